# quiznight/handlers/common.py
from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

router = Router(name="common")

HELP_TEXT = (
    "📌 <b>Commands</b>\n"
    "/formats - quiz formats\n"
    "/format_add Name | joker=yes | big=yes | Round:small/big | ...\n"
    "/newquiz format | YYYY-MM-DD | small|big | Name, Name | teams=N | position=N | notes=...\n"
    "/quizzes - your recent quizzes\n"
    "/quiz YYYY-MM-DD - rounds and totals\n"
    "/joker YYYY-MM-DD ROUND|off\n"
    "/hu YYYY-MM-DD ROUND on|off - highest unique badge\n"
    "/round YYYY-MM-DD ROUND [notes=...] then one line per question:\n"
    "  <code>text | answer | y/n/? | normal|killer|wipeout | points | scored</code>\n"
    "/roster YYYY-MM-DD Name, Name (or #id #id from /regulars)\n"
    "/date YYYY-MM-DD NEW-YYYY-MM-DD - move a quiz\n"
    "/regulars - roster suggestions\n"
    "/results YYYY-MM-DD | 1=Team:score[:us] | 2=... | 3=... | teams=N | position=N\n"
    "/delete_quiz YYYY-MM-DD"
)


@router.message(CommandStart())
async def cmd_start(message: Message) -> None:
    await message.answer(
        "👋 Welcome to Quiz Night!\n\n"
        "Track your team's quiz nights round by round.\n"
        "Use /help to see commands."
    )


@router.message(Command("help"))
async def cmd_help(message: Message) -> None:
    await message.answer(HELP_TEXT)
