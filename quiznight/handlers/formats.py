# quiznight/handlers/formats.py
from __future__ import annotations

import html
import logging

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.database.models import QuizFormat, User
from quiznight.services.auth import require_user
from quiznight.services.errors import QuizNightError
from quiznight.services.formats import create_format, list_formats
from quiznight.utils.command_parser import parse_format_add
from quiznight.utils.display import format_points

log = logging.getLogger(__name__)
router = Router(name="formats")


def _format_summary(fmt: QuizFormat) -> str:
    flags = [
        f"joker: {'yes' if fmt.has_joker else 'no'}",
        f"big: {'yes' if fmt.supports_big_quiz else 'no'}",
    ]
    lines = [f"<b>{html.escape(fmt.name)}</b> (<code>{fmt.slug}</code>) · {' · '.join(flags)}"]
    for r in fmt.rounds:
        lines.append(
            f"  {r.round_number}. {html.escape(r.round_name)} "
            f"[{format_points(r.default_small_max)}/{format_points(r.default_big_max)}]"
        )
    return "\n".join(lines)


@router.message(Command("formats"))
async def formats_cmd(message: Message, session: AsyncSession) -> None:
    formats = await list_formats(session)
    if not formats:
        await message.answer("ℹ️ No formats yet. Add one with /format_add.")
        return
    await message.answer("📋 <b>Formats</b>\n\n" + "\n\n".join(_format_summary(f) for f in formats))


@router.message(Command("format_add"))
async def format_add_cmd(message: Message, session: AsyncSession, db_user: User | None) -> None:
    try:
        require_user(db_user)
        parsed = parse_format_add(message.text or "")
        fmt = await create_format(
            session,
            name=parsed.name,
            has_joker=parsed.has_joker,
            supports_big_quiz=parsed.supports_big_quiz,
            rounds=parsed.rounds,
        )
    except ValueError as e:
        await message.answer(f"❌ {e}")
        return
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    await message.answer(f'✅ Created format "{html.escape(fmt.name)}" (slug: <code>{fmt.slug}</code>).')
