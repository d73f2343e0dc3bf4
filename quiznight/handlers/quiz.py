# quiznight/handlers/quiz.py
from __future__ import annotations

import html
import logging

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.config.settings import Settings
from quiznight.database.models import Player, User
from quiznight.services import quizzes, roster
from quiznight.services.errors import QuizNightError, ValidationError
from quiznight.services.provisioning import QuizCreated, create_quiz_from_format
from quiznight.utils.command_parser import parse_new_quiz, parse_roster_args, parse_round_number
from quiznight.utils.dates import parse_iso_date, today_in
from quiznight.utils.display import format_points, format_quiz, quiz_totals

log = logging.getLogger(__name__)
router = Router(name="quiz")


def _split_args(command: CommandObject) -> list[str]:
    return (command.args or "").split()


def _player_label(player: Player) -> str:
    return f"#{player.id} {html.escape(player.name)}"


@router.message(Command("newquiz"))
async def newquiz_cmd(message: Message, session: AsyncSession, db_user: User | None) -> None:
    try:
        parsed = parse_new_quiz(message.text or "")
        result = await create_quiz_from_format(
            session,
            user=db_user,
            format_slug=parsed.format_slug,
            quiz_date=parsed.quiz_date,
            is_big_quiz=parsed.is_big_quiz,
            team_names=parsed.team_names,
            teams_total=parsed.teams_total,
            position=parsed.position,
            notes=parsed.notes,
        )
    except ValueError as e:
        await message.answer(f"❌ {e}")
        return
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    if not isinstance(result, QuizCreated):
        existing = result.existing_quiz
        await message.answer(
            f"⚠️ You already have a quiz on {existing.quiz_date.isoformat()} "
            f"({html.escape(existing.quiz_name)}).\n"
            f"Open it with /quiz {existing.quiz_date.isoformat()}"
        )
        return

    quiz = result.quiz
    names = ", ".join(html.escape(p.name) for p in result.players)
    ceiling = sum((r.max_score or 0) for r in result.rounds)
    await message.answer(
        f"✅ {html.escape(quiz.quiz_name)} quiz created for {quiz.quiz_date.isoformat()} "
        f"({'big' if quiz.is_big_quiz else 'small'}).\n"
        f"👥 {names}\n"
        f"🔢 {len(result.rounds)} rounds, {format_points(ceiling)} points available.\n\n"
        f"Record a round with /round {quiz.quiz_date.isoformat()} 1"
    )


@router.message(Command("quizzes"))
async def quizzes_cmd(message: Message, session: AsyncSession, db_user: User | None) -> None:
    try:
        items = await quizzes.list_quizzes(session, user=db_user, limit=15)
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    if not items:
        await message.answer("ℹ️ No quizzes yet. Create one with /newquiz.")
        return

    lines = ["🗂 <b>Your quizzes</b>", ""]
    for q in items:
        score, max_score = quiz_totals(list(q.rounds))
        position = f" · #{q.position}" if q.position else ""
        lines.append(
            f"{q.quiz_date.isoformat()} · {html.escape(q.quiz_name)} · "
            f"{format_points(score)}/{format_points(max_score)}{position}"
        )
    await message.answer("\n".join(lines))


@router.message(Command("quiz"))
async def quiz_show_cmd(
    message: Message,
    command: CommandObject,
    session: AsyncSession,
    db_user: User | None,
    settings: Settings,
) -> None:
    args = _split_args(command)
    try:
        quiz_date = parse_iso_date(args[0]) if args else today_in(settings.timezone)
        quiz = await quizzes.get_quiz_by_date(session, user=db_user, quiz_date=quiz_date)
    except ValueError as e:
        await message.answer(f"❌ {e}")
        return
    except QuizNightError as e:
        await message.answer(f"ℹ️ {e.message}")
        return

    await message.answer(format_quiz(quiz))


@router.message(Command("joker"))
async def joker_cmd(message: Message, command: CommandObject, session: AsyncSession, db_user: User | None) -> None:
    args = _split_args(command)
    try:
        if len(args) != 2:
            raise ValidationError("Usage: /joker YYYY-MM-DD ROUND|off")
        quiz = await quizzes.get_quiz_by_date(session, user=db_user, quiz_date=parse_iso_date(args[0]))
        round_number = None if args[1].lower() == "off" else parse_round_number(args[1])
        await quizzes.set_joker_round(session, user=db_user, quiz_id=quiz.id, round_number=round_number)
    except ValueError as e:
        await message.answer(f"❌ {e}")
        return
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    if round_number is None:
        await message.answer("✅ Joker cleared.")
    else:
        await message.answer(
            f"🃏 Joker set on round {round_number}. "
            f"Save that round's questions to apply it."
        )


@router.message(Command("roster"))
async def roster_cmd(message: Message, command: CommandObject, session: AsyncSession, db_user: User | None) -> None:
    date_raw, _, names_raw = (command.args or "").strip().partition(" ")
    try:
        if not date_raw:
            raise ValidationError("Usage: /roster YYYY-MM-DD Name, Name (or #id #id)")
        quiz = await quizzes.get_quiz_by_date(session, user=db_user, quiz_date=parse_iso_date(date_raw))
        parsed = parse_roster_args(names_raw)
        if parsed.player_ids:
            players = await roster.replace_quiz_roster(
                session, user=db_user, quiz_id=quiz.id, player_ids=parsed.player_ids
            )
        else:
            players = await roster.set_quiz_roster_by_names(
                session, user=db_user, quiz_id=quiz.id, names=parsed.names
            )
    except ValueError as e:
        await message.answer(f"❌ {e}")
        return
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    await message.answer("✅ Roster saved: " + ", ".join(html.escape(p.name) for p in players))


@router.message(Command("regulars"))
async def regulars_cmd(message: Message, session: AsyncSession, db_user: User | None) -> None:
    try:
        suggestions = await roster.suggest_roster(session, user=db_user)
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    frequent = ", ".join(_player_label(p) for p in suggestions.frequent) or "none yet"
    last = ", ".join(_player_label(p) for p in suggestions.last_quiz) or "none yet"
    await message.answer(f"⭐ <b>Regulars:</b> {frequent}\n🕘 <b>Last quiz:</b> {last}")


@router.message(Command("delete_quiz"))
async def delete_quiz_cmd(message: Message, command: CommandObject, session: AsyncSession, db_user: User | None) -> None:
    args = _split_args(command)
    try:
        if len(args) != 1:
            raise ValidationError("Usage: /delete_quiz YYYY-MM-DD")
        quiz = await quizzes.get_quiz_by_date(session, user=db_user, quiz_date=parse_iso_date(args[0]))
        await quizzes.delete_quiz(session, user=db_user, quiz_id=quiz.id)
    except ValueError as e:
        await message.answer(f"❌ {e}")
        return
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    await message.answer(f"🗑 Quiz on {args[0]} deleted.")


@router.message(Command("date"))
async def move_quiz_cmd(message: Message, command: CommandObject, session: AsyncSession, db_user: User | None) -> None:
    args = _split_args(command)
    try:
        if len(args) != 2:
            raise ValidationError("Usage: /date YYYY-MM-DD NEW-YYYY-MM-DD")
        quiz = await quizzes.get_quiz_by_date(session, user=db_user, quiz_date=parse_iso_date(args[0]))
        quiz = await quizzes.update_quiz_date(
            session, user=db_user, quiz_id=quiz.id, quiz_date=parse_iso_date(args[1])
        )
    except ValueError as e:
        await message.answer(f"❌ {e}")
        return
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    await message.answer(f"📅 Quiz moved to {quiz.quiz_date.isoformat()}.")
