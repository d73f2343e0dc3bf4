# quiznight/handlers/rounds.py
from __future__ import annotations

import html
import logging

from aiogram import Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.database.models import User
from quiznight.database.repo import round_repo
from quiznight.services import quizzes, rounds
from quiznight.services.errors import NotFoundError, QuizNightError, ValidationError
from quiznight.utils.command_parser import parse_bool, parse_round_number, parse_round_sheet
from quiznight.utils.dates import parse_iso_date
from quiznight.utils.display import format_percentage, format_points

log = logging.getLogger(__name__)
router = Router(name="rounds")


def _sheet_template(drafts) -> str:
    lines = []
    for q in drafts:
        correct = "?" if q.is_correct is None else ("y" if q.is_correct else "n")
        fields = [
            q.question_text or "",
            q.our_answer or "",
            correct,
            q.question_type,
            format_points(q.points_value) if q.points_value is not None else "",
            format_points(q.points_scored) if q.points_scored is not None else "",
        ]
        lines.append(" | ".join(fields))
    return "\n".join(lines)


async def _round_for(session: AsyncSession, db_user: User | None, date_raw: str, number_raw: str):
    quiz = await quizzes.get_quiz_by_date(session, user=db_user, quiz_date=parse_iso_date(date_raw))
    rnd = await round_repo.get_round_by_number(session, quiz.id, parse_round_number(number_raw))
    if rnd is None:
        raise NotFoundError(f"Round {number_raw} does not exist on that quiz.")
    return quiz, rnd


@router.message(Command("round"))
async def round_cmd(message: Message, command: CommandObject, session: AsyncSession, db_user: User | None) -> None:
    text = message.text or ""
    try:
        sheet = parse_round_sheet(text)
        quiz, rnd = await _round_for(
            session, db_user, sheet.quiz_date.isoformat(), str(sheet.round_number)
        )

        if not sheet.questions:
            # no question lines: show what is stored so it can be edited and sent back
            drafts = await rounds.load_round_questions(session, user=db_user, round_id=rnd.id)
            await message.answer(
                f"✏️ <b>Round {rnd.round_number}: {html.escape(rnd.round_name or '')}</b>\n"
                f"Send <code>/round {sheet.quiz_date.isoformat()} {rnd.round_number}</code> "
                f"followed by one line per question:\n\n"
                f"<code>{html.escape(_sheet_template(drafts))}</code>"
            )
            return

        saved = await rounds.save_round_questions(
            session,
            user=db_user,
            round_id=rnd.id,
            questions=sheet.questions,
            notes=sheet.notes,
        )
    except ValueError as e:
        await message.answer(f"❌ {e}")
        return
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    totals = saved.totals
    joker = " 🃏 joker applied" if totals.joker_applied else ""
    await message.answer(
        f"✅ Round {saved.round.round_number} saved: "
        f"{format_points(saved.round.score)}/{format_points(saved.round.max_score)} "
        f"({format_percentage(saved.round.score, saved.round.max_score)}) "
        f"from {len(totals.questions)} questions.{joker}"
    )


@router.message(Command("hu"))
async def highest_unique_cmd(message: Message, command: CommandObject, session: AsyncSession, db_user: User | None) -> None:
    args = (command.args or "").split()
    try:
        if len(args) != 3:
            raise ValidationError("Usage: /hu YYYY-MM-DD ROUND on|off")
        _, rnd = await _round_for(session, db_user, args[0], args[1])
        flag = parse_bool(args[2], "highest unique")
        await rounds.set_highest_unique(session, user=db_user, round_id=rnd.id, highest_unique=flag)
    except ValueError as e:
        await message.answer(f"❌ {e}")
        return
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    await message.answer(f"✅ Highest unique {'on' if flag else 'off'} for round {rnd.round_number}.")
