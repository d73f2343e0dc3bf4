# quiznight/handlers/results.py
from __future__ import annotations

import logging

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import Message
from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.database.models import User
from quiznight.services import quizzes
from quiznight.services.errors import QuizNightError
from quiznight.services.results import save_results
from quiznight.utils.command_parser import parse_results

log = logging.getLogger(__name__)
router = Router(name="results")


@router.message(Command("results"))
async def results_cmd(message: Message, session: AsyncSession, db_user: User | None) -> None:
    try:
        parsed = parse_results(message.text or "")
        quiz = await quizzes.get_quiz_by_date(session, user=db_user, quiz_date=parsed.quiz_date)
        quiz = await save_results(
            session,
            user=db_user,
            quiz_id=quiz.id,
            podium=parsed.podium,
            teams_total=parsed.teams_total,
            our_position=parsed.position,
        )
    except ValueError as e:
        await message.answer(f"❌ {e}")
        return
    except QuizNightError as e:
        await message.answer(f"❌ {e.message}")
        return

    if quiz.position is None:
        await message.answer("✅ Results saved.")
        return
    of_total = f" of {quiz.teams_total}" if quiz.teams_total else ""
    await message.answer(f"🏁 Results saved. We finished #{quiz.position}{of_total}.")
