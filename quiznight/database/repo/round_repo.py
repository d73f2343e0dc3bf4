# quiznight/database/repo/round_repo.py
from __future__ import annotations

from typing import Any, Iterable

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quiznight.database.models import Question, Quiz, Round


async def insert_rounds(session: AsyncSession, rounds: Iterable[dict[str, Any]]) -> list[Round]:
    rows = [Round(**values) for values in rounds]
    session.add_all(rows)
    await session.flush()  # ids
    return sorted(rows, key=lambda r: r.round_number)


async def get_round(session: AsyncSession, user_id: int, round_id: int) -> Round | None:
    """Round with its quiz loaded, only if the quiz belongs to `user_id`."""
    q = (
        select(Round)
        .join(Quiz, Quiz.id == Round.quiz_id)
        .where(Round.id == round_id, Quiz.user_id == user_id)
        .options(selectinload(Round.quiz))
    )
    res = await session.execute(q)
    return res.scalar_one_or_none()


async def get_round_by_number(session: AsyncSession, quiz_id: int, round_number: int) -> Round | None:
    res = await session.execute(
        select(Round).where(Round.quiz_id == quiz_id, Round.round_number == round_number)
    )
    return res.scalar_one_or_none()


async def list_questions(session: AsyncSession, round_id: int) -> list[Question]:
    res = await session.execute(
        select(Question).where(Question.round_id == round_id).order_by(Question.question_number)
    )
    return list(res.scalars())


async def replace_questions(
    session: AsyncSession,
    round_id: int,
    questions: Iterable[dict[str, Any]],
) -> list[Question]:
    """Delete-all-then-insert. Callers pass already renumbered rows."""
    await session.execute(delete(Question).where(Question.round_id == round_id))

    rows = [Question(round_id=round_id, **values) for values in questions]
    if rows:
        session.add_all(rows)
        await session.flush()
    return rows


async def update_round(session: AsyncSession, round_id: int, **values: Any) -> None:
    await session.execute(update(Round).where(Round.id == round_id).values(**values))
