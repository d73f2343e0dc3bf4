# quiznight/database/repo/quiz_repo.py
from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quiznight.database.models import Question, Quiz, QuizPlayer, Round


async def insert_quiz(session: AsyncSession, *, user_id: int, **fields: Any) -> Quiz:
    """
    Inserts and flushes a quiz row.
    Raises IntegrityError when the user already has a quiz on that date.
    """
    quiz = Quiz(user_id=user_id, **fields)
    session.add(quiz)
    await session.flush()
    return quiz


async def find_quiz_by_date(session: AsyncSession, user_id: int, quiz_date: date) -> Quiz | None:
    q = (
        select(Quiz)
        .where(Quiz.user_id == user_id, Quiz.quiz_date == quiz_date)
        .options(selectinload(Quiz.rounds))
    )
    res = await session.execute(q)
    return res.scalar_one_or_none()


async def get_quiz(session: AsyncSession, user_id: int, quiz_id: int) -> Quiz | None:
    q = (
        select(Quiz)
        .where(Quiz.id == quiz_id, Quiz.user_id == user_id)
        .options(selectinload(Quiz.rounds))
    )
    res = await session.execute(q)
    return res.scalar_one_or_none()


async def list_quizzes(session: AsyncSession, user_id: int, limit: int | None = None) -> list[Quiz]:
    q = (
        select(Quiz)
        .where(Quiz.user_id == user_id)
        .options(selectinload(Quiz.rounds))
        .order_by(Quiz.quiz_date.desc())
    )
    if limit is not None:
        q = q.limit(limit)
    res = await session.execute(q)
    return list(res.scalars())


async def latest_quiz(session: AsyncSession, user_id: int) -> Quiz | None:
    res = await session.execute(
        select(Quiz).where(Quiz.user_id == user_id).order_by(Quiz.quiz_date.desc()).limit(1)
    )
    return res.scalar_one_or_none()


async def update_quiz(session: AsyncSession, quiz_id: int, **values: Any) -> None:
    await session.execute(update(Quiz).where(Quiz.id == quiz_id).values(**values))


async def delete_quiz(session: AsyncSession, quiz_id: int) -> None:
    # children first, same order as the FK chain
    round_ids = select(Round.id).where(Round.quiz_id == quiz_id)
    await session.execute(delete(Question).where(Question.round_id.in_(round_ids)))
    await session.execute(delete(Round).where(Round.quiz_id == quiz_id))
    await session.execute(delete(QuizPlayer).where(QuizPlayer.quiz_id == quiz_id))
    await session.execute(delete(Quiz).where(Quiz.id == quiz_id))
