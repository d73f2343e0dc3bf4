# quiznight/database/repo/format_repo.py
from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from quiznight.database.models import FormatRound, QuizFormat


async def find_format_by_slug(session: AsyncSession, slug: str) -> QuizFormat | None:
    q = (
        select(QuizFormat)
        .where(QuizFormat.slug == slug)
        .options(selectinload(QuizFormat.rounds))
    )
    res = await session.execute(q)
    return res.scalar_one_or_none()


async def get_format(session: AsyncSession, format_id: int) -> QuizFormat | None:
    q = (
        select(QuizFormat)
        .where(QuizFormat.id == format_id)
        .options(selectinload(QuizFormat.rounds))
    )
    res = await session.execute(q)
    return res.scalar_one_or_none()


async def list_formats(session: AsyncSession) -> list[QuizFormat]:
    q = (
        select(QuizFormat)
        .options(selectinload(QuizFormat.rounds))
        .order_by(QuizFormat.name, QuizFormat.id)
    )
    res = await session.execute(q)
    return list(res.scalars())


async def list_format_rounds(session: AsyncSession, format_id: int) -> list[FormatRound]:
    q = (
        select(FormatRound)
        .where(FormatRound.format_id == format_id)
        .order_by(FormatRound.round_number)
    )
    res = await session.execute(q)
    return list(res.scalars())


async def insert_format(
    session: AsyncSession,
    *,
    slug: str,
    name: str,
    has_joker: bool,
    supports_big_quiz: bool,
    rounds: list[tuple[int, str, float | None, float | None]],
) -> QuizFormat:
    """
    rounds = [(round_number, round_name, default_small_max, default_big_max), ...]
    May raise IntegrityError on a slug collision.
    """
    fmt = QuizFormat(
        slug=slug,
        name=name,
        has_joker=has_joker,
        supports_big_quiz=supports_big_quiz,
    )
    session.add(fmt)
    await session.flush()  # fmt.id

    session.add_all(
        [
            FormatRound(
                format_id=fmt.id,
                round_number=number,
                round_name=round_name,
                default_small_max=small_max,
                default_big_max=big_max,
            )
            for number, round_name, small_max, big_max in rounds
        ]
    )
    await session.flush()
    return fmt
