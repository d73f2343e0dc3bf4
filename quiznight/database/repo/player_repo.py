# quiznight/database/repo/player_repo.py
from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.database.models import Player, Quiz, QuizPlayer


def _insert_for(session: AsyncSession):
    dialect = session.bind.dialect.name if session.bind is not None else "sqlite"
    return pg_insert if dialect == "postgresql" else sqlite_insert


async def upsert_players_by_name(session: AsyncSession, user_id: int, names: list[str]) -> list[Player]:
    """
    Insert-or-keep by (user_id, name). Existing rows keep their id.
    Returns players in the order of `names`.
    """
    if not names:
        return []

    insert = _insert_for(session)
    stmt = insert(Player).values(
        [{"user_id": user_id, "name": name} for name in names]
    ).on_conflict_do_nothing(index_elements=["user_id", "name"])
    await session.execute(stmt)

    res = await session.execute(
        select(Player).where(Player.user_id == user_id, Player.name.in_(names))
    )
    by_name = {p.name: p for p in res.scalars()}
    return [by_name[n] for n in names if n in by_name]


async def get_players(session: AsyncSession, user_id: int, player_ids: list[int]) -> list[Player]:
    if not player_ids:
        return []
    res = await session.execute(
        select(Player).where(Player.user_id == user_id, Player.id.in_(player_ids))
    )
    return list(res.scalars())


async def list_players(session: AsyncSession, user_id: int) -> list[Player]:
    res = await session.execute(
        select(Player).where(Player.user_id == user_id).order_by(Player.name)
    )
    return list(res.scalars())


async def insert_quiz_players(session: AsyncSession, quiz_id: int, player_ids: list[int]) -> None:
    if not player_ids:
        return
    session.add_all([QuizPlayer(quiz_id=quiz_id, player_id=pid) for pid in player_ids])
    await session.flush()


async def replace_quiz_players(session: AsyncSession, quiz_id: int, player_ids: list[int]) -> None:
    await session.execute(delete(QuizPlayer).where(QuizPlayer.quiz_id == quiz_id))
    await insert_quiz_players(session, quiz_id, player_ids)


async def list_quiz_roster(session: AsyncSession, quiz_id: int) -> list[Player]:
    res = await session.execute(
        select(Player)
        .join(QuizPlayer, QuizPlayer.player_id == Player.id)
        .where(QuizPlayer.quiz_id == quiz_id)
        .order_by(Player.name)
    )
    return list(res.scalars())


async def attendance_counts(session: AsyncSession, user_id: int) -> list[tuple[Player, int]]:
    """(player, quizzes attended), most frequent first, ties by name."""
    attended = func.count(QuizPlayer.id)
    res = await session.execute(
        select(Player, attended)
        .join(QuizPlayer, QuizPlayer.player_id == Player.id)
        .join(Quiz, Quiz.id == QuizPlayer.quiz_id)
        .where(Player.user_id == user_id, Quiz.user_id == user_id)
        .group_by(Player.id)
        .order_by(attended.desc(), Player.name)
    )
    return [(player, int(count)) for player, count in res.all()]
