# quiznight/services/roster.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.database.models import Player, User
from quiznight.database.repo import player_repo, quiz_repo
from quiznight.database.tx import transactional
from quiznight.services.auth import require_user
from quiznight.services.errors import NotFoundError, ValidationError
from quiznight.services.provisioning import normalize_team_names

log = logging.getLogger(__name__)

DEFAULT_SUGGESTIONS = 6


@dataclass(frozen=True, slots=True)
class RosterSuggestions:
    frequent: list[Player]
    last_quiz: list[Player]


async def replace_quiz_roster(
    session: AsyncSession,
    *,
    user: User | None,
    quiz_id: int,
    player_ids: Iterable[int],
) -> list[Player]:
    user_id = require_user(user).id
    quiz = await quiz_repo.get_quiz(session, user_id, quiz_id)
    if quiz is None:
        raise NotFoundError("Quiz not found.")

    ids = list(dict.fromkeys(player_ids))
    players = await player_repo.get_players(session, user_id, ids)
    if len(players) != len(ids):
        raise NotFoundError("One or more players were not found.")

    async with transactional(session):
        await player_repo.replace_quiz_players(session, quiz.id, ids)

    log.info("Quiz %s roster replaced (%d players)", quiz.id, len(ids))
    return sorted(players, key=lambda p: p.name)


async def set_quiz_roster_by_names(
    session: AsyncSession,
    *,
    user: User | None,
    quiz_id: int,
    names: Iterable[str | None],
) -> list[Player]:
    """Same as replace_quiz_roster, creating players for unknown names."""
    user_id = require_user(user).id
    clean = normalize_team_names(names)
    if not clean:
        raise ValidationError("You must provide at least one team member name.")

    quiz = await quiz_repo.get_quiz(session, user_id, quiz_id)
    if quiz is None:
        raise NotFoundError("Quiz not found.")

    async with transactional(session):
        players = await player_repo.upsert_players_by_name(session, user_id, clean)
        await player_repo.replace_quiz_players(session, quiz.id, [p.id for p in players])

    return sorted(players, key=lambda p: p.name)


async def suggest_roster(
    session: AsyncSession,
    *,
    user: User | None,
    limit: int = DEFAULT_SUGGESTIONS,
) -> RosterSuggestions:
    """
    Regulars (most quizzes attended) and whoever came to the latest quiz.
    With no attendance yet, the first players by name stand in as regulars.
    """
    user_id = require_user(user).id

    counts = await player_repo.attendance_counts(session, user_id)
    if counts:
        frequent = [player for player, _ in counts[:limit]]
    else:
        frequent = (await player_repo.list_players(session, user_id))[:limit]

    last = await quiz_repo.latest_quiz(session, user_id)
    last_roster = await player_repo.list_quiz_roster(session, last.id) if last else []

    return RosterSuggestions(frequent=frequent, last_quiz=last_roster)
