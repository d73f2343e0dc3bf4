# quiznight/services/results.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.database.models import Quiz, User
from quiznight.database.repo import quiz_repo
from quiznight.database.tx import transactional
from quiznight.services.errors import ValidationError
from quiznight.services.quizzes import get_quiz

log = logging.getLogger(__name__)

PODIUM_PREFIXES = ("first", "second", "third")


@dataclass(frozen=True, slots=True)
class PodiumEntry:
    team_name: str | None = None
    score: float | None = None
    is_us: bool = False


def derive_position(
    podium: list[PodiumEntry],
    our_position: int | None,
    previous: int | None,
) -> int | None:
    """A flagged podium slot wins, then the explicit position, then what was stored."""
    for place, entry in enumerate(podium, start=1):
        if entry.is_us:
            return place
    if our_position is not None:
        return our_position
    return previous


async def save_results(
    session: AsyncSession,
    *,
    user: User | None,
    quiz_id: int,
    podium: list[PodiumEntry],
    teams_total: int | None = None,
    our_position: int | None = None,
) -> Quiz:
    if len(podium) > len(PODIUM_PREFIXES):
        raise ValidationError("Only the top three teams can be recorded.")
    if sum(1 for e in podium if e.is_us) > 1:
        raise ValidationError("Only one podium team can be marked as us.")
    if teams_total is not None and teams_total < 1:
        raise ValidationError("Total teams must be at least 1.")
    if our_position is not None and our_position < 1:
        raise ValidationError("Position must be at least 1.")

    quiz = await get_quiz(session, user=user, quiz_id=quiz_id)

    slots = list(podium) + [PodiumEntry()] * (len(PODIUM_PREFIXES) - len(podium))
    values: dict[str, object] = {
        "teams_total": teams_total,
        "position": derive_position(slots, our_position, quiz.position),
    }
    for prefix, entry in zip(PODIUM_PREFIXES, slots):
        values[f"{prefix}_team_name"] = (entry.team_name or "").strip() or None
        values[f"{prefix}_team_score"] = entry.score
        values[f"{prefix}_team_is_us"] = True if entry.is_us else None

    if teams_total is not None and values["position"] is not None and values["position"] > teams_total:
        raise ValidationError("Position can't be worse than the number of teams.")

    async with transactional(session):
        await quiz_repo.update_quiz(session, quiz.id, **values)

    log.info("Quiz %s results saved (position=%s of %s)", quiz.id, values["position"], teams_total)
    return quiz
