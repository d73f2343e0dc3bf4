# quiznight/services/provisioning.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import ClassVar, Iterable, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.database.integrity import is_unique_violation
from quiznight.database.models import Player, Quiz, QuizFormat, Round, User
from quiznight.database.repo import format_repo, player_repo, quiz_repo, round_repo
from quiznight.database.tx import transactional
from quiznight.services.auth import require_user
from quiznight.services.errors import (
    ConfigurationError,
    NotFoundError,
    PersistenceError,
    QuizNightError,
    ValidationError,
)

log = logging.getLogger(__name__)

QUIZ_DATE_CONSTRAINT = "uq_quizzes_user_date"
QUIZ_DATE_COLUMNS = ("quizzes.user_id", "quizzes.quiz_date")


@dataclass(frozen=True, slots=True)
class QuizCreated:
    status: ClassVar[str] = "created"

    quiz: Quiz
    rounds: list[Round]
    players: list[Player]
    player_ids_by_name: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class QuizDuplicate:
    """A quiz already exists on that date; carries it so the caller can open it."""
    status: ClassVar[str] = "duplicate"

    existing_quiz: Quiz


CreateQuizResult = Union[QuizCreated, QuizDuplicate]


def normalize_team_names(team_names: Iterable[str | None]) -> list[str]:
    """Trim, drop empties, de-duplicate (case-sensitive), keep first-seen order."""
    seen: dict[str, None] = {}
    for raw in team_names or ():
        name = (raw or "").strip()
        if name and name not in seen:
            seen[name] = None
    return list(seen)


async def _provision(
    session: AsyncSession,
    *,
    user_id: int,
    format_slug: str,
    quiz_date: date,
    is_big_quiz: bool,
    names: list[str],
    teams_total: int | None,
    position: int | None,
    notes: str | None,
) -> QuizCreated:
    # 1) format
    fmt: QuizFormat | None = await format_repo.find_format_by_slug(session, format_slug)
    if fmt is None:
        raise NotFoundError(f'Unknown quiz format "{format_slug}".')

    if is_big_quiz and not fmt.supports_big_quiz:
        log.warning("Format %s has no big variant; creating a small quiz", fmt.slug)
        is_big_quiz = False

    # 2) quiz row (IntegrityError on a taken date bubbles to the caller)
    quiz = await quiz_repo.insert_quiz(
        session,
        user_id=user_id,
        format_id=fmt.id,
        quiz_date=quiz_date,
        quiz_name=fmt.name,
        is_big_quiz=is_big_quiz,
        teams_total=teams_total,
        position=position,
        notes=notes,
    )

    # 3) players, same identity for a name across quizzes
    players = await player_repo.upsert_players_by_name(session, user_id, names)
    player_ids_by_name = {p.name: p.id for p in players}

    # 4) roster
    await player_repo.insert_quiz_players(
        session,
        quiz.id,
        [player_ids_by_name[n] for n in names if n in player_ids_by_name],
    )

    # 5) rounds from the format template
    templates = await format_repo.list_format_rounds(session, fmt.id)
    if not templates:
        raise ConfigurationError(f'Format "{fmt.name}" has no rounds defined.')

    rounds = await round_repo.insert_rounds(
        session,
        [
            {
                "quiz_id": quiz.id,
                "round_number": t.round_number,
                "round_name": t.round_name,
                "score": None,
                "max_score": t.default_big_max if is_big_quiz else t.default_small_max,
            }
            for t in templates
        ],
    )

    return QuizCreated(
        quiz=quiz,
        rounds=rounds,
        players=players,
        player_ids_by_name=player_ids_by_name,
    )


async def create_quiz_from_format(
    session: AsyncSession,
    *,
    user: User | None,
    format_slug: str,
    quiz_date: date | None,
    is_big_quiz: bool,
    team_names: Iterable[str | None],
    teams_total: int | None = None,
    position: int | None = None,
    notes: str | None = None,
) -> CreateQuizResult:
    """
    Creates a quiz, its roster and its rounds in one transaction.

    A second call for the same user and date does not fail: it returns
    QuizDuplicate with the quiz that already exists. Nothing is written
    when validation fails or when any step after the quiz insert fails.
    """
    user_id = require_user(user).id

    names = normalize_team_names(team_names)
    if not names:
        raise ValidationError("You must provide at least one team member name.")
    if quiz_date is None:
        raise ValidationError("Please choose a quiz date.")
    slug = (format_slug or "").strip().lower()
    if not slug:
        raise ValidationError("Please choose a quiz format.")

    notes = (notes or "").strip() or None

    try:
        async with transactional(session):
            created = await _provision(
                session,
                user_id=user_id,
                format_slug=slug,
                quiz_date=quiz_date,
                is_big_quiz=is_big_quiz,
                names=names,
                teams_total=teams_total,
                position=position,
                notes=notes,
            )
    except QuizNightError:
        raise
    except IntegrityError as e:
        if not is_unique_violation(e, constraint=QUIZ_DATE_CONSTRAINT, columns=QUIZ_DATE_COLUMNS):
            log.exception("Quiz provisioning failed (user=%s date=%s)", user_id, quiz_date)
            raise PersistenceError("Failed to create quiz.") from e

        existing = await quiz_repo.find_quiz_by_date(session, user_id, quiz_date)
        if existing is None:
            raise PersistenceError(
                "A quiz already exists on this date, but it could not be loaded."
            ) from e

        log.warning("Quiz for %s already exists (user=%s quiz=%s)", quiz_date, user_id, existing.id)
        return QuizDuplicate(existing_quiz=existing)
    except SQLAlchemyError as e:
        log.exception("Quiz provisioning failed (user=%s date=%s)", user_id, quiz_date)
        raise PersistenceError("Failed to create quiz.") from e

    log.info(
        "Created quiz %s on %s (%s, %s, %d players, %d rounds)",
        created.quiz.id,
        quiz_date,
        created.quiz.quiz_name,
        "big" if created.quiz.is_big_quiz else "small",
        len(created.players),
        len(created.rounds),
    )
    return created
