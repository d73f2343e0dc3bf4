# quiznight/services/formats.py
from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.database.integrity import is_unique_violation
from quiznight.database.models import QuizFormat
from quiznight.database.repo import format_repo
from quiznight.database.tx import transactional
from quiznight.services.errors import NotFoundError, PersistenceError, ValidationError

log = logging.getLogger(__name__)

CHELSEA_SLUG = "chelsea"

CHELSEA_ROUNDS = (
    "General Knowledge 1",
    "Entertainment",
    "Geography",
    "Music",
    "Sport",
    "Science",
    "Facebook",
    "Pictures",
    "History",
    "General Knowledge 2",
)


@dataclass(frozen=True, slots=True)
class FormatRoundDraft:
    name: str
    small_max: float | None = None
    big_max: float | None = None


def slugify(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", (name or "").strip().lower())
    return slug.strip("-")


def chelsea_default_max(round_number: int, is_big_quiz: bool) -> int:
    if round_number == 7:  # Facebook
        return 10 if is_big_quiz else 8
    if round_number == 8:  # Pictures
        return 16 if is_big_quiz else 10
    return 8 if is_big_quiz else 5


def chelsea_round_drafts() -> list[FormatRoundDraft]:
    return [
        FormatRoundDraft(
            name=name,
            small_max=chelsea_default_max(number, False),
            big_max=chelsea_default_max(number, True),
        )
        for number, name in enumerate(CHELSEA_ROUNDS, start=1)
    ]


async def create_format(
    session: AsyncSession,
    *,
    name: str,
    has_joker: bool,
    supports_big_quiz: bool,
    rounds: list[FormatRoundDraft],
) -> QuizFormat:
    """
    Blank round names are dropped and the rest numbered 1..N, so stored
    formats never have gaps.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Please enter a format name.")

    slug = slugify(name)
    if not slug:
        raise ValidationError("Could not generate a valid slug from the name.")

    cleaned = [r for r in rounds if (r.name or "").strip()]
    if not cleaned:
        raise ValidationError("Please define at least one round.")

    payload = [
        (number, r.name.strip(), r.small_max, r.big_max)
        for number, r in enumerate(cleaned, start=1)
    ]

    try:
        async with transactional(session):
            fmt = await format_repo.insert_format(
                session,
                slug=slug,
                name=name,
                has_joker=has_joker,
                supports_big_quiz=supports_big_quiz,
                rounds=payload,
            )
    except IntegrityError as e:
        if is_unique_violation(e, constraint="quiz_formats_slug", columns=("quiz_formats.slug",)):
            raise ValidationError(f'A format with slug "{slug}" already exists.') from e
        log.exception("Format insert failed (slug=%s)", slug)
        raise PersistenceError("Failed to create format.") from e

    log.info("Created format %s with %d rounds", slug, len(payload))
    return fmt


async def ensure_default_formats(session: AsyncSession) -> bool:
    """Installs the Chelsea format once. Returns True if it was created."""
    if await format_repo.find_format_by_slug(session, CHELSEA_SLUG) is not None:
        return False

    await create_format(
        session,
        name="Chelsea",
        has_joker=True,
        supports_big_quiz=True,
        rounds=chelsea_round_drafts(),
    )
    return True


async def list_formats(session: AsyncSession) -> list[QuizFormat]:
    return await format_repo.list_formats(session)


async def get_format_by_slug(session: AsyncSession, slug: str) -> QuizFormat:
    fmt = await format_repo.find_format_by_slug(session, (slug or "").strip().lower())
    if fmt is None:
        raise NotFoundError(f'Unknown quiz format "{slug}".')
    return fmt
