# quiznight/services/quizzes.py
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.database.integrity import is_unique_violation
from quiznight.database.models import Quiz, User
from quiznight.database.repo import format_repo, quiz_repo
from quiznight.database.tx import transactional
from quiznight.services.auth import require_user
from quiznight.services.errors import NotFoundError, PersistenceError, ValidationError
from quiznight.services.provisioning import QUIZ_DATE_COLUMNS, QUIZ_DATE_CONSTRAINT
from quiznight.services.scoring import is_pictures_round

log = logging.getLogger(__name__)


async def get_quiz(session: AsyncSession, *, user: User | None, quiz_id: int) -> Quiz:
    quiz = await quiz_repo.get_quiz(session, require_user(user).id, quiz_id)
    if quiz is None:
        raise NotFoundError("Quiz not found.")
    return quiz


async def get_quiz_by_date(session: AsyncSession, *, user: User | None, quiz_date: date) -> Quiz:
    quiz = await quiz_repo.find_quiz_by_date(session, require_user(user).id, quiz_date)
    if quiz is None:
        raise NotFoundError(f"No quiz on {quiz_date.isoformat()}.")
    return quiz


async def list_quizzes(session: AsyncSession, *, user: User | None, limit: int | None = None) -> list[Quiz]:
    return await quiz_repo.list_quizzes(session, require_user(user).id, limit=limit)


async def delete_quiz(session: AsyncSession, *, user: User | None, quiz_id: int) -> None:
    quiz = await get_quiz(session, user=user, quiz_id=quiz_id)
    async with transactional(session):
        await quiz_repo.delete_quiz(session, quiz.id)
    log.info("Deleted quiz %s (%s)", quiz.id, quiz.quiz_date)


async def set_joker_round(
    session: AsyncSession,
    *,
    user: User | None,
    quiz_id: int,
    round_number: int | None,
) -> Quiz:
    """
    Stores the joker choice. Scores are not recomputed here; saving the
    round's questions applies it.
    """
    quiz = await get_quiz(session, user=user, quiz_id=quiz_id)

    if round_number is not None:
        if quiz.format_id is not None:
            fmt = await format_repo.get_format(session, quiz.format_id)
            if fmt is not None and not fmt.has_joker:
                raise ValidationError(f'The "{fmt.name}" format has no joker.')

        rnd = next((r for r in quiz.rounds if r.round_number == round_number), None)
        if rnd is None:
            raise ValidationError(f"Round {round_number} does not exist on this quiz.")
        if is_pictures_round(rnd.round_number, rnd.round_name):
            raise ValidationError("The joker can't be played on the Pictures round.")

    async with transactional(session):
        await quiz_repo.update_quiz(session, quiz.id, joker_round_number=round_number)

    log.info("Quiz %s joker -> %s", quiz.id, round_number)
    return quiz


async def update_quiz_date(
    session: AsyncSession,
    *,
    user: User | None,
    quiz_id: int,
    quiz_date: date,
) -> Quiz:
    quiz = await get_quiz(session, user=user, quiz_id=quiz_id)
    if quiz.quiz_date == quiz_date:
        return quiz

    try:
        async with transactional(session):
            await quiz_repo.update_quiz(session, quiz.id, quiz_date=quiz_date)
    except IntegrityError as e:
        if is_unique_violation(e, constraint=QUIZ_DATE_CONSTRAINT, columns=QUIZ_DATE_COLUMNS):
            raise ValidationError("A quiz already exists on that date.") from e
        log.exception("Quiz date update failed (quiz=%s)", quiz_id)
        raise PersistenceError("Failed to save quiz date.") from e

    return quiz
