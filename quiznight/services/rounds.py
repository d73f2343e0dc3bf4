# quiznight/services/rounds.py
from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from quiznight.database.models import Round, User
from quiznight.database.repo import round_repo
from quiznight.database.tx import transactional
from quiznight.services.auth import require_user
from quiznight.services.errors import NotFoundError, PersistenceError
from quiznight.services.scoring import (
    DEFAULT_POINTS_VALUE,
    QuestionDraft,
    RoundTotals,
    compute_round_totals,
    question_from_mapping,
)

log = logging.getLogger(__name__)

BLANK_SHEET_FALLBACK = 10
BLANK_SHEET_LIMIT = 50


@dataclass(frozen=True, slots=True)
class RoundSaveResult:
    round: Round
    totals: RoundTotals


def blank_sheet_size(max_score: float | None) -> int:
    if max_score and 0 < max_score <= BLANK_SHEET_LIMIT:
        return int(max_score)
    return BLANK_SHEET_FALLBACK


async def _owned_round(session: AsyncSession, user: User | None, round_id: int) -> Round:
    user_id = require_user(user).id
    rnd = await round_repo.get_round(session, user_id, round_id)
    if rnd is None:
        raise NotFoundError("Round not found.")
    return rnd


async def load_round_questions(
    session: AsyncSession,
    *,
    user: User | None,
    round_id: int,
) -> list[QuestionDraft]:
    """
    Saved questions in order, or a blank sheet sized from the round's
    ceiling when nothing has been recorded yet.
    """
    rnd = await _owned_round(session, user, round_id)
    rows = await round_repo.list_questions(session, rnd.id)

    if rows:
        return [
            QuestionDraft(
                question_number=q.question_number,
                question_text=q.question_text or "",
                our_answer=q.our_answer or "",
                is_correct=q.is_correct,
                question_type=q.question_type,
                points_value=q.points_value,
                points_scored=q.points_scored,
            )
            for q in rows
        ]

    return [
        QuestionDraft(question_number=i, question_text="", our_answer="", points_value=DEFAULT_POINTS_VALUE)
        for i in range(1, blank_sheet_size(rnd.max_score) + 1)
    ]


async def save_round_questions(
    session: AsyncSession,
    *,
    user: User | None,
    round_id: int,
    questions: list[QuestionDraft | dict],
    notes: str | None = None,
) -> RoundSaveResult:
    """
    Scores the round (joker included), replaces its question set and
    overwrites score / max_score / notes, all in one transaction.

    An empty save keeps the round's previous max_score.
    """
    rnd = await _owned_round(session, user, round_id)
    quiz = rnd.quiz

    drafts = [
        q if isinstance(q, QuestionDraft) else question_from_mapping(q, question_number=i)
        for i, q in enumerate(questions, start=1)
    ]
    totals = compute_round_totals(
        drafts,
        quiz.joker_round_number,
        quiz.is_big_quiz,
        rnd.round_number,
        rnd.round_name,
    )

    max_score = totals.max_score or rnd.max_score
    clean_notes = (notes or "").strip() or None

    try:
        async with transactional(session):
            await round_repo.replace_questions(
                session, rnd.id, [q.as_row() for q in totals.questions]
            )
            await round_repo.update_round(
                session,
                rnd.id,
                score=totals.score,
                max_score=max_score,
                notes=clean_notes,
            )
    except SQLAlchemyError as e:
        log.exception("Saving questions failed (round=%s)", rnd.id)
        raise PersistenceError("Failed to save questions.") from e

    log.info(
        "Round %s (quiz %s, #%s) saved: %s/%s from %d questions%s",
        rnd.id,
        quiz.id,
        rnd.round_number,
        totals.score,
        max_score,
        len(totals.questions),
        " [joker]" if totals.joker_applied else "",
    )
    return RoundSaveResult(round=rnd, totals=totals)


async def set_highest_unique(
    session: AsyncSession,
    *,
    user: User | None,
    round_id: int,
    highest_unique: bool,
) -> Round:
    rnd = await _owned_round(session, user, round_id)
    async with transactional(session):
        await round_repo.update_round(session, rnd.id, highest_unique=highest_unique)
    return rnd
