# quiznight/services/scoring.py
"""
Round scoring and the joker bonus.

Pure functions only: callers load questions, call `compute_round_totals`,
then persist the returned questions and totals.

Joker rules:
- the joker doubles the round whose number equals the quiz's
  `joker_round_number`
- on a Facebook-type round only the first 5 questions (8 on a big quiz)
  are doubled
- a Pictures-type round is never doubled, even if selected

Round types are detected by name ("facebook" / "picture", any case) or by
the fixed round numbers 7 and 8 used by the Chelsea format.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping

from quiznight.database.models.quiz import QuestionType

FACEBOOK_ROUND_NUMBER = 7
PICTURES_ROUND_NUMBER = 8

FACEBOOK_JOKER_LIMIT_SMALL = 5
FACEBOOK_JOKER_LIMIT_BIG = 8

DEFAULT_POINTS_VALUE = 1

Number = int | float


@dataclass(frozen=True, slots=True)
class QuestionDraft:
    question_number: int
    question_text: str | None = None
    our_answer: str | None = None
    is_correct: bool | None = None
    question_type: str = QuestionType.NORMAL.value
    points_value: Number | None = None
    points_scored: Number | None = None

    @property
    def max_points(self) -> Number:
        return DEFAULT_POINTS_VALUE if self.points_value is None else self.points_value

    @property
    def scored_points(self) -> Number:
        if self.points_scored is not None:
            return self.points_scored
        # killer / wipeout never auto-score
        if self.question_type == QuestionType.NORMAL.value and self.is_correct:
            return self.max_points
        return 0

    def has_content(self) -> bool:
        return bool(
            (self.question_text and self.question_text.strip())
            or (self.our_answer and self.our_answer.strip())
            or self.points_value is not None
            or self.points_scored is not None
            or self.is_correct is not None
        )

    def as_row(self) -> dict[str, Any]:
        """Column values for a `questions` insert (points_value defaults to 1)."""
        return {
            "question_number": self.question_number,
            "question_text": self.question_text,
            "our_answer": self.our_answer,
            "is_correct": self.is_correct,
            "question_type": self.question_type,
            "points_value": self.max_points,
            "points_scored": self.points_scored,
        }


@dataclass(frozen=True, slots=True)
class RoundTotals:
    score: Number
    max_score: Number
    base_score: Number
    base_max: Number
    joker_applied: bool
    questions: tuple[QuestionDraft, ...]


def to_number(value: Any) -> Number | None:
    """Lenient numeric coercion: blanks, garbage and NaN become None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return None
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def to_question_type(value: Any) -> str:
    raw = (str(value).strip().lower() if value is not None else "") or QuestionType.NORMAL.value
    try:
        return QuestionType(raw).value
    except ValueError:
        return QuestionType.NORMAL.value


def question_from_mapping(data: Mapping[str, Any], question_number: int = 0) -> QuestionDraft:
    """
    Build a draft from loosely typed input (ORM row dict, form data, parsed
    command). Numbers are coerced, never rejected.
    """
    is_correct = data.get("is_correct")
    return QuestionDraft(
        question_number=int(to_number(data.get("question_number")) or question_number),
        question_text=data.get("question_text"),
        our_answer=data.get("our_answer"),
        is_correct=None if is_correct is None else bool(is_correct),
        question_type=to_question_type(data.get("question_type")),
        points_value=to_number(data.get("points_value")),
        points_scored=to_number(data.get("points_scored")),
    )


def apply_correctness(question: QuestionDraft, is_correct: bool | None) -> QuestionDraft:
    """
    Editing helper: marking a normal question right/wrong derives its
    points_scored; other types keep whatever was entered.
    """
    if question.question_type != QuestionType.NORMAL.value:
        return replace(question, is_correct=is_correct)
    if is_correct is None:
        scored = None
    else:
        scored = question.max_points if is_correct else 0
    return replace(question, is_correct=is_correct, points_scored=scored)


def prepare_questions(questions: Iterable[QuestionDraft]) -> tuple[QuestionDraft, ...]:
    """Drop empty rows and renumber the rest 1..N in their given order."""
    kept = [q for q in questions if q.has_content()]
    return tuple(replace(q, question_number=i) for i, q in enumerate(kept, start=1))


def is_facebook_round(round_number: int | None, round_name: str | None) -> bool:
    return "facebook" in (round_name or "").lower() or round_number == FACEBOOK_ROUND_NUMBER


def is_pictures_round(round_number: int | None, round_name: str | None) -> bool:
    return "picture" in (round_name or "").lower() or round_number == PICTURES_ROUND_NUMBER


def facebook_joker_limit(quiz_is_big: bool) -> int:
    return FACEBOOK_JOKER_LIMIT_BIG if quiz_is_big else FACEBOOK_JOKER_LIMIT_SMALL


def compute_round_totals(
    questions: Iterable[QuestionDraft],
    joker_round_number: int | None,
    quiz_is_big: bool,
    current_round_number: int,
    current_round_name: str | None,
) -> RoundTotals:
    prepared = prepare_questions(questions)

    base_max: Number = 0
    base_score: Number = 0
    for q in prepared:
        base_max += q.max_points
        base_score += q.scored_points

    is_joker = joker_round_number is not None and joker_round_number == current_round_number
    eligible = (
        is_joker
        and bool(prepared)
        and not is_pictures_round(current_round_number, current_round_name)
    )
    if not eligible:
        return RoundTotals(
            score=base_score,
            max_score=base_max,
            base_score=base_score,
            base_max=base_max,
            joker_applied=False,
            questions=prepared,
        )

    if is_facebook_round(current_round_number, current_round_name):
        limit = facebook_joker_limit(quiz_is_big)
        doubled = [q for q in prepared if q.question_number <= limit]
    else:
        doubled = list(prepared)

    bonus_max: Number = sum((q.max_points for q in doubled), 0)
    bonus_score: Number = sum((q.scored_points for q in doubled), 0)

    return RoundTotals(
        score=base_score + bonus_score,
        max_score=base_max + bonus_max,
        base_score=base_score,
        base_max=base_max,
        joker_applied=True,
        questions=prepared,
    )
