# quiznight/database/models/quiz.py
from __future__ import annotations

import enum
from datetime import date, datetime

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quiznight.database.base import Base


class QuestionType(str, enum.Enum):
    NORMAL = "normal"
    KILLER = "killer"
    WIPEOUT = "wipeout"


class Quiz(Base):
    """
    One played quiz night. At most one quiz per date per user
    (enforced by uq_quizzes_user_date).
    """
    __tablename__ = "quizzes"
    __table_args__ = (
        UniqueConstraint("user_id", "quiz_date", name="uq_quizzes_user_date"),
        Index("ix_quizzes_user_date", "user_id", "quiz_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    format_id: Mapped[int | None] = mapped_column(
        ForeignKey("quiz_formats.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    quiz_date: Mapped[date] = mapped_column(Date)
    quiz_name: Mapped[str] = mapped_column(String(128))
    is_big_quiz: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    joker_round_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # final results
    teams_total: Mapped[int | None] = mapped_column(Integer, nullable=True)
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)

    first_team_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    first_team_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    first_team_is_us: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    second_team_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    second_team_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    second_team_is_us: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    third_team_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    third_team_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    third_team_is_us: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())

    rounds: Mapped[list["Round"]] = relationship(
        "Round",
        back_populates="quiz",
        cascade="all, delete-orphan",
        order_by="Round.round_number",
    )


class Round(Base):
    __tablename__ = "rounds"
    __table_args__ = (
        UniqueConstraint("quiz_id", "round_number", name="uq_rounds_quiz_number"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    quiz_id: Mapped[int] = mapped_column(ForeignKey("quizzes.id", ondelete="CASCADE"), index=True)

    round_number: Mapped[int] = mapped_column(Integer)  # 1-based, mirrors the format
    round_name: Mapped[str | None] = mapped_column(String(128), nullable=True)

    score: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    highest_unique: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    quiz: Mapped["Quiz"] = relationship("Quiz", back_populates="rounds")
    questions: Mapped[list["Question"]] = relationship(
        "Question",
        back_populates="round",
        cascade="all, delete-orphan",
        order_by="Question.question_number",
    )


class Question(Base):
    """
    The whole set for a round is replaced on every save; rows are never
    edited in place.
    """
    __tablename__ = "questions"
    __table_args__ = (
        UniqueConstraint("round_id", "question_number", name="uq_questions_round_number"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    round_id: Mapped[int] = mapped_column(ForeignKey("rounds.id", ondelete="CASCADE"), index=True)

    question_number: Mapped[int] = mapped_column(Integer)
    question_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    our_answer: Mapped[str | None] = mapped_column(Text, nullable=True)

    is_correct: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    question_type: Mapped[str] = mapped_column(String(16), default=QuestionType.NORMAL.value)

    points_value: Mapped[float | None] = mapped_column(Float, nullable=True)
    points_scored: Mapped[float | None] = mapped_column(Float, nullable=True)

    round: Mapped["Round"] = relationship("Round", back_populates="questions")
