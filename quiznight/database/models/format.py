# quiznight/database/models/format.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from quiznight.database.base import Base


class QuizFormat(Base):
    """
    Named quiz template. Rounds are numbered 1..N without gaps.
    """
    __tablename__ = "quiz_formats"

    id: Mapped[int] = mapped_column(primary_key=True)
    slug: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    name: Mapped[str] = mapped_column(String(128))

    has_joker: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    supports_big_quiz: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())

    rounds: Mapped[list["FormatRound"]] = relationship(
        "FormatRound",
        back_populates="format",
        cascade="all, delete-orphan",
        order_by="FormatRound.round_number",
    )


class FormatRound(Base):
    __tablename__ = "quiz_format_rounds"
    __table_args__ = (
        UniqueConstraint("format_id", "round_number", name="uq_quiz_format_rounds_format_number"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    format_id: Mapped[int] = mapped_column(ForeignKey("quiz_formats.id", ondelete="CASCADE"), index=True)

    round_number: Mapped[int] = mapped_column(Integer)  # 1..n
    round_name: Mapped[str] = mapped_column(String(128))

    # NULL = no default ceiling for that size
    default_small_max: Mapped[float | None] = mapped_column(Float, nullable=True)
    default_big_max: Mapped[float | None] = mapped_column(Float, nullable=True)

    format: Mapped["QuizFormat"] = relationship("QuizFormat", back_populates="rounds")
