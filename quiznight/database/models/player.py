# quiznight/database/models/player.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from quiznight.database.base import Base


class Player(Base):
    """
    Team member identity, one row per (user, name).
    """
    __tablename__ = "players"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_players_user_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    name: Mapped[str] = mapped_column(String(128))

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=False), server_default=func.now())


class QuizPlayer(Base):
    __tablename__ = "quiz_players"
    __table_args__ = (
        UniqueConstraint("quiz_id", "player_id", name="uq_quiz_players_quiz_player"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    quiz_id: Mapped[int] = mapped_column(ForeignKey("quizzes.id", ondelete="CASCADE"), index=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id", ondelete="CASCADE"), index=True)
