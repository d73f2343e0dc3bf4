# quiznight/services/auth.py
from __future__ import annotations

from quiznight.database.models import User
from quiznight.services.errors import Unauthorized


def require_user(user: User | None) -> User:
    """
    The current caller. Handlers get `db_user` from the session middleware;
    updates without a sender (channel posts, service messages) have none.
    """
    if user is None or user.id is None:
        raise Unauthorized()
    return user
