# quiznight/services/errors.py
from __future__ import annotations


class QuizNightError(Exception):
    """
    Base for every failure a caller is expected to show to the user.
    `message` is the user-facing text.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthorized(QuizNightError):
    def __init__(self, message: str = "You need to be signed in to do that.") -> None:
        super().__init__(message)


class ValidationError(QuizNightError):
    pass


class NotFoundError(QuizNightError):
    pass


class ConfigurationError(QuizNightError):
    """Stored setup is incomplete (e.g. a format without rounds). Not retried."""


class PersistenceError(QuizNightError):
    pass
