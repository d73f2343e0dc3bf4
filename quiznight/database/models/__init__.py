from .user import User
from .format import QuizFormat, FormatRound
from .quiz import Quiz, Round, Question, QuestionType
from .player import Player, QuizPlayer

__all__ = [
    "User",
    "QuizFormat",
    "FormatRound",
    "Quiz",
    "Round",
    "Question",
    "QuestionType",
    "Player",
    "QuizPlayer",
]
