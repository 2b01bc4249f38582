from .answers import InvalidAnswer, check_answer, parse_numeric
from .session import ExerciseSession, Outcome, SessionState, SubmitResult, TickResult

__all__ = [
    "InvalidAnswer",
    "check_answer",
    "parse_numeric",
    "ExerciseSession",
    "Outcome",
    "SessionState",
    "SubmitResult",
    "TickResult",
]
