from __future__ import annotations

"""Exercise session: attempt and time lifecycle of one question.

A session is started with the correct answer and its limits, then driven by
`submit_answer` (user input) and `tick` (one call per second from whatever
clock the front-end owns). Once a terminal state is reached nothing changes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from ..app.explain import trace as xtrace
from ..policy.scoring import ScoringFamily, ScoringPolicy
from .answers import Answer, InvalidAnswer, check_answer


class SessionState(str, Enum):
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    CORRECTLY_SOLVED = "correctly_solved"
    EXHAUSTED_ATTEMPTS = "exhausted_attempts"
    TIMED_OUT = "timed_out"


TERMINAL_STATES = frozenset(
    {SessionState.CORRECTLY_SOLVED, SessionState.EXHAUSTED_ATTEMPTS, SessionState.TIMED_OUT}
)


class Outcome(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    INVALID = "invalid"


@dataclass(frozen=True)
class SubmitResult:
    outcome: Outcome
    attempts_remaining: int
    state: SessionState


@dataclass(frozen=True)
class TickResult:
    seconds_left: Optional[int]
    expired: bool


class ExerciseSession:
    def __init__(
        self,
        exercise_id: str,
        *,
        family: ScoringFamily = ScoringFamily.STANDARD,
        policy: ScoringPolicy | None = None,
        on_score_delta: Callable[[int], None] | None = None,
    ) -> None:
        self.exercise_id = exercise_id
        self.family = ScoringFamily(family)
        self.policy = policy or ScoringPolicy()
        self.on_score_delta = on_score_delta
        self.correct_answer: Answer = 0.0
        self.tolerance = 0.0
        self.attempts_used = 0
        self.max_attempts = 3
        self.time_budget_seconds: Optional[int] = None
        self.remaining_seconds: Optional[int] = None
        self.state = SessionState.NOT_STARTED
        self.abandoned = False

    def start(
        self,
        correct_answer: Answer,
        tolerance: float = 0.01,
        max_attempts: int = 3,
        time_budget_seconds: Optional[int] = None,
    ) -> None:
        """(Re)start the question. `time_budget_seconds=None` means untimed."""
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if time_budget_seconds is not None and time_budget_seconds < 1:
            raise ValueError("time_budget_seconds must be >= 1 or None")
        self.correct_answer = correct_answer
        self.tolerance = float(tolerance)
        self.max_attempts = int(max_attempts)
        self.attempts_used = 0
        self.time_budget_seconds = time_budget_seconds
        self.remaining_seconds = time_budget_seconds
        self.state = SessionState.ACTIVE
        self.abandoned = False
        xtrace(
            "session_started",
            {"exercise": self.exercise_id, "max_attempts": self.max_attempts, "time_budget": time_budget_seconds},
        )

    @property
    def is_active(self) -> bool:
        return self.state == SessionState.ACTIVE and not self.abandoned

    @property
    def is_complete(self) -> bool:
        return self.state in TERMINAL_STATES

    @property
    def attempts_remaining(self) -> int:
        return self.max_attempts - self.attempts_used

    @property
    def points(self) -> int:
        if self.state != SessionState.CORRECTLY_SOLVED:
            return 0
        return self.policy.points_for(self.attempts_used, self.family)

    def submit_answer(self, value: object) -> SubmitResult:
        if not self.is_active:
            return SubmitResult(Outcome.INVALID, self.attempts_remaining, self.state)
        try:
            correct = check_answer(value, self.correct_answer, self.tolerance)
        except InvalidAnswer as e:
            xtrace("answer_invalid", {"exercise": self.exercise_id, "reason": str(e)})
            return SubmitResult(Outcome.INVALID, self.attempts_remaining, self.state)

        self.attempts_used += 1
        if correct:
            self.state = SessionState.CORRECTLY_SOLVED
        elif self.attempts_used >= self.max_attempts:
            self.state = SessionState.EXHAUSTED_ATTEMPTS
        outcome = Outcome.CORRECT if correct else Outcome.INCORRECT
        xtrace(
            "answer_submitted",
            {"exercise": self.exercise_id, "outcome": outcome.value, "attempt": self.attempts_used, "state": self.state.value},
        )
        if correct and self.on_score_delta is not None and self.points > 0:
            self.on_score_delta(self.points)
        return SubmitResult(outcome, self.attempts_remaining, self.state)

    def tick(self) -> TickResult:
        if not self.is_active or self.remaining_seconds is None:
            return TickResult(self.remaining_seconds, self.state == SessionState.TIMED_OUT)
        self.remaining_seconds = max(0, self.remaining_seconds - 1)
        if self.remaining_seconds == 0:
            self.state = SessionState.TIMED_OUT
            xtrace("session_timed_out", {"exercise": self.exercise_id, "attempts": self.attempts_used})
        return TickResult(self.remaining_seconds, self.state == SessionState.TIMED_OUT)

    def abandon(self) -> None:
        """Drop the session without a terminal transition (dialog closed)."""
        if self.state == SessionState.ACTIVE:
            self.abandoned = True
            xtrace("session_abandoned", {"exercise": self.exercise_id, "attempts": self.attempts_used})
