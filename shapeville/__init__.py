"""Shapeville: attempt scoring and progress tracking for geometry mini-games.

The core is UI-agnostic: a front-end creates sessions through
`shapeville.app.session_manager.SessionManager`, feeds it answers and clock
ticks, and renders the outcomes and progress it reports.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .core.session import ExerciseSession, Outcome, SessionState, SubmitResult, TickResult
from .policy.scoring import ScoringFamily, ScoringPolicy, points_for
from .progress.registry import CompletionRegistry, MarkResult
from .progress.tracker import ProgressTracker, Stage

__all__ = [
    "__version__",
    "ExerciseSession",
    "Outcome",
    "SessionState",
    "SubmitResult",
    "TickResult",
    "ScoringFamily",
    "ScoringPolicy",
    "points_for",
    "CompletionRegistry",
    "MarkResult",
    "ProgressTracker",
    "Stage",
]
