from __future__ import annotations

"""User-facing feedback text for outcomes and finished rounds."""

from typing import List, Tuple

# (minimum share of the maximum score, badge, message)
GRADES: List[Tuple[float, str, str]] = [
    (0.9, "🏆", "Excellent! You're a geometry master!"),
    (0.7, "🎉", "Great job! You understand shapes well!"),
    (0.5, "👍", "Well done! Keep practicing!"),
    (0.3, "🙂", "Good start! Keep learning!"),
    (0.0, "💪", "Keep studying! You'll improve!"),
]

SOLVED_PRAISE = {1: "Excellent!", 2: "Very Good!", 3: "Good!"}


def attempts_remaining_text(remaining: int) -> str:
    noun = "attempt" if remaining == 1 else "attempts"
    return f"Incorrect. You have {remaining} more {noun} remaining."


def solved_text(attempts_used: int, points: int) -> str:
    praise = SOLVED_PRAISE.get(attempts_used, "Correct!")
    return f"{praise} +{points} points"


def grade(score: int, max_score: int) -> Tuple[str, str]:
    """Badge and message for a round score."""
    share = (score / max_score) if max_score > 0 else 0.0
    for threshold, badge, message in GRADES:
        if share >= threshold:
            return badge, message
    return GRADES[-1][1], GRADES[-1][2]
