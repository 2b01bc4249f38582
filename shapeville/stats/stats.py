from __future__ import annotations

"""Basic play stats: JSON-based aggregation and formatting."""

import json
from pathlib import Path
from typing import Dict


def new_play_stats() -> Dict:
    """Create a new, empty stats structure."""
    return {"score": 0, "questions": 0, "solved": 0, "per_module": {}}


def update_stats(stats: Dict, module_id: str, state: str, points: int, attempts: int) -> None:
    """Update stats for a single finished question."""
    solved = state == "correctly_solved"
    stats["questions"] = int(stats.get("questions", 0)) + 1
    stats["score"] = int(stats.get("score", 0)) + int(points)
    if solved:
        stats["solved"] = int(stats.get("solved", 0)) + 1
    per = stats.setdefault("per_module", {})
    bucket = per.setdefault(
        module_id,
        {"asked": 0, "solved": 0, "timed_out": 0, "exhausted": 0, "points": 0, "attempts": 0},
    )
    bucket["asked"] += 1
    bucket["solved"] += 1 if solved else 0
    bucket["timed_out"] += 1 if state == "timed_out" else 0
    bucket["exhausted"] += 1 if state == "exhausted_attempts" else 0
    bucket["points"] += int(points)
    bucket["attempts"] += int(attempts)


def write_stats(stats: Dict, path: str) -> None:
    """Write stats as JSON to path."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with p.open("w", encoding="utf-8") as f:
        json.dump(stats, f, indent=2)


def format_summary(stats: Dict, progress: Dict[str, float] | None = None) -> str:
    """Return a human-readable summary of stats."""
    lines = [
        f"Score: {int(stats.get('score', 0))}",
        f"Solved: {int(stats.get('solved', 0))}/{int(stats.get('questions', 0))}",
    ]
    for module_id in sorted(stats.get("per_module", {})):
        b = stats["per_module"][module_id]
        lines.append(
            f"{module_id}: {b.get('solved', 0)}/{b.get('asked', 0)} solved, {b.get('points', 0)} points"
        )
    for stage, pct in (progress or {}).items():
        lines.append(f"{stage.upper()} progress: {pct:.1f}%")
    return "\n".join(lines)
