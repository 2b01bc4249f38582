from __future__ import annotations

"""Scoring policy: points awarded for a solved question by attempts used."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Tuple


class ScoringFamily(str, Enum):
    STANDARD = "standard"
    HIGH_VALUE = "high_value"


@dataclass(frozen=True)
class ScoringTable:
    """Points per attempt index (1st, 2nd, ...).

    With `sticky_tail` the last entry applies to every later attempt;
    otherwise attempts past the table earn nothing.
    """

    points: Tuple[int, ...]
    sticky_tail: bool = False

    def __post_init__(self) -> None:
        if not self.points:
            raise ValueError("scoring table needs at least one entry")
        if any(p < 0 for p in self.points):
            raise ValueError("points must be non-negative")
        if any(b > a for a, b in zip(self.points, self.points[1:])):
            raise ValueError(f"points must be non-increasing: {self.points}")

    def for_attempt(self, attempts_used: int) -> int:
        if attempts_used < 1:
            return 0
        idx = attempts_used - 1
        if idx < len(self.points):
            return self.points[idx]
        return self.points[-1] if self.sticky_tail else 0


DEFAULT_TABLES: Dict[ScoringFamily, ScoringTable] = {
    ScoringFamily.STANDARD: ScoringTable(points=(3, 2, 1)),
    ScoringFamily.HIGH_VALUE: ScoringTable(points=(6, 4, 2), sticky_tail=True),
}


class ScoringPolicy:
    def __init__(self, tables: Mapping[ScoringFamily, ScoringTable] | None = None) -> None:
        self.tables: Dict[ScoringFamily, ScoringTable] = dict(DEFAULT_TABLES)
        if tables:
            self.tables.update(tables)

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "ScoringPolicy":
        """Build from the validated `scoring.tables` config section."""
        raw = cfg.get("scoring", {}).get("tables", {}) or {}
        tables: Dict[ScoringFamily, ScoringTable] = {}
        for name, table in raw.items():
            family = ScoringFamily(name)
            tables[family] = ScoringTable(
                points=tuple(int(p) for p in table.get("points", ())),
                sticky_tail=bool(table.get("sticky_tail", False)),
            )
        return cls(tables)

    def points_for(self, attempts_used: int, family: ScoringFamily) -> int:
        return self.tables[ScoringFamily(family)].for_attempt(attempts_used)

    def max_points(self, family: ScoringFamily) -> int:
        return self.tables[ScoringFamily(family)].points[0]


_DEFAULT_POLICY = ScoringPolicy()


def points_for(attempts_used: int, family: ScoringFamily) -> int:
    """Points for a question solved on attempt `attempts_used` (default tables).

    Timeouts and exhausted attempts never reach here; callers award 0.
    """
    return _DEFAULT_POLICY.points_for(attempts_used, family)
