from __future__ import annotations

"""Key Stage progress accumulation.

Each first completion of a task adds `stage_total * task_weight` percent to
its stage. Sums are kept at six decimal places so repeated thirds and
eighths do not drift, and the result is clamped at 100.
"""

from enum import Enum
from fractions import Fraction
from typing import Callable, Dict, List, Set, Union

from ..app.explain import trace as xtrace


class Stage(str, Enum):
    KS1 = "ks1"
    KS2 = "ks2"


STAGE_TOTALS: Dict[Stage, float] = {Stage.KS1: 50.0, Stage.KS2: 25.0}
DECIMAL_PLACES = 6
PROGRESS_MAX = 100.0

Weight = Union[float, Fraction]


class ProgressTracker:
    def __init__(
        self,
        stage_totals: Dict[Stage, float] | None = None,
        decimal_places: int = DECIMAL_PLACES,
    ) -> None:
        self.stage_totals = dict(STAGE_TOTALS)
        if stage_totals:
            self.stage_totals.update({Stage(k): float(v) for k, v in stage_totals.items()})
        self.decimal_places = int(decimal_places)
        self._percent: Dict[Stage, float] = {s: 0.0 for s in Stage}
        self._counted: Set[str] = set()
        self._listeners: List[Callable[[Stage, float], None]] = []

    def subscribe(self, listener: Callable[[Stage, float], None]) -> None:
        self._listeners.append(listener)

    def stage_total(self, stage: Stage) -> float:
        return self.stage_totals[Stage(stage)]

    def is_counted(self, key: str) -> bool:
        return key in self._counted

    def add_task_completion(self, stage: Stage, task_weight: Weight, key: str | None = None) -> bool:
        """Add one task's share to `stage`.

        With `key`, a task already counted is ignored and False is returned.
        """
        st = Stage(stage)
        if task_weight < 0:
            raise ValueError("task_weight must be non-negative")
        if key is not None:
            if key in self._counted:
                return False
            self._counted.add(key)
        increment = round(self.stage_total(st) * float(task_weight), self.decimal_places)
        updated = round(self._percent[st] + increment, self.decimal_places)
        self._percent[st] = min(updated, PROGRESS_MAX)
        xtrace("progress_updated", {"stage": st.value, "increment": increment, "percent": self._percent[st]})
        for listener in list(self._listeners):
            listener(st, self.current_percent(st))
        return True

    def raw_percent(self, stage: Stage) -> float:
        return self._percent[Stage(stage)]

    def current_percent(self, stage: Stage) -> float:
        return round(self._percent[Stage(stage)], 1)
