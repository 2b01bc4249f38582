from __future__ import annotations

"""Completion registry: which variants of one module have been completed.

One registry per module key space (shapes, angle types, challenge numbers).
Flags only go false -> true; `reset_all` is the single way back.
"""

from dataclasses import dataclass, asdict
from typing import Any, Callable, Dict, Iterable, List, Optional

from ..app.explain import trace as xtrace


@dataclass
class VariantRecord:
    completed: bool = False
    attempts_taken: int = 0
    points_earned: int = 0


@dataclass(frozen=True)
class MarkResult:
    key: str
    already_completed_before: bool
    record: VariantRecord


class CompletionRegistry:
    def __init__(
        self,
        module_id: str,
        keys: Iterable[str] = (),
        on_first_completion: Callable[[str, VariantRecord], None] | None = None,
    ) -> None:
        self.module_id = module_id
        self._records: Dict[str, VariantRecord] = {str(k): VariantRecord() for k in keys}
        self._listeners: List[Callable[[str, VariantRecord], None]] = []
        if on_first_completion is not None:
            self._listeners.append(on_first_completion)

    @property
    def keys(self) -> List[str]:
        return list(self._records.keys())

    def subscribe(self, listener: Callable[[str, VariantRecord], None]) -> None:
        self._listeners.append(listener)

    def is_completed(self, key: str) -> bool:
        rec = self._records.get(str(key))
        return bool(rec and rec.completed)

    def get(self, key: str) -> Optional[VariantRecord]:
        return self._records.get(str(key))

    def mark_completed(self, key: str, attempts_taken: int, points_earned: int) -> MarkResult:
        """Record a completion; only the first one per key is stored and announced."""
        k = str(key)
        rec = self._records.setdefault(k, VariantRecord())
        if rec.completed:
            return MarkResult(k, True, rec)
        rec.completed = True
        rec.attempts_taken = int(attempts_taken)
        rec.points_earned = int(points_earned)
        xtrace(
            "variant_completed",
            {"module": self.module_id, "key": k, "attempts": rec.attempts_taken, "points": rec.points_earned},
        )
        for listener in list(self._listeners):
            listener(k, rec)
        return MarkResult(k, False, rec)

    def all_completed(self, keys: Iterable[str] | None = None) -> bool:
        ks = self.keys if keys is None else [str(k) for k in keys]
        if not ks:
            return False
        return all(self.is_completed(k) for k in ks)

    def uncompleted(self, keys: Iterable[str] | None = None) -> List[str]:
        ks = self.keys if keys is None else [str(k) for k in keys]
        return [k for k in ks if not self.is_completed(k)]

    def total_points(self) -> int:
        return sum(r.points_earned for r in self._records.values() if r.completed)

    def reset_all(self) -> None:
        """Clear every flag and score in this module's key space."""
        for k in self._records:
            self._records[k] = VariantRecord()
        xtrace("registry_reset", {"module": self.module_id})

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        return {k: asdict(r) for k, r in self._records.items()}
