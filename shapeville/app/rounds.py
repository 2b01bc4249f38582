from __future__ import annotations

"""Round planning: which variants a round asks, and the "play again" reset."""

import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..progress.registry import CompletionRegistry
from ..util.randomness import sample
from .explain import trace as xtrace
from .module_registry import PROGRESS_PER_ROUND, ModuleMeta


@dataclass
class Round:
    module_id: str
    keys: List[str]
    replay: bool = False
    index: int = 0
    score: int = 0
    outcomes: Dict[str, str] = field(default_factory=dict)

    @property
    def current_key(self) -> Optional[str]:
        if self.index < len(self.keys):
            return self.keys[self.index]
        return None

    @property
    def is_finished(self) -> bool:
        return self.index >= len(self.keys)

    def record(self, key: str, state: str, points: int) -> None:
        self.outcomes[key] = state
        self.score += int(points)
        self.index += 1


def plan_round(meta: ModuleMeta, registry: CompletionRegistry, rng: random.Random | None = None) -> Round:
    """Pick the variants for the next round of `meta`.

    Round-mode modules ask `round_size` random uncompleted variants and reset
    the registry first when too few remain. Other modules ask every
    uncompleted variant in catalog order, or replay them all once everything
    is done.
    """
    variants = list(meta.variants)
    if meta.progress_mode == PROGRESS_PER_ROUND:
        size = meta.questions_per_round
        pool = registry.uncompleted(variants)
        if len(pool) < size:
            registry.reset_all()
            pool = list(variants)
        keys = sample(pool, size, rng)
        xtrace("round_planned", {"module": meta.id, "keys": keys})
        return Round(module_id=meta.id, keys=keys)

    pool = registry.uncompleted(variants)
    if not pool:
        xtrace("round_planned", {"module": meta.id, "keys": variants, "replay": True})
        return Round(module_id=meta.id, keys=variants, replay=True)
    xtrace("round_planned", {"module": meta.id, "keys": pool})
    return Round(module_id=meta.id, keys=pool)
