from __future__ import annotations

"""Exercise module registry and metadata.

Lists the mini-games, the parameters their sessions are started with, and
how their completions feed Key Stage progress. Config may override the
per-module limits (see `resolve_module`).
"""

from dataclasses import dataclass, replace
from fractions import Fraction
from typing import Any, Dict, List, Optional, Tuple

from ..policy.scoring import ScoringFamily
from ..progress.tracker import Stage

# How a module's completions reach the ProgressTracker.
PROGRESS_PER_VARIANT = "variant"
PROGRESS_PER_ROUND = "round"


@dataclass(frozen=True)
class ModuleMeta:
    id: str
    name: str
    description: str
    stage: Stage
    family: ScoringFamily
    answer_kind: str  # numeric | label
    variants: Tuple[str, ...]
    tolerance: float = 0.01
    time_budget_seconds: Optional[int] = None
    max_attempts: int = 3
    round_size: Optional[int] = None
    progress_mode: str = PROGRESS_PER_VARIANT
    task_weight: Fraction = Fraction(1)

    def progress_key(self, variant: str | None = None) -> str:
        if self.progress_mode == PROGRESS_PER_ROUND or variant is None:
            return self.id
        return f"{self.id}:{variant}"

    @property
    def questions_per_round(self) -> int:
        return min(self.round_size or len(self.variants), len(self.variants))


SHAPES_2D = (
    "circle", "rectangle", "triangle", "oval", "octagon", "square",
    "heptagon", "rhombus", "pentagon", "hexagon", "kite",
)
SHAPES_3D = (
    "cube", "cuboid", "cylinder", "sphere", "triangular prism",
    "square-based pyramid", "cone", "tetrahedron",
)
ANGLE_TYPES = ("acute angle", "right angle", "obtuse angle", "straight angle", "reflex angle")
AREA_SHAPES = ("rectangle", "parallelogram", "triangle", "trapezium")
CIRCLE_TASKS = ("area", "circumference")
COMPOUND_CHALLENGES = ("2", "3", "4", "5", "8", "9")
SECTORS = tuple(str(i) for i in range(1, 9))


def _modules() -> List[ModuleMeta]:
    return [
        ModuleMeta(
            id="shapes_2d",
            name="2D Shape Identification",
            description="Name the flat shape shown.",
            stage=Stage.KS1,
            family=ScoringFamily.STANDARD,
            answer_kind="label",
            variants=SHAPES_2D,
            round_size=4,
            progress_mode=PROGRESS_PER_ROUND,
            task_weight=Fraction(1, 2),
        ),
        ModuleMeta(
            id="shapes_3d",
            name="3D Shape Identification",
            description="Name the solid shape shown.",
            stage=Stage.KS1,
            family=ScoringFamily.HIGH_VALUE,
            answer_kind="label",
            variants=SHAPES_3D,
            round_size=4,
            progress_mode=PROGRESS_PER_ROUND,
            task_weight=Fraction(1, 2),
        ),
        ModuleMeta(
            id="angle_types",
            name="Angle Type Identification",
            description="Classify an angle as acute, right, obtuse, straight or reflex.",
            stage=Stage.KS1,
            family=ScoringFamily.STANDARD,
            answer_kind="label",
            variants=ANGLE_TYPES,
            task_weight=Fraction(1, len(ANGLE_TYPES)),
        ),
        ModuleMeta(
            id="area",
            name="Shape Area Calculation",
            description="Work out the area of a rectangle, parallelogram, triangle or trapezium.",
            stage=Stage.KS2,
            family=ScoringFamily.STANDARD,
            answer_kind="numeric",
            variants=AREA_SHAPES,
            tolerance=0.1,
            time_budget_seconds=180,
            task_weight=Fraction(1, len(AREA_SHAPES)),
        ),
        ModuleMeta(
            id="circle",
            name="Circle Area and Circumference",
            description="Work out a circle's area or circumference from its radius or diameter.",
            stage=Stage.KS2,
            family=ScoringFamily.HIGH_VALUE,
            answer_kind="numeric",
            variants=CIRCLE_TASKS,
            tolerance=0.01,
            time_budget_seconds=180,
            task_weight=Fraction(1, len(CIRCLE_TASKS)),
        ),
        ModuleMeta(
            id="compound_area",
            name="Compound Shape Area",
            description="Split a compound shape into simple ones and add their areas.",
            stage=Stage.KS2,
            family=ScoringFamily.HIGH_VALUE,
            answer_kind="numeric",
            variants=COMPOUND_CHALLENGES,
            tolerance=1e-9,
            time_budget_seconds=300,
            task_weight=Fraction(1, len(COMPOUND_CHALLENGES)),
        ),
        ModuleMeta(
            id="sector",
            name="Sector Area",
            description="Work out the area of a circle sector from its radius and angle.",
            stage=Stage.KS2,
            family=ScoringFamily.HIGH_VALUE,
            answer_kind="numeric",
            variants=SECTORS,
            tolerance=0.01,
            time_budget_seconds=300,
            task_weight=Fraction(1, len(SECTORS)),
        ),
    ]


def list_modules() -> List[ModuleMeta]:
    return _modules()


def get_module(module_id: str) -> ModuleMeta:
    for m in list_modules():
        if m.id == module_id:
            return m
    raise KeyError(f"Unknown module id: {module_id}")


_OVERRIDABLE = ("tolerance", "time_budget_seconds", "max_attempts", "round_size")


def resolve_module(module_id: str, cfg: Dict[str, Any] | None = None) -> ModuleMeta:
    """Module metadata with `modules.<id>` config overrides applied.

    A time budget of 0 in config means untimed.
    """
    meta = get_module(module_id)
    overrides = dict(((cfg or {}).get("modules", {}) or {}).get(module_id, {}) or {})
    changes: Dict[str, Any] = {}
    for name in _OVERRIDABLE:
        if name not in overrides or overrides[name] is None:
            continue
        value = overrides[name]
        if name == "tolerance":
            changes[name] = float(value)
        elif name == "time_budget_seconds":
            changes[name] = int(value) or None
        else:
            changes[name] = int(value)
    return replace(meta, **changes) if changes else meta
