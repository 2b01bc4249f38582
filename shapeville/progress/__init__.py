from .registry import CompletionRegistry, MarkResult, VariantRecord
from .tracker import STAGE_TOTALS, ProgressTracker, Stage

__all__ = [
    "CompletionRegistry",
    "MarkResult",
    "VariantRecord",
    "STAGE_TOTALS",
    "ProgressTracker",
    "Stage",
]
