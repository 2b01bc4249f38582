from .config import AnalyticsConfig
from .metrics import compute_metrics
from .prepare import accuracy_trend, load_and_prepare

__all__ = [
    "AnalyticsConfig",
    "compute_metrics",
    "load_and_prepare",
    "accuracy_trend",
]
