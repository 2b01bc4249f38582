from __future__ import annotations

"""Analytics configuration (hyperparameters) using Pydantic."""

from pydantic import BaseModel, Field


class AnalyticsConfig(BaseModel):
    """Hyperparameters for attempt-log analytics.

    - timeout_weight: how much a timeout counts against mastery relative to
      exhausting attempts (0 = ignore timeouts, 1 = same as a miss)
    - min_questions: modules with fewer finished questions are flagged
    - smoothing_span: EWMA span in plays for accuracy trends (>1)
    """

    timeout_weight: float = Field(0.5, ge=0, le=1)
    min_questions: int = Field(3, ge=1)
    smoothing_span: int = Field(5, gt=1)
