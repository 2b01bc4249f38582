from __future__ import annotations

"""Schema constants and Pydantic models for the Parquet attempt log."""

from datetime import datetime, timezone
from typing import Literal, Optional

import pandas as pd
from pandas.api.types import CategoricalDtype
from pydantic import BaseModel, Field, field_validator, model_validator

# --- Constants ---

STATES = {"correctly_solved", "exhausted_attempts", "timed_out"}
FAMILIES = {"standard", "high_value"}
STAGES = {"ks1", "ks2"}


def _cat_dtype(categories: set[str]) -> CategoricalDtype:
    return CategoricalDtype(categories=sorted(categories), ordered=False)


DTYPES = {
    "play_id": "string",
    # timezone-aware UTC timestamps
    "finished_at": pd.DatetimeTZDtype(tz="UTC"),
    "module_id": "string",
    "variant": "string",
    "stage": _cat_dtype(STAGES),
    "family": _cat_dtype(FAMILIES),
    "state": _cat_dtype(STATES),
    "attempts": "UInt8",
    "max_attempts": "UInt8",
    "points": "UInt8",
    "seconds_used": "UInt32",
    "first_completion": "boolean",
}


# --- Pydantic models ---

class AttemptRow(BaseModel):
    """One finished question (terminal session) as persisted."""

    play_id: str
    finished_at: datetime
    module_id: str = Field(min_length=1)
    variant: str = Field(min_length=1)
    stage: Literal[tuple(STAGES)]  # type: ignore[valid-type]
    family: Literal[tuple(FAMILIES)]  # type: ignore[valid-type]
    state: Literal[tuple(STATES)]  # type: ignore[valid-type]
    attempts: int = Field(ge=0, le=255)
    max_attempts: int = Field(ge=1, le=255)
    points: int = Field(default=0, ge=0, le=255)
    seconds_used: int = Field(default=0, ge=0)
    first_completion: bool = False

    @field_validator("finished_at")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @model_validator(mode="after")
    def _consistent(self) -> "AttemptRow":
        if self.attempts > self.max_attempts:
            raise ValueError("attempts must be <= max_attempts")
        if self.state != "correctly_solved" and self.points != 0:
            raise ValueError("only solved questions earn points")
        return self


class PlayMeta(BaseModel):
    play_id: str
    started_at: datetime
    app_version: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("started_at")
    @classmethod
    def _ensure_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)
