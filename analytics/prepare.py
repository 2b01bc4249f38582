from __future__ import annotations

"""Load the attempt log and compute per-module metrics."""

from pathlib import Path

import pandas as pd

from shapeville.policy.scoring import ScoringPolicy
from shapeville.storage import load_all

from .config import AnalyticsConfig
from .metrics import compute_metrics


def load_and_prepare(data_dir: Path, cfg: AnalyticsConfig, policy: ScoringPolicy | None = None) -> pd.DataFrame:
    """Read the Parquet attempt log and compute module metrics.

    - Best points per question come from the scoring policy's first-attempt value.
    - Sorted by module_id for stable output.
    """
    policy = policy or ScoringPolicy()
    df = load_all(Path(data_dir))
    max_points = {family.value: table.points[0] for family, table in policy.tables.items()}
    return compute_metrics(df, max_points, cfg).sort_values("module_id", kind="stable").reset_index(drop=True)


def accuracy_trend(data_dir: Path, cfg: AnalyticsConfig, module_id: str) -> pd.DataFrame:
    """Per-play accuracy for one module with an EWMA over plays."""
    df = load_all(Path(data_dir))
    dff = df[df["module_id"].astype("string") == module_id]
    if dff.empty:
        return pd.DataFrame({"play_id": pd.Series(dtype="string"), "acc": pd.Series(dtype="float32"), "acc_smooth": pd.Series(dtype="float32")})
    per_play = (
        dff.assign(solved_i=dff["solved"].astype("int32"))
        .groupby("play_id", observed=True, sort=False)
        .agg(finished_at=("finished_at", "max"), acc=("solved_i", "mean"))
        .sort_values("finished_at")
        .reset_index()
    )
    per_play["acc"] = per_play["acc"].astype("float32")
    per_play["acc_smooth"] = per_play["acc"].ewm(span=cfg.smoothing_span).mean().astype("float32")
    return per_play[["play_id", "acc", "acc_smooth"]]
