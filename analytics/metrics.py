from __future__ import annotations

"""Per-module metrics over the attempt log."""

import numpy as np
import pandas as pd

from .config import AnalyticsConfig

COLUMNS = [
    "module_id",
    "asked",
    "solved",
    "timed_out",
    "exhausted",
    "acc",
    "mean_attempts",
    "points",
    "points_ratio",
    "mastery",
    "low_sample",
]


def compute_metrics(df: pd.DataFrame, max_points: dict[str, int], cfg: AnalyticsConfig) -> pd.DataFrame:
    """Aggregate finished questions per module.

    Args:
        df: attempt log rows (see shapeville.storage.schema.DTYPES).
        max_points: best points per question by family ("standard" -> 3, ...).
        cfg: analytics hyperparameters.

    Returns one row per module with:
    - acc: solved / asked
    - mean_attempts: attempts per solved question
    - points_ratio: points / best possible points
    - mastery: acc discounted by timeouts, clipped to [0, 1]
    """
    if df.empty:
        return pd.DataFrame({c: pd.Series(dtype="float32") for c in COLUMNS}).astype({"module_id": "string"})

    work = df.copy()
    state = work["state"].astype("string")
    work["is_solved"] = (state == "correctly_solved").astype("int32")
    work["is_timeout"] = (state == "timed_out").astype("int32")
    work["is_exhausted"] = (state == "exhausted_attempts").astype("int32")
    work["points_i"] = work["points"].astype("int64")
    work["best"] = work["family"].astype("string").map(max_points).fillna(0).astype("float32")
    work["solved_attempts"] = (work["attempts"].astype("float32") * work["is_solved"]).astype("float32")

    g = work.groupby(work["module_id"].astype("string"), observed=True)
    out = pd.DataFrame(
        {
            "asked": g.size(),
            "solved": g["is_solved"].sum(),
            "timed_out": g["is_timeout"].sum(),
            "exhausted": g["is_exhausted"].sum(),
            "points": g["points_i"].sum(),
            "best": g["best"].sum(),
            "solved_attempts": g["solved_attempts"].sum(),
        }
    )
    asked = out["asked"].to_numpy(dtype="float32")
    solved = out["solved"].to_numpy(dtype="float32")
    out["acc"] = (solved / np.maximum(asked, 1.0)).astype("float32")
    out["mean_attempts"] = np.where(solved > 0, out["solved_attempts"] / np.maximum(solved, 1.0), np.nan).astype("float32")
    out["points_ratio"] = (out["points"] / out["best"].where(out["best"] > 0, other=1.0)).astype("float32")

    # Timeouts count as partial misses on top of the plain accuracy.
    penalty = float(cfg.timeout_weight) * out["timed_out"].to_numpy(dtype="float32") / np.maximum(asked, 1.0)
    out["mastery"] = np.clip(out["acc"].to_numpy() - penalty, 0.0, 1.0).astype("float32")
    out["low_sample"] = out["asked"] < int(cfg.min_questions)

    out = out.reset_index()
    return out[COLUMNS]
