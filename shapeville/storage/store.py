from __future__ import annotations

"""Parquet-backed attempt log using pandas + pyarrow.

Unit of data: one row per finished question (play × module × variant).
"""

from pathlib import Path

import pandas as pd

from .schema import DTYPES, AttemptRow, PlayMeta


DATA_FILE = "attempts.parquet"
META_FILE = "plays.parquet"

META_DTYPES = {
    "play_id": "string",
    "started_at": pd.DatetimeTZDtype(tz="UTC"),
    "app_version": "string",
    "notes": "string",
}


def _empty_df() -> pd.DataFrame:
    return pd.DataFrame({k: pd.Series(dtype=v) for k, v in DTYPES.items()})


def init_store(data_dir: Path) -> None:
    """Ensure data directory and empty Parquet files with correct schema exist."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)
    attempts_path = data_dir / DATA_FILE
    meta_path = data_dir / META_FILE
    if not attempts_path.exists():
        _empty_df().to_parquet(attempts_path, engine="pyarrow", compression="zstd")
    if not meta_path.exists():
        md = pd.DataFrame({k: pd.Series(dtype=v) for k, v in META_DTYPES.items()})
        md.to_parquet(meta_path, engine="pyarrow", compression="zstd")


def _fix_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    for col, dt in DTYPES.items():
        if col in df.columns:
            df[col] = df[col].astype(dt)
        else:
            df[col] = pd.Series(pd.NA, index=df.index, dtype=dt)
    return df[list(DTYPES.keys())]


def validate_records(records: list[AttemptRow]) -> pd.DataFrame:
    """Validate a list of AttemptRow and return a DataFrame with proper dtypes.

    - Enforces states, families, and attempt/points constraints via Pydantic.
    - Returns a pandas DataFrame with categorical and unsigned integer dtypes.
    """
    if not isinstance(records, list):
        raise TypeError("records must be a list[AttemptRow]")
    rows = [r if isinstance(r, AttemptRow) else AttemptRow.model_validate(r) for r in records]
    if not rows:
        return _empty_df()
    df = pd.DataFrame([r.model_dump() for r in rows])
    return _fix_dtypes(df)


def append_attempts(df_new: pd.DataFrame, data_path: Path) -> None:
    """Append rows to the attempt log.

    - Reads existing, concatenates, fixes dtypes, removes exact duplicates, and writes back.
    """
    f = Path(data_path) / DATA_FILE
    df_old = pd.read_parquet(f, engine="pyarrow") if f.exists() else _empty_df()
    parts = [d for d in (_fix_dtypes(df_old), _fix_dtypes(df_new.copy())) if not d.empty]
    combined = pd.concat(parts, ignore_index=True) if parts else _empty_df()
    combined = _fix_dtypes(combined).drop_duplicates()
    combined.to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def upsert_play_meta(meta: PlayMeta, data_path: Path) -> None:
    """Insert or update a single play metadata row keyed by play_id."""
    f = Path(data_path) / META_FILE
    row = PlayMeta.model_validate(meta).model_dump()
    df_new = pd.DataFrame([row]).astype(META_DTYPES)
    if f.exists():
        df = pd.read_parquet(f, engine="pyarrow")
        if not df.empty:
            df = df[df["play_id"].astype("string") != row["play_id"]]
        df = pd.concat([d for d in (df, df_new) if not d.empty], ignore_index=True)
    else:
        df = df_new
    df.to_parquet(f, engine="pyarrow", compression="zstd", index=False)


def load_all(data_path: Path) -> pd.DataFrame:
    """Load the full attempt log with dtypes enforced.

    Adds:
    - solved: bool, state == correctly_solved
    """
    f = Path(data_path) / DATA_FILE
    if not f.exists():
        return _empty_df().assign(solved=pd.Series(dtype="boolean"))
    df = _fix_dtypes(pd.read_parquet(f, engine="pyarrow"))
    df["solved"] = (df["state"].astype("string") == "correctly_solved").astype("boolean")
    return df


def query_module(df: pd.DataFrame, module_id: str, variant: str | None = None) -> pd.DataFrame:
    """Filter rows for a module (and optionally one variant) sorted by finished_at."""
    mask = df["module_id"].astype("string") == module_id
    if variant is not None:
        mask &= df["variant"].astype("string") == str(variant)
    return df[mask].sort_values("finished_at").reset_index(drop=True)
