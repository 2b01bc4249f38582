from .schema import STATES, FAMILIES, STAGES, DTYPES, AttemptRow, PlayMeta
from .store import (
    init_store,
    validate_records,
    append_attempts,
    upsert_play_meta,
    load_all,
    query_module,
)

__all__ = [
    "STATES",
    "FAMILIES",
    "STAGES",
    "DTYPES",
    "AttemptRow",
    "PlayMeta",
    "init_store",
    "validate_records",
    "append_attempts",
    "upsert_play_meta",
    "load_all",
    "query_module",
]
