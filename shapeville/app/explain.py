from __future__ import annotations

"""Explain mode: terse one-line milestones for sessions and progress.

Off by default. Enable with `--explain` on the CLI or `enable()` in code.
"""

import json
from typing import Any, Callable, Dict

_ENABLED = False
_SINK: Callable[[str], None] = print


def enable(flag: bool = True) -> None:
    global _ENABLED
    _ENABLED = bool(flag)


def enabled() -> bool:
    return _ENABLED


def set_sink(sink: Callable[[str], None] | None) -> None:
    """Redirect trace lines (None restores print)."""
    global _SINK
    _SINK = sink or print


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not _ENABLED:
        return
    try:
        line = f"[EXPLAIN] {event} :: {json.dumps(payload or {}, separators=(',', ':'), default=str)}"
    except (TypeError, ValueError):
        line = f"[EXPLAIN] {event}"
    _SINK(line)
