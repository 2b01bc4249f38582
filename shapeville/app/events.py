from __future__ import annotations

"""Small pub/sub bus used by the session manager to notify front-ends."""

from typing import Any, Callable, Dict, List

from .explain import trace as xtrace

SCORE_DELTA = "score_delta"
PROGRESS_CHANGED = "progress_changed"
VARIANT_COMPLETED = "variant_completed"
MODULE_COMPLETED = "module_completed"
SESSION_FINISHED = "session_finished"
ROUND_FINISHED = "round_finished"


class EventBus:
    def __init__(self) -> None:
        self._subs: Dict[str, List[Callable[[Any], None]]] = {}

    def subscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        self._subs.setdefault(event, []).append(handler)

    def unsubscribe(self, event: str, handler: Callable[[Any], None]) -> None:
        handlers = self._subs.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, payload: Any) -> None:
        # A failing subscriber must not starve the others or the session.
        for h in list(self._subs.get(event, [])):
            try:
                h(payload)
            except Exception as e:
                xtrace("subscriber_failed", {"event": event, "error": repr(e)})
