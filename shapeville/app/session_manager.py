from __future__ import annotations

"""Session Manager: orchestrates rounds, sessions, scoring and progress.

It owns one CompletionRegistry per module, the shared ProgressTracker and an
EventBus. Front-ends (the CLI, or any GUI) only call `start_round`,
`next_question`, `submit`, `tick` and `abandon`, and listen on the bus.
"""

import random
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from .. import __version__
from ..content.problems import Problem, ProblemBank, load_problem_bank
from ..core.session import ExerciseSession, SubmitResult, TickResult
from ..policy.scoring import ScoringPolicy
from ..progress.registry import CompletionRegistry, VariantRecord
from ..progress.tracker import ProgressTracker, Stage
from ..stats.stats import new_play_stats, update_stats
from ..storage import AttemptRow, PlayMeta, append_attempts, init_store, upsert_play_meta, validate_records
from . import events
from .events import EventBus
from .explain import trace as xtrace
from .feedback import grade
from .module_registry import PROGRESS_PER_ROUND, PROGRESS_PER_VARIANT, ModuleMeta, resolve_module
from .rounds import Round, plan_round


@dataclass(frozen=True)
class FinishedQuestion:
    module_id: str
    variant: str
    state: str
    attempts: int
    points: int
    first_completion: bool
    seconds_used: int


@dataclass(frozen=True)
class RoundSummary:
    module_id: str
    score: int
    max_score: int
    badge: str
    message: str
    module_fully_completed: bool


class SessionManager:
    def __init__(
        self,
        cfg: Dict[str, Any],
        *,
        bank: ProblemBank | None = None,
        policy: ScoringPolicy | None = None,
        tracker: ProgressTracker | None = None,
        bus: EventBus | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.cfg = cfg
        self.policy = policy or ScoringPolicy.from_config(cfg)
        progress_cfg = cfg.get("progress", {})
        self.tracker = tracker or ProgressTracker(
            stage_totals=progress_cfg.get("stage_totals"),
            decimal_places=int(progress_cfg.get("decimal_places", 6)),
        )
        self.bus = bus or EventBus()
        self.rng = rng
        self._bank = bank
        self.registries: Dict[str, CompletionRegistry] = {}
        self.total_score = 0
        self.stats = new_play_stats()
        self.play_id = str(uuid4())
        self.started_at = datetime.now(timezone.utc)
        self._fully_completed: set[str] = set()
        self._pending_rows: List[AttemptRow] = []
        self._meta: Optional[ModuleMeta] = None
        self._round: Optional[Round] = None
        self._session: Optional[ExerciseSession] = None
        self._problem: Optional[Problem] = None
        self._closed = False
        self.tracker.subscribe(self._on_progress)

    # --- wiring -------------------------------------------------------

    @property
    def bank(self) -> ProblemBank:
        if self._bank is None:
            self._bank = load_problem_bank(self.cfg.get("content", {}).get("problems_path"))
        return self._bank

    def module(self, module_id: str) -> ModuleMeta:
        meta = resolve_module(module_id, self.cfg)
        overrides = (self.cfg.get("modules", {}) or {}).get(module_id, {}) or {}
        if overrides.get("max_attempts") is None and "max_attempts" in self.cfg.get("session", {}):
            meta = replace(meta, max_attempts=int(self.cfg["session"]["max_attempts"]))
        return meta

    def registry(self, module_id: str) -> CompletionRegistry:
        reg = self.registries.get(module_id)
        if reg is None:
            meta = self.module(module_id)
            reg = CompletionRegistry(module_id, meta.variants)
            reg.subscribe(lambda key, rec, _meta=meta: self._on_first_completion(_meta, key, rec))
            self.registries[module_id] = reg
        return reg

    def _on_first_completion(self, meta: ModuleMeta, key: str, rec: VariantRecord) -> None:
        self.bus.emit(events.VARIANT_COMPLETED, {"module_id": meta.id, "variant": key, "points": rec.points_earned})
        if meta.progress_mode == PROGRESS_PER_VARIANT:
            self.tracker.add_task_completion(meta.stage, meta.task_weight, key=meta.progress_key(key))

    def _on_progress(self, stage: Stage, percent: float) -> None:
        self.bus.emit(events.PROGRESS_CHANGED, {"stage": stage.value, "percent": percent})

    def _on_score_delta(self, points: int) -> None:
        self.total_score += int(points)
        self.bus.emit(events.SCORE_DELTA, int(points))

    # --- queries ------------------------------------------------------

    @property
    def current_round(self) -> Optional[Round]:
        return self._round

    @property
    def current_session(self) -> Optional[ExerciseSession]:
        return self._session

    @property
    def current_problem(self) -> Optional[Problem]:
        return self._problem

    def progress(self) -> Dict[str, float]:
        return {s.value: self.tracker.current_percent(s) for s in Stage}

    def is_module_complete(self, module_id: str) -> bool:
        return self.registry(module_id).all_completed()

    # --- lifecycle ----------------------------------------------------

    def start_round(self, module_id: str) -> Round:
        if self._session is not None and self._session.is_active:
            self.abandon()
        meta = self.module(module_id)
        missing = self.bank.missing(meta)
        if missing:
            raise KeyError(f"Problem bank has no problems for {module_id}: {', '.join(missing)}")
        reg = self.registry(module_id)
        self._meta = meta
        self._round = plan_round(meta, reg, self.rng)
        if not reg.all_completed():
            self._fully_completed.discard(module_id)
        self._session = None
        self._problem = None
        return self._round

    def next_question(self) -> Optional[ExerciseSession]:
        """Start the round's next question; None once the round is over."""
        if self._round is None or self._meta is None:
            raise RuntimeError("start_round() must be called first")
        if self._session is not None and self._session.is_active:
            return self._session
        key = self._round.current_key
        if key is None:
            return None
        meta = self._meta
        problem = self.bank.get(meta.id, key)
        session = ExerciseSession(
            f"{meta.id}:{key}",
            family=meta.family,
            policy=self.policy,
            on_score_delta=self._on_score_delta,
        )
        session.start(
            problem.answer,
            tolerance=meta.tolerance,
            max_attempts=meta.max_attempts,
            time_budget_seconds=meta.time_budget_seconds,
        )
        self._session = session
        self._problem = problem
        self._closed = False
        return session

    def submit(self, value: object) -> SubmitResult:
        session = self._require_session()
        result = session.submit_answer(value)
        if session.is_complete and not self._closed:
            self._finish_question()
        return result

    def tick(self) -> TickResult:
        session = self._require_session()
        was_active = session.is_active
        result = session.tick()
        if was_active and session.is_complete:
            self._finish_question()
        return result

    def abandon(self) -> None:
        """Close the current question and round without score or progress."""
        if self._session is not None:
            self._session.abandon()
        self._session = None
        self._problem = None
        self._round = None
        self._meta = None

    def _require_session(self) -> ExerciseSession:
        if self._session is None:
            raise RuntimeError("no question in progress; call next_question()")
        return self._session

    def _finish_question(self) -> None:
        assert self._meta is not None and self._round is not None and self._session is not None
        meta, rnd, session = self._meta, self._round, self._session
        key = rnd.current_key or ""
        points = session.points
        mark = self.registry(meta.id).mark_completed(key, session.attempts_used, points)
        seconds_used = 0
        if session.time_budget_seconds is not None and session.remaining_seconds is not None:
            seconds_used = session.time_budget_seconds - session.remaining_seconds
        finished = FinishedQuestion(
            module_id=meta.id,
            variant=key,
            state=session.state.value,
            attempts=session.attempts_used,
            points=points,
            first_completion=not mark.already_completed_before,
            seconds_used=seconds_used,
        )
        rnd.record(key, finished.state, points)
        update_stats(self.stats, meta.id, finished.state, points, finished.attempts)
        if self._storage_enabled():
            self._pending_rows.append(
                AttemptRow(
                    play_id=self.play_id,
                    finished_at=datetime.now(timezone.utc),
                    module_id=meta.id,
                    variant=key,
                    stage=meta.stage.value,
                    family=meta.family.value,
                    state=finished.state,
                    attempts=finished.attempts,
                    max_attempts=session.max_attempts,
                    points=points,
                    seconds_used=seconds_used,
                    first_completion=finished.first_completion,
                )
            )
        xtrace("session_finished", {"module": meta.id, "variant": key, "state": finished.state, "points": points})
        self._closed = True
        self.bus.emit(events.SESSION_FINISHED, finished)

        reg = self.registry(meta.id)
        if reg.all_completed() and meta.id not in self._fully_completed:
            self._fully_completed.add(meta.id)
            self.bus.emit(events.MODULE_COMPLETED, meta.id)
        if rnd.is_finished:
            self._finish_round(meta, rnd)

    def _finish_round(self, meta: ModuleMeta, rnd: Round) -> None:
        if meta.progress_mode == PROGRESS_PER_ROUND and not rnd.replay:
            self.tracker.add_task_completion(meta.stage, meta.task_weight, key=meta.progress_key())
        max_score = self.policy.max_points(meta.family) * len(rnd.keys)
        badge, message = grade(rnd.score, max_score)
        summary = RoundSummary(
            module_id=meta.id,
            score=rnd.score,
            max_score=max_score,
            badge=badge,
            message=message,
            module_fully_completed=self.registry(meta.id).all_completed(),
        )
        xtrace("round_finished", {"module": meta.id, "score": rnd.score, "max": max_score})
        self.bus.emit(events.ROUND_FINISHED, summary)
        self.flush()

    def _storage_enabled(self) -> bool:
        return bool(self.cfg.get("storage", {}).get("enabled", False))

    def flush(self) -> int:
        """Persist pending attempt rows if storage is enabled; returns rows written."""
        rows, self._pending_rows = self._pending_rows, []
        if not rows or not self._storage_enabled():
            return 0
        storage = self.cfg["storage"]
        data_dir = Path(storage.get("data_dir", "storage/data"))
        try:
            init_store(data_dir)
            append_attempts(validate_records(rows), data_dir)
            upsert_play_meta(PlayMeta(play_id=self.play_id, started_at=self.started_at, app_version=__version__), data_dir)
        except Exception as e:
            xtrace("persist_failed", {"error": repr(e), "rows": len(rows)})
            return 0
        return len(rows)
