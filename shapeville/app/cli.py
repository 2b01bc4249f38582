from __future__ import annotations

"""CLI for Shapeville using SessionManager and the module registry."""

import argparse
import time
from pathlib import Path
from typing import Any, Callable, Dict

from ..config.config import load_config, validate_config
from ..core.session import Outcome, SessionState
from ..stats.stats import format_summary, write_stats
from ..util.randomness import get_rng, seed_if_needed
from . import events
from .feedback import attempts_remaining_text, solved_text
from .module_registry import get_module, list_modules, resolve_module
from .session_manager import RoundSummary, SessionManager

QUIT = {"q", "quit", "exit"}


def _build_ui() -> Dict[str, Callable[..., Any]]:
    def ask(prompt: str) -> str:
        return input(prompt)

    def inform(msg: str) -> None:
        print(msg)

    return {"ask": ask, "inform": inform, "clock": time.monotonic}


def _format_time(seconds: int) -> str:
    return f"{seconds // 60}:{seconds % 60:02d}"


def _reveal(sm: SessionManager, inform: Callable[[str], None], prefix: str) -> None:
    problem = sm.current_problem
    if problem is None:
        return
    inform(f"{prefix} The correct answer is: {problem.answer_text()} (No points)")
    if problem.solution:
        inform(f"Solution: {problem.solution}")


def play_round(sm: SessionManager, module_id: str, ui: Dict[str, Callable[..., Any]]) -> bool:
    """Play one round interactively. Returns False if the user quit."""
    ask, inform, clock = ui["ask"], ui["inform"], ui["clock"]
    rnd = sm.start_round(module_id)
    meta = sm.module(module_id)
    if rnd.replay:
        inform("You have completed every question here already; this round is for practice.")

    while True:
        session = sm.next_question()
        if session is None:
            return True
        problem = sm.current_problem
        assert problem is not None
        inform(f"\nQ{rnd.index + 1}/{len(rnd.keys)}: {problem.prompt}")
        last = clock()
        carry = 0.0
        while session.is_active:
            if session.remaining_seconds is not None:
                inform(f"Time remaining: {_format_time(session.remaining_seconds)}")
            raw = ask("Your answer: ")
            if raw.strip().lower() in QUIT:
                sm.abandon()
                inform("Exercise closed. No points for the unfinished question.")
                return False

            # Feed whole elapsed seconds to the session clock before grading.
            now = clock()
            carry += max(0.0, now - last)
            last = now
            while carry >= 1.0 and session.is_active:
                sm.tick()
                carry -= 1.0
            if session.state == SessionState.TIMED_OUT:
                _reveal(sm, inform, "Time's up!")
                break

            res = sm.submit(raw)
            if res.outcome == Outcome.INVALID:
                expected = "a name" if meta.answer_kind == "label" else "a valid number"
                inform(f"Please enter {expected}!")
            elif res.outcome == Outcome.CORRECT:
                inform(solved_text(session.attempts_used, session.points))
            elif res.state == SessionState.EXHAUSTED_ATTEMPTS:
                _reveal(sm, inform, "Sorry!")
            else:
                inform(attempts_remaining_text(res.attempts_remaining))


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="shapeville")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list-modules")

    sp = sub.add_parser("show-module")
    sp.add_argument("--module", required=True)
    sp.add_argument("--config", default=None)

    rp = sub.add_parser("run")
    rp.add_argument("--config", default=None)
    rp.add_argument("--module", default="shapes_2d")
    rp.add_argument("--problems", default=None, help="Path to a YAML problem bank")
    rp.add_argument("--explain", action="store_true")
    rp.add_argument("--save", dest="save", action="store_true", help="Append finished questions to the Parquet log")

    rep = sub.add_parser("report")
    rep.add_argument("--config", default=None)
    rep.add_argument("--data-dir", default=None)
    rep.add_argument("--module", default=None, help="Show the accuracy trend for one module")

    args = p.parse_args(argv)

    if args.cmd == "list-modules":
        for m in list_modules():
            print(f"{m.id}: {m.name} [{m.stage.value.upper()}, {m.family.value}] - {m.description}")
        return 0

    if args.cmd == "show-module":
        try:
            get_module(args.module)
        except KeyError as e:
            print(f"ERROR: {e.args[0]}")
            return 2
        cfg = validate_config(load_config(args.config))
        m = resolve_module(args.module, cfg)
        print(f"Module {m.id}: {m.name}")
        print(f"  stage: {m.stage.value}")
        print(f"  scoring: {m.family.value}")
        print(f"  answers: {m.answer_kind} (tolerance {m.tolerance:g})")
        budget = _format_time(m.time_budget_seconds) if m.time_budget_seconds else "untimed"
        print(f"  time budget: {budget}")
        print(f"  variants: {', '.join(m.variants)}")
        return 0

    if args.cmd == "run":
        seed_if_needed()
        if args.explain:
            from .explain import enable as explain_enable
            explain_enable(True)
        cfg = validate_config(load_config(args.config))
        if args.problems:
            cfg["content"]["problems_path"] = args.problems
        if args.save:
            cfg["storage"]["enabled"] = True
        try:
            get_module(args.module)
        except KeyError as e:
            print(f"ERROR: {e.args[0]}")
            return 2

        sm = SessionManager(cfg, rng=get_rng())
        ui = _build_ui()
        inform = ui["inform"]

        def on_round(summary: RoundSummary) -> None:
            inform(f"\n{summary.badge} Round score: {summary.score} / {summary.max_score}")
            inform(summary.message)

        sm.bus.subscribe(events.ROUND_FINISHED, on_round)
        sm.bus.subscribe(events.MODULE_COMPLETED, lambda mid: inform(f"Congratulations! Every {mid} question is complete."))
        sm.bus.subscribe(events.PROGRESS_CHANGED, lambda p: inform(f"{p['stage'].upper()} progress: {p['percent']:.1f}%"))

        try:
            while play_round(sm, args.module, ui):
                again = ui["ask"]("\nPlay again? (y/n): ")
                if again.strip().lower() not in {"y", "yes"}:
                    break
        except (EOFError, KeyboardInterrupt):
            sm.abandon()
            inform("")

        sm.flush()
        if cfg["stats"].get("show_summary", True):
            inform("\nSession Summary:")
            inform(format_summary(sm.stats, sm.progress()))
        out_path = cfg["stats"].get("output_path")
        if out_path:
            write_stats({**sm.stats, "progress": sm.progress()}, out_path)
        return 0

    if args.cmd == "report":
        from analytics import AnalyticsConfig, accuracy_trend, load_and_prepare

        cfg = validate_config(load_config(args.config))
        data_dir = Path(args.data_dir or cfg["storage"]["data_dir"])
        acfg = AnalyticsConfig()
        if args.module:
            print(accuracy_trend(data_dir, acfg, args.module).to_string(index=False))
        else:
            print(load_and_prepare(data_dir, acfg).to_string(index=False))
        return 0

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
