from __future__ import annotations

"""Configuration loading and validation for Shapeville.

This module loads YAML configuration, applies defaults, and validates
scoring tables, progress totals and per-module overrides.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml


ALLOWED_FAMILIES = {"standard", "high_value"}
ALLOWED_STAGES = {"ks1", "ks2"}
DEFAULT_TABLES = {
    "standard": {"points": [3, 2, 1], "sticky_tail": False},
    "high_value": {"points": [6, 4, 2], "sticky_tail": True},
}
DEFAULT_STAGE_TOTALS = {"ks1": 50.0, "ks2": 25.0}
# Smallest accepted value per module override (tolerance must also be > 0).
OVERRIDE_MINIMUMS = {"tolerance": 0.0, "time_budget_seconds": 0, "max_attempts": 1, "round_size": 1}


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        return _load_yaml(Path(path))
    return _load_yaml(Path(__file__).with_name("defaults.yml"))


def _valid_table(name: str, table: Any) -> bool:
    if not isinstance(table, dict):
        return False
    points = table.get("points")
    if not isinstance(points, list) or not points:
        return False
    try:
        pts = [int(p) for p in points]
    except (TypeError, ValueError):
        return False
    if any(p < 0 for p in pts) or any(b > a for a, b in zip(pts, pts[1:])):
        print(f"WARNING: Scoring table '{name}' must be non-negative and non-increasing, using default.")
        return False
    table["points"] = pts
    return True


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Unsupported values are replaced by defaults with a warning rather than
    rejected, so a partially wrong config still gives a playable session.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    cfg.setdefault("scoring", {})
    cfg.setdefault("progress", {})
    cfg.setdefault("session", {})
    cfg.setdefault("modules", {})
    cfg.setdefault("content", {})
    cfg.setdefault("stats", {})
    cfg.setdefault("storage", {})

    scoring = cfg["scoring"]
    progress = cfg["progress"]
    session = cfg["session"]
    stats = cfg["stats"]
    storage = cfg["storage"]

    # Scoring tables
    tables = scoring.setdefault("tables", {})
    for name in list(tables.keys()):
        if name not in ALLOWED_FAMILIES:
            print(f"WARNING: Unknown scoring family '{name}', ignoring.")
            del tables[name]
    for name, default in DEFAULT_TABLES.items():
        if name not in tables or not _valid_table(name, tables[name]):
            tables[name] = {"points": list(default["points"]), "sticky_tail": default["sticky_tail"]}
        tables[name].setdefault("sticky_tail", default["sticky_tail"])

    # Progress
    totals = progress.setdefault("stage_totals", dict(DEFAULT_STAGE_TOTALS))
    for stage, default in DEFAULT_STAGE_TOTALS.items():
        value = totals.get(stage, default)
        try:
            value = float(value)
        except (TypeError, ValueError):
            value = -1.0
        if not (0.0 <= value <= 100.0):
            print(f"WARNING: Invalid stage total for '{stage}', using {default}.")
            value = default
        totals[stage] = value
    for stage in list(totals.keys()):
        if stage not in ALLOWED_STAGES:
            print(f"WARNING: Unknown stage '{stage}', ignoring.")
            del totals[stage]
    progress.setdefault("decimal_places", 6)

    # Session
    session.setdefault("max_attempts", 3)
    try:
        if int(session["max_attempts"]) < 1:
            raise ValueError
        session["max_attempts"] = int(session["max_attempts"])
    except (TypeError, ValueError):
        print(f"WARNING: Invalid max_attempts '{session['max_attempts']}', using 3.")
        session["max_attempts"] = 3

    # Module ids are checked against the catalog lazily; values are checked here.
    modules = cfg["modules"]
    for module_id in list(modules.keys()):
        overrides = modules[module_id]
        if not isinstance(overrides, dict):
            print(f"WARNING: Overrides for module '{module_id}' must be a mapping, ignoring.")
            del modules[module_id]
            continue
        for name, minimum in OVERRIDE_MINIMUMS.items():
            if overrides.get(name) is None:
                continue
            try:
                value = float(overrides[name]) if name == "tolerance" else int(overrides[name])
            except (TypeError, ValueError):
                value = None
            if value is None or value < minimum or (name == "tolerance" and value == 0):
                print(f"WARNING: Invalid {name} '{overrides[name]}' for module '{module_id}', using module default.")
                del overrides[name]
            else:
                overrides[name] = value

    cfg["content"].setdefault("problems_path", None)

    stats.setdefault("output_path", "./shapeville_stats.json")
    stats.setdefault("show_summary", True)

    storage.setdefault("enabled", False)
    storage.setdefault("data_dir", "storage/data")

    return cfg
