from __future__ import annotations

"""Configuration loading and validation for studynotes.

This module loads YAML configuration, applies defaults, and validates
thresholds and interval choices.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml

from ..scheduling import DUE_SOON_DAYS, get_interval


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
        cfg = _load_yaml(Path(path))
    else:
        cfg = _load_yaml(Path(__file__).with_name("defaults.yml"))
    return cfg


def _non_negative_int(section: Dict[str, Any], key: str, default: int, *, minimum: int = 0) -> None:
    try:
        value = int(section.get(key, default))
    except (TypeError, ValueError):
        print(f"WARNING: {key} must be an integer, using {default}.")
        value = default
    if value < minimum:
        print(f"WARNING: {key} must be >= {minimum}, using {default}.")
        value = default
    section[key] = value


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    # Shallow defaults for missing sections
    for section in ("storage", "schedule", "study", "report"):
        if not isinstance(cfg.get(section), dict):
            cfg[section] = {}

    storage = cfg["storage"]
    schedule = cfg["schedule"]
    study = cfg["study"]
    report = cfg["report"]

    storage.setdefault("data_dir", "./data")
    schedule.setdefault("due_soon_days", DUE_SOON_DAYS)
    schedule.setdefault("default_interval", "3d")
    study.setdefault("item_count", 20)
    report.setdefault("output_dir", "./reports")

    _non_negative_int(schedule, "due_soon_days", DUE_SOON_DAYS)
    _non_negative_int(study, "item_count", 20, minimum=1)

    try:
        schedule["default_interval"] = get_interval(str(schedule["default_interval"])).key
    except KeyError:
        print(f"WARNING: Unknown default_interval '{schedule['default_interval']}', using '3d'.")
        schedule["default_interval"] = "3d"

    storage["data_dir"] = str(storage["data_dir"])
    report["output_dir"] = str(report["output_dir"])
    return cfg
