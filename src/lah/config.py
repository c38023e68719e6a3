"""Configuration management with layered resolution.

Priority (highest first):
    1. CLI arguments (argparse namespace)
    2. Environment variables (LAH_GIT, LAH_MARGIN, NO_COLOR, etc.)
    3. Config file (lah.yaml, or ~/.config/lah/config.yaml)
    4. Built-in defaults (color follows whether stdout is a terminal)
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from lah.layout import ColumnConstraint
from lah.terminal import DEFAULT_MARGIN, MIN_BUDGET

logger = logging.getLogger(__name__)

COLUMN_KEYS = ("name", "size", "modified", "perms", "git")

_DEFAULTS = {
    "path": ".",
    "show_git": False,
    "color": None,  # None: decided by _color_supported()
    "margin": DEFAULT_MARGIN,
    "min_width": MIN_BUDGET,
    "verbose": False,
    "log_file": None,
    "columns": {},
}


@dataclass
class Config:
    path: str = _DEFAULTS["path"]
    show_git: bool = _DEFAULTS["show_git"]
    color: bool = True
    margin: int = _DEFAULTS["margin"]  # columns kept free at the right edge
    min_width: int = _DEFAULTS["min_width"]  # smallest table budget ever used
    verbose: bool = _DEFAULTS["verbose"]
    log_file: Optional[str] = None
    # Per-column constraint overrides, keyed by lower-case header
    columns: dict[str, ColumnConstraint] = field(default_factory=dict)


def default_config_paths() -> list[Path]:
    paths = [Path("lah.yaml")]
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    paths.append(base / "lah" / "config.yaml")
    return paths


def _color_supported() -> bool:
    """Color only when stdout is a terminal that understands escapes."""
    try:
        is_tty = sys.stdout.isatty()
    except (AttributeError, ValueError):
        is_tty = False
    return is_tty and os.environ.get("TERM") != "dumb"


def _load_yaml(path: Path) -> dict:
    """Load a YAML config file, returning {} on any error."""
    if not path.is_file():
        logger.debug("Config file not found: %s", path)
        return {}

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Failed to parse config file %s: %s", path, e)
        return {}


def _parse_columns(data: dict) -> dict[str, ColumnConstraint]:
    """Turn {name: {min: 20, max: 60}, ...} into ColumnConstraint overrides."""
    result = {}
    for key, bounds in data.items():
        key = str(key).lower()
        if key not in COLUMN_KEYS:
            logger.warning("Unknown column '%s' in config, ignoring.", key)
            continue
        if not isinstance(bounds, dict):
            logger.warning("Column '%s' must map to {min, max}, ignoring.", key)
            continue
        try:
            result[key] = ColumnConstraint(
                min_width=int(bounds.get("min", 0) or 0),
                max_width=int(bounds.get("max", 0) or 0),
            )
        except (TypeError, ValueError):
            logger.warning("Invalid bounds for column '%s': %r", key, bounds)
    return result


def _flatten_yaml(data: dict) -> dict:
    """Flatten nested YAML structure to flat config keys."""
    flat = {}
    if "git" in data:
        flat["show_git"] = bool(data["git"])
    if "color" in data:
        flat["color"] = bool(data["color"])

    terminal = data.get("terminal", {})
    if isinstance(terminal, dict):
        if "margin" in terminal:
            flat["margin"] = terminal["margin"]
        if "min_width" in terminal:
            flat["min_width"] = terminal["min_width"]

    columns = data.get("columns", {})
    if isinstance(columns, dict) and columns:
        flat["columns"] = _parse_columns(columns)

    return flat


def _from_env() -> dict:
    """Read config from environment variables."""
    env_map = {
        "LAH_GIT": "show_git",
        "LAH_COLOR": "color",
        "LAH_MARGIN": "margin",
        "LAH_MIN_WIDTH": "min_width",
    }
    result = {}
    for env_key, config_key in env_map.items():
        val = os.environ.get(env_key)
        if val is None:
            continue
        if config_key in ("show_git", "color"):
            result[config_key] = val.lower() in ("1", "true", "yes")
        else:
            result[config_key] = val
    # https://no-color.org: any non-empty value disables color
    if os.environ.get("NO_COLOR"):
        result["color"] = False
    return result


def _from_cli(args) -> dict:
    """Extract config from argparse namespace, ignoring None (unset) values."""
    mapping = {
        "path": "path",
        "git": "show_git",
        "color": "color",
        "margin": "margin",
        "verbose": "verbose",
        "log_file": "log_file",
    }
    result = {}
    for arg_name, config_key in mapping.items():
        val = getattr(args, arg_name, None)
        if val is not None:
            result[config_key] = val
    return result


def _coerce_int(merged: dict, key: str, minimum: int) -> None:
    try:
        value = int(merged[key])
        if value < minimum:
            raise ValueError(value)
        merged[key] = value
    except (TypeError, ValueError):
        logger.warning("Invalid %s '%s', using %d.", key, merged[key], _DEFAULTS[key])
        merged[key] = _DEFAULTS[key]


def load_config(cli_args=None, config_path: Optional[Path] = None) -> Config:
    """Build a Config by merging all layers.

    Args:
        cli_args: argparse.Namespace or None.
        config_path: Explicit path to a YAML file, or auto-detect.
    """
    merged = dict(_DEFAULTS)
    merged["columns"] = {}

    # Layer 3: Config file
    if config_path is not None:
        yaml_data = _load_yaml(config_path)
    else:
        yaml_data = {}
        for candidate in default_config_paths():
            if candidate.is_file():
                yaml_data = _load_yaml(candidate)
                break
    for k, v in _flatten_yaml(yaml_data).items():
        if v is not None:
            merged[k] = v

    # Layer 2: Environment variables
    for k, v in _from_env().items():
        if v is not None:
            merged[k] = v

    # Layer 1: CLI arguments (highest priority)
    if cli_args is not None:
        for k, v in _from_cli(cli_args).items():
            merged[k] = v

    if merged.get("color") is None:
        merged["color"] = _color_supported()

    _coerce_int(merged, "margin", 0)
    _coerce_int(merged, "min_width", 1)

    return Config(**{k: v for k, v in merged.items() if k in Config.__dataclass_fields__})
