"""
YAML → typed settings loader.

Loads the bundled settings.yaml and optionally merges user overrides from
~/.hybrid-fit/settings.yaml (or $HYBRID_FIT_HOME/settings.yaml).

Usage:
    from hybrid_fit.core.engine.config_loader import load_settings
    settings = load_settings()
    settings.rest_default_seconds

Values missing from both files fall back to the Python defaults in
config.py. A user override file with parse errors is logged and ignored.
"""

from __future__ import annotations

import importlib.resources
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..config import (
    DATA_DIR_ENV,
    DATA_DIR_NAME,
    DEFAULT_REST_SECONDS,
    REPS_STEP,
    REST_EXTEND_SECONDS,
    REST_REDUCE_SECONDS,
    WEIGHT_STEP_KG,
)

logger = logging.getLogger(__name__)

SETTINGS_FILE = "settings.yaml"


@dataclass(frozen=True)
class Settings:
    """Effective user-tunable settings."""

    rest_default_seconds: int = DEFAULT_REST_SECONDS
    rest_extend_seconds: int = REST_EXTEND_SECONDS
    rest_reduce_seconds: int = REST_REDUCE_SECONDS
    weight_step_kg: float = WEIGHT_STEP_KG
    reps_step: int = REPS_STEP


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; unreadable or malformed files give {}."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring settings file %s: %s", path, e)
        return {}
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    ref = importlib.resources.files("hybrid_fit").joinpath(SETTINGS_FILE)
    with importlib.resources.as_file(ref) as p:
        return p if p.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return the user's settings.yaml if it exists, else None."""
    override = os.environ.get(DATA_DIR_ENV)
    base = Path(override).expanduser() if override else Path.home() / DATA_DIR_NAME
    p = base / SETTINGS_FILE
    return p if p.exists() else None


def load_settings_dict(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/hybrid_fit/settings.yaml
    2. User override (``user_path`` or the default location)

    Returns:
        Merged dict of settings sections. Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = user_path if user_path is not None else get_user_yaml_path()
    if user is not None and user.exists():
        config = _deep_merge(config, _load_yaml_file(user))

    return config


def load_settings(user_path: Path | None = None) -> Settings:
    """Return the effective Settings, falling back to config.py defaults."""
    data = load_settings_dict(user_path)
    rest = data.get("rest") if isinstance(data.get("rest"), dict) else {}
    steps = data.get("steps") if isinstance(data.get("steps"), dict) else {}
    defaults = Settings()
    try:
        return Settings(
            rest_default_seconds=int(rest.get("default_seconds", defaults.rest_default_seconds)),
            rest_extend_seconds=int(rest.get("extend_seconds", defaults.rest_extend_seconds)),
            rest_reduce_seconds=int(rest.get("reduce_seconds", defaults.rest_reduce_seconds)),
            weight_step_kg=float(steps.get("weight_kg", defaults.weight_step_kg)),
            reps_step=int(steps.get("reps", defaults.reps_step)),
        )
    except (TypeError, ValueError) as e:
        logger.warning("Invalid settings value (%s), using defaults", e)
        return defaults
