"""Tunable settings for the solver, the level generator and the CLI.

Defaults live in the dataclasses below.  A JSON file may override any of
them::

    {
      "solver": {"max_iterations": 20000},
      "generator": {"max_attempts": 80, "curve_exponent": 0.7},
      "total_levels": 500
    }
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class SolverConfig:
    max_iterations: int = 50_000
    check_every: int = 256


@dataclass
class GeneratorConfig:
    max_attempts: int = 50
    relaxed_attempts: int = 20
    placement_attempts: int = 500
    # Difficulty curve: 0 at level 1, 1 from saturation_level onwards.
    saturation_level: int = 100
    curve_exponent: float = 1.0
    # Above this difficulty, the optimal solution must move spread_ratio
    # of the non-goal blocks.
    spread_threshold: float = 0.3
    spread_ratio: float = 0.7
    duplicate_retries: int = 3


@dataclass
class Settings:
    solver: SolverConfig = field(default_factory=SolverConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    total_levels: int = 1000
    levels_path: str = "data/levels.json"


# Lower bounds for settings that count states, attempts or levels.
_MINIMUMS: dict[str, int] = {
    "max_iterations": 1,
    "check_every": 1,
    "max_attempts": 1,
    "relaxed_attempts": 0,
    "placement_attempts": 1,
    "saturation_level": 1,
    "duplicate_retries": 0,
    "total_levels": 1,
}


def _merge(target: Any, overrides: dict[str, Any], section: str) -> None:
    known = {f.name: f for f in fields(target)}
    for key, value in overrides.items():
        if key not in known:
            logger.warning(f"Ignoring unknown setting {section}{key}")
            continue
        current = getattr(target, key)
        if isinstance(current, (SolverConfig, GeneratorConfig)):
            if isinstance(value, dict):
                _merge(current, value, f"{section}{key}.")
            else:
                logger.warning(f"Setting {section}{key} must be an object, ignoring")
            continue
        expected = type(current)
        try:
            converted = expected(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid value for {section}{key}: {value!r}, keeping {current!r}")
            continue
        minimum = _MINIMUMS.get(key)
        if minimum is not None and converted < minimum:
            logger.warning(
                f"Setting {section}{key} must be at least {minimum}, keeping {current!r}"
            )
            continue
        setattr(target, key, converted)


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from *path*, falling back to defaults.

    A missing or unreadable file yields the defaults; bad keys are logged
    and skipped.
    """
    settings = Settings()
    if path is None:
        return settings
    if not path.exists():
        logger.debug(f"Settings file {path} not found, using defaults")
        return settings

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return settings

    if not isinstance(data, dict):
        logger.warning(f"Settings file {path} is not a JSON object, using defaults")
        return settings

    _merge(settings, data, "")
    logger.debug(f"Settings loaded: {settings}")
    return settings
