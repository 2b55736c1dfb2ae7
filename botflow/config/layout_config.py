"""Layout configuration registry for the graph model builder.

Provides the spacing constants used by the layout engine. Environment
variables take precedence over YAML config.

Usage:
    from botflow.config.layout_config import get_layout_config

    config = get_layout_config()
    x = index * config.step_spacing_x

Environment overrides (highest precedence first):
    1. BOTFLOW_<KEY> (e.g. BOTFLOW_RUN_ROW_HEIGHT=120)
    2. layout.yaml value
    3. Built-in default
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

_CONFIG_PATH = Path(__file__).parent / "layout.yaml"
_cached_config: Optional["LayoutConfig"] = None

ENV_PREFIX = "BOTFLOW_"

# YAML section each key lives under
_SECTIONS = ("step_timeline", "mini_app_tree", "orientation")


@dataclass(frozen=True)
class LayoutConfig:
    """Resolved layout constants.

    Attributes:
        step_spacing_x: Horizontal distance between consecutive step nodes.
        step_base_y: y of even-indexed step nodes.
        step_zigzag_y: Extra y applied to odd-indexed step nodes.
        step_subtitle_chars: Max user-text characters in a step subtitle.
        run_column_width: Width of one depth column in a mini-app tree.
        run_row_height: Height of one row within a depth column.
        run_baseline_y: y of the first row of the tallest column.
        root_x: x of the synthetic root node.
        root_subtitle_chars: Max user-text characters in the root subtitle.
        vertical_margin: Minimum coordinate after a vertical re-flow.
        tones: Colour tone names cycled through node payloads.
    """
    step_spacing_x: float = 320
    step_base_y: float = 140
    step_zigzag_y: float = 40
    step_subtitle_chars: int = 42
    run_column_width: float = 320
    run_row_height: float = 150
    run_baseline_y: float = 110
    root_x: float = 24
    root_subtitle_chars: int = 48
    vertical_margin: float = 24
    tones: Tuple[str, ...] = ("slate", "amber", "cyan", "mint", "violet")


_INT_KEYS = {"step_subtitle_chars", "root_subtitle_chars"}


def _default_config() -> Dict[str, Any]:
    """Return default configuration if layout.yaml doesn't exist."""
    return {
        "version": "1.0",
        "step_timeline": {
            "step_spacing_x": 320,
            "step_base_y": 140,
            "step_zigzag_y": 40,
            "step_subtitle_chars": 42,
        },
        "mini_app_tree": {
            "run_column_width": 320,
            "run_row_height": 150,
            "run_baseline_y": 110,
            "root_x": 24,
            "root_subtitle_chars": 48,
        },
        "orientation": {"vertical_margin": 24},
        "tones": ["slate", "amber", "cyan", "mint", "violet"],
    }


def _load_yaml() -> Dict[str, Any]:
    if _CONFIG_PATH.exists():
        with open(_CONFIG_PATH) as f:
            data = yaml.safe_load(f)
        if isinstance(data, dict):
            return data
        logger.warning("Ignoring malformed layout config %s", _CONFIG_PATH)
    return _default_config()


def _coerce_number(key: str, value: Any, source: str) -> Optional[float]:
    """Convert a config value to a number, or log and return None."""
    try:
        number = int(value) if key in _INT_KEYS else float(value)
    except (TypeError, ValueError):
        logger.warning("Layout setting '%s' from %s is not numeric: %r. Ignoring.", key, source, value)
        return None
    if key in _INT_KEYS and number < 0:
        logger.warning("Layout setting '%s' from %s must be >= 0, got %r. Ignoring.", key, source, value)
        return None
    return number


def config_from_dict(data: Dict[str, Any], env: Optional[Dict[str, str]] = None) -> LayoutConfig:
    """Build a LayoutConfig from a layout.yaml-shaped dict plus env overrides.

    Args:
        data: Parsed YAML (sections step_timeline / mini_app_tree /
            orientation and a top-level tones list).
        env: Environment mapping; defaults to os.environ.

    Returns:
        Resolved LayoutConfig. Unknown keys are ignored.
    """
    env = os.environ if env is None else env
    values: Dict[str, Any] = {}

    flat: Dict[str, Any] = {}
    for section in _SECTIONS:
        section_data = data.get(section) or {}
        if isinstance(section_data, dict):
            flat.update(section_data)

    for f in fields(LayoutConfig):
        if f.name == "tones":
            continue
        env_value = env.get(f"{ENV_PREFIX}{f.name.upper()}")
        if env_value is not None:
            number = _coerce_number(f.name, env_value, f"env {ENV_PREFIX}{f.name.upper()}")
            if number is not None:
                values[f.name] = number
                continue
        if f.name in flat:
            number = _coerce_number(f.name, flat[f.name], "layout.yaml")
            if number is not None:
                values[f.name] = number

    tones = data.get("tones")
    env_tones = env.get(f"{ENV_PREFIX}TONES")
    if env_tones:
        tones = [t.strip() for t in env_tones.split(",") if t.strip()]
    if isinstance(tones, list) and tones:
        values["tones"] = tuple(str(t) for t in tones)

    return LayoutConfig(**values)


def get_layout_config() -> LayoutConfig:
    """Return the cached layout config, loading it on first use."""
    global _cached_config
    if _cached_config is None:
        _cached_config = config_from_dict(_load_yaml())
    return _cached_config


def reset_config() -> None:
    """Reset cached config (for testing)."""
    global _cached_config
    _cached_config = None
