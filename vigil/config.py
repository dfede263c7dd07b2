"""
Configuration management for Vigil.

Handles persistent configuration including:
- Server settings (port, log level)
- Graph heuristics overrides (thresholds and keyword lists)
- Graph edge drawing mode

Config is stored in config.json next to the executable/project root.
Environment variables (VIGIL_PORT, VIGIL_LOG_LEVEL) take priority.
"""

import json
import logging
import math
import os
from dataclasses import fields, replace
from typing import Optional

from vigil.graph.builder import DEFAULT_HEURISTICS, GraphHeuristics
from vigil.paths import get_config_path

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"
EDGE_MODES = ("star", "graph")


def load_config() -> dict:
    """Load configuration from config.json."""
    config_path = get_config_path()
    if config_path.exists():
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to read config {config_path}: {e}")
            return {}
    return {}


def get_port(config: Optional[dict] = None) -> int:
    """
    Get the port the web UI listens on.

    Priority:
    1. Environment variable VIGIL_PORT
    2. "port" in config.json
    """
    config = load_config() if config is None else config
    raw = os.environ.get("VIGIL_PORT") or config.get("port")
    try:
        return int(raw) if raw else DEFAULT_PORT
    except (TypeError, ValueError):
        logger.warning(f"Ignoring invalid port {raw!r}")
        return DEFAULT_PORT


def get_log_level(config: Optional[dict] = None) -> str:
    config = load_config() if config is None else config
    level = str(os.environ.get("VIGIL_LOG_LEVEL") or config.get("log_level") or DEFAULT_LOG_LEVEL).upper()
    if not isinstance(logging.getLevelName(level), int):
        logger.warning(f"Unknown log level {level!r}, using {DEFAULT_LOG_LEVEL}")
        return DEFAULT_LOG_LEVEL
    return level


def get_edge_mode(config: Optional[dict] = None) -> str:
    config = load_config() if config is None else config
    mode = config.get("graph_edge_mode", "star")
    return mode if mode in EDGE_MODES else "star"


def _coerce_heuristic(key: str, value):
    """Convert one override to the field's type, or None when it is unusable."""
    if key.endswith("_keywords"):
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, (list, tuple)):
            return None
        return tuple(str(v) for v in value)

    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or number < 0:
        return None
    return int(number) if key == "multi_tag_count" else number


def get_graph_heuristics(config: Optional[dict] = None) -> GraphHeuristics:
    """
    Build the graph heuristics from the "graph_heuristics" config section.

    Unknown keys and values that cannot be converted are ignored with a
    warning; keyword lists are stored as tuples so the result stays hashable.
    """
    config = load_config() if config is None else config
    overrides = config.get("graph_heuristics") or {}
    if not isinstance(overrides, dict):
        logger.warning("graph_heuristics must be an object, using defaults")
        return DEFAULT_HEURISTICS

    known = {f.name for f in fields(GraphHeuristics)}
    values = {}
    for key, value in overrides.items():
        if key not in known:
            logger.warning(f"Unknown graph heuristic {key!r} ignored")
            continue
        coerced = _coerce_heuristic(key, value)
        if coerced is None:
            logger.warning(f"Invalid value {value!r} for graph heuristic {key!r}, keeping default")
            continue
        values[key] = coerced
    return replace(DEFAULT_HEURISTICS, **values)
