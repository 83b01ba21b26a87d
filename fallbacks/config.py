# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""YAML-backed configuration for fallback routes and traversal limits."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from fallbacks.logs import library_logger

LOGGER = library_logger(__name__)

CONFIG_PATH_ENV = "FALLBACKS_CONFIG_PATH"
MAX_HOPS_ENV = "FALLBACKS_MAX_HOPS"

# Historical revisions used 20 and 100; 20 is the shipped default.
MAXIMUM_FALLBACKS = 20


def _default_config_path() -> Path:
    env_path = os.getenv(CONFIG_PATH_ENV)
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path(__file__).resolve().parent.parent / "fallbacks.yaml"


def read_config(path: Path | str) -> Dict[str, Any]:
    """Read a YAML config file, returning ``{}`` when missing or not a mapping."""

    path = Path(path)
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        LOGGER.warning("fallbacks.config.ignored | path=%s reason=not_a_mapping", path)
        return {}
    return data


@lru_cache(maxsize=1)
def load() -> Dict[str, Any]:
    """Load the application configuration from YAML."""

    return read_config(_default_config_path())


def _section(config: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if config is None:
        config = load()
    section = config.get("fallbacks") or {}
    if not isinstance(section, Mapping):
        return {}
    return section


def _coerce_hops(raw: Any, source: str) -> Optional[int]:
    if raw is None or (isinstance(raw, str) and not raw.strip()):
        return None
    try:
        value = int(raw)
    except (TypeError, ValueError):
        LOGGER.warning("fallbacks.config.max_hops_invalid | source=%s value=%r", source, raw)
        return None
    if value < 1:
        LOGGER.warning("fallbacks.config.max_hops_invalid | source=%s value=%r", source, raw)
        return None
    return value


def max_hops(config: Optional[Mapping[str, Any]] = None) -> int:
    """Return the traversal bound: env var, then config, then the default."""

    env_value = _coerce_hops(os.getenv(MAX_HOPS_ENV), MAX_HOPS_ENV)
    if env_value is not None:
        return env_value
    config_value = _coerce_hops(_section(config).get("max_hops"), "config")
    if config_value is not None:
        return config_value
    return MAXIMUM_FALLBACKS


def routes(config: Optional[Mapping[str, Any]] = None) -> Dict[str, Dict[str, Any]]:
    """Return the ``fallbacks.routes`` mapping from the configuration."""

    raw = _section(config).get("routes") or {}
    if not isinstance(raw, Mapping):
        LOGGER.warning("fallbacks.config.routes_ignored | reason=not_a_mapping")
        return {}
    result: Dict[str, Dict[str, Any]] = {}
    for name, entry in raw.items():
        # ``alias: target`` is shorthand for ``alias: {fallback: target}``
        if isinstance(entry, str):
            entry = {"fallback": entry}
        result[str(name)] = dict(entry or {})
    return result


__all__ = [
    "CONFIG_PATH_ENV",
    "MAXIMUM_FALLBACKS",
    "MAX_HOPS_ENV",
    "load",
    "max_hops",
    "read_config",
    "routes",
]
