# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Logging helpers shared across fallback modules."""

from __future__ import annotations

import json
import logging
import os
import sys
from functools import lru_cache
from typing import Any

_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _resolve_level() -> int:
    level_name = os.getenv("FALLBACKS_LOG_LEVEL", "INFO").upper()
    return getattr(logging, level_name, logging.INFO)


def debug_enabled() -> bool:
    return os.getenv("FALLBACKS_DEBUG") == "1"


def diag_enabled() -> bool:
    """Return ``True`` when JSON diagnostics should be emitted."""

    return os.getenv("FALLBACKS_DIAG") == "1"


def library_logger(name: str) -> logging.Logger:
    """Return a module logger that stays silent unless the host configures it."""

    logger = logging.getLogger(name)
    if not logger.handlers:  # pragma: no cover - silence library default
        logger.addHandler(logging.NullHandler())
    if debug_enabled():
        logger.setLevel(logging.DEBUG)
    return logger


@lru_cache(maxsize=None)
def get_logger(name: str) -> logging.Logger:
    """Return a configured logger with a consistent formatter.

    The first call configures the logger and caches it so repeated invocations
    reuse the same handler without duplicating output.
    """

    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level())
    if not any(isinstance(handler, logging.StreamHandler) for handler in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def log_json(logger: logging.Logger, msg: str, **payload: Any) -> None:
    """Emit ``msg`` with a JSON payload when diagnostics are enabled."""

    if not diag_enabled():
        return
    try:
        serialised = json.dumps(payload, default=str, sort_keys=True)
    except (TypeError, ValueError):
        serialised = str(payload)
    logger.debug("%s %s", msg, serialised)


__all__ = ["debug_enabled", "diag_enabled", "get_logger", "library_logger", "log_json"]
