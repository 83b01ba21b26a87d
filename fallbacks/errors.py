# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Exceptions raised by the fallback registry."""

from __future__ import annotations

EXCEPTION_FALLBACK_EXCEEDED = "Fallbacks exceeded %s Failure!"
EXCEPTION_NO_COLUMN_WITH_NAME = "No column with name %s registered"
EXCEPTION_NAMES_SHOULD_NOT_EQUAL = "Fallback should not be equal to column name"


class InvalidArgument(ValueError):
    """Registration violated the registry's naming rules."""


class FallbackChainExceeded(RuntimeError):
    """A resolution walked more hops than the registry allows."""

    def __init__(self, column: str, max_hops: int) -> None:
        super().__init__(EXCEPTION_FALLBACK_EXCEEDED % max_hops)
        self.column = column
        self.max_hops = max_hops


__all__ = [
    "EXCEPTION_FALLBACK_EXCEEDED",
    "EXCEPTION_NAMES_SHOULD_NOT_EQUAL",
    "EXCEPTION_NO_COLUMN_WITH_NAME",
    "FallbackChainExceeded",
    "InvalidArgument",
]
