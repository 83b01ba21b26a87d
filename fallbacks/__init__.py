# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Column fallback registry for schema-tolerant imports."""

from .errors import FallbackChainExceeded, InvalidArgument
from .registry import (
    KEY_FALLBACK,
    KEY_PERMANENT,
    MAXIMUM_FALLBACKS,
    FallbackRegistry,
    FallbackSpec,
)
from .schema import (
    DuckDBSchemaChecker,
    FrameSchemaChecker,
    MappingSchemaChecker,
    SchemaChecker,
)
from .sql import qualify, quote_identifier, render_case, render_select

__all__ = [
    "DuckDBSchemaChecker",
    "FallbackChainExceeded",
    "FallbackRegistry",
    "FallbackSpec",
    "FrameSchemaChecker",
    "InvalidArgument",
    "KEY_FALLBACK",
    "KEY_PERMANENT",
    "MAXIMUM_FALLBACKS",
    "MappingSchemaChecker",
    "SchemaChecker",
    "qualify",
    "quote_identifier",
    "render_case",
    "render_select",
]
