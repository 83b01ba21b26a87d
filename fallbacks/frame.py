# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""pandas and DuckDB helpers applying fallbacks to whole import batches."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

import pandas as pd

from fallbacks.logs import library_logger
from fallbacks.registry import FallbackRegistry
from fallbacks.schema import DuckDBSchemaChecker
from fallbacks.sql import render_select

if TYPE_CHECKING:  # pragma: no cover - typing only
    import duckdb

LOGGER = library_logger(__name__)


def resolve_frame_values(
    registry: FallbackRegistry, frame: pd.DataFrame, column: str
) -> pd.Series:
    """Return ``column`` resolved row by row through its fallback chain."""

    if frame.empty:
        return pd.Series([], index=frame.index, dtype=object, name=column)
    values = [
        registry.resolve_value(row, column)
        for row in frame.to_dict(orient="records")
    ]
    return pd.Series(values, index=frame.index, dtype=object, name=column)


def fetch_with_fallbacks(
    conn: "duckdb.DuckDBPyConnection",
    registry: FallbackRegistry,
    table: str,
    columns: Sequence[str],
    *,
    text_cast: bool = False,
) -> pd.DataFrame:
    """Select ``columns`` from ``table``, each drawn from its fallback chain."""

    checker = DuckDBSchemaChecker(conn)
    sql = render_select(registry, checker, table, columns, text_cast=text_cast)
    LOGGER.debug("fallbacks.fetch | table=%s sql=%s", table, sql)
    return conn.execute(sql).fetchdf()


__all__ = ["fetch_with_fallbacks", "resolve_frame_values"]
