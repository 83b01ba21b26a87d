# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Schema checkers answering whether a table has a given column."""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, Mapping, Optional, Protocol, runtime_checkable

import pandas as pd

from fallbacks.logs import library_logger

if TYPE_CHECKING:  # pragma: no cover - typing only
    import duckdb

LOGGER = library_logger(__name__)


@runtime_checkable
class SchemaChecker(Protocol):
    def column_exists(self, table: str, column: str) -> bool:
        ...


def _quote_literal(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def table_columns(conn: "duckdb.DuckDBPyConnection", table: str) -> Dict[str, str]:
    """Return ``{lowercased: actual}`` column names for ``table``.

    Missing tables and introspection failures yield an empty mapping.
    """

    try:
        rows = conn.execute(f"PRAGMA table_info({_quote_literal(table)})").fetchall()
    except Exception:
        LOGGER.debug("fallbacks.schema.table_info_failed | table=%s", table, exc_info=True)
        return {}
    return {str(row[1]).lower(): str(row[1]) for row in rows}


class DuckDBSchemaChecker:
    """Answer column lookups from a live DuckDB connection.

    Column sets are cached per table; call :meth:`invalidate` after DDL.
    """

    def __init__(self, conn: "duckdb.DuckDBPyConnection", *, cache: bool = True) -> None:
        self.conn = conn
        self.cache = cache
        self._columns: Dict[str, Dict[str, str]] = {}

    def _lookup(self, table: str) -> Dict[str, str]:
        if not self.cache:
            return table_columns(self.conn, table)
        key = table.lower()
        if key not in self._columns:
            self._columns[key] = table_columns(self.conn, table)
        return self._columns[key]

    def column_exists(self, table: str, column: str) -> bool:
        return column.lower() in self._lookup(table)

    def actual_name(self, table: str, column: str) -> Optional[str]:
        """Return the column's spelling in the catalog, if it exists."""

        return self._lookup(table).get(column.lower())

    def invalidate(self, table: Optional[str] = None) -> None:
        if table is None:
            self._columns.clear()
        else:
            self._columns.pop(table.lower(), None)


class MappingSchemaChecker:
    """In-memory schema: ``{table: iterable of column names}``."""

    def __init__(self, tables: Mapping[str, Iterable[str]]) -> None:
        self.tables = {name: frozenset(columns) for name, columns in tables.items()}

    def column_exists(self, table: str, column: str) -> bool:
        return column in self.tables.get(table, frozenset())


class FrameSchemaChecker:
    """Treat each DataFrame's columns as a table schema."""

    def __init__(self, frames: Mapping[str, pd.DataFrame]) -> None:
        self.frames = dict(frames)

    def column_exists(self, table: str, column: str) -> bool:
        frame = self.frames.get(table)
        if frame is None:
            return False
        return column in frame.columns


__all__ = [
    "DuckDBSchemaChecker",
    "FrameSchemaChecker",
    "MappingSchemaChecker",
    "SchemaChecker",
    "table_columns",
]
