# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Resolve fallback columns against a DuckDB table from the command line.

Usage:
  python -m fallbacks.cli --db imports.duckdb --table products \
      --config fallbacks.yaml --mode case desc_short
"""

from __future__ import annotations

import argparse
from typing import Optional

import duckdb

from fallbacks import config as fallback_config
from fallbacks.errors import FallbackChainExceeded, InvalidArgument
from fallbacks.logs import get_logger
from fallbacks.registry import FallbackRegistry
from fallbacks.schema import DuckDBSchemaChecker
from fallbacks.sql import BACKTICK, DOUBLE_QUOTE, render_select

LOGGER = get_logger("fallbacks.cli")

MODES = ("column", "chain", "case", "select")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Resolve column fallbacks against a table")
    parser.add_argument("--db", required=True, help="Path to the DuckDB database")
    parser.add_argument("--table", required=True, help="Table to resolve columns against")
    parser.add_argument("--config", help="YAML config with a fallbacks.routes section")
    parser.add_argument("--mode", choices=MODES, default="column")
    parser.add_argument(
        "--backticks", action="store_true", help="Quote identifiers with backticks"
    )
    parser.add_argument("columns", nargs="+", help="Logical column names")
    args = parser.parse_args(argv)

    quote = BACKTICK if args.backticks else DOUBLE_QUOTE
    config = fallback_config.read_config(args.config) if args.config else None

    try:
        registry = FallbackRegistry.from_config(config)
    except InvalidArgument as exc:
        LOGGER.error("Invalid fallback configuration: %s", exc)
        return 2

    conn = duckdb.connect(args.db, read_only=True)
    try:
        checker = DuckDBSchemaChecker(conn)
        if args.mode == "select":
            print(render_select(registry, checker, args.table, args.columns, quote=quote))
            return 0
        for column in args.columns:
            if args.mode == "column":
                result = registry.resolve_column(checker, args.table, column)
            elif args.mode == "chain":
                result = ", ".join(registry.resolve_chain(checker, args.table, column))
            else:
                result = registry.render_case(
                    checker, args.table, column, qualifier=args.table, quote=quote
                )
            print(f"{column}\t{result}")
    except FallbackChainExceeded as exc:
        LOGGER.error("Fallback chain for %s exceeded %d hops", exc.column, exc.max_hops)
        return 2
    finally:
        conn.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
