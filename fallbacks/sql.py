# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""SQL rendering for resolved fallback chains."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence, Union

if TYPE_CHECKING:  # pragma: no cover - typing only
    from fallbacks.registry import FallbackRegistry
    from fallbacks.schema import SchemaChecker

DOUBLE_QUOTE = '"'
BACKTICK = "`"
_QUOTES = {DOUBLE_QUOTE, BACKTICK}


def quote_identifier(identifier: str, quote: str = DOUBLE_QUOTE) -> str:
    if quote not in _QUOTES:
        raise ValueError(f"unsupported identifier quote {quote!r}")
    return quote + identifier.replace(quote, quote + quote) + quote


def qualify(column: str, table: Optional[str] = None, quote: str = DOUBLE_QUOTE) -> str:
    """Return ``"table"."column"`` (or just ``"column"``)."""

    quoted = quote_identifier(column, quote)
    if table:
        return f"{quote_identifier(table, quote)}.{quoted}"
    return quoted


def render_case(
    columns: Union[Sequence[str], str],
    table: Optional[str] = None,
    *,
    quote: str = DOUBLE_QUOTE,
    text_cast: bool = False,
) -> str:
    """Render a fallback chain as a SQL expression.

    A single column renders as its qualified identifier. Longer chains render
    as ``(CASE WHEN TRIM(a) > '' THEN a ... ELSE last END)`` so the first
    column with a non-blank value wins. A bare string is treated as a single
    column and an empty chain renders the quoted empty identifier.

    ``TRIM`` only accepts text in DuckDB; set ``text_cast`` to wrap each tested
    column in ``CAST(.. AS VARCHAR)`` when the chain holds typed columns. The
    selected values themselves are never cast.
    """

    if isinstance(columns, str):
        return qualify(columns, table, quote)
    chain = list(columns)
    if not chain:
        return qualify("", table, quote)
    if len(chain) == 1:
        return qualify(chain[0], table, quote)

    branches = []
    for column in chain[:-1]:
        ref = qualify(column, table, quote)
        tested = f"CAST({ref} AS VARCHAR)" if text_cast else ref
        branches.append(f"WHEN TRIM({tested}) > '' THEN {ref}")
    last = qualify(chain[-1], table, quote)
    return f"(CASE {' '.join(branches)} ELSE {last} END)"


def render_select(
    registry: "FallbackRegistry",
    checker: "SchemaChecker",
    table: str,
    columns: Sequence[str],
    *,
    quote: str = DOUBLE_QUOTE,
    text_cast: bool = False,
) -> str:
    """Build a ``SELECT`` projecting each logical column through its chain."""

    if not columns:
        raise ValueError("render_select requires at least one column")
    projections: List[str] = []
    for column in columns:
        chain = registry.resolve_chain(checker, table, column)
        expr = render_case(chain, table, quote=quote, text_cast=text_cast)
        projections.append(f"{expr} AS {quote_identifier(column, quote)}")
    return f"SELECT {', '.join(projections)} FROM {quote_identifier(table, quote)}"


__all__ = [
    "BACKTICK",
    "DOUBLE_QUOTE",
    "qualify",
    "quote_identifier",
    "render_case",
    "render_select",
]
