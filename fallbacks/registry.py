# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

"""Registry of column fallbacks and the resolvers that walk it.

Each registered column may name another registered column to fall back to.
Resolution walks that chain until it reaches a usable candidate, where
"usable" depends on the caller: a column that exists in a table schema, a
non-empty value in a decoded row, or every viable column for a ``CASE``
expression. Observing that a column is missing from a schema or a row marks
its entry permanent, so later walks skip it without asking again.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Sequence

import pandas as pd

from fallbacks import config as fallback_config
from fallbacks.errors import (
    EXCEPTION_NAMES_SHOULD_NOT_EQUAL,
    EXCEPTION_NO_COLUMN_WITH_NAME,
    FallbackChainExceeded,
    InvalidArgument,
)
from fallbacks.logs import library_logger, log_json
from fallbacks.schema import SchemaChecker
from fallbacks.sql import render_case

LOGGER = library_logger(__name__)

KEY_FALLBACK = "fallback"
KEY_PERMANENT = "perm"

MAXIMUM_FALLBACKS = fallback_config.MAXIMUM_FALLBACKS


@dataclass(frozen=True)
class FallbackSpec:
    """One registered column and where it falls back to."""

    name: str
    fallback: Optional[str] = None
    permanent: bool = False

    @property
    def bypassed(self) -> bool:
        """Permanent entries with a target are always skipped."""

        return self.permanent and self.fallback is not None

    def to_dict(self) -> Dict[str, Any]:
        return {KEY_FALLBACK: self.fallback, KEY_PERMANENT: bool(self.permanent)}


def is_empty_value(value: Any) -> bool:
    """Return ``True`` for values a row should not supply (blank, zero, NA)."""

    if value is None:
        return True
    # arrays and Series have no single truth value
    if pd.api.types.is_list_like(value):
        return hasattr(value, "__len__") and len(value) == 0
    if pd.api.types.is_scalar(value) and pd.isna(value):
        return True
    return not value


class FallbackRegistry:
    """Mapping of column names to :class:`FallbackSpec` plus chain resolvers."""

    def __init__(
        self,
        routes: Optional[Mapping[str, Mapping[str, Any]]] = None,
        *,
        max_hops: Optional[int] = None,
    ) -> None:
        if max_hops is None:
            max_hops = fallback_config.max_hops()
        if isinstance(max_hops, bool) or not isinstance(max_hops, int) or max_hops < 1:
            raise InvalidArgument(f"max_hops must be a positive integer, got {max_hops!r}")
        self.max_hops = max_hops
        self._routes: Dict[str, FallbackSpec] = {}
        self._lock = threading.Lock()
        if routes:
            self._load_routes(routes)

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]] = None) -> "FallbackRegistry":
        """Build a registry from the ``fallbacks`` section of the YAML config."""

        return cls(
            fallback_config.routes(config),
            max_hops=fallback_config.max_hops(config),
        )

    def _load_routes(self, routes: Mapping[str, Mapping[str, Any]]) -> None:
        # Targets may be listed after the columns that use them.
        loaded: Dict[str, FallbackSpec] = {}
        for name, entry in routes.items():
            # ``alias: target`` is shorthand for ``alias: {fallback: target}``
            if isinstance(entry, str):
                entry = {KEY_FALLBACK: entry}
            entry = entry or {}
            if not isinstance(entry, Mapping):
                raise InvalidArgument(
                    f"Fallback route for {name} must be a mapping, got {type(entry).__name__}"
                )
            fallback = entry.get(KEY_FALLBACK) or None
            if name == fallback:
                raise InvalidArgument(EXCEPTION_NAMES_SHOULD_NOT_EQUAL)
            loaded[name] = FallbackSpec(
                name=name,
                fallback=fallback,
                permanent=bool(entry.get(KEY_PERMANENT, False)),
            )
        for spec in loaded.values():
            if spec.fallback is not None and spec.fallback not in loaded:
                raise InvalidArgument(EXCEPTION_NO_COLUMN_WITH_NAME % spec.fallback)
        self._routes.update(loaded)
        LOGGER.debug("fallbacks.registry.loaded | columns=%d", len(loaded))

    # ------------------------------------------------------------------
    # Registration

    def register_column(
        self, name: str, fallback: Optional[str] = None, permanent: bool = False
    ) -> FallbackSpec:
        """Register ``name`` and, optionally, the column it falls back to.

        ``fallback`` must already be registered. ``permanent`` makes every
        resolution skip ``name`` in favour of its fallback, even when ``name``
        holds a value.
        """

        if name == fallback:
            raise InvalidArgument(EXCEPTION_NAMES_SHOULD_NOT_EQUAL)
        if fallback and fallback not in self._routes:
            raise InvalidArgument(EXCEPTION_NO_COLUMN_WITH_NAME % fallback)
        spec = FallbackSpec(name=name, fallback=fallback or None, permanent=bool(permanent))
        with self._lock:
            self._routes[name] = spec
        LOGGER.debug(
            "fallbacks.registry.column | name=%s fallback=%s permanent=%s",
            name,
            spec.fallback,
            spec.permanent,
        )
        return spec

    def register_fallback(self, source: str, target: str) -> FallbackSpec:
        """Point the already-registered ``source`` at the registered ``target``."""

        if source not in self._routes:
            raise InvalidArgument(EXCEPTION_NO_COLUMN_WITH_NAME % source)
        if target not in self._routes:
            raise InvalidArgument(EXCEPTION_NO_COLUMN_WITH_NAME % target)
        with self._lock:
            spec = replace(self._routes[source], fallback=target)
            self._routes[source] = spec
        LOGGER.debug("fallbacks.registry.edge | source=%s target=%s", source, target)
        return spec

    # ------------------------------------------------------------------
    # Introspection

    def __contains__(self, name: object) -> bool:
        return name in self._routes

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._routes))

    def get(self, name: str) -> Optional[FallbackSpec]:
        return self._routes.get(name)

    def is_permanent(self, name: str) -> bool:
        spec = self._routes.get(name)
        return bool(spec and spec.permanent)

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        """Snapshot in the same shape the constructor accepts."""

        return {name: spec.to_dict() for name, spec in list(self._routes.items())}

    def __repr__(self) -> str:  # pragma: no cover - logging helper
        return f"FallbackRegistry(columns={len(self._routes)}, max_hops={self.max_hops})"

    # ------------------------------------------------------------------
    # Traversal

    def _promote(self, name: str) -> None:
        with self._lock:
            spec = self._routes.get(name)
            if spec is None or spec.permanent:
                return
            self._routes[name] = replace(spec, permanent=True)
        LOGGER.debug("fallbacks.promote | column=%s", name)
        log_json(LOGGER, "fallbacks.promote", column=name, fallback=spec.fallback)

    def _walk(
        self,
        column: str,
        skip: Callable[[FallbackSpec], bool],
        record: Optional[Callable[[str], None]] = None,
    ) -> str:
        """Follow fallbacks from ``column`` and return where the walk stopped.

        ``skip`` decides whether a candidate is unusable. Without ``record`` the
        first usable candidate ends the walk; with it, every usable candidate is
        recorded and the walk continues to its fallback. Unregistered columns
        and entries without a fallback are terminal.
        """

        start = column
        hops = 0
        while True:
            spec = self._routes.get(column)
            if spec is None:
                return column
            if not skip(spec):
                if record is None:
                    return column
                record(column)
            if spec.fallback is None:
                return column
            column = spec.fallback
            hops += 1
            if hops > self.max_hops:
                LOGGER.warning(
                    "fallbacks.chain_exceeded | start=%s max_hops=%d", start, self.max_hops
                )
                raise FallbackChainExceeded(start, self.max_hops)

    def _schema_skip(self, checker: SchemaChecker, table: str) -> Callable[[FallbackSpec], bool]:
        def skip(spec: FallbackSpec) -> bool:
            if spec.bypassed:
                return True
            if not checker.column_exists(table, spec.name):
                self._promote(spec.name)
                return True
            return False

        return skip

    def resolve_column(self, checker: SchemaChecker, table: str, column: str) -> str:
        """Return the column of ``table`` that should stand in for ``column``.

        The result is not guaranteed to exist: when the chain runs out the last
        candidate is returned as-is.
        """

        return self._walk(column, self._schema_skip(checker, table))

    def resolve_value(self, row: Mapping[str, Any], column: str) -> Any:
        """Return the first non-empty value along ``column``'s chain in ``row``.

        Missing keys are memoized as permanent; empty values are not, since an
        empty cell only describes the current row.
        """

        def skip(spec: FallbackSpec) -> bool:
            if spec.bypassed:
                return True
            if spec.name not in row:
                self._promote(spec.name)
                return True
            return is_empty_value(row[spec.name])

        resolved = self._walk(column, skip)
        if resolved not in row:
            return None
        value = row[resolved]
        # a registered chain that ends on an empty cell has nothing to supply
        if resolved in self._routes and is_empty_value(value):
            return None
        return value

    def resolve_chain(self, checker: SchemaChecker, table: str, column: str) -> List[str]:
        """Return every existing column along ``column``'s chain, in priority order.

        When nothing along the chain qualifies, the column the walk ended on is
        returned on its own.
        """

        route: List[str] = []
        last = self._walk(column, self._schema_skip(checker, table), route.append)
        if not route:
            route.append(last)
        log_json(LOGGER, "fallbacks.chain", table=table, column=column, route=route)
        return route

    def render_case(
        self,
        checker: SchemaChecker,
        table: str,
        column: str,
        *,
        qualifier: Optional[str] = None,
        quote: str = '"',
    ) -> str:
        """Resolve ``column``'s chain against ``table`` and render it as SQL."""

        return render_case(self.resolve_chain(checker, table, column), qualifier, quote=quote)

    def resolve_columns(
        self, checker: SchemaChecker, table: str, columns: Sequence[str]
    ) -> Dict[str, str]:
        """Resolve several logical columns at once, keyed by the requested name."""

        return {column: self.resolve_column(checker, table, column) for column in columns}


__all__ = [
    "FallbackRegistry",
    "FallbackSpec",
    "KEY_FALLBACK",
    "KEY_PERMANENT",
    "MAXIMUM_FALLBACKS",
    "is_empty_value",
]
