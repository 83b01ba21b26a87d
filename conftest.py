from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, Mapping

import pytest

from fallbacks import config as fallback_config


class CountingSchemaChecker:
    """In-memory schema that records every lookup it answers."""

    def __init__(self, tables: Mapping[str, Iterable[str]]) -> None:
        self.tables = {name: set(columns) for name, columns in tables.items()}
        self.calls: list[tuple[str, str]] = []

    def column_exists(self, table: str, column: str) -> bool:
        self.calls.append((table, column))
        return column in self.tables.get(table, set())


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Point config loading at an empty location and reset the cache."""

    monkeypatch.setenv(fallback_config.CONFIG_PATH_ENV, str(tmp_path / "missing.yaml"))
    monkeypatch.delenv(fallback_config.MAX_HOPS_ENV, raising=False)
    monkeypatch.delenv("FALLBACKS_DIAG", raising=False)
    fallback_config.load.cache_clear()
    try:
        yield
    finally:
        fallback_config.load.cache_clear()


@pytest.fixture()
def counting_checker():
    return CountingSchemaChecker
