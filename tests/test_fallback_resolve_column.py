# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import logging

import pytest

from fallbacks import FallbackChainExceeded, FallbackRegistry, MappingSchemaChecker


def _product_registry(**kwargs) -> FallbackRegistry:
    registry = FallbackRegistry(**kwargs)
    registry.register_column("name")
    registry.register_column("description")
    registry.register_column("desc_short", "description")
    return registry


def test_missing_column_falls_back_and_is_memoized(counting_checker):
    registry = _product_registry()
    checker = counting_checker({"products": {"name", "description"}})

    assert registry.resolve_column(checker, "products", "desc_short") == "description"
    assert checker.calls == [("products", "desc_short"), ("products", "description")]
    assert registry.is_permanent("desc_short")

    checker.calls.clear()
    assert registry.resolve_column(checker, "products", "desc_short") == "description"
    assert ("products", "desc_short") not in checker.calls


def test_existing_column_is_used_directly(counting_checker):
    registry = _product_registry()
    checker = counting_checker({"products": {"desc_short", "description"}})

    assert registry.resolve_column(checker, "products", "desc_short") == "desc_short"
    assert not registry.is_permanent("desc_short")


def test_resolution_is_idempotent(counting_checker):
    registry = _product_registry()
    checker = counting_checker({"products": {"description"}})

    results = {registry.resolve_column(checker, "products", "desc_short") for _ in range(3)}

    assert results == {"description"}


def test_permanent_entry_skips_present_column(counting_checker):
    registry = FallbackRegistry()
    registry.register_column("description")
    registry.register_column("desc_short", "description", permanent=True)
    checker = counting_checker({"products": {"desc_short", "description"}})

    assert registry.resolve_column(checker, "products", "desc_short") == "description"
    assert checker.calls == [("products", "description")]


def test_unregistered_column_is_returned_unchanged():
    registry = _product_registry()
    checker = MappingSchemaChecker({"products": []})

    assert registry.resolve_column(checker, "products", "sku") == "sku"


def test_chain_end_is_returned_even_if_absent():
    registry = _product_registry()
    checker = MappingSchemaChecker({"products": {"name"}})

    assert registry.resolve_column(checker, "products", "desc_short") == "description"
    assert registry.is_permanent("description")


def test_promotion_is_never_reverted(counting_checker):
    registry = _product_registry()
    registry.resolve_column(counting_checker({"products": set()}), "products", "desc_short")
    assert registry.is_permanent("desc_short")

    registry.resolve_column(
        counting_checker({"products": {"desc_short"}}), "products", "desc_short"
    )
    registry.register_fallback("desc_short", "name")

    assert registry.is_permanent("desc_short")


def test_resolve_columns_maps_each_request():
    registry = _product_registry()
    checker = MappingSchemaChecker({"products": {"name", "description"}})

    assert registry.resolve_columns(checker, "products", ["name", "desc_short"]) == {
        "name": "name",
        "desc_short": "description",
    }


def test_cycle_raises_chain_exceeded(caplog):
    registry = FallbackRegistry(max_hops=5)
    registry.register_column("a")
    registry.register_column("b", "a")
    registry.register_fallback("a", "b")
    checker = MappingSchemaChecker({"t": set()})

    with caplog.at_level(logging.WARNING, logger="fallbacks.registry"):
        with pytest.raises(FallbackChainExceeded) as excinfo:
            registry.resolve_column(checker, "t", "a")

    assert excinfo.value.column == "a"
    assert excinfo.value.max_hops == 5
    assert str(excinfo.value) == "Fallbacks exceeded 5 Failure!"
    assert any("fallbacks.chain_exceeded" in rec.getMessage() for rec in caplog.records)


def test_cycle_failure_leaves_registry_usable():
    registry = FallbackRegistry(max_hops=3)
    registry.register_column("a")
    registry.register_column("b", "a")
    registry.register_fallback("a", "b")
    registry.register_column("name")
    checker = MappingSchemaChecker({"t": {"name"}})

    with pytest.raises(FallbackChainExceeded):
        registry.resolve_column(checker, "t", "a")

    assert registry.resolve_column(checker, "t", "name") == "name"
