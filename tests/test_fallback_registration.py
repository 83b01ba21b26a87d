# Pythia
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import pytest

from fallbacks import FallbackRegistry, FallbackSpec, InvalidArgument
from fallbacks.errors import EXCEPTION_NAMES_SHOULD_NOT_EQUAL


def test_register_column_rejects_self_fallback():
    registry = FallbackRegistry()
    registry.register_column("name")

    with pytest.raises(InvalidArgument, match=EXCEPTION_NAMES_SHOULD_NOT_EQUAL):
        registry.register_column("name", "name")


def test_register_column_requires_known_target():
    registry = FallbackRegistry()

    with pytest.raises(InvalidArgument, match="No column with name description registered"):
        registry.register_column("desc_short", "description")

    registry.register_column("description")
    spec = registry.register_column("desc_short", "description")

    assert spec == FallbackSpec("desc_short", "description", False)
    assert "desc_short" in registry


def test_register_column_last_registration_wins():
    registry = FallbackRegistry()
    registry.register_column("description")
    registry.register_column("desc_short", "description", permanent=True)
    registry.register_column("desc_short")

    assert registry.get("desc_short") == FallbackSpec("desc_short", None, False)
    assert len(registry) == 2


def test_register_column_treats_empty_target_as_terminal():
    registry = FallbackRegistry()
    spec = registry.register_column("title", "")

    assert spec.fallback is None


@pytest.mark.parametrize("source, target", [("a", "b"), ("b", "a"), ("x", "y")])
def test_register_fallback_requires_both_registered(source, target):
    registry = FallbackRegistry()
    registry.register_column("a")

    with pytest.raises(InvalidArgument):
        registry.register_fallback(source, target)


def test_register_fallback_keeps_permanence():
    registry = FallbackRegistry()
    registry.register_column("a", permanent=True)
    registry.register_column("b")

    registry.register_fallback("a", "b")

    assert registry.get("a") == FallbackSpec("a", "b", True)


def test_register_fallback_then_resolve(counting_checker):
    registry = FallbackRegistry()
    registry.register_column("a")
    registry.register_column("b")
    registry.register_fallback("a", "b")

    checker = counting_checker({"items": {"b"}})

    assert registry.resolve_column(checker, "items", "a") == "b"


def test_constructor_accepts_snapshot_shape_and_round_trips():
    routes = {
        "desc_short": {"fallback": "description", "perm": False},
        "description": {"fallback": None, "perm": False},
        "name": {"fallback": None, "perm": True},
    }
    registry = FallbackRegistry(routes)

    assert registry.to_dict() == routes
    assert FallbackRegistry(registry.to_dict()).to_dict() == routes
    assert list(registry) == ["desc_short", "description", "name"]


def test_constructor_validates_routes():
    with pytest.raises(InvalidArgument):
        FallbackRegistry({"a": {"fallback": "missing"}})
    with pytest.raises(InvalidArgument):
        FallbackRegistry({"a": {"fallback": "a"}})


@pytest.mark.parametrize("value", [0, -1, "20", True])
def test_constructor_rejects_bad_max_hops(value):
    with pytest.raises(InvalidArgument):
        FallbackRegistry(max_hops=value)


def test_constructor_accepts_target_shorthand():
    registry = FallbackRegistry({"title": "title_alt", "title_alt": None})

    assert registry.to_dict() == {
        "title": {"fallback": "title_alt", "perm": False},
        "title_alt": {"fallback": None, "perm": False},
    }


def test_constructor_rejects_non_mapping_entries():
    with pytest.raises(InvalidArgument, match="must be a mapping"):
        FallbackRegistry({"title": ["title_alt"]})
