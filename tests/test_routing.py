from __future__ import annotations

import pytest

from htmx_components.errors import MisconfigurationError
from htmx_components.routing import RouteTable


def test_resolve_returns_registered_handler() -> None:
    table: RouteTable[str] = RouteTable("page")
    table.add("/weather", "weather-handler")

    assert table.resolve("/weather") == "weather-handler"
    assert "/weather" in table
    assert table.paths == ["/weather"]


def test_resolve_is_exact_match_only() -> None:
    table: RouteTable[str] = RouteTable("page")
    table.add("/weather", "weather-handler")

    assert table.resolve("/weather/") is None
    assert table.resolve("/weather/today") is None
    assert table.resolve("/Weather") is None
    assert table.resolve("/") is None


def test_duplicate_literal_path_is_rejected() -> None:
    table: RouteTable[str] = RouteTable("fragment")
    table.add("/weather", "first")

    with pytest.raises(MisconfigurationError, match="Duplicate fragment route '/weather'"):
        table.add("/weather", "second")

    # The first registration survives.
    assert table.resolve("/weather") == "first"


def test_path_must_be_absolute() -> None:
    table: RouteTable[str] = RouteTable("page")
    with pytest.raises(MisconfigurationError):
        table.add("weather", "handler")


def test_frozen_table_rejects_additions() -> None:
    table: RouteTable[str] = RouteTable("page")
    table.add("/", "index")
    table.freeze()

    assert table.frozen
    with pytest.raises(RuntimeError):
        table.add("/privacy", "privacy")
    assert len(table) == 1
