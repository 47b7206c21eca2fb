"""Tests for ToolCatalog: immutable, unique names, ordered listing."""

from __future__ import annotations

import httpx
import pytest

from src.infra.errors import ConfigurationError
from src.tools.builtins import build_catalog
from src.tools.catalog import ToolCatalog


class TestToolCatalog:
    def test_resolve_and_list(self, make_tool) -> None:
        a, b = make_tool("maps_geocode"), make_tool("maps_elevation")
        catalog = ToolCatalog([a, b])
        assert catalog.resolve("maps_geocode") is a
        assert catalog.resolve("maps_elevation") is b
        assert catalog.list_tools() == (a, b)
        assert len(catalog) == 2
        assert "maps_geocode" in catalog

    def test_resolve_unknown_returns_none(self, make_tool) -> None:
        catalog = ToolCatalog([make_tool("maps_geocode")])
        assert catalog.resolve("maps_teleport") is None
        assert "maps_teleport" not in catalog

    def test_duplicate_name_fails_fast(self, make_tool) -> None:
        with pytest.raises(ConfigurationError, match="Tool already registered: maps_geocode"):
            ToolCatalog([make_tool("maps_geocode"), make_tool("maps_geocode")])

    def test_duplicate_error_code(self, make_tool) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ToolCatalog([make_tool("x"), make_tool("x")])
        assert exc_info.value.code == "CONFIGURATION_ERROR"

    def test_describe_format(self, make_tool) -> None:
        catalog = ToolCatalog([make_tool("maps_geocode")])
        assert catalog.describe() == [
            {
                "name": "maps_geocode",
                "description": "Recording tool maps_geocode",
                "inputSchema": {"type": "object", "properties": {}},
            }
        ]

    def test_not_mutable_after_construction(self, make_tool) -> None:
        catalog = ToolCatalog([make_tool("maps_geocode")])
        assert not hasattr(catalog, "register")
        with pytest.raises(TypeError):
            catalog._tools["maps_other"] = make_tool("maps_other")  # type: ignore[index]

    def test_source_iterable_changes_do_not_leak(self, make_tool) -> None:
        tools = [make_tool("maps_geocode")]
        catalog = ToolCatalog(tools)
        tools.append(make_tool("maps_elevation"))
        assert catalog.names() == ["maps_geocode"]


class TestBuiltinCatalog:
    def test_all_maps_tools_registered_in_order(self, maps_client_factory) -> None:
        client = maps_client_factory(lambda request: httpx.Response(200, json={}))
        catalog = build_catalog(client)
        assert catalog.names() == [
            "maps_geocode",
            "maps_reverse_geocode",
            "maps_search_places",
            "maps_place_details",
            "maps_distance_matrix",
            "maps_elevation",
            "maps_directions",
        ]

    def test_every_schema_is_an_object_with_required(self, maps_client_factory) -> None:
        client = maps_client_factory(lambda request: httpx.Response(200, json={}))
        for entry in build_catalog(client).describe():
            assert entry["inputSchema"]["type"] == "object"
            assert entry["inputSchema"]["required"]
            assert entry["description"]
