"""Tests for tool name -> descriptor mapping."""

from chatbridge.responses.tools import TOOL_DESCRIPTORS, map_tools


def test_known_and_unknown_names():
    assert map_tools(["web_search", "unknown_tool"]) == [{"type": "web_search_preview"}]


def test_order_is_preserved_with_custom_table():
    table = {"a": {"type": "tool_a"}, "b": {"type": "tool_b"}}
    assert map_tools(["b", "missing", "a"], table=table) == [{"type": "tool_b"}, {"type": "tool_a"}]


def test_single_descriptor_object_passes_through():
    descriptor = {"type": "file_search", "vector_store_ids": ["vs_1"]}
    assert map_tools([descriptor]) == [descriptor]


def test_objects_mixed_with_names_are_skipped():
    assert map_tools([{"type": "custom"}, "web_search"]) == [{"type": "web_search_preview"}]


def test_empty_input():
    assert map_tools([]) == []


def test_returned_descriptors_are_copies():
    result = map_tools(["web_search"])
    result[0]["type"] = "changed"
    assert TOOL_DESCRIPTORS["web_search"] == {"type": "web_search_preview"}


def test_non_list_input_maps_to_nothing():
    assert map_tools({"type": "x"}) == []
    assert map_tools("web_search") == []
