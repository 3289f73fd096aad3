"""Tests for the nested JSON key helpers."""

import pytest

from imbue.mng_mrbeanbot.errors import JsonPathTypeError
from imbue.mng_mrbeanbot.json_tree import get_nested_object
from imbue.mng_mrbeanbot.json_tree import get_nested_value
from imbue.mng_mrbeanbot.json_tree import set_nested_value

# =============================================================================
# Tests for get_nested_value
# =============================================================================


def test_get_nested_value_returns_leaf() -> None:
    assert get_nested_value({"a": {"b": {"c": 3}}}, ["a", "b", "c"]) == 3


def test_get_nested_value_returns_none_for_missing_key() -> None:
    assert get_nested_value({"a": {}}, ["a", "b", "c"]) is None


def test_get_nested_value_treats_null_as_missing() -> None:
    assert get_nested_value({"a": None}, ["a", "b"]) is None


def test_get_nested_value_with_empty_path_returns_document() -> None:
    document = {"a": 1}
    assert get_nested_value(document, []) is document


def test_get_nested_value_raises_on_non_object_intermediate() -> None:
    with pytest.raises(JsonPathTypeError) as exc_info:
        get_nested_value({"a": {"b": [1, 2]}}, ["a", "b", "c"])
    assert exc_info.value.key_path == "a.b"


def test_get_nested_object_raises_when_leaf_is_not_an_object() -> None:
    with pytest.raises(JsonPathTypeError) as exc_info:
        get_nested_object({"a": {"b": "text"}}, ["a", "b"])
    assert exc_info.value.key_path == "a.b"


def test_get_nested_object_returns_none_when_missing() -> None:
    assert get_nested_object({}, ["a", "b"]) is None


# =============================================================================
# Tests for set_nested_value
# =============================================================================


def test_set_nested_value_creates_missing_objects() -> None:
    assert set_nested_value({}, ["a", "b", "c"], 1) == {"a": {"b": {"c": 1}}}


def test_set_nested_value_keeps_siblings_at_every_level() -> None:
    document = {"top": True, "a": {"keep": [1], "b": {"keep": "x", "c": "old"}}}

    result = set_nested_value(document, ["a", "b", "c"], "new")

    assert result == {"top": True, "a": {"keep": [1], "b": {"keep": "x", "c": "new"}}}


def test_set_nested_value_does_not_mutate_input() -> None:
    document = {"a": {"b": 1}}
    set_nested_value(document, ["a", "b"], 2)
    assert document == {"a": {"b": 1}}


def test_set_nested_value_replaces_null_intermediate() -> None:
    assert set_nested_value({"a": None}, ["a", "b"], 1) == {"a": {"b": 1}}


def test_set_nested_value_replaces_non_object_leaf() -> None:
    assert set_nested_value({"a": {"b": "text"}}, ["a", "b"], {"c": 1}) == {"a": {"b": {"c": 1}}}


def test_set_nested_value_raises_on_non_object_intermediate() -> None:
    with pytest.raises(JsonPathTypeError) as exc_info:
        set_nested_value({"a": {"b": 5}}, ["a", "b", "c"], 1)
    assert exc_info.value.key_path == "a.b"


def test_set_nested_value_rejects_empty_path() -> None:
    with pytest.raises(ValueError, match="at least one key"):
        set_nested_value({}, [], 1)
