"""Helpers for reading and updating nested keys of a loosely-typed JSON document.

Documents are plain ``dict``/``list``/scalar trees as produced by ``json.loads``.
Keys these helpers do not touch are carried over as-is, so unknown or future
fields survive a read-modify-write cycle.
"""

from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any
from typing import TypeAlias

from imbue.mng_mrbeanbot.errors import JsonPathTypeError

JsonObject: TypeAlias = dict[str, Any]


def format_key_path(key_path: Sequence[str]) -> str:
    return ".".join(key_path)


def get_nested_value(document: Mapping[str, Any], key_path: Sequence[str]) -> Any:
    """Return the value stored at key_path, or None if any key along the way is absent.

    A JSON null on the way counts as absent. Raises JsonPathTypeError if a
    value that must be traversed is present but is not an object.
    """
    current: Any = document
    for depth, key in enumerate(key_path):
        if current is None:
            return None
        if not isinstance(current, Mapping):
            raise JsonPathTypeError(format_key_path(key_path[:depth]))
        current = current.get(key)
    return current


def get_nested_object(document: Mapping[str, Any], key_path: Sequence[str]) -> JsonObject | None:
    """Like get_nested_value, but the value itself must also be an object (or absent)."""
    value = get_nested_value(document, key_path)
    if value is None:
        return None
    if not isinstance(value, dict):
        raise JsonPathTypeError(format_key_path(key_path))
    return value


def set_nested_value(document: Mapping[str, Any], key_path: Sequence[str], value: Any) -> JsonObject:
    """Return a copy of document with the key at key_path replaced by value.

    Missing (or null) intermediate objects are created. Only the objects along
    key_path are copied; all sibling values are shared with the input, which
    is never mutated. Raises JsonPathTypeError if an intermediate value is
    present but is not an object.
    """
    if len(key_path) == 0:
        raise ValueError("key_path must contain at least one key")
    return _set_nested_value(document, key_path, value, depth=0)


def _set_nested_value(document: Mapping[str, Any], key_path: Sequence[str], value: Any, depth: int) -> JsonObject:
    key = key_path[depth]
    if depth == len(key_path) - 1:
        return {**document, key: value}

    child = document.get(key)
    if child is None:
        child = {}
    elif not isinstance(child, Mapping):
        raise JsonPathTypeError(format_key_path(key_path[: depth + 1]))
    return {**document, key: _set_nested_value(child, key_path, value, depth + 1)}
