"""Helpers for safely working with dynamic (untyped) structures.

Release configs and package.json manifests arrive as parsed JSON. These helpers
narrow them at the boundary so the rest of the code works with typed values.
"""

from __future__ import annotations

from typing import Mapping, TypeGuard, cast

StrDict = dict[str, object]
ObjList = list[object]


def is_str_dict(obj: object) -> TypeGuard[StrDict]:
    """Return True if obj is a dict with string keys."""
    if not isinstance(obj, dict):
        return False
    d = cast(dict[object, object], obj)
    return all(isinstance(k, str) for k in d.keys())


def as_str_dict(obj: object) -> StrDict | None:
    """Return obj as StrDict if it matches, else None."""
    if is_str_dict(obj):
        return obj
    return None


def is_obj_list(obj: object) -> TypeGuard[ObjList]:
    """Return True if obj is a list or tuple."""
    return isinstance(obj, (list, tuple))


def as_obj_list(obj: object) -> ObjList | None:
    """Return obj as a list if it is a list or tuple, else None."""
    if is_obj_list(obj):
        return list(cast(list[object], obj))
    return None


def get_str(table: Mapping[str, object], key: str) -> str | None:
    """Get a string value from a mapping, stripping whitespace.

    Returns None if missing, not a str, or empty after stripping.
    """
    value = table.get(key)
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def get_table(table: Mapping[str, object], key: str) -> StrDict | None:
    """Get a nested table (dict with string keys) from a mapping."""
    return as_str_dict(table.get(key))


def truthy(value: object) -> bool:
    """Loose JSON truthiness: missing, false, empty and zero values are falsy."""
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, dict)):
        return len(cast(str, value)) > 0
    return bool(value)
