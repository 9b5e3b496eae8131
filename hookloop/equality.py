"""
Structural equality and copying for dependency arrays and state snapshots.

Only plain composites are compared and copied structurally: lists, tuples,
dicts and frozendicts. Scalars compare by value. Every other object,
including dates, compiled patterns and user classes, compares by identity
and is shared rather than copied.
"""

from __future__ import annotations

from typing import Any, TypeVar

from frozendict import frozendict

T = TypeVar("T")

_SCALARS = (str, bytes, int, float, complex, type(None))
_SEQUENCES = (list, tuple)
_MAPPINGS = (dict, frozendict)


def _is_mapping(value: object) -> bool:
    return type(value) in _MAPPINGS


def _is_sequence(value: object) -> bool:
    return type(value) in _SEQUENCES


def _same_scalar(a: object, b: object) -> bool:
    # bool is an int subclass but never equal to a number here
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if not isinstance(b, _SCALARS):
        return False
    if isinstance(a, (int, float, complex)) and isinstance(b, (int, float, complex)):
        return a == b
    return type(a) is type(b) and a == b


def equals(a: Any, b: Any) -> bool:
    """Return ``True`` when ``a`` and ``b`` are structurally equal.

    Mappings compare regardless of key insertion order; sequences must have
    the same type and length.
    """

    if _is_sequence(a):
        if type(a) is not type(b) or len(a) != len(b):
            return False
        return all(equals(x, y) for x, y in zip(a, b))

    if _is_mapping(a):
        if not _is_mapping(b) or set(a) != set(b):
            return False
        return all(equals(a[key], b[key]) for key in a)

    if isinstance(a, _SCALARS):
        return _same_scalar(a, b)

    return a is b


def clone(value: T) -> T:
    """Return a structural copy of ``value`` that shares no mutable composite storage."""

    kind = type(value)
    if kind is list:
        return [clone(item) for item in value]  # type: ignore[return-value]
    if kind is tuple:
        return tuple(clone(item) for item in value)  # type: ignore[return-value]
    if kind is dict:
        return {key: clone(item) for key, item in value.items()}  # type: ignore[union-attr,return-value]
    if kind is frozendict:
        return frozendict({key: clone(item) for key, item in value.items()})  # type: ignore[union-attr,return-value]
    return value


__all__ = [
    "clone",
    "equals",
]
