"""Runtime validators for engine entry points."""

from __future__ import annotations


def _type_name(value: object) -> str:
    return type(value).__name__


def ensure_callable(value: object, *, name: str) -> None:
    if not callable(value):
        raise TypeError(f"{name} must be callable, got {_type_name(value)}")


def ensure_optional_callable(value: object | None, *, name: str) -> None:
    if value is not None and not callable(value):
        raise TypeError(f"{name} must be callable or None, got {_type_name(value)}")


def ensure_optional_deps(value: object | None, *, name: str) -> None:
    if value is not None and not isinstance(value, (list, tuple)):
        raise TypeError(f"{name} must be a list, a tuple or None, got {_type_name(value)}")


__all__ = [
    "ensure_callable",
    "ensure_optional_callable",
    "ensure_optional_deps",
]
