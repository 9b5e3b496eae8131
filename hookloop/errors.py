"""Error taxonomy for hooked executions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


class HookloopError(Exception):
    """Base class for every error raised by the engine."""


class NoActiveExecution(HookloopError, RuntimeError):
    """Raised when an accessor is called outside of any pass."""

    def __init__(self) -> None:
        super().__init__("Cannot invoke accessors outside of a hooked execution")


class UnstableCallShape(HookloopError):
    """Raised when a pass calls accessors in a different shape than the first pass.

    Attributes:
        expected: Accessor counts recorded on the first pass.
        actual: Accessor counts observed on the failing pass.
    """

    def __init__(self, expected: Any, actual: Any) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            "Accessor calls must be invoked in a predictable way every invocation "
            f"(expected {dict(expected)}, got {dict(actual)})"
        )


@dataclass(eq=False)
class InvocationFailure(HookloopError):
    """Wrapper for exceptions raised while the body was running.

    Attributes:
        original: The exception raised by the body or by the shape check.
    """

    original: BaseException

    def __post_init__(self) -> None:
        self.__cause__ = self.original

    def __str__(self) -> str:
        return f"Unexpected failure in execution\n{self.original}"

    def __repr__(self) -> str:
        return f"InvocationFailure({self.original!r})"


@dataclass(eq=False)
class EffectFailure(HookloopError):
    """Wrapper for exceptions raised by an effect callback or teardown during a flush."""

    original: BaseException

    def __post_init__(self) -> None:
        self.__cause__ = self.original

    def __str__(self) -> str:
        return str(self.original)

    def __repr__(self) -> str:
        return f"EffectFailure({self.original!r})"


__all__ = [
    "EffectFailure",
    "HookloopError",
    "InvocationFailure",
    "NoActiveExecution",
    "UnstableCallShape",
]
