"""
Effect records and the lifecycle flush that mounts and tears them down.

An effect callback may return a teardown. Callbacks written as plain Python
functions return either ``None`` or a zero-argument callable; both are
normalised once, at the boundary, into the ``EffectResult`` sum type so the
flush never inspects raw return values.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Final

from hookloop.errors import EffectFailure


class EffectResult:
    """Sum type for what an effect callback leaves behind: ``Teardown`` or ``NoTeardown``."""

    __slots__ = ()

    def is_teardown(self) -> bool:
        """Return ``True`` when a teardown is held."""

        return isinstance(self, Teardown)

    def run(self) -> None:
        """Invoke the held teardown, if any."""

        if isinstance(self, Teardown):
            self.fn()


@dataclass(frozen=True)
class Teardown(EffectResult):
    """Teardown closure returned by a mounted effect."""

    fn: Callable[[], Any]


@dataclass(frozen=True)
class NoTeardown(EffectResult):
    """The effect left nothing to clean up."""


NO_TEARDOWN: Final = NoTeardown()


def as_effect_result(value: Any) -> EffectResult:
    """Normalise a callback return value into an ``EffectResult``."""

    if isinstance(value, EffectResult):
        return value
    if callable(value):
        return Teardown(value)
    return NO_TEARDOWN


class FlushMode(Enum):
    """Which lifecycle steps a flush performs."""

    SETTLE = "settle"
    FORCE_TEARDOWN_ONLY = "force_teardown_only"
    UNMOUNT = "unmount"


@dataclass
class EffectRecord:
    """Lifecycle state of one effect slot.

    Attributes:
        callback: Latest callback registered at this position.
        run_on_mount: Dependencies changed and the callback is due on the next settle flush.
        teardown: Result of the last callback invocation.
        mount_once: The effect has no dependencies and runs at most once.
        mounted: The callback has run at least once.
        deps: Dependency array recorded by the last pass.
    """

    callback: Callable[[], Any] | None = None
    run_on_mount: bool = False
    teardown: EffectResult = NO_TEARDOWN
    mount_once: bool = False
    mounted: bool = False
    deps: Any = field(default=None, repr=False)

    def tear_down(self) -> None:
        held, self.teardown = self.teardown, NO_TEARDOWN
        held.run()

    def mount(self, callback: Callable[[], Any]) -> None:
        self.teardown = as_effect_result(callback())
        self.mounted = True


def flush(records: Iterable[EffectRecord], mode: FlushMode) -> None:
    """Run due teardowns and mounts over ``records``.

    Per record, in order:

    1. A held teardown of a non-mount-once effect always runs and is cleared.
    2. A mount-once effect that has never been mounted is mounted, except
       during ``UNMOUNT``.
    3. ``SETTLE`` only: effects flagged ``run_on_mount`` are (re)mounted.
    4. ``UNMOUNT`` only: any teardown still held runs and is cleared.

    Raises:
        EffectFailure: The first callback or teardown that raised. Remaining
            records are left untouched.
    """

    try:
        for record in records:
            if record.teardown.is_teardown() and not record.mount_once:
                record.tear_down()

            if (
                mode is not FlushMode.UNMOUNT
                and record.mount_once
                and not record.mounted
                and record.callback is not None
                and not record.teardown.is_teardown()
            ):
                record.mount(record.callback)

            if mode is FlushMode.SETTLE and record.run_on_mount and record.callback is not None:
                record.mount(record.callback)
                record.run_on_mount = False

            if mode is FlushMode.UNMOUNT and record.teardown.is_teardown():
                record.tear_down()
    except Exception as exc:
        raise EffectFailure(exc) from exc


__all__ = [
    "NO_TEARDOWN",
    "EffectRecord",
    "EffectResult",
    "FlushMode",
    "NoTeardown",
    "Teardown",
    "as_effect_result",
    "flush",
]
