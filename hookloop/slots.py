"""
Slot allocators behind the accessor functions.

Each accessor reads a per-kind cursor on the execution, advances it, and
addresses the matching slot list by that position. Nothing here checks that
the call order is stable; the pass compares the final cursors against the
shape recorded by the first pass.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from frozendict import frozendict

from hookloop.effects import EffectRecord
from hookloop.equality import clone, equals

if TYPE_CHECKING:
    from hookloop.execution import Execution

T = TypeVar("T")


@dataclass
class Cursors:
    """Next free position per accessor kind for the running pass."""

    state: int = 0
    effect: int = 0
    memo: int = 0

    def reset(self) -> None:
        self.state = self.effect = self.memo = 0

    def shape(self) -> frozendict:
        return frozendict(state=self.state, effect=self.effect, memo=self.memo)


@dataclass
class MemoSlot:
    value: Any
    deps: Any


@dataclass
class Ref(Generic[T]):
    """Mutable box that keeps its identity across passes."""

    current: T


class StateSetter(Generic[T]):
    """Writes one state slot and requests a convergence check."""

    __slots__ = ("_execution", "_index")

    def __init__(self, execution: Execution, index: int) -> None:
        self._execution = execution
        self._index = index

    def __call__(self, value: T | Callable[[T], T]) -> T:
        slots = self._execution.state_slots
        if callable(value):
            slots[self._index] = value(slots[self._index])
        else:
            slots[self._index] = value
        self._execution.request_reconverge()
        return slots[self._index]

    def __repr__(self) -> str:
        return f"StateSetter(slot={self._index})"


def allocate_state(execution: Execution, fallback: T) -> tuple[T, StateSetter[T]]:
    index = execution.cursors.state
    execution.cursors.state += 1

    slots = execution.state_slots
    if index >= len(slots):
        slots.append(fallback)
    return slots[index], StateSetter(execution, index)


def allocate_memo(execution: Execution, producer: Callable[[], T], deps: Sequence[Any] | None) -> T:
    index = execution.cursors.memo
    execution.cursors.memo += 1

    slots = execution.memo_slots
    if index >= len(slots):
        slots.append(MemoSlot(producer(), clone(deps)))
        return slots[index].value

    slot = slots[index]
    if slot.deps is None or not equals(slot.deps, deps):
        slot.value = producer()
        slot.deps = clone(deps)
    return slot.value


def allocate_ref(execution: Execution, initial: T) -> Ref[T]:
    return allocate_memo(execution, lambda: Ref(clone(initial)), [])


def allocate_effect(
    execution: Execution,
    callback: Callable[[], Any],
    deps: Sequence[Any] | None,
) -> None:
    index = execution.cursors.effect
    execution.cursors.effect += 1

    slots = execution.effect_slots
    if index >= len(slots):
        slots.append(EffectRecord())
    record = slots[index]

    mount_once = not deps
    record.run_on_mount = not mount_once and not equals(record.deps, deps)
    record.mount_once = mount_once
    record.callback = callback
    record.deps = clone(deps)


__all__ = [
    "Cursors",
    "MemoSlot",
    "Ref",
    "StateSetter",
    "allocate_effect",
    "allocate_memo",
    "allocate_ref",
    "allocate_state",
]
