"""Registry of the executions whose body is currently running."""

from __future__ import annotations

from typing import TYPE_CHECKING

from hookloop.errors import NoActiveExecution

if TYPE_CHECKING:
    from hookloop.execution import Execution


class ExecutionStack:
    """Call stack of active executions.

    ``pop`` removes an execution by identity wherever it sits, leaving an
    empty marker behind, so an inner execution may finish after the outer one
    has already been popped. ``current`` skips empty markers.
    """

    def __init__(self) -> None:
        self._entries: list[Execution | None] = []

    def push(self, execution: Execution) -> None:
        self._entries.append(execution)

    def pop(self, execution: Execution) -> None:
        for index in range(len(self._entries) - 1, -1, -1):
            if self._entries[index] is execution:
                self._entries[index] = None
                break
        while self._entries and self._entries[-1] is None:
            self._entries.pop()

    def current(self) -> Execution:
        for entry in reversed(self._entries):
            if entry is not None:
                return entry
        raise NoActiveExecution()

    def __contains__(self, execution: object) -> bool:
        return any(entry is execution for entry in self._entries)

    def __len__(self) -> int:
        return sum(1 for entry in self._entries if entry is not None)


__all__ = ["ExecutionStack"]
