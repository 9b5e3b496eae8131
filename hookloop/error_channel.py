"""
Routing of asynchronous failures raised by convergence passes and flushes.

A failure goes to the error handler registered on the execution through
``on_error``. Without a handler it becomes an unhandled failure of the host:
it is handed to the running event loop's exception handler, or raised
directly when no loop is running.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from loguru import logger

from hookloop.effects import FlushMode, flush
from hookloop.errors import EffectFailure

if TYPE_CHECKING:
    from hookloop.execution import Execution

logger = logger.bind(component="error_channel")


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def report(execution: Execution, error: BaseException) -> None:
    """Deliver ``error`` to the execution's handler or escalate it as unhandled."""

    handler = execution.error_handler
    if handler is not None:
        logger.debug("Delivering {!r} to the error handler of {!r}", error, execution)
        handler(error)
        return

    loop = _running_loop()
    if loop is None:
        raise error
    logger.debug("No error handler on {!r}; escalating {!r}", execution, error)
    loop.call_exception_handler(
        {
            "message": f"Unhandled failure in hooked execution {execution!r}",
            "exception": error,
            "execution": execution,
        }
    )


def cleanup(execution: Execution) -> None:
    """Tear down non-mount-once effects left behind by a failed flush."""

    mode = FlushMode.UNMOUNT if execution.discarded else FlushMode.FORCE_TEARDOWN_ONLY
    try:
        flush(execution.effect_slots, mode)
    except EffectFailure as exc:
        report(execution, exc)


def route(execution: Execution, error: BaseException) -> None:
    """Report ``error`` and schedule a cleanup-only flush on the next loop step."""

    if execution.effect_slots:
        loop = _running_loop()
        if loop is not None:
            loop.call_soon(cleanup, execution)
        else:
            cleanup(execution)
    report(execution, error)


def route_soon(execution: Execution, error: BaseException) -> None:
    """Route ``error`` asynchronously when an event loop is running, immediately otherwise."""

    loop = _running_loop()
    if loop is None:
        route(execution, error)
    else:
        loop.call_soon(route, execution, error)


__all__ = [
    "cleanup",
    "report",
    "route",
    "route_soon",
]
