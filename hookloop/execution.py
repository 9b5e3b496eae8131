"""
Execution: one body bound to one argument tuple, re-run until its state converges.

A pass runs the body synchronously with the execution pushed on its stack,
so accessor calls inside the body resolve to it. State writes request a
convergence check on the next event-loop step; the check compares the state
slots with the snapshot taken at the start of the last pass and runs one more
pass only when they differ, so any number of writes between two checks
collapse into a single pass.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from frozendict import frozendict

from hookloop import error_channel
from hookloop.config import HookloopConfig
from hookloop.effects import EffectRecord, FlushMode, flush
from hookloop.equality import clone, equals
from hookloop.errors import EffectFailure, InvocationFailure, UnstableCallShape
from hookloop.slots import Cursors, MemoSlot

if TYPE_CHECKING:
    from hookloop.stack import ExecutionStack

logger = logging.getLogger(__name__)

ErrorHandler = Callable[[BaseException], Any]
SetHook = Callable[[], Any]


class Execution:
    """Persistent slots and scheduling state of one hooked body.

    Attributes:
        state_slots: Values written by ``use_state``, by call position.
        prior_snapshot: Structural copy of ``state_slots`` taken when the last pass started.
        memo_slots: Cached ``use_memo``/``use_ref`` values with their dependencies.
        effect_slots: ``use_effect`` lifecycle records.
        call_shape: Accessor counts recorded by the first pass.
        error_handler: Handler registered through ``on_error``.
        pending: In-flight convergence task, if any.
        result: Return value of the last successful body invocation.
    """

    def __init__(
        self,
        body: Callable[..., Any],
        args: tuple[Any, ...],
        stack: ExecutionStack,
        config: HookloopConfig,
        kwargs: Mapping[str, Any] | None = None,
    ) -> None:
        self._body = body
        self._args = args
        self._kwargs = dict(kwargs or {})
        self._stack = stack
        self._config = config

        self.cursors = Cursors()
        self.state_slots: list[Any] = []
        self.prior_snapshot: list[Any] = []
        self.memo_slots: list[MemoSlot] = []
        self.effect_slots: list[EffectRecord] = []
        self.call_shape: frozendict | None = None
        self.error_handler: ErrorHandler | None = None
        self.pending: asyncio.Task[None] | None = None
        self.result: Any = None

        self._invocation_count = 0
        self._set_hook: SetHook | None = None
        self._discarded = False

    @property
    def invocation_count(self) -> int:
        """Number of passes run so far."""

        return self._invocation_count

    @property
    def discarded(self) -> bool:
        """``True`` once ``teardown_all`` has run."""

        return self._discarded

    # ------------------------------------------------------------------
    # Invocation loop
    # ------------------------------------------------------------------

    def run_pass(self) -> Any:
        """Invoke the body once and flush its effects.

        Returns:
            The body's return value, also stored on ``result``.

        Raises:
            InvocationFailure: The body raised, or it called accessors in a
                different shape than the first pass did.
        """

        self.cursors.reset()
        self.prior_snapshot = clone(self.state_slots)
        self._invocation_count += 1
        self._stack.push(self)
        failure: InvocationFailure | None = None
        try:
            self.result = self._body(*self._args, **self._kwargs)

            shape = self.cursors.shape()
            if self.call_shape is None:
                self.call_shape = shape
            elif self.call_shape != shape:
                raise UnstableCallShape(self.call_shape, shape)
            if self._config.debug:
                logger.debug(
                    "pass %d of %r completed with shape %s",
                    self._invocation_count,
                    self,
                    dict(shape),
                )
        except Exception as exc:
            failure = InvocationFailure(exc)
        finally:
            self._stack.pop(self)

        try:
            self._flush_after_pass()
        except EffectFailure:
            # the body failure wins; the effect failure stays as its __context__
            if failure is None:
                raise
            raise failure from failure.original
        if failure is not None:
            raise failure from failure.original
        return self.result

    def _flush_after_pass(self) -> None:
        if not self.effect_slots:
            return
        try:
            flush(self.effect_slots, FlushMode.SETTLE)
        except EffectFailure as exc:
            error_channel.route_soon(self, exc)

    # ------------------------------------------------------------------
    # Convergence scheduler
    # ------------------------------------------------------------------

    def install_set_hook(self, hook: SetHook | None) -> None:
        """Replace how convergence is requested; ``None`` restores the default scheduling."""

        self._set_hook = hook

    def request_reconverge(self) -> None:
        """Schedule a convergence check unless one is already pending."""

        if self._discarded:
            return
        if self._set_hook is not None:
            self._set_hook()
            return
        if self.pending is None:
            loop = asyncio.get_running_loop()
            self.pending = loop.create_task(self._reconverge())

    async def _reconverge(self) -> None:
        self.pending = None
        await self.converge()

    async def converge(self) -> None:
        """Run one more pass if state moved away from the last pass's starting snapshot."""

        if self._discarded or equals(self.state_slots, self.prior_snapshot):
            return
        try:
            self.run_pass()
        except InvocationFailure as exc:
            logger.debug("convergence pass of %r failed: %s", self, exc.original)
            error_channel.route(self, exc)

    async def settle(self, delay: float | None = None) -> Execution:
        """Wait at least ``delay`` seconds, then until no convergence work is pending.

        Args:
            delay: Minimum wait in seconds; defaults to the configured ``settle_delay``.

        Returns:
            This execution, so ``(await execution.settle()).result`` reads the converged result.
        """

        await asyncio.sleep(self._config.settle_delay if delay is None else delay)
        while self.pending is not None and not self.pending.done():
            await asyncio.wait([self.pending])
        return self

    def __await__(self):
        return self.settle().__await__()

    def teardown_all(self) -> None:
        """Cancel pending convergence and run every held teardown. Idempotent."""

        self._discarded = True
        if self.pending is not None:
            self.pending.cancel()
            self.pending = None
        if not self.effect_slots:
            return
        try:
            flush(self.effect_slots, FlushMode.UNMOUNT)
        except EffectFailure as exc:
            error_channel.route_soon(self, exc)

    def __repr__(self) -> str:
        name = getattr(self._body, "__qualname__", repr(self._body))
        return f"Execution({name}, passes={self._invocation_count})"


__all__ = [
    "ErrorHandler",
    "Execution",
    "SetHook",
]
