"""
Engine: the entry point that binds bodies to executions and resolves accessors.

Each ``Engine`` owns one ``ExecutionStack``, so independent engines can run
side by side. The module-level accessor functions delegate to a lazily
created default engine.

Example:
    >>> from hookloop import hooked, use_state
    >>>
    >>> @hooked
    ... def counter(limit):
    ...     value, set_value = use_state(0)
    ...     if value < limit:
    ...         set_value(value + 1)
    ...     return value
    >>>
    >>> execution = await counter(3)
    >>> execution.result
    3
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from functools import wraps
from typing import Any, TypeVar

from hookloop._validators import (
    ensure_callable,
    ensure_optional_callable,
    ensure_optional_deps,
)
from hookloop.config import HookloopConfig, load_config
from hookloop.execution import ErrorHandler, Execution, SetHook
from hookloop.slots import Ref, StateSetter, allocate_effect, allocate_memo, allocate_ref, allocate_state
from hookloop.stack import ExecutionStack

T = TypeVar("T")

Wrapper = Callable[[Callable[[], Execution], Callable[[SetHook | None], None]], Any]


def run_immediately(
    trigger_first_pass: Callable[[], Execution],
    install_set_hook: Callable[[SetHook | None], None],
) -> Execution:
    """Default wrapper: run the first pass right away and return the execution."""

    return trigger_first_pass()


class Engine:
    """Binds bodies to executions and serves the accessors called inside them."""

    def __init__(
        self,
        config: HookloopConfig | None = None,
        stack: ExecutionStack | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        self.stack = stack if stack is not None else ExecutionStack()

    def hooked(self, body: Callable[..., Any], wrapper: Wrapper | None = None) -> Callable[..., Any]:
        """Turn ``body`` into a factory that starts a new execution per call.

        Args:
            body: Function re-run on every pass; it must call accessors in
                the same order and count each time.
            wrapper: Receives ``(trigger_first_pass, install_set_hook)`` and
                decides when the first pass runs. Its return value is what
                the factory returns. Defaults to ``run_immediately``.

        Raises:
            TypeError: ``body`` or ``wrapper`` is not callable.
        """

        ensure_callable(body, name="body")
        ensure_optional_callable(wrapper, name="wrapper")
        wrap = wrapper if wrapper is not None else run_immediately

        @wraps(body)
        def start(*args: Any, **kwargs: Any) -> Any:
            execution = Execution(body, args, self.stack, self.config, kwargs)

            def trigger_first_pass() -> Execution:
                execution.run_pass()
                return execution

            return wrap(trigger_first_pass, execution.install_set_hook)

        return start

    def get_execution(self) -> Execution:
        """Return the execution whose body is running.

        Raises:
            NoActiveExecution: Called outside of any pass.
        """

        return self.stack.current()

    def use_state(self, fallback: T = None) -> tuple[T, StateSetter[T]]:
        return allocate_state(self.get_execution(), fallback)

    def use_memo(self, producer: Callable[[], T], deps: Sequence[Any] | None = None) -> T:
        ensure_callable(producer, name="producer")
        ensure_optional_deps(deps, name="deps")
        return allocate_memo(self.get_execution(), producer, deps)

    def use_ref(self, initial: T = None) -> Ref[T]:
        return allocate_ref(self.get_execution(), initial)

    def use_effect(self, callback: Callable[[], Any], deps: Sequence[Any] | None = None) -> None:
        ensure_callable(callback, name="callback")
        ensure_optional_deps(deps, name="deps")
        allocate_effect(self.get_execution(), callback, deps)

    def on_error(self, handler: ErrorHandler) -> None:
        ensure_callable(handler, name="handler")
        self.get_execution().error_handler = handler


_default_engine: Engine | None = None


def get_engine() -> Engine:
    """Return the process-wide default engine, creating it on first use."""

    global _default_engine
    if _default_engine is None:
        _default_engine = Engine()
    return _default_engine


def hooked(body: Callable[..., Any], wrapper: Wrapper | None = None) -> Callable[..., Any]:
    return get_engine().hooked(body, wrapper)


def get_execution() -> Execution:
    return get_engine().get_execution()


def use_state(fallback: T = None) -> tuple[T, StateSetter[T]]:
    """Return ``(value, setter)`` for the next state slot, initialised to ``fallback``."""

    return get_engine().use_state(fallback)


def use_memo(producer: Callable[[], T], deps: Sequence[Any] | None = None) -> T:
    """Return the cached ``producer()`` value, recomputed when ``deps`` change."""

    return get_engine().use_memo(producer, deps)


def use_ref(initial: T = None) -> Ref[T]:
    """Return a ``Ref`` that keeps its identity across passes."""

    return get_engine().use_ref(initial)


def use_effect(callback: Callable[[], Any], deps: Sequence[Any] | None = None) -> None:
    """Register ``callback`` to run after the pass.

    With no ``deps`` (or empty ``deps``) the callback runs once per execution;
    otherwise it runs again on every pass where ``deps`` changed. A callable
    returned by ``callback`` is kept as its teardown.
    """

    get_engine().use_effect(callback, deps)


def on_error(handler: ErrorHandler) -> None:
    """Register ``handler`` for asynchronous failures of the current execution."""

    get_engine().on_error(handler)


__all__ = [
    "Engine",
    "Wrapper",
    "get_engine",
    "get_execution",
    "hooked",
    "on_error",
    "run_immediately",
    "use_effect",
    "use_memo",
    "use_ref",
    "use_state",
]
