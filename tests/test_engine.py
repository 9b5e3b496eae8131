"""Tests for the hooked entry point, wrappers and engine isolation."""

from __future__ import annotations

import asyncio

import pytest

from hookloop import Engine, Execution, NoActiveExecution, hooked, use_effect, use_state


class TestHooked:
    def test_validates_arguments(self, engine: Engine) -> None:
        with pytest.raises(TypeError, match="body must be callable"):
            engine.hooked(None)
        with pytest.raises(TypeError, match="wrapper must be callable or None"):
            engine.hooked(lambda: None, wrapper=42)

    def test_keeps_body_metadata(self, engine: Engine) -> None:
        def greet(name):
            """Say hello."""
            return f"hello {name}"

        start = engine.hooked(greet)

        assert start.__name__ == "greet"
        assert start.__doc__ == "Say hello."

    def test_each_call_creates_a_new_execution(self, engine: Engine) -> None:
        @engine.hooked
        def greet(name, *, punctuation="!"):
            return f"hello {name}{punctuation}"

        first = greet("a")
        second = greet("b", punctuation="?")

        assert isinstance(first, Execution)
        assert first is not second
        assert (first.result, second.result) == ("hello a!", "hello b?")

    def test_wrapper_controls_first_pass(self, engine: Engine) -> None:
        calls = []

        def body():
            calls.append("body")
            return "value"

        def wrapper(trigger_first_pass, install_set_hook):
            calls.append("wrapper")
            execution = trigger_first_pass()
            install_set_hook(None)
            return ("wrapped", execution.result)

        assert engine.hooked(body, wrapper)() == ("wrapped", "value")
        assert calls == ["wrapper", "body"]

    def test_wrapper_may_defer_first_pass(self, engine: Engine) -> None:
        deferred = []

        start = engine.hooked(lambda: "late", lambda trigger, _install: deferred.append(trigger))
        assert start() is None
        assert len(deferred) == 1

        execution = deferred[0]()
        assert execution.result == "late"
        assert execution.invocation_count == 1

    @pytest.mark.asyncio
    async def test_set_hook_replaces_default_scheduling(self, engine: Engine) -> None:
        requests = []

        def body():
            value, set_value = engine.use_state(0)
            if value < 2:
                set_value(value + 1)
            return value

        def wrapper(trigger_first_pass, install_set_hook):
            install_set_hook(lambda: requests.append("requested"))
            return trigger_first_pass()

        execution = engine.hooked(body, wrapper)()
        assert requests == ["requested"]
        assert execution.pending is None

        await execution.converge()
        assert execution.invocation_count == 2
        assert requests == ["requested", "requested"]

        execution.install_set_hook(None)
        await execution.converge()
        await execution
        assert execution.result == 2


class TestEngineIsolation:
    def test_engines_do_not_share_stacks(self) -> None:
        first, second = Engine(), Engine()
        seen = []

        @first.hooked
        def body():
            seen.append(first.get_execution())
            with pytest.raises(NoActiveExecution):
                second.use_state(0)

        execution = body()
        assert seen == [execution]


class TestDefaultEngine:
    @pytest.mark.asyncio
    async def test_module_level_accessors(self) -> None:
        mounted = []

        @hooked
        def counter(limit):
            value, set_value = use_state(0)
            use_effect(lambda: mounted.append(value), [])
            if value < limit:
                set_value(value + 1)
            return value

        execution = await counter(2)

        assert execution.result == 2
        assert execution.invocation_count == 3
        assert mounted == [0]
        execution.teardown_all()

    @pytest.mark.asyncio
    async def test_default_executions_interleave_independently(self) -> None:
        @hooked
        def counter(limit):
            value, set_value = use_state(0)
            if value < limit:
                set_value(value + 1)
            return value

        small, large = counter(1), counter(3)
        await asyncio.gather(small.settle(), large.settle())

        assert (small.result, large.result) == (1, 3)
        assert (small.invocation_count, large.invocation_count) == (2, 4)
