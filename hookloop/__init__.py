"""
hookloop - a reactive execution engine for plain Python functions.

A hooked body is re-run while it keeps private, positionally addressed state
across passes: values (``use_state``), memoized computations (``use_memo``,
``use_ref``) and effects with teardown (``use_effect``). Writing state
schedules another pass on the event loop until the state stops changing.

Example:
    >>> from hookloop import hooked, use_effect, use_state
    >>>
    >>> @hooked
    ... def ticker():
    ...     count, set_count = use_state(0)
    ...     if count < 3:
    ...         set_count(count + 1)
    ...     return count
    >>>
    >>> execution = await ticker()
    >>> execution.result, execution.invocation_count
    (3, 4)
"""

from hookloop.config import HookloopConfig, load_config
from hookloop.effects import NO_TEARDOWN, EffectResult, FlushMode, NoTeardown, Teardown
from hookloop.engine import (
    Engine,
    get_engine,
    get_execution,
    hooked,
    on_error,
    use_effect,
    use_memo,
    use_ref,
    use_state,
)
from hookloop.equality import clone, equals
from hookloop.errors import (
    EffectFailure,
    HookloopError,
    InvocationFailure,
    NoActiveExecution,
    UnstableCallShape,
)
from hookloop.execution import Execution
from hookloop.slots import Ref
from hookloop.stack import ExecutionStack

__version__ = "0.1.0"

__all__ = [
    "NO_TEARDOWN",
    "EffectFailure",
    "EffectResult",
    "Engine",
    "Execution",
    "ExecutionStack",
    "FlushMode",
    "HookloopConfig",
    "HookloopError",
    "InvocationFailure",
    "NoActiveExecution",
    "NoTeardown",
    "Ref",
    "Teardown",
    "UnstableCallShape",
    "clone",
    "equals",
    "get_engine",
    "get_execution",
    "hooked",
    "load_config",
    "on_error",
    "use_effect",
    "use_memo",
    "use_ref",
    "use_state",
]
