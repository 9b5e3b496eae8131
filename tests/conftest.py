"""
Pytest configuration for hookloop tests.

Every test gets its own ``Engine`` so executions never share a stack.
"""

import pytest

from hookloop import Engine, HookloopConfig


@pytest.fixture
def engine() -> Engine:
    return Engine(config=HookloopConfig())


@pytest.fixture
def debug_engine() -> Engine:
    return Engine(config=HookloopConfig(debug=True))
