"""
Engine configuration read from the environment.

HOOKLOOP_DEBUG          enable per-pass debug tracing ("1", "true", "yes")
HOOKLOOP_SETTLE_DELAY   default minimum delay of ``settle()`` in seconds
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

_TRUTHY = ("1", "true", "yes")


@dataclass(frozen=True)
class HookloopConfig:
    debug: bool = False
    settle_delay: float = 0.0

    def __post_init__(self) -> None:
        if self.settle_delay < 0:
            raise ValueError(f"settle_delay must be >= 0, got {self.settle_delay!r}")


def load_config(environ: Mapping[str, str] | None = None) -> HookloopConfig:
    """Build a ``HookloopConfig`` from ``environ`` (defaults to ``os.environ``)."""

    env = os.environ if environ is None else environ
    raw_delay = env.get("HOOKLOOP_SETTLE_DELAY", "").strip()
    try:
        settle_delay = float(raw_delay) if raw_delay else 0.0
    except ValueError as exc:
        raise ValueError(f"HOOKLOOP_SETTLE_DELAY must be a number, got {raw_delay!r}") from exc
    return HookloopConfig(
        debug=env.get("HOOKLOOP_DEBUG", "").lower() in _TRUTHY,
        settle_delay=settle_delay,
    )


__all__ = [
    "HookloopConfig",
    "load_config",
]
