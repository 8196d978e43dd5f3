"""Runtime state container and access helpers."""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock
from typing import Callable

from failtrace.application.ports.sink import SinkPort
from failtrace.domain import BufferPool, ContextBinder

from ._settings import RuntimeSettings


@dataclass(slots=True)
class FailtraceRuntime:
    """Aggregate of live collaborators assembled by the composition root."""

    settings: RuntimeSettings
    sink: SinkPort
    pool: BufferPool
    binder: ContextBinder


_STATE: FailtraceRuntime | None = None
_STATE_LOCK = RLock()


def set_runtime(runtime: FailtraceRuntime) -> None:
    """Install ``runtime`` as the active singleton."""

    with _STATE_LOCK:
        global _STATE
        _STATE = runtime


def clear_runtime() -> None:
    """Remove the active runtime if present."""

    with _STATE_LOCK:
        global _STATE
        _STATE = None


def current_runtime(default: Callable[[], FailtraceRuntime]) -> FailtraceRuntime:
    """Return the active runtime, installing ``default()`` on first use."""

    with _STATE_LOCK:
        global _STATE
        if _STATE is None:
            _STATE = default()
        return _STATE


def is_initialised() -> bool:
    """Return ``True`` when a runtime is installed."""

    with _STATE_LOCK:
        return _STATE is not None


__all__ = [
    "FailtraceRuntime",
    "clear_runtime",
    "current_runtime",
    "is_initialised",
    "set_runtime",
]
