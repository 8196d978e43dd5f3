"""Runtime façade over the request buffer engine.

Purpose
-------
Expose the stable entry points host applications use (`init`,
`request_scope`, `current`, `bind`, `retrieve`, `shutdown`) instead of wiring
pools and binders by hand.

Contents
--------
* ``init`` / ``shutdown`` – compose or drop the process-wide runtime.
* ``request_scope`` / ``current`` – ambient propagation via :mod:`contextvars`.
* ``bind`` / ``retrieve`` – explicit propagation through a mapping carrier.
* ``inspect_runtime`` – read-only snapshot for diagnostics and the CLI.

System Role
-----------
Outer shell of the package. Every accessor composes a default runtime on
first use, so calling ``init`` is optional: the pool exists as soon as the
first request asks for a buffer.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from failtrace.application.ports.sink import SinkPort
from failtrace.domain import RequestBuffer
from failtrace.domain import context as _context
from failtrace.domain.buffer import DiagnosticHook

from ._composition import build_runtime
from ._settings import RuntimeSettings, SINK_NAMES, build_runtime_settings
from ._state import FailtraceRuntime, clear_runtime, current_runtime, is_initialised, set_runtime


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Immutable view over the active runtime."""

    sink: str
    max_idle: int | None
    idle_buffers: int
    allocated_buffers: int
    dropped_buffers: int


def init(
    *,
    sink: str | SinkPort = "stderr",
    max_idle: int | None = None,
    force_color: bool = False,
    no_color: bool = False,
    diagnostic_hook: DiagnosticHook = None,
) -> None:
    """Compose the runtime and install it as the process-wide singleton.

    Parameters
    ----------
    sink:
        ``"stderr"`` (default), ``"stdout"``, ``"rich"``, ``"discard"``, or
        any object with a ``write(str)`` method. ``FAILTRACE_SINK`` overrides
        a named sink.
    max_idle:
        Upper bound for idle pooled buffers; ``None`` keeps every flushed
        buffer. Overridden by ``FAILTRACE_POOL_MAX_IDLE``.
    force_color, no_color:
        Colour controls for the Rich sink (``FAILTRACE_FORCE_COLOR`` /
        ``FAILTRACE_NO_COLOR``).
    diagnostic_hook:
        Callback receiving ``("sink_write_failed", payload)`` when a sink
        write raises.

    Raises
    ------
    ValueError
        For unknown sink names or a negative/non-integer pool cap.

    Examples
    --------
    >>> init(sink="discard")  # doctest: +SKIP
    >>> with request_scope() as log:  # doctest: +SKIP
    ...     log.info("ready")
    """

    settings = build_runtime_settings(
        sink=sink,
        max_idle=max_idle,
        force_color=force_color,
        no_color=no_color,
        diagnostic_hook=diagnostic_hook,
    )
    set_runtime(build_runtime(settings))


def shutdown() -> None:
    """Drop the active runtime; the next accessor composes a fresh default."""

    clear_runtime()


def _runtime() -> FailtraceRuntime:
    return current_runtime(lambda: build_runtime(build_runtime_settings()))


@contextmanager
def request_scope() -> Iterator[RequestBuffer]:
    """Bind a pooled buffer to the current context for the duration of a request.

    Code further down the call chain reaches the same buffer through
    :func:`current`. When the block raises, the buffered entries and the
    exception are written to the sink and the exception propagates; a clean
    exit writes nothing.
    """

    with _runtime().binder.bind() as buffer:
        yield buffer


def current() -> RequestBuffer:
    """Return the buffer bound by the innermost :func:`request_scope`, or the no-op sentinel."""

    return _runtime().binder.current()


def bind(carrier: Mapping[Any, Any] | None = None) -> Mapping[Any, Any]:
    """Return a copy of ``carrier`` with a freshly acquired buffer attached."""

    return _context.bind(carrier, _runtime().pool)


def retrieve(carrier: Mapping[Any, Any] | None) -> RequestBuffer:
    """Return the buffer attached to ``carrier`` by :func:`bind`, or the no-op sentinel."""

    return _context.retrieve(carrier)


def inspect_runtime() -> RuntimeSnapshot:
    """Return a read-only snapshot of the current runtime state."""

    runtime = _runtime()
    return RuntimeSnapshot(
        sink=runtime.settings.sink_name,
        max_idle=runtime.settings.max_idle,
        idle_buffers=runtime.pool.idle_count,
        allocated_buffers=runtime.pool.allocated,
        dropped_buffers=runtime.pool.dropped,
    )


__all__ = [
    "RuntimeSettings",
    "RuntimeSnapshot",
    "SINK_NAMES",
    "bind",
    "current",
    "init",
    "inspect_runtime",
    "is_initialised",
    "request_scope",
    "retrieve",
    "shutdown",
]
