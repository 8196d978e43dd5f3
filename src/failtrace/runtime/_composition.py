"""Runtime composition helpers wiring domain objects to adapters.

Purpose
-------
Translate :class:`RuntimeSettings` into the live :class:`FailtraceRuntime`
singleton: pick the sink adapter, create the process-wide pool, and attach a
context binder to it.
"""

from __future__ import annotations

import logging

from failtrace.adapters import DiscardSink, RichConsoleSink, StderrSink, StdoutSink, UuidProvider
from failtrace.application.ports.sink import SinkPort
from failtrace.domain import BufferPool, ContextBinder

from ._settings import RuntimeSettings
from ._state import FailtraceRuntime

LOGGER = logging.getLogger(__name__)


def build_runtime(settings: RuntimeSettings) -> FailtraceRuntime:
    """Assemble the runtime from resolved settings."""

    sink = create_sink(settings)
    pool = BufferPool(
        sink=sink,
        id_provider=UuidProvider(),
        max_idle=settings.max_idle,
        diagnostic=settings.diagnostic_hook,
    )
    binder = ContextBinder(pool)
    LOGGER.debug("Composed failtrace runtime (sink=%s, max_idle=%s)", settings.sink_name, settings.max_idle)
    return FailtraceRuntime(settings=settings, sink=sink, pool=pool, binder=binder)


def create_sink(settings: RuntimeSettings) -> SinkPort:
    """Return the sink adapter named by ``settings.sink``."""

    if not isinstance(settings.sink, str):
        return settings.sink
    if settings.sink == "stdout":
        return StdoutSink()
    if settings.sink == "rich":
        return RichConsoleSink(force_color=settings.force_color, no_color=settings.no_color)
    if settings.sink == "discard":
        return DiscardSink()
    return StderrSink()


__all__ = ["build_runtime", "create_sink"]
