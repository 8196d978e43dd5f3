"""Request-scoped log buffer that writes only when a request fails.

Typical use::

    import failtrace

    def handle_request():
        with failtrace.request_scope() as log:
            log.debug("handling request")
            do_work()            # callees use failtrace.current()

An exception escaping the block prints every buffered line plus the error,
tagged with the session identifier; a clean exit prints nothing.
"""

from __future__ import annotations

from .domain import BufferPool, ContextBinder, Entry, NOOP_BUFFER, RequestBuffer, Severity
from .runtime import (
    RuntimeSnapshot,
    bind,
    current,
    init,
    inspect_runtime,
    is_initialised,
    request_scope,
    retrieve,
    shutdown,
)

__all__ = [
    "BufferPool",
    "ContextBinder",
    "Entry",
    "NOOP_BUFFER",
    "RequestBuffer",
    "RuntimeSnapshot",
    "Severity",
    "bind",
    "current",
    "init",
    "inspect_runtime",
    "is_initialised",
    "request_scope",
    "retrieve",
    "shutdown",
]
