"""Plain text sinks for flushed request buffers.

Purpose
-------
Provide the default output destinations: the process standard streams and a
discarding sink.

Contents
--------
* :class:`StderrSink` – default sink; resolves ``sys.stderr`` on every write.
* :class:`StdoutSink` – same for ``sys.stdout``.
* :class:`DiscardSink` – accepts and drops every line. Defined next to the
  no-op sentinel in :mod:`failtrace.domain.buffer`, which already needs it,
  and re-exported here with the other named sinks.

System Role
-----------
Selected by name through ``FAILTRACE_SINK`` or :func:`failtrace.init`. Any
object with a ``write(str)`` method can be used instead.
"""

from __future__ import annotations

import sys

from failtrace.application.ports.sink import SinkPort
from failtrace.domain.buffer import DiscardSink


class StderrSink(SinkPort):
    """Write to whatever ``sys.stderr`` is at the time of the write.

    Looking the stream up lazily keeps redirections (``contextlib.redirect_stderr``,
    pytest's ``capsys``) effective for long-lived pools.
    """

    def write(self, text: str) -> int:
        return sys.stderr.write(text)


class StdoutSink(SinkPort):
    """Write to whatever ``sys.stdout`` is at the time of the write."""

    def write(self, text: str) -> int:
        return sys.stdout.write(text)


__all__ = ["DiscardSink", "StderrSink", "StdoutSink"]
