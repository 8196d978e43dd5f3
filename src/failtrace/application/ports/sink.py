"""Sink port describing the output destination of flushed buffers.

Purpose
-------
Define the narrow write contract the request buffer depends on so that any
text stream (``sys.stderr``, :class:`io.StringIO`, an open file) or a custom
adapter can receive flushed lines.

System Role
-----------
Outer boundary of the engine. A write signals failure by raising; the buffer
contains such failures and keeps writing the remaining lines.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SinkPort(Protocol):
    """Accept one newline-terminated output line per call."""

    def write(self, text: str) -> Any:
        """Write ``text``; raise to report failure."""


__all__ = ["SinkPort"]
