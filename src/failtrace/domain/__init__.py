"""Domain entities and services of the request buffer engine."""

from __future__ import annotations

from .buffer import NOOP_BUFFER, BufferStorage, DiscardSink, NoopBuffer, RequestBuffer, format_message
from .context import ContextBinder, bind, retrieve
from .entries import Entry
from .levels import Severity
from .pool import BufferPool

__all__ = [
    "BufferPool",
    "BufferStorage",
    "ContextBinder",
    "DiscardSink",
    "Entry",
    "NOOP_BUFFER",
    "NoopBuffer",
    "RequestBuffer",
    "Severity",
    "bind",
    "format_message",
    "retrieve",
]
