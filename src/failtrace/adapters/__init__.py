"""Adapters implementing the sink and identifier ports."""

from __future__ import annotations

from .console.rich_console import RichConsoleSink
from .identifiers import UuidProvider
from .sinks import DiscardSink, StderrSink, StdoutSink

__all__ = ["DiscardSink", "RichConsoleSink", "StderrSink", "StdoutSink", "UuidProvider"]
