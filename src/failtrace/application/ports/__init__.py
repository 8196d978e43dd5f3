"""Protocols describing the collaborators of the request buffer."""

from __future__ import annotations

from .identifiers import IdProvider
from .sink import SinkPort

__all__ = ["IdProvider", "SinkPort"]
