"""Port for session identifier generation."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IdProvider(Protocol):
    """Generate statistically unique identifiers for buffer sessions."""

    def __call__(self) -> str: ...


__all__ = ["IdProvider"]
