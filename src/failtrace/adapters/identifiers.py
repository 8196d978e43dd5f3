"""UUID-backed identifier provider."""

from __future__ import annotations

from uuid import uuid4

from failtrace.application.ports.identifiers import IdProvider


class UuidProvider(IdProvider):
    """Generate random UUID4 identifiers in canonical hyphenated form."""

    def __call__(self) -> str:
        """Return a new UUID4 string such as ``"1b4e28ba-2fa1-11d2-883f-0016d3cca427"``."""
        return str(uuid4())


__all__ = ["UuidProvider"]
