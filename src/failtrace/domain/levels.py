"""Severity labels attached to buffered entries.

Purpose
-------
Provide the closed set of severities a request buffer understands together
with the single-character wire tags written in front of every emitted line.

Contents
--------
* :class:`Severity` enum with tag lookup helpers.

System Role
-----------
Leaf of the domain layer: entries carry a :class:`Severity`, the buffer renders
its :attr:`Severity.tag`, and the Rich console sink keys its styles on it.
Severities are labels only; nothing in the package filters on them.
"""

from __future__ import annotations

from enum import Enum


class Severity(Enum):
    """Enumerated severities; the value is the wire tag."""

    DEBUG = "D"
    INFO = "I"
    WARN = "W"
    ERROR = "E"

    @property
    def tag(self) -> str:
        """Return the single-character tag used in the output line."""

        return self.value

    @classmethod
    def from_name(cls, name: str) -> "Severity":
        normalized = name.strip().upper()
        if normalized == "WARNING":
            normalized = "WARN"
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown severity: {name!r}") from exc

    @classmethod
    def from_tag(cls, tag: str) -> "Severity":
        """Translate a wire tag (``"D"``, ``"I"``, ``"W"``, ``"E"``) back into a member."""
        try:
            return cls(tag)
        except ValueError as exc:
            raise ValueError(f"Unknown severity tag: {tag!r}") from exc


__all__ = ["Severity"]
