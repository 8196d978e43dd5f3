"""Immutable buffered log entry."""

from __future__ import annotations

from dataclasses import dataclass

from .levels import Severity


@dataclass(slots=True, frozen=True)
class Entry:
    """A single ``(severity, message)`` pair captured by a request buffer.

    Any string is accepted as ``message``, including the empty string.
    """

    severity: Severity
    message: str

    def render(self, identifier: str) -> str:
        """Return the newline-terminated output line for ``identifier``.

        Examples
        --------
        >>> Entry(Severity.DEBUG, "inside a").render("X")
        '[X] D: inside a\\n'
        """

        return render_line(identifier, self.severity.tag, self.message)


def render_line(identifier: str, tag: str, message: str) -> str:
    """Format one wire line: ``[<identifier>] <TAG>: <message>``."""
    return f"[{identifier}] {tag}: {message}\n"


__all__ = ["Entry", "render_line"]
