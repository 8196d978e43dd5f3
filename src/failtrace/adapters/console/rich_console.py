"""Rich-powered console sink implementing :class:`SinkPort`.

Purpose
-------
Colour flushed request lines by severity on interactive terminals while
keeping the wire text byte-for-byte identical to the plain sinks.

Contents
--------
* :data:`_STYLE_MAP` - default tag-to-style mapping.
* :class:`RichConsoleSink` - sink selected with ``FAILTRACE_SINK=rich``.

System Role
-----------
Human-facing alternative to :class:`~failtrace.adapters.sinks.StderrSink`.
Markup and highlighting are disabled so messages containing brackets are
printed verbatim.
"""

from __future__ import annotations

import re
from typing import Mapping

from rich.console import Console

from failtrace.application.ports.sink import SinkPort
from failtrace.domain.levels import Severity


#: Default Rich styles keyed by :class:`Severity`.
_STYLE_MAP: Mapping[Severity, str] = {
    Severity.DEBUG: "dim",
    Severity.INFO: "cyan",
    Severity.WARN: "yellow",
    Severity.ERROR: "red",
}

_LINE_RE = re.compile(r"^\[[^\]]*\] (?P<tag>[DIWE]): ")


class RichConsoleSink(SinkPort):
    """Print request lines through a Rich console with per-severity styles."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
        styles: Mapping[Severity | str, str] | None = None,
    ) -> None:
        if console is not None:
            self._console = console
        else:
            self._console = Console(stderr=True, force_terminal=force_color or None, no_color=no_color)
        self._no_color = no_color
        merged = dict(_STYLE_MAP)
        for key, value in (styles or {}).items():
            severity = Severity.from_name(key) if isinstance(key, str) else key
            merged[severity] = value
        self._style_map = merged

    @property
    def console(self) -> Console:
        return self._console

    def write(self, text: str) -> int:
        """Print ``text`` with the style of its severity tag.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True, width=120)
        >>> sink = RichConsoleSink(console=console)
        >>> sink.write("[X] W: disk [almost] full\\n")
        26
        >>> console.export_text()
        '[X] W: disk [almost] full\\n'
        """
        line = text[:-1] if text.endswith("\n") else text
        style = "" if self._no_color else self._style_for(line)
        self._console.print(line, style=style, markup=False, highlight=False, emoji=False, soft_wrap=True)
        return len(text)

    def _style_for(self, line: str) -> str:
        match = _LINE_RE.match(line)
        if match is None:
            return ""
        return self._style_map.get(Severity.from_tag(match.group("tag")), "")


__all__ = ["RichConsoleSink"]
