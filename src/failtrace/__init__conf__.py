"""Static package metadata surfaced by the CLI ``info`` command."""

from __future__ import annotations

from typing import Any, Callable

name = "failtrace"
title = "Request-scoped log buffer that only speaks up when a request fails"
version = "0.1.0"
homepage = "https://github.com/IbrahimShahzad/failtrace"
author = "Ibrahim Shahzad"
shell_command = "failtrace"


def print_info(*, writer: Callable[[str], Any] | None = None) -> None:
    """Write the metadata banner, one line per ``writer`` call.

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for failtrace:\\n'
    """

    emit = writer if writer is not None else (lambda text: print(text, end=""))
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    emit(f"Info for {name}:\n")
    emit("\n")
    for label, value in fields:
        emit(f"    {label:<{pad}} = {value}\n")
