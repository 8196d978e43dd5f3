"""Request-scoped buffer that emits its entries only when asked to.

Purpose
-------
Accumulate :class:`~failtrace.domain.entries.Entry` objects for one logical
request and decide at the end of the request whether they reach the sink:
everything plus the error when the request failed, nothing when it succeeded.

Contents
--------
* :class:`BufferStorage` – the recycled part: entry list and the identifier
  prepared for the next session.
* :class:`RequestBuffer` – session handle over a storage object exposing
  append, ``flush_if``, ``flush`` and reset.
* :class:`NoopBuffer` / :data:`NOOP_BUFFER` – sentinel handed out when no
  session is bound.
* :class:`DiscardSink` – null sink used by the sentinel.

System Role
-----------
Core of the domain layer. The pool recycles storage objects and the context
binder hands session handles from caller to callee:

``acquire -> append* -> flush_if/flush -> reset storage -> back to the pool``

A pooled handle lets go of its storage on the first flush. Flushes and
appends through that handle afterwards do nothing, so a handle kept past its
session can never touch the storage once another session owns it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Callable, Optional

from .entries import Entry, render_line
from .levels import Severity

if TYPE_CHECKING:
    from failtrace.application.ports import IdProvider, SinkPort

    from .pool import BufferPool


LOGGER = logging.getLogger(__name__)

DiagnosticHook = Optional[Callable[[str, dict[str, Any]], None]]

NOOP_IDENTIFIER = "noop"


def format_message(template: str, args: tuple[Any, ...]) -> str:
    """Render ``template % args`` without ever raising.

    A single non-empty mapping argument is used for named placeholders, the
    same way :mod:`logging` treats it. Mismatched arguments fall back to the
    raw template followed by the argument tuple.

    Examples
    --------
    >>> format_message("user %s failed %d times", ("bob", 3))
    'user bob failed 3 times'
    >>> format_message("%(user)s", ({"user": "bob"},))
    'bob'
    >>> format_message("no placeholders", (1,))
    'no placeholders (1,)'
    >>> format_message("100%", ())
    '100%'
    """

    if not args:
        return template
    values: Any = args
    if len(args) == 1 and isinstance(args[0], Mapping) and args[0]:
        values = args[0]
    try:
        return template % values
    except Exception:  # noqa: BLE001 - formatting must never fail the caller
        try:
            return f"{template} {args!r}"
        except Exception:  # noqa: BLE001 - an argument with a broken __repr__
            return template


def describe_error(error: object) -> str:
    """Return the text of ``error`` for the trailing ``E`` line without raising.

    Examples
    --------
    >>> describe_error(ValueError("bad input"))
    'bad input'
    >>> class Unprintable(Exception):
    ...     def __str__(self):
    ...         raise RuntimeError("no text")
    >>> describe_error(Unprintable())
    'Unprintable()'
    """

    try:
        return str(error)
    except Exception:  # noqa: BLE001 - error rendering must never fail the flush
        try:
            return repr(error)
        except Exception:  # noqa: BLE001
            return f"<unprintable {type(error).__name__}>"


class DiscardSink:
    """Sink accepting every line and keeping nothing.

    Shared by the no-op sentinel and the ``discard`` sink setting.

    Examples
    --------
    >>> DiscardSink().write("[noop] D: ignored\\n")
    18
    """

    def write(self, text: str) -> int:
        return len(text)


class BufferStorage:
    """Recyclable storage behind a :class:`RequestBuffer` session.

    ``identifier`` is the value the next session will use; it is replaced
    every time the storage is reset.
    """

    __slots__ = ("entries", "identifier", "checked_out")

    def __init__(self, identifier: str) -> None:
        self.entries: list[Entry] = []
        self.identifier = identifier
        self.checked_out = False

    def reset(self, identifier: str) -> None:
        """Drop all entries in place and install ``identifier``."""
        self.entries.clear()
        self.identifier = identifier


class RequestBuffer:
    """Buffer log entries for one session and flush them conditionally.

    Parameters
    ----------
    sink:
        Destination receiving one line per :meth:`SinkPort.write` call.
    id_provider:
        Zero-argument callable producing a fresh session identifier on every
        reset.
    pool:
        Owning :class:`~failtrace.domain.pool.BufferPool`. A pooled handle
        hands ``storage`` back on its first flush and is finished afterwards.
        ``None`` keeps the buffer standalone: it resets after each flush and
        stays usable.
    storage:
        Storage checked out from ``pool``; a standalone buffer creates its own.
    diagnostic:
        Optional callback invoked as ``diagnostic(name, payload)`` when a
        sink write fails.

    Examples
    --------
    >>> from io import StringIO
    >>> out = StringIO()
    >>> buffer = RequestBuffer(sink=out, id_provider=lambda: "X")
    >>> buffer.debug("handling request")
    >>> buffer.flush_if(None)
    >>> out.getvalue()
    ''
    >>> buffer.debug("inside b")
    >>> buffer.flush_if(RuntimeError("boom"))
    >>> print(out.getvalue(), end="")
    [X] D: inside b
    [X] E: boom
    """

    def __init__(
        self,
        *,
        sink: SinkPort,
        id_provider: IdProvider,
        pool: BufferPool | None = None,
        storage: BufferStorage | None = None,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        if pool is not None and storage is None:
            raise ValueError("pooled buffers need the storage checked out from their pool")
        self._sink = sink
        self._id_provider = id_provider
        self._pool = pool
        self._diagnostic = diagnostic
        self._storage: BufferStorage | None = storage if storage is not None else BufferStorage(id_provider())
        self._identifier = self._storage.identifier
        self._write_failures = 0

    @property
    def identifier(self) -> str:
        """Return the identifier of this session; it survives the final flush."""

        return self._identifier

    @property
    def entries(self) -> tuple[Entry, ...]:
        """Return a snapshot of the buffered entries in append order."""

        if self._storage is None:
            return ()
        return tuple(self._storage.entries)

    @property
    def storage(self) -> BufferStorage | None:
        """Return the storage this handle holds, ``None`` once a pooled session ended."""

        return self._storage

    @property
    def sink(self) -> SinkPort:
        """Return the destination used by the flush operations."""

        return self._sink

    @property
    def write_failures(self) -> int:
        """Return how many sink writes raised through this handle."""

        return self._write_failures

    @property
    def active(self) -> bool:
        """Return ``True`` while the handle still owns its storage."""

        return self._storage is not None

    def __len__(self) -> int:
        return len(self._storage.entries) if self._storage is not None else 0

    def append(self, severity: Severity, message: str) -> None:
        """Append an entry to the tail of the buffer.

        Appends through a handle whose session already ended are dropped.
        """
        if self._storage is None:
            return
        self._storage.entries.append(Entry(severity, message))

    def debug(self, message: str) -> None:
        self.append(Severity.DEBUG, message)

    def info(self, message: str) -> None:
        self.append(Severity.INFO, message)

    def warn(self, message: str) -> None:
        self.append(Severity.WARN, message)

    def error(self, message: str) -> None:
        self.append(Severity.ERROR, message)

    def debugf(self, template: str, *args: Any) -> None:
        """Append a ``DEBUG`` entry rendered with ``%``-style formatting."""
        self.append(Severity.DEBUG, format_message(template, args))

    def infof(self, template: str, *args: Any) -> None:
        """Append an ``INFO`` entry rendered with ``%``-style formatting."""
        self.append(Severity.INFO, format_message(template, args))

    def warnf(self, template: str, *args: Any) -> None:
        """Append a ``WARN`` entry rendered with ``%``-style formatting."""
        self.append(Severity.WARN, format_message(template, args))

    def errorf(self, template: str, *args: Any) -> None:
        """Append an ``ERROR`` entry rendered with ``%``-style formatting."""
        self.append(Severity.ERROR, format_message(template, args))

    def flush_if(self, error: object | None) -> None:
        """Emit the session only when ``error`` is present, then recycle.

        With ``error`` set, every entry is written in append order followed by
        ``[<identifier>] E: <error text>``. With ``error`` being ``None``
        nothing is written. In both cases the storage is reset and returned to
        the pool. Calling this again through the same handle is a no-op.
        """

        if self._storage is None:
            return
        if error is not None:
            self._write_entries()
            self._write(render_line(self._identifier, Severity.ERROR.tag, describe_error(error)))
        self._recycle()

    def flush(self) -> None:
        """Write every buffered entry unconditionally, then recycle."""

        if self._storage is None:
            return
        self._write_entries()
        self._recycle()

    def reset(self) -> RequestBuffer:
        """Drop all entries in place and draw a fresh identifier."""

        if self._storage is not None:
            self._storage.reset(self._id_provider())
            self._identifier = self._storage.identifier
        return self

    def _write_entries(self) -> None:
        if self._storage is None:
            return
        identifier = self._identifier
        for entry in self._storage.entries:
            self._write(entry.render(identifier))

    def _write(self, line: str) -> None:
        """Write one line, containing any failure raised by the sink."""

        try:
            self._sink.write(line)
        except Exception as exc:  # noqa: BLE001 - sink failures never reach the caller
            self._write_failures += 1
            self._emit_diagnostic(
                "sink_write_failed",
                {"identifier": self._identifier, "line": line, "exception": repr(exc)},
            )

    def _recycle(self) -> None:
        storage = self._storage
        if storage is None:
            return
        if self._pool is None:
            self.reset()
            return
        # The session identifier stays on the handle; the storage moves on.
        storage.reset(self._id_provider())
        self._storage = None
        self._pool.release(storage)

    def _emit_diagnostic(self, name: str, payload: dict[str, Any]) -> None:
        """Invoke the diagnostic hook while guarding against callback failures."""

        if self._diagnostic is None:
            return
        try:
            self._diagnostic(name, payload)
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Diagnostic hook raised while reporting %s", name, exc_info=diagnostic_exc)


class NoopBuffer(RequestBuffer):
    """Sentinel buffer returned when no session is bound.

    It never stores entries, never writes, and never enters a pool, so a
    single shared instance is safe to hand to any number of call chains.
    """

    def __init__(self) -> None:
        super().__init__(sink=DiscardSink(), id_provider=lambda: NOOP_IDENTIFIER)

    def append(self, severity: Severity, message: str) -> None:
        return None

    def flush_if(self, error: object | None) -> None:
        return None

    def flush(self) -> None:
        return None


NOOP_BUFFER = NoopBuffer()


__all__ = [
    "BufferStorage",
    "DiagnosticHook",
    "DiscardSink",
    "NOOP_BUFFER",
    "NOOP_IDENTIFIER",
    "NoopBuffer",
    "RequestBuffer",
    "describe_error",
    "format_message",
]
