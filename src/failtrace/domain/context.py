"""Hand a request buffer from caller to callee.

Purpose
-------
Attach a pooled :class:`RequestBuffer` to whatever travels down the call
chain and find it again further down, falling back to the no-op sentinel when
nothing was attached.

Contents
--------
* :func:`bind` / :func:`retrieve` – explicit carriers: any mapping passed
  along as an argument.
* :class:`ContextBinder` – ambient carrier built on :mod:`contextvars`; each
  thread and each asyncio task sees its own binding.

System Role
-----------
Glue between the pool and application code. Retrieval never fails: unbound
call sites get :data:`~failtrace.domain.buffer.NOOP_BUFFER`, whose writes go
nowhere.
"""

from __future__ import annotations

import contextvars
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from types import MappingProxyType
from typing import Any

from .buffer import NOOP_BUFFER, RequestBuffer
from .pool import BufferPool


class _BufferKey:
    """Private carrier key; no caller can construct an equal one."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<failtrace request buffer>"


_BUFFER_KEY = _BufferKey()


def bind(carrier: Mapping[Any, Any] | None, pool: BufferPool) -> Mapping[Any, Any]:
    """Return a read-only copy of ``carrier`` carrying a freshly acquired buffer.

    The original carrier is left untouched.

    Examples
    --------
    >>> from io import StringIO
    >>> pool = BufferPool(sink=StringIO(), id_provider=lambda: "req-1")
    >>> carrier = bind({"user": "bob"}, pool)
    >>> carrier["user"], retrieve(carrier).identifier
    ('bob', 'req-1')
    >>> retrieve({"user": "bob"}).identifier
    'noop'
    """

    derived = dict(carrier) if carrier else {}
    derived[_BUFFER_KEY] = pool.acquire()
    return MappingProxyType(derived)


def retrieve(carrier: Mapping[Any, Any] | None) -> RequestBuffer:
    """Return the buffer attached to ``carrier`` or the no-op sentinel."""

    if carrier is None:
        return NOOP_BUFFER
    buffer = carrier.get(_BUFFER_KEY)
    if isinstance(buffer, RequestBuffer):
        return buffer
    return NOOP_BUFFER


class ContextBinder:
    """Manage the buffer bound to the current execution flow."""

    _buffer_var: contextvars.ContextVar[RequestBuffer | None]

    def __init__(self, pool: BufferPool) -> None:
        self._pool = pool
        self._buffer_var = contextvars.ContextVar("failtrace_request_buffer", default=None)

    @property
    def pool(self) -> BufferPool:
        return self._pool

    @contextmanager
    def bind(self) -> Iterator[RequestBuffer]:
        """Bind a fresh buffer to the current scope and flush it on exit.

        An exception escaping the block is passed to
        :meth:`RequestBuffer.flush_if` and re-raised; a clean exit flushes
        with ``None`` so nothing is written. The previous binding is restored
        either way.
        """

        buffer = self._pool.acquire()
        token = self._buffer_var.set(buffer)
        try:
            yield buffer
        except BaseException as exc:
            buffer.flush_if(exc)
            raise
        else:
            buffer.flush_if(None)
        finally:
            self._buffer_var.reset(token)

    def current(self) -> RequestBuffer:
        """Return the buffer bound to the current scope, or the sentinel."""

        buffer = self._buffer_var.get()
        return buffer if buffer is not None else NOOP_BUFFER

    def is_bound(self) -> bool:
        """Return ``True`` when a buffer is bound to the current scope."""

        return self._buffer_var.get() is not None


__all__ = ["ContextBinder", "bind", "retrieve"]
