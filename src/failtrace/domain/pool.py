"""Process-wide reuse cache for :class:`RequestBuffer` storage.

Purpose
-------
Avoid allocating a new entry list for every request by keeping flushed
storage on an idle free list and handing it out again.

Contents
--------
* :class:`BufferPool` – lock-protected LIFO free list with optional cap.

System Role
-----------
The only shared mutable state of the engine. Many call chains acquire and
release concurrently; a :class:`threading.Lock` guards the free list and the
counters. Storage is reset by the flush path before it comes back, so
:meth:`BufferPool.acquire` does no hidden work. Every checkout gets its own
:class:`RequestBuffer` handle, and a handle lets go of the storage on its
first flush, so a stale handle cannot recycle a later session.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from .buffer import BufferStorage, DiagnosticHook, RequestBuffer

if TYPE_CHECKING:
    from failtrace.application.ports import IdProvider, SinkPort


LOGGER = logging.getLogger(__name__)


class BufferPool:
    """Hand out reset buffers and take their storage back after flush.

    Examples
    --------
    >>> from io import StringIO
    >>> from itertools import count
    >>> ids = (f"id-{n}" for n in count())
    >>> pool = BufferPool(sink=StringIO(), id_provider=lambda: next(ids))
    >>> buffer = pool.acquire()
    >>> storage = buffer.storage
    >>> buffer.identifier
    'id-0'
    >>> buffer.info("hello")
    >>> buffer.flush_if(None)
    >>> pool.idle_count, buffer.active
    (1, False)
    >>> again = pool.acquire()
    >>> again.storage is storage, again.identifier, len(again)
    (True, 'id-1', 0)
    """

    def __init__(
        self,
        *,
        sink: SinkPort,
        id_provider: IdProvider,
        max_idle: int | None = None,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        if max_idle is not None and max_idle < 0:
            raise ValueError("max_idle must be zero or positive")
        self._sink = sink
        self._id_provider = id_provider
        self._max_idle = max_idle
        self._diagnostic = diagnostic
        self._idle: list[BufferStorage] = []
        self._lock = threading.Lock()
        self._allocated = 0
        self._dropped = 0

    @property
    def sink(self) -> SinkPort:
        """Return the sink new buffers are bound to."""

        return self._sink

    @property
    def max_idle(self) -> int | None:
        """Return the idle cap; ``None`` means unbounded."""

        return self._max_idle

    @property
    def idle_count(self) -> int:
        """Return how many storage objects currently wait on the free list."""

        with self._lock:
            return len(self._idle)

    @property
    def allocated(self) -> int:
        """Return how many storage objects this pool has created so far."""

        with self._lock:
            return self._allocated

    @property
    def dropped(self) -> int:
        """Return how many released storage objects were discarded because of the cap."""

        with self._lock:
            return self._dropped

    def acquire(self) -> RequestBuffer:
        """Return a buffer over idle storage, allocating storage when none is idle."""

        storage: BufferStorage | None = None
        with self._lock:
            if self._idle:
                storage = self._idle.pop()
            else:
                self._allocated += 1
                allocated = self._allocated
        if storage is None:
            storage = BufferStorage(self._id_provider())
            LOGGER.debug("Allocated request buffer #%d", allocated)
        storage.checked_out = True
        return RequestBuffer(
            sink=self._sink,
            id_provider=self._id_provider,
            pool=self,
            storage=storage,
            diagnostic=self._diagnostic,
        )

    def release(self, storage: BufferStorage) -> None:
        """Put reset ``storage`` back on the free list.

        Reached only through :meth:`RequestBuffer.flush_if` and
        :meth:`RequestBuffer.flush`, which reset the storage first.
        """

        with self._lock:
            if not storage.checked_out:
                raise ValueError("storage is already back in the pool")
            storage.checked_out = False
            if self._max_idle is not None and len(self._idle) >= self._max_idle:
                self._dropped += 1
                dropped = True
            else:
                self._idle.append(storage)
                dropped = False
        if dropped:
            LOGGER.debug("Idle pool full (max_idle=%s); dropping request buffer", self._max_idle)


__all__ = ["BufferPool"]
