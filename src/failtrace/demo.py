"""Runnable walkthroughs backing the ``demo`` and ``stress`` CLI commands.

Purpose
-------
Show the intended call pattern end to end: a handler binds a buffer into the
carrier, callees log through the same buffer, and only the failing path
produces output. The stress routine exercises the pool from many threads.

Contents
--------
* :func:`handle` – entry of the ``handle -> a -> b`` example chain.
* :func:`run_stress` – concurrent acquire/flush cycles with collision check.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from .domain import BufferPool
from . import runtime


class DemoError(RuntimeError):
    """Failure raised by the example chain when asked to fail."""


def handle(*, fail: bool) -> None:
    """Run the example request; prints the buffered trace only when ``fail`` is set."""

    carrier = runtime.bind()
    log = runtime.retrieve(carrier)
    log.debug("handling request")
    _a(carrier, fail=fail)


def _a(carrier: Mapping[Any, Any], *, fail: bool) -> None:
    log = runtime.retrieve(carrier)
    try:
        log.debug("inside a")
        _b(carrier, fail=fail)
    finally:
        log.flush_if(None)


def _b(carrier: Mapping[Any, Any], *, fail: bool) -> None:
    log = runtime.retrieve(carrier)
    try:
        log.debug("inside b")
        if fail:
            log.flush_if(DemoError("an error occurred in b"))
            return
    finally:
        log.flush_if(None)


@dataclass(frozen=True)
class StressReport:
    """Outcome of :func:`run_stress`."""

    cycles: int
    collisions: int
    allocated: int
    idle: int


def run_stress(pool: BufferPool, *, workers: int, cycles: int) -> StressReport:
    """Acquire and flush ``cycles`` buffers per worker, checking identifier overlap.

    Every identifier held at the same time by two buffers counts as a
    collision.
    """

    if workers <= 0 or cycles <= 0:
        raise ValueError("workers and cycles must be positive")
    held: set[str] = set()
    lock = threading.Lock()
    collisions = 0

    def worker(index: int) -> None:
        nonlocal collisions
        for cycle in range(cycles):
            buffer = pool.acquire()
            identifier = buffer.identifier
            with lock:
                if identifier in held:
                    collisions += 1
                held.add(identifier)
            buffer.debugf("worker %d cycle %d", index, cycle)
            with lock:
                held.discard(identifier)
            buffer.flush_if(None)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        for future in [executor.submit(worker, index) for index in range(workers)]:
            future.result()

    return StressReport(
        cycles=workers * cycles,
        collisions=collisions,
        allocated=pool.allocated,
        idle=pool.idle_count,
    )


__all__ = ["DemoError", "StressReport", "handle", "run_stress"]
