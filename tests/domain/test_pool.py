from __future__ import annotations

import threading
from io import StringIO

import pytest

from failtrace.adapters import DiscardSink, UuidProvider
from failtrace.demo import run_stress
from failtrace.domain.pool import BufferPool


def test_acquire_allocates_when_idle_set_is_empty(pool: BufferPool) -> None:
    first = pool.acquire()
    second = pool.acquire()

    assert first is not second
    assert pool.allocated == 2
    assert pool.idle_count == 0
    assert first.active and second.active


def test_acquired_buffers_start_in_reset_state(pool: BufferPool) -> None:
    buffer = pool.acquire()

    assert buffer.entries == ()
    assert buffer.identifier == "req-0"


@pytest.mark.parametrize("error", [None, RuntimeError("boom")])
def test_flush_if_returns_storage_with_cleared_entries_and_new_identifier(pool: BufferPool, error: Exception | None) -> None:
    buffer = pool.acquire()
    storage = buffer.storage
    previous_identifier = buffer.identifier
    buffer.debug("handling request")

    buffer.flush_if(error)

    assert pool.idle_count == 1
    again = pool.acquire()
    assert again.storage is storage
    assert again.entries == ()
    assert again.identifier != previous_identifier


def test_flush_returns_storage_to_pool(pool: BufferPool, sink: StringIO) -> None:
    buffer = pool.acquire()
    buffer.info("kept")

    buffer.flush()

    assert sink.getvalue() == "[req-0] I: kept\n"
    assert pool.idle_count == 1


def test_reuse_is_lifo(pool: BufferPool) -> None:
    first = pool.acquire()
    second = pool.acquire()
    first_storage, second_storage = first.storage, second.storage
    first.flush_if(None)
    second.flush_if(None)

    assert pool.acquire().storage is second_storage
    assert pool.acquire().storage is first_storage
    assert pool.allocated == 2


def test_max_idle_drops_surplus_buffers(sink: StringIO) -> None:
    pool = BufferPool(sink=sink, id_provider=UuidProvider(), max_idle=1)
    buffers = [pool.acquire() for _ in range(3)]

    for buffer in buffers:
        buffer.flush_if(None)

    assert pool.idle_count == 1
    assert pool.dropped == 2


def test_negative_max_idle_is_rejected(sink: StringIO) -> None:
    with pytest.raises(ValueError, match="max_idle"):
        BufferPool(sink=sink, id_provider=UuidProvider(), max_idle=-1)


def test_release_rejects_storage_already_idle(pool: BufferPool) -> None:
    buffer = pool.acquire()
    storage = buffer.storage
    buffer.flush_if(None)

    with pytest.raises(ValueError, match="already back in the pool"):
        pool.release(storage)
    assert pool.idle_count == 1


def test_each_checkout_gets_its_own_handle(pool: BufferPool) -> None:
    buffer = pool.acquire()
    storage = buffer.storage
    buffer.flush_if(None)

    again = pool.acquire()

    assert again is not buffer
    assert again.storage is storage
    assert buffer.active is False
    assert buffer.storage is None
    assert buffer.identifier == "req-0"
    assert again.identifier == "req-1"


def test_concurrent_cycles_never_share_identifiers() -> None:
    pool = BufferPool(sink=DiscardSink(), id_provider=UuidProvider())

    report = run_stress(pool, workers=8, cycles=250)

    assert report.cycles == 2000
    assert report.collisions == 0
    assert report.allocated <= 8
    assert report.idle == report.allocated


def test_concurrent_holders_see_distinct_buffers() -> None:
    pool = BufferPool(sink=DiscardSink(), id_provider=UuidProvider())
    workers = 16
    barrier = threading.Barrier(workers)
    held: list[tuple[int, str]] = []
    lock = threading.Lock()

    def worker() -> None:
        buffer = pool.acquire()
        barrier.wait()
        with lock:
            held.append((id(buffer.storage), buffer.identifier))
        barrier.wait()
        buffer.flush_if(None)

    threads = [threading.Thread(target=worker) for _ in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert len({object_id for object_id, _ in held}) == workers
    assert len({identifier for _, identifier in held}) == workers
    assert pool.idle_count == workers


def test_run_stress_validates_arguments() -> None:
    pool = BufferPool(sink=DiscardSink(), id_provider=UuidProvider())

    with pytest.raises(ValueError, match="positive"):
        run_stress(pool, workers=0, cycles=1)
