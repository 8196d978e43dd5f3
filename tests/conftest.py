from __future__ import annotations

from collections.abc import Callable, Iterator
from io import StringIO
from itertools import count

import pytest
from rich.console import Console

import failtrace
from failtrace.domain import BufferPool


@pytest.fixture
def record_console() -> Console:
    """Rich console writing into memory with recording enabled."""

    return Console(file=StringIO(), record=True, width=160, force_terminal=False, color_system=None)


@pytest.fixture
def sequential_ids() -> Callable[[], str]:
    """Identifier provider yielding ``req-0``, ``req-1``, ..."""

    counter = count()
    return lambda: f"req-{next(counter)}"


@pytest.fixture
def sink() -> StringIO:
    return StringIO()


@pytest.fixture
def pool(sink: StringIO, sequential_ids: Callable[[], str]) -> BufferPool:
    return BufferPool(sink=sink, id_provider=sequential_ids)


@pytest.fixture(autouse=True)
def reset_runtime() -> Iterator[None]:
    failtrace.shutdown()
    try:
        yield
    finally:
        failtrace.shutdown()
