from __future__ import annotations

from io import StringIO
from typing import Any

import pytest

import failtrace
from failtrace import NOOP_BUFFER, bind, current, init, inspect_runtime, is_initialised, request_scope, retrieve, shutdown
from failtrace.adapters import DiscardSink, RichConsoleSink, StderrSink, StdoutSink
from failtrace.runtime import _state


def _validate(order: dict[str, Any]) -> None:
    log = current()
    log.debugf("validating order %s", order["id"])
    if not order.get("items"):
        raise ValueError("order has no items")
    log.info("order valid")


def test_request_scope_prints_trace_on_failure() -> None:
    sink = StringIO()
    init(sink=sink)

    with pytest.raises(ValueError):
        with request_scope() as log:
            log.debug("handling request")
            _validate({"id": 7})

    lines = sink.getvalue().splitlines()
    identifier = lines[0][1 : lines[0].index("]")]
    assert lines == [
        f"[{identifier}] D: handling request",
        f"[{identifier}] D: validating order 7",
        f"[{identifier}] E: order has no items",
    ]


def test_request_scope_is_silent_on_success() -> None:
    sink = StringIO()
    init(sink=sink)

    with request_scope() as log:
        log.debug("handling request")
        _validate({"id": 8, "items": ["book"]})

    assert sink.getvalue() == ""
    assert inspect_runtime().idle_buffers == 1


def test_current_outside_scope_is_noop() -> None:
    assert current() is NOOP_BUFFER


def test_accessors_compose_default_runtime_lazily() -> None:
    assert is_initialised() is False

    snapshot = inspect_runtime()

    assert is_initialised() is True
    assert snapshot.sink == "stderr"
    assert snapshot.allocated_buffers == 0
    assert isinstance(_state._STATE.sink, StderrSink)  # type: ignore[union-attr]


def test_default_sink_writes_to_stderr(capsys: pytest.CaptureFixture[str]) -> None:
    carrier = bind({"route": "/health"})
    log = retrieve(carrier)
    log.warn("slow dependency")

    log.flush_if(TimeoutError("upstream timed out"))

    lines = capsys.readouterr().err.splitlines()
    identifier = lines[0][1:37]
    assert lines == [f"[{identifier}] W: slow dependency", f"[{identifier}] E: upstream timed out"]


def test_explicit_carrier_round_trip() -> None:
    sink = StringIO()
    init(sink=sink)
    carrier = bind()

    retrieve(carrier).info("step one")
    retrieve(carrier).flush()

    assert sink.getvalue().endswith(" I: step one\n")
    assert retrieve({}) is NOOP_BUFFER


@pytest.mark.parametrize(
    "name, sink_type",
    [("stderr", StderrSink), ("stdout", StdoutSink), ("rich", RichConsoleSink), ("discard", DiscardSink)],
)
def test_named_sinks_are_composed(name: str, sink_type: type) -> None:
    init(sink=name)

    assert isinstance(_state._STATE.sink, sink_type)  # type: ignore[union-attr]
    assert inspect_runtime().sink == name


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FAILTRACE_SINK", "discard")
    monkeypatch.setenv("FAILTRACE_POOL_MAX_IDLE", "1")

    init(sink="stdout", max_idle=10)

    snapshot = inspect_runtime()
    assert snapshot.sink == "discard"
    assert snapshot.max_idle == 1


def test_pool_cap_is_reported_in_snapshot() -> None:
    init(sink="discard", max_idle=1)
    first = bind()
    second = bind()

    retrieve(first).flush_if(None)
    retrieve(second).flush_if(None)

    snapshot = inspect_runtime()
    assert snapshot.idle_buffers == 1
    assert snapshot.dropped_buffers == 1
    assert snapshot.allocated_buffers == 2


def test_diagnostic_hook_is_wired_through_init() -> None:
    reports: list[str] = []

    class Broken:
        def write(self, text: str) -> None:
            raise OSError("closed")

    init(sink=Broken(), diagnostic_hook=lambda name, payload: reports.append(name))

    with pytest.raises(RuntimeError):
        with request_scope() as log:
            log.debug("lost")
            raise RuntimeError("failed")

    assert reports == ["sink_write_failed", "sink_write_failed"]


def test_shutdown_drops_runtime() -> None:
    init(sink="discard")
    assert is_initialised() is True

    shutdown()

    assert is_initialised() is False


def test_package_surface_exports_public_api() -> None:
    for name in failtrace.__all__:
        assert hasattr(failtrace, name)
