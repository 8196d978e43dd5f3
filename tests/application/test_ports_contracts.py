from __future__ import annotations

from io import StringIO

from failtrace.adapters import DiscardSink, RichConsoleSink, StderrSink, StdoutSink, UuidProvider
from failtrace.application.ports import IdProvider, SinkPort


class _RecordingSink:
    def __init__(self) -> None:
        self.lines: list[str] = []

    def write(self, text: str) -> None:
        self.lines.append(text)


def test_plain_text_streams_satisfy_sink_port() -> None:
    assert isinstance(StringIO(), SinkPort)


def test_custom_objects_with_write_satisfy_sink_port() -> None:
    assert isinstance(_RecordingSink(), SinkPort)
    assert not isinstance(object(), SinkPort)


def test_bundled_sinks_satisfy_sink_port(record_console) -> None:
    for sink in (StderrSink(), StdoutSink(), DiscardSink(), RichConsoleSink(console=record_console)):
        assert isinstance(sink, SinkPort)


def test_id_provider_protocol_accepts_callables() -> None:
    assert isinstance(UuidProvider(), IdProvider)
    assert isinstance(lambda: "fixed", IdProvider)
