"""
Unit tests for output sinks and the sink factory.

HTTP sinks are exercised against httpx.MockTransport.
"""

import io
from pathlib import Path

import httpx
import pytest

from aam_cdf_pipeline.storage import (
    FileSink,
    HttpSink,
    SinkWriteError,
    StdoutSink,
    StreamSink,
    detect_sink_type,
    get_sink,
    list_available_sinks,
)


class _RecordingHandler:
    """MockTransport handler keeping every request body."""

    def __init__(self, status_code: int = 200, text: str = ""):
        self.status_code = status_code
        self.text = text
        self.bodies: list[bytes] = []
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.bodies.append(request.read())
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.text)


# =============================================================================
# File and Stream Sinks
# =============================================================================


class TestStreamSink:
    """Tests for StreamSink class."""

    def test_write_all(self) -> None:
        stream = io.BytesIO()
        sink = StreamSink(stream)

        total = sink.write_all([b"a\n", b"bc\n"])

        assert total == 5
        assert stream.getvalue() == b"a\nbc\n"

    def test_close_leaves_stream_open_by_default(self) -> None:
        stream = io.BytesIO()
        StreamSink(stream).close()
        assert not stream.closed

    def test_close_stream_when_owned(self) -> None:
        stream = io.BytesIO()
        sink = StreamSink(stream, close_stream=True)
        sink.close()
        sink.close()
        assert stream.closed

    def test_write_to_closed_stream_raises(self) -> None:
        stream = io.BytesIO()
        stream.close()
        with pytest.raises(SinkWriteError):
            StreamSink(stream).write(b"x")

    def test_destination_without_name(self) -> None:
        assert StreamSink(io.BytesIO()).destination == "<stream>"


class TestFileSink:
    """Tests for FileSink class."""

    def test_writes_file(self, tmp_path: Path) -> None:
        path = tmp_path / "out.ndjson"

        with FileSink(path) as sink:
            sink.write_all([b'{"a":1}\n'])

        assert path.read_bytes() == b'{"a":1}\n'

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "out.ndjson"
        with FileSink(path) as sink:
            sink.write(b"x\n")
        assert path.read_bytes() == b"x\n"

    def test_truncates_by_default(self, tmp_path: Path) -> None:
        path = tmp_path / "out.ndjson"
        path.write_bytes(b"old\n")
        with FileSink(path) as sink:
            sink.write(b"new\n")
        assert path.read_bytes() == b"new\n"

    def test_append(self, tmp_path: Path) -> None:
        path = tmp_path / "out.ndjson"
        path.write_bytes(b"old\n")
        with FileSink(path, append=True) as sink:
            sink.write(b"new\n")
        assert path.read_bytes() == b"old\nnew\n"

    def test_write_after_close_raises(self, tmp_path: Path) -> None:
        sink = FileSink(tmp_path / "out.ndjson")
        sink.close()
        with pytest.raises(SinkWriteError) as exc_info:
            sink.write(b"x")
        assert exc_info.value.destination == str(tmp_path / "out.ndjson")

    def test_cannot_create(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x")
        with pytest.raises(SinkWriteError):
            FileSink(blocker / "out.ndjson")

    def test_sink_type(self, tmp_path: Path) -> None:
        with FileSink(tmp_path / "out.ndjson") as sink:
            assert sink.sink_type == "file"


class TestStdoutSink:
    """Tests for StdoutSink class."""

    def test_writes_and_stays_open(self) -> None:
        stream = io.BytesIO()
        sink = StdoutSink(stream)

        sink.write_all([b"line\n"])
        sink.close()

        assert stream.getvalue() == b"line\n"
        assert not stream.closed
        assert sink.destination == "<stdout>"


# =============================================================================
# HTTP Sink
# =============================================================================


class TestHttpSink:
    """Tests for HttpSink class."""

    def test_write_all_single_request(self) -> None:
        handler = _RecordingHandler()
        sink = HttpSink(
            "https://ingest.example.com/cdf", transport=httpx.MockTransport(handler)
        )

        total = sink.write_all(iter([b'{"a":1}\n', b'{"a":2}\n']))
        sink.close()

        assert total == 16
        assert handler.bodies == [b'{"a":1}\n{"a":2}\n']
        assert sink.requests_sent == 1

    def test_content_type_and_headers(self) -> None:
        handler = _RecordingHandler()
        sink = HttpSink(
            "https://ingest.example.com/cdf",
            headers={"Authorization": "Bearer token"},
            transport=httpx.MockTransport(handler),
        )

        sink.write_all([b"{}\n"])
        sink.close()

        request = handler.requests[0]
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/x-ndjson"
        assert request.headers["Authorization"] == "Bearer token"

    def test_error_status_raises(self) -> None:
        handler = _RecordingHandler(status_code=500, text="backend down")
        sink = HttpSink(
            "https://ingest.example.com/cdf", transport=httpx.MockTransport(handler)
        )

        with pytest.raises(SinkWriteError) as exc_info:
            sink.write_all([b"{}\n"])
        sink.close()

        assert "HTTP 500" in str(exc_info.value)
        assert "backend down" in str(exc_info.value)

    def test_transport_error_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        sink = HttpSink(
            "https://ingest.example.com/cdf", transport=httpx.MockTransport(handler)
        )
        with pytest.raises(SinkWriteError) as exc_info:
            sink.write_all([b"{}\n"])
        sink.close()
        assert "HTTP request failed" in str(exc_info.value)

    def test_write_batches(self) -> None:
        handler = _RecordingHandler()
        sink = HttpSink(
            "https://ingest.example.com/cdf",
            batch_bytes=10,
            transport=httpx.MockTransport(handler),
        )

        sink.write(b"12345\n")
        assert handler.bodies == []
        sink.write(b"67890\n")
        assert handler.bodies == [b"12345\n67890\n"]
        sink.write(b"tail\n")
        sink.close()

        assert handler.bodies == [b"12345\n67890\n", b"tail\n"]

    def test_flush_empty_sends_nothing(self) -> None:
        handler = _RecordingHandler()
        sink = HttpSink(
            "https://ingest.example.com/cdf", transport=httpx.MockTransport(handler)
        )
        sink.flush()
        sink.close()
        assert handler.bodies == []


# =============================================================================
# Factory
# =============================================================================


class TestSinkFactory:
    """Tests for detect_sink_type and get_sink."""

    @pytest.mark.parametrize(
        "destination,expected",
        [
            ("-", "stdout"),
            ("http://localhost:8080/ingest", "http"),
            ("HTTPS://ingest.example.com", "http"),
            ("out/feed.ndjson", "file"),
            ("/tmp/feed.ndjson", "file"),
        ],
    )
    def test_detect_sink_type(self, destination, expected) -> None:
        assert detect_sink_type(destination) == expected

    def test_get_file_sink(self, tmp_path: Path) -> None:
        sink = get_sink(str(tmp_path / "out.ndjson"))
        try:
            assert isinstance(sink, FileSink)
        finally:
            sink.close()

    def test_get_stdout_sink(self) -> None:
        sink = get_sink("-")
        assert isinstance(sink, StdoutSink)

    def test_get_http_sink(self) -> None:
        handler = _RecordingHandler()
        sink = get_sink(
            "https://ingest.example.com/cdf",
            timeout=5,
            transport=httpx.MockTransport(handler),
        )
        try:
            assert isinstance(sink, HttpSink)
        finally:
            sink.close()

    def test_unknown_sink_type(self) -> None:
        with pytest.raises(SinkWriteError) as exc_info:
            get_sink("s3://bucket/key", sink_type="s3")
        assert "Unknown sink type" in str(exc_info.value)

    def test_list_available_sinks(self) -> None:
        assert set(list_available_sinks()) >= {"file", "stdout", "http"}
