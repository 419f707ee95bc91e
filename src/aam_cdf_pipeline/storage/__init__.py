"""
Output sinks for NDJSON produced by the pipeline.

Usage:
    from aam_cdf_pipeline.storage import get_sink

    # Local file
    sink = get_sink("out/cdf.ndjson")

    # HTTP endpoint accepting application/x-ndjson
    sink = get_sink("https://ingest.example.com/cdf", timeout=30)

    # Use as context manager
    with get_sink("-") as sink:
        sink.write_all(chunks)
"""

from .base import OutputSink, SinkWriteError
from .factory import detect_sink_type, get_sink, list_available_sinks, register_sink
from .file_sink import FileSink, StdoutSink, StreamSink
from .http_sink import HttpSink

__all__ = [
    # Base class and exception
    "OutputSink",
    "SinkWriteError",
    # Implementations
    "FileSink",
    "StreamSink",
    "StdoutSink",
    "HttpSink",
    # Factory functions
    "get_sink",
    "detect_sink_type",
    "register_sink",
    "list_available_sinks",
]
