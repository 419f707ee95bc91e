"""
Output sink factory.

Maps a destination string to a sink: "-" for standard output, http(s)
URLs for the HTTP sink, anything else for a local file.
"""

import logging
from typing import Optional

from .base import OutputSink, SinkWriteError

logger = logging.getLogger(__name__)

# Registry of available sinks
_SINK_REGISTRY: dict[str, type[OutputSink]] = {}


def register_sink(sink_type: str, sink_class: type[OutputSink]) -> None:
    """
    Register an output sink class.

    Args:
        sink_type: Sink identifier (e.g., 'file')
        sink_class: Class implementing OutputSink interface
    """
    _SINK_REGISTRY[sink_type.lower()] = sink_class
    logger.debug(f"Registered output sink: {sink_type}")


def detect_sink_type(destination: str) -> str:
    """
    Infer the sink type from a destination string.

    Args:
        destination: "-", an http(s) URL or a file path

    Returns:
        Sink type identifier ('stdout', 'http' or 'file')
    """
    if destination == "-":
        return "stdout"
    if destination.lower().startswith(("http://", "https://")):
        return "http"
    return "file"


def get_sink(
    destination: str,
    sink_type: Optional[str] = None,
    **kwargs,
) -> OutputSink:
    """
    Get an output sink for a destination.

    Args:
        destination: "-", an http(s) URL or a file path
        sink_type: Explicit sink type. Detected from destination if None.
        **kwargs: Additional arguments passed to the sink constructor.
                  For http: timeout, headers, batch_bytes, transport

    Returns:
        Ready-to-use OutputSink instance.

    Raises:
        SinkWriteError: If the sink type is unknown or the sink cannot
            be created.

    Examples:
        sink = get_sink("out/logs.ndjson")
        sink = get_sink("https://ingest.example.com/cdf", timeout=30)
    """
    sink_type = (sink_type or detect_sink_type(destination)).lower()

    if sink_type not in _SINK_REGISTRY:
        _load_sink(sink_type)

    if sink_type not in _SINK_REGISTRY:
        available = list(_SINK_REGISTRY.keys()) if _SINK_REGISTRY else ["none"]
        raise SinkWriteError(
            f"Unknown sink type: '{sink_type}'. "
            f"Available sinks: {', '.join(available)}",
            destination=destination,
        )

    sink_class = _SINK_REGISTRY[sink_type]

    if sink_type == "stdout":
        sink = sink_class(**kwargs)
    else:
        sink = sink_class(destination, **kwargs)
    logger.info(f"Created {sink_type} sink for {sink.destination}")
    return sink


def _load_sink(sink_type: str) -> None:
    """
    Lazy-load a sink implementation.

    Args:
        sink_type: Sink type to load
    """
    if sink_type == "file":
        from .file_sink import FileSink

        register_sink("file", FileSink)
    elif sink_type == "stdout":
        from .file_sink import StdoutSink

        register_sink("stdout", StdoutSink)
    elif sink_type == "http":
        from .http_sink import HttpSink

        register_sink("http", HttpSink)


def list_available_sinks() -> list[str]:
    """
    List all registered sink types.

    Returns:
        List of sink type identifiers.
    """
    for sink_type in ["file", "stdout", "http"]:
        if sink_type not in _SINK_REGISTRY:
            _load_sink(sink_type)

    return list(_SINK_REGISTRY.keys())
