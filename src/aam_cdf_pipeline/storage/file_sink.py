"""
File and stream sinks.

FileSink owns a file it opens itself; StreamSink wraps a binary stream
owned by the caller (for example sys.stdout.buffer).
"""

import logging
import sys
from pathlib import Path
from typing import IO, Optional, Union

from .base import OutputSink, SinkWriteError

logger = logging.getLogger(__name__)


class StreamSink(OutputSink):
    """Sink writing to an already-open binary stream."""

    def __init__(self, stream: IO[bytes], close_stream: bool = False):
        """
        Initialize the stream sink.

        Args:
            stream: Writable binary stream
            close_stream: If True, close the stream in close()
        """
        self._stream = stream
        self._close_stream = close_stream
        self._closed = False

    @property
    def sink_type(self) -> str:
        return "stream"

    @property
    def destination(self) -> str:
        name = getattr(self._stream, "name", None)
        return str(name) if name is not None else "<stream>"

    def write(self, data: bytes) -> None:
        try:
            self._stream.write(data)
        except (OSError, ValueError) as e:
            # ValueError: write to a closed file
            raise SinkWriteError(
                f"Cannot write output: {e}", destination=self.destination
            ) from e

    def flush(self) -> None:
        try:
            self._stream.flush()
        except (OSError, ValueError) as e:
            raise SinkWriteError(
                f"Cannot flush output: {e}", destination=self.destination
            ) from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self._close_stream:
            try:
                self._stream.close()
            except OSError as e:
                raise SinkWriteError(
                    f"Cannot close output: {e}", destination=self.destination
                ) from e


class FileSink(StreamSink):
    """
    Sink writing to a local file.

    The file is created (with missing parent directories) when the sink
    is constructed and truncated if it already exists.
    """

    def __init__(self, path: Union[str, Path], append: bool = False):
        """
        Initialize the file sink.

        Args:
            path: Output file path
            append: If True, append instead of truncating

        Raises:
            SinkWriteError: If the file cannot be created
        """
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            stream = open(self.path, "ab" if append else "wb")
        except OSError as e:
            raise SinkWriteError(
                f"Cannot open output file: {e}", destination=str(self.path)
            ) from e
        super().__init__(stream, close_stream=True)
        logger.debug(f"Opened output file {self.path}")

    @property
    def sink_type(self) -> str:
        return "file"

    @property
    def destination(self) -> str:
        return str(self.path)


class StdoutSink(StreamSink):
    """Sink on standard output. close() leaves stdout open."""

    def __init__(self, stream: Optional[IO[bytes]] = None):
        super().__init__(stream if stream is not None else sys.stdout.buffer)

    @property
    def sink_type(self) -> str:
        return "stdout"

    @property
    def destination(self) -> str:
        return "<stdout>"
