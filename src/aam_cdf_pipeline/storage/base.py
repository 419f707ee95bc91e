"""
Abstract base class for output sinks.

A sink receives the encoded NDJSON bytes at the end of the pipeline.
Implementations write to files, open streams or HTTP endpoints.
"""

from abc import ABC, abstractmethod
from typing import Iterable

from ..ingestion.exceptions import SinkWriteError


class OutputSink(ABC):
    """
    Abstract base class for output sinks.

    Subclasses implement write(), flush() and close(). write_all() drives
    a whole chunk iterator through write() by default; sinks that pull
    their input (like the HTTP sink) override it.

    Errors writing to the destination are raised as SinkWriteError.
    """

    @property
    @abstractmethod
    def sink_type(self) -> str:
        """Return the sink type identifier (e.g., 'file')."""
        pass

    @property
    def destination(self) -> str:
        """Human-readable destination for logs and errors."""
        return self.sink_type

    @abstractmethod
    def write(self, data: bytes) -> None:
        """
        Write bytes to the destination.

        Args:
            data: Encoded output

        Raises:
            SinkWriteError: If the destination rejects the bytes
        """
        pass

    @abstractmethod
    def flush(self) -> None:
        """
        Push buffered bytes to the destination.

        Raises:
            SinkWriteError: If flushing fails
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """
        Close connections and release resources.

        Safe to call more than once.
        """
        pass

    def write_all(self, chunks: Iterable[bytes]) -> int:
        """
        Write every chunk from an iterator, then flush.

        Chunks are pulled one at a time, so a slow destination slows the
        producer instead of buffering its output.

        Args:
            chunks: Byte chunks to write

        Returns:
            Number of bytes written

        Raises:
            SinkWriteError: If writing fails
        """
        total = 0
        for chunk in chunks:
            self.write(chunk)
            total += len(chunk)
        self.flush()
        return total

    def __enter__(self) -> "OutputSink":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
