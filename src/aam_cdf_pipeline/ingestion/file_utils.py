"""
Shared file utilities for the ingestion module.

Opens CDF inputs given either as paths or as already-open binary streams,
and reads them as byte chunks.
"""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator, Union

from ..config.constants import DEFAULT_CHUNK_SIZE, GZIP_MAGIC
from .exceptions import SourceReadError

logger = logging.getLogger(__name__)

SourceLike = Union[str, Path, IO[bytes]]


def is_gzip_file(file_path: Union[str, Path]) -> bool:
    """
    Check for gzip magic bytes (0x1f 0x8b), regardless of file extension.

    Args:
        file_path: Path to the file

    Returns:
        True if the file starts with the gzip magic bytes

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    with open(path, "rb") as f:
        magic = f.read(2)
    return magic == GZIP_MAGIC


@contextmanager
def open_source(source: SourceLike) -> Iterator[IO[bytes]]:
    """
    Open a CDF input for binary reading.

    Paths are opened here and closed on exit. Streams passed in are
    yielded unchanged and closed on exit as well, so the caller hands
    over ownership.

    Args:
        source: File path or open binary stream

    Yields:
        Binary stream

    Raises:
        FileNotFoundError: If a path doesn't exist
        SourceReadError: If the path cannot be opened
    """
    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {source}")
        try:
            stream = open(path, "rb")
        except OSError as e:
            raise SourceReadError(f"Cannot open input: {e}", source=str(path)) from e
        logger.debug(f"Opened input file {path}")
    else:
        stream = source

    try:
        yield stream
    finally:
        stream.close()


def iter_byte_chunks(
    stream: IO[bytes], chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Iterator[bytes]:
    """
    Read a binary stream in fixed-size chunks.

    Args:
        stream: Open binary stream
        chunk_size: Maximum bytes per read

    Yields:
        Non-empty byte chunks until end of stream

    Raises:
        SourceReadError: If reading from the stream fails
    """
    name = getattr(stream, "name", None)
    while True:
        try:
            chunk = stream.read(chunk_size)
        except OSError as e:
            raise SourceReadError(
                f"Cannot read input: {e}",
                source=str(name) if name is not None else None,
            ) from e
        if not chunk:
            return
        yield chunk
