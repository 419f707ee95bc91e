"""
Incremental gzip decompression.

Inflates a gzip byte stream chunk by chunk, so a CDF file never has to be
held in memory. Concatenated gzip members are decoded one after another,
the same way `gzip.open` reads them.
"""

import logging
import zlib
from typing import Iterable, Iterator

from ..config.constants import GZIP_MAGIC
from .exceptions import CorruptInputError

logger = logging.getLogger(__name__)

# wbits for zlib: 16 + MAX_WBITS selects the gzip container
_GZIP_WBITS = 16 + zlib.MAX_WBITS


def iter_decompressed(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """
    Decompress a gzip stream given as an iterable of byte chunks.

    Args:
        chunks: Compressed input, in any chunking

    Yields:
        Decompressed byte chunks (never empty)

    Raises:
        CorruptInputError: If the stream is not gzip, is corrupt, or ends
            before the gzip trailer of the current member
    """
    decompressor = zlib.decompressobj(_GZIP_WBITS)
    bytes_read = 0
    members = 0
    # True once the current member has consumed any input
    member_started = False
    # After the last member only NUL padding is accepted
    padding_only = False

    for chunk in chunks:
        if not chunk:
            continue
        bytes_read += len(chunk)
        data = chunk

        while data:
            # Between members, anything that is not a gzip header is padding
            if members and not member_started and not padding_only:
                padding_only = not data.startswith(GZIP_MAGIC[: len(data)])

            if padding_only:
                if data.strip(b"\x00"):
                    raise CorruptInputError(
                        "Trailing garbage after gzip stream", bytes_read=bytes_read
                    )
                break

            try:
                output = decompressor.decompress(data)
            except zlib.error as e:
                raise CorruptInputError(
                    f"Invalid gzip data: {e}", bytes_read=bytes_read
                ) from e
            member_started = True

            if output:
                yield output

            if not decompressor.eof:
                break

            # Member complete; whatever follows is another member or padding
            members += 1
            data = decompressor.unused_data
            decompressor = zlib.decompressobj(_GZIP_WBITS)
            member_started = False

    if member_started:
        tail = decompressor.flush()
        if tail:
            yield tail
        raise CorruptInputError(
            "Truncated gzip stream: input ended before the gzip trailer",
            bytes_read=bytes_read,
        )

    logger.debug(
        f"Decompressed {members} gzip member(s) from {bytes_read} compressed bytes"
    )
