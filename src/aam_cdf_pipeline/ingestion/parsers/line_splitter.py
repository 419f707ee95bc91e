"""
Byte stream to line splitter.

Reassembles lines whose bytes arrive across arbitrary chunk boundaries.
"""

from typing import Iterable, Iterator


def split_lines(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """
    Split a byte stream into lines.

    Lines are delimited by b"\\n"; the delimiter is not included and a
    trailing b"\\r" is removed. Bytes left after the last newline are
    emitted as a final line. Empty lines are yielded as b"".

    Args:
        chunks: Byte chunks in stream order

    Yields:
        One bytes object per line
    """
    pending = b""

    for chunk in chunks:
        if not chunk:
            continue
        data = pending + chunk if pending else chunk
        lines = data.split(b"\n")
        # The last element is an incomplete line (b"" if chunk ended on \n)
        pending = lines.pop()
        for line in lines:
            yield _strip_cr(line)

    if pending:
        yield _strip_cr(pending)


def _strip_cr(line: bytes) -> bytes:
    if line.endswith(b"\r"):
        return line[:-1]
    return line
