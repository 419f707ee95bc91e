"""
HTTP sink for NDJSON output.

Sends records to an HTTP endpoint that accepts application/x-ndjson
bodies. write_all() streams the whole run in one chunked POST, pulling
chunks from the pipeline as the connection accepts them. Single write()
calls are batched and POSTed when the batch is full or on flush().
"""

import logging
from typing import Iterable, Iterator, Optional

import httpx

from ..config.constants import NDJSON_CONTENT_TYPE
from .base import OutputSink, SinkWriteError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_BYTES = 1024 * 1024


class HttpSink(OutputSink):
    """
    Sink POSTing NDJSON to an HTTP(S) endpoint.

    Transport failures and non-2xx responses raise SinkWriteError.
    No retries are attempted.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 60.0,
        headers: Optional[dict] = None,
        batch_bytes: int = DEFAULT_BATCH_BYTES,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Initialize the HTTP sink.

        Args:
            url: Endpoint URL
            timeout: Request timeout in seconds
            headers: Extra request headers (e.g., Authorization)
            batch_bytes: Size at which buffered write() data is sent
            transport: Optional httpx transport (used by tests)
        """
        self.url = url
        self.batch_bytes = batch_bytes
        self._headers = {"Content-Type": NDJSON_CONTENT_TYPE}
        self._headers.update(headers or {})
        self._client = httpx.Client(timeout=timeout, transport=transport)
        self._buffer: list[bytes] = []
        self._buffered = 0
        self._closed = False
        self.requests_sent = 0

    @property
    def sink_type(self) -> str:
        return "http"

    @property
    def destination(self) -> str:
        return self.url

    def write(self, data: bytes) -> None:
        self._buffer.append(data)
        self._buffered += len(data)
        if self._buffered >= self.batch_bytes:
            self.flush()

    def flush(self) -> None:
        if not self._buffer:
            return
        body = b"".join(self._buffer)
        self._buffer = []
        self._buffered = 0
        self._post(body)

    def write_all(self, chunks: Iterable[bytes]) -> int:
        """
        Stream every chunk in a single chunked POST.

        Args:
            chunks: Byte chunks to send

        Returns:
            Number of bytes sent

        Raises:
            SinkWriteError: If the request fails or is rejected
        """
        self.flush()
        counter = _CountingIterator(chunks)
        self._post(counter)
        return counter.total

    def close(self) -> None:
        if self._closed:
            return
        try:
            self.flush()
        finally:
            self._closed = True
            self._client.close()

    def _post(self, content) -> None:
        try:
            response = self._client.post(
                self.url, content=content, headers=self._headers
            )
        except httpx.HTTPError as e:
            raise SinkWriteError(
                f"HTTP request failed: {e}", destination=self.url
            ) from e

        self.requests_sent += 1
        if not response.is_success:
            raise SinkWriteError(
                f"HTTP {response.status_code}: {response.text[:500]}",
                destination=self.url,
            )
        logger.debug(f"POST {self.url} -> HTTP {response.status_code}")


class _CountingIterator:
    """Iterator wrapper counting the bytes passed through it."""

    def __init__(self, chunks: Iterable[bytes]):
        self._chunks = iter(chunks)
        self.total = 0

    def __iter__(self) -> Iterator[bytes]:
        for chunk in self._chunks:
            self.total += len(chunk)
            yield chunk
