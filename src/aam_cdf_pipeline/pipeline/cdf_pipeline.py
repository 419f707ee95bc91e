"""
CDF to NDJSON pipeline.

Wires the stages into one pull-based generator chain:

    source bytes -> gunzip -> lines -> LogRecord -> NDJSON bytes -> sink

Nothing runs ahead of the sink: each stage produces its next element only
when the stage after it asks, so memory stays bounded by one chunk and one
record per stage whatever the input size.
"""

import logging
import time
from contextlib import ExitStack
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import IO, Iterable, Iterator, Optional, Union

from ..config.settings import Settings, get_settings
from ..ingestion.base import LogRecord
from ..ingestion.decompress import iter_decompressed
from ..ingestion.encoder import encode_record
from ..ingestion.exceptions import MalformedLineError, PipelineError, SourceReadError
from ..ingestion.file_utils import iter_byte_chunks, open_source
from ..ingestion.parsers import CDFParser, split_lines
from ..storage import OutputSink, StreamSink, detect_sink_type, get_sink

logger = logging.getLogger(__name__)

SourceInput = Union[str, Path, IO[bytes], Iterable[bytes]]
SinkInput = Union[OutputSink, str, Path, IO[bytes]]


def setup_logging(level: Union[int, str] = logging.INFO) -> None:
    """
    Configure root logging for scripts.

    Args:
        level: Logging level (e.g., logging.DEBUG or "INFO")
    """
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


@dataclass
class PipelineResult:
    """Result of a pipeline run."""

    success: bool
    error: Optional[PipelineError] = None
    started_at: datetime = field(default_factory=lambda: datetime.now().astimezone())
    completed_at: Optional[datetime] = None
    # Stats
    bytes_read: int = 0
    lines_read: int = 0
    records_written: int = 0
    bytes_written: int = 0
    lines_skipped: int = 0
    blank_lines: int = 0

    @property
    def duration_seconds(self) -> Optional[float]:
        """Get pipeline duration in seconds."""
        if self.completed_at:
            return (self.completed_at - self.started_at).total_seconds()
        return None

    def raise_for_error(self) -> None:
        """Raise the error that stopped the run, if any."""
        if self.error is not None:
            raise self.error

    def to_dict(self) -> dict:
        """Convert to dictionary for logging/serialization."""
        return {
            "success": self.success,
            "error": str(self.error) if self.error else None,
            "error_type": type(self.error).__name__ if self.error else None,
            "started_at": self.started_at.isoformat(),
            "completed_at": (
                self.completed_at.isoformat() if self.completed_at else None
            ),
            "duration_seconds": self.duration_seconds,
            "bytes_read": self.bytes_read,
            "lines_read": self.lines_read,
            "records_written": self.records_written,
            "bytes_written": self.bytes_written,
            "lines_skipped": self.lines_skipped,
            "blank_lines": self.blank_lines,
        }


class CDFPipeline:
    """
    Streaming CDF to NDJSON pipeline.

    A fresh parser is created for every run, so one pipeline object can
    run several inputs one after another.

    Pipeline stages:
    1. Decompress: inflate gzip input
    2. Split: cut the byte stream into lines
    3. Parse: turn each line into a LogRecord
    4. Encode: serialize each record as one NDJSON line
    5. Sink: write the bytes to the destination
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the pipeline.

        Args:
            settings: Pipeline settings (uses get_settings() if None)
        """
        if settings is None:
            settings = get_settings()

        errors = settings.validate()
        if errors:
            raise ValueError(f"Invalid settings: {'; '.join(errors)}")

        self.settings = settings
        self._parser: Optional[CDFParser] = None
        self._bytes_read = 0
        self._records_written = 0
        self._bytes_written = 0

    def iter_records(self, chunks: Iterable[bytes]) -> Iterator[LogRecord]:
        """
        Run stages 1-3 over compressed input.

        Args:
            chunks: gzip-compressed CDF bytes, in any chunking

        Yields:
            LogRecord objects in input order

        Raises:
            CorruptInputError: If the input is not valid gzip
            MalformedLineError: On a malformed line (unless skipping)
        """
        self._parser = CDFParser(
            skip_malformed=self.settings.skip_malformed,
            referer_decoding=self.settings.referer_decoding,
        )
        self._bytes_read = 0

        lines = split_lines(iter_decompressed(self._count_input(chunks)))
        yield from self._parser.parse(self._decode_lines(lines))

    def iter_ndjson(self, chunks: Iterable[bytes]) -> Iterator[bytes]:
        """
        Run stages 1-4 over compressed input.

        Args:
            chunks: gzip-compressed CDF bytes

        Yields:
            One encoded NDJSON line per record
        """
        self._records_written = 0
        self._bytes_written = 0
        interval = self.settings.progress_interval_seconds
        last_progress_time = time.time()

        for record in self.iter_records(chunks):
            data = encode_record(record)
            yield data
            self._records_written += 1
            self._bytes_written += len(data)

            # Progress reporting
            if time.time() - last_progress_time >= interval:
                logger.info(f"Processed {self._records_written:,} records...")
                last_progress_time = time.time()

    def run(self, source: SourceInput, sink: SinkInput) -> PipelineResult:
        """
        Convert one CDF input into NDJSON.

        The run stops at the first pipeline error. Input and sink are
        released whatever the outcome; output already written is left
        in place.

        Args:
            source: Path, open binary stream or iterable of byte chunks
            sink: OutputSink, output path or open binary stream

        Returns:
            PipelineResult with success flag, first error and stats
        """
        result = PipelineResult(success=False)
        self._parser = None
        self._bytes_read = 0
        self._records_written = 0
        self._bytes_written = 0
        logger.info(
            f"Starting CDF conversion: {_describe(source)} -> {_describe(sink)}"
        )

        try:
            with ExitStack() as stack:
                chunks = self._open_chunks(source, stack)
                out = stack.enter_context(self._open_sink(sink))
                ndjson = self.iter_ndjson(chunks)
                stack.callback(ndjson.close)
                out.write_all(ndjson)
            result.success = True
        except FileNotFoundError as e:
            result.error = SourceReadError(str(e), source=_describe(source))
        except PipelineError as e:
            result.error = e
        finally:
            result.completed_at = datetime.now().astimezone()
            self._collect_stats(result)

        if result.success:
            logger.info(
                f"CDF conversion complete: {result.records_written:,} records written, "
                f"{result.lines_skipped:,} skipped in {result.duration_seconds:.1f}s"
            )
        else:
            logger.error(
                f"CDF conversion failed after {result.records_written:,} records: "
                f"{result.error}"
            )
        return result

    def _open_chunks(self, source: SourceInput, stack: ExitStack) -> Iterable[bytes]:
        if isinstance(source, (bytes, bytearray)):
            return [bytes(source)]
        if isinstance(source, (str, Path)) or hasattr(source, "read"):
            stream = stack.enter_context(open_source(source))
            return iter_byte_chunks(stream, self.settings.chunk_size)
        if hasattr(source, "close"):
            stack.callback(source.close)
        return source

    def _open_sink(self, sink: SinkInput) -> OutputSink:
        if isinstance(sink, OutputSink):
            return sink
        if isinstance(sink, (str, Path)):
            return get_sink(str(sink), **self._sink_kwargs(str(sink)))
        return StreamSink(sink, close_stream=True)

    def _sink_kwargs(self, destination: str) -> dict:
        if detect_sink_type(destination) == "http":
            return {
                "timeout": self.settings.http_timeout_seconds,
                "headers": self.settings.http_headers,
            }
        return {}

    def _count_input(self, chunks: Iterable[bytes]) -> Iterator[bytes]:
        for chunk in chunks:
            self._bytes_read += len(chunk)
            yield chunk

    def _decode_lines(self, lines: Iterable[bytes]) -> Iterator[str]:
        encoding = self.settings.encoding
        errors = self.settings.encoding_errors
        for line_number, line in enumerate(lines, start=1):
            try:
                yield line.decode(encoding, errors)
            except UnicodeDecodeError as e:
                raise MalformedLineError(
                    f"Line is not valid {encoding}: {e}", line_number=line_number
                ) from e

    def _collect_stats(self, result: PipelineResult) -> None:
        result.bytes_read = self._bytes_read
        result.records_written = self._records_written
        result.bytes_written = self._bytes_written
        if self._parser is not None:
            result.lines_read = self._parser.lines_read
            result.lines_skipped = self._parser.lines_skipped
            result.blank_lines = self._parser.blank_lines


def _describe(obj) -> str:
    if isinstance(obj, (str, Path)):
        return str(obj)
    if isinstance(obj, OutputSink):
        return obj.destination
    name = getattr(obj, "name", None)
    if isinstance(name, str):
        return name
    return f"<{type(obj).__name__}>"


def run(
    source: SourceInput,
    sink: SinkInput,
    settings: Optional[Settings] = None,
) -> PipelineResult:
    """
    Convert one CDF input into NDJSON.

    Args:
        source: Path, open binary stream or iterable of byte chunks
        sink: OutputSink, output path or open binary stream
        settings: Pipeline settings (uses get_settings() if None)

    Returns:
        PipelineResult; check result.success or call result.raise_for_error()
    """
    return CDFPipeline(settings).run(source, sink)


def convert_file(
    input_path: Union[str, Path],
    output_path: Union[str, Path],
    settings: Optional[Settings] = None,
) -> PipelineResult:
    """
    Convert a local gzip CDF file into an NDJSON file.

    Args:
        input_path: gzip-compressed CDF file
        output_path: NDJSON destination ("-", URL or file path)
        settings: Pipeline settings (uses get_settings() if None)

    Returns:
        PipelineResult of the successful run

    Raises:
        PipelineError: The error that stopped the run
    """
    result = run(input_path, output_path, settings)
    result.raise_for_error()
    return result
