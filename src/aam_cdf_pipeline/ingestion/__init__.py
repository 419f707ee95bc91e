"""
Ingestion layer for Adobe Audience Manager CDF files.

Decompresses gzip CDF input, splits it into lines, parses each line into
a LogRecord and encodes records as NDJSON.

Usage:
    from aam_cdf_pipeline.ingestion import (
        CDFParser,
        encode_record,
        iter_decompressed,
        split_lines,
    )

    parser = CDFParser()
    lines = (line.decode("utf-8") for line in split_lines(iter_decompressed(chunks)))
    for record in parser.parse(lines):
        sink.write(encode_record(record))
"""

from .base import LogRecord, RequestParameter
from .decompress import iter_decompressed
from .encoder import decode_record, encode_record
from .exceptions import (
    CorruptInputError,
    MalformedLineError,
    PipelineError,
    RecordEncodeError,
    SinkWriteError,
    SourceReadError,
)
from .file_utils import is_gzip_file, iter_byte_chunks, open_source
from .parsers import CDFParser, parse_cdf_line, split_lines

__all__ = [
    # Data models
    "LogRecord",
    "RequestParameter",
    # Pipeline stages
    "iter_decompressed",
    "split_lines",
    "CDFParser",
    "parse_cdf_line",
    "encode_record",
    "decode_record",
    # Exceptions
    "PipelineError",
    "CorruptInputError",
    "SourceReadError",
    "MalformedLineError",
    "RecordEncodeError",
    "SinkWriteError",
    # File utilities
    "open_source",
    "iter_byte_chunks",
    "is_gzip_file",
]
