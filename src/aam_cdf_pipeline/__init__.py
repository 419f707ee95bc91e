"""
Adobe Audience Manager CDF to NDJSON converter.

Streams gzip-compressed Audience Manager Data Feed (CDF) files into
newline-delimited JSON, one object per CDF line, ready to load into an
analytical table.

Usage:
    from aam_cdf_pipeline import convert_file

    result = convert_file("feed.gz", "feed.ndjson")
    print(result.records_written)
"""

from .ingestion import (
    CorruptInputError,
    LogRecord,
    MalformedLineError,
    PipelineError,
    RequestParameter,
    SinkWriteError,
    SourceReadError,
)
from .pipeline import CDFPipeline, PipelineResult, convert_file, run

__version__ = "0.1.0"

__all__ = [
    "CDFPipeline",
    "PipelineResult",
    "run",
    "convert_file",
    "LogRecord",
    "RequestParameter",
    "PipelineError",
    "CorruptInputError",
    "SourceReadError",
    "MalformedLineError",
    "SinkWriteError",
]
