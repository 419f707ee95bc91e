"""
Parsers for Adobe Audience Manager CDF files.

Provides:
- split_lines: byte chunks -> lines, across chunk boundaries
- parse_cdf_line: one CDF line -> LogRecord
- CDFParser: streaming parser with optional skip-malformed mode

Usage:
    from aam_cdf_pipeline.ingestion.parsers import CDFParser, split_lines

    parser = CDFParser()
    lines = (line.decode("utf-8") for line in split_lines(chunks))
    for record in parser.parse(lines):
        print(record.eventTime, record.device)
"""

from .cdf_parser import (
    CDFParser,
    parse_cdf_line,
    parse_request_parameters,
    split_array,
)
from .line_splitter import split_lines

__all__ = [
    # Line splitting
    "split_lines",
    # CDF parser
    "CDFParser",
    "parse_cdf_line",
    "parse_request_parameters",
    "split_array",
]
