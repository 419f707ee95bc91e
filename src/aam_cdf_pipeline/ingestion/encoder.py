"""
NDJSON encoding of LogRecords.

Each record becomes one compact JSON object followed by a newline, with
keys in CDF field order so output is byte-for-byte reproducible.
"""

import json
from typing import Union

from .base import LogRecord
from .exceptions import MalformedLineError, RecordEncodeError


def encode_record(record: LogRecord) -> bytes:
    """
    Serialize a LogRecord as one NDJSON line.

    Args:
        record: Parsed record

    Returns:
        UTF-8 JSON text terminated by b"\\n"

    Raises:
        RecordEncodeError: If a value cannot be represented in JSON
    """
    try:
        text = json.dumps(
            record.to_dict(),
            ensure_ascii=False,
            separators=(",", ":"),
            allow_nan=False,
        )
        return text.encode("utf-8") + b"\n"
    except (TypeError, ValueError) as e:
        raise RecordEncodeError(f"Cannot encode record as JSON: {e}") from e


def decode_record(line: Union[bytes, str]) -> LogRecord:
    """
    Read one NDJSON line back into a LogRecord.

    Args:
        line: JSON object text, with or without trailing newline

    Returns:
        LogRecord instance

    Raises:
        MalformedLineError: If the line is not a JSON object with all fields
    """
    try:
        data = json.loads(line)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedLineError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MalformedLineError(f"Expected JSON object, got {type(data).__name__}")

    return LogRecord.from_dict(data)
