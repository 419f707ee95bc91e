"""
Adobe Audience Manager CDF line parser.

A CDF line holds 11 fields in a fixed order, separated by 0x01. Array
fields use 0x02 between elements and request parameters use 0x03 between
key and value:

    eventTime ^A device ^A containerId ^A realizedTraits ^A realizedSegments
    ^A requestParameters ^A referer ^A ip ^A mid ^A allSegments ^A allTraits

The literal \\N marks an absent array element and is dropped.
"""

import logging
from typing import Iterable, Iterator, Optional

from ...config.constants import (
    ARRAY_SEPARATOR,
    FIELD_COUNT,
    FIELD_NAMES,
    FIELD_SEPARATOR,
    KEYVAL_SEPARATOR,
    NULL_SENTINEL,
    REFERER_DECODING_COMPONENT,
    REFERER_DECODING_MODES,
    REFERER_DECODING_URI,
)
from ...utils.url_utils import UriDecodeError, decode_uri, decode_uri_component
from ..base import LogRecord, RequestParameter
from ..exceptions import MalformedLineError

logger = logging.getLogger(__name__)


def split_array(raw: str) -> tuple[str, ...]:
    """
    Split an array field, dropping empty entries and null sentinels.

    An empty field or a field holding only the sentinel gives ().
    """
    return tuple(
        el for el in raw.split(ARRAY_SEPARATOR) if el and el != NULL_SENTINEL
    )


def parse_request_parameters(
    raw: str, line_number: Optional[int] = None
) -> tuple[RequestParameter, ...]:
    """
    Parse the requestParameters field into ordered key/value pairs.

    Keys are kept verbatim; values are percent-decoded as URI components.

    Args:
        raw: Raw field content
        line_number: Line number for error reporting

    Returns:
        Tuple of RequestParameter, in source order

    Raises:
        MalformedLineError: If a chunk does not contain exactly one
            key-value separator, or a value has invalid escapes
    """
    if not raw or raw == NULL_SENTINEL:
        return ()

    parameters = []
    for index, chunk in enumerate(raw.split(ARRAY_SEPARATOR)):
        parts = chunk.split(KEYVAL_SEPARATOR)
        if len(parts) != 2:
            raise MalformedLineError(
                f"Request parameter {index} has {len(parts) - 1} key-value "
                f"separators, expected 1",
                line_number=line_number,
                line_content=chunk,
                field="requestParameters",
            )
        key, value = parts
        try:
            value = decode_uri_component(value)
        except UriDecodeError as e:
            raise MalformedLineError(
                f"Cannot decode value of parameter {key!r}: {e}",
                line_number=line_number,
                field="requestParameters",
            ) from e
        parameters.append(RequestParameter(key=key, value=value))

    return tuple(parameters)


def parse_cdf_line(
    line: str,
    line_number: Optional[int] = None,
    referer_decoding: str = REFERER_DECODING_URI,
) -> LogRecord:
    """
    Parse one CDF line into a LogRecord.

    Lines must split into exactly 11 fields; shorter and longer lines are
    both rejected rather than padded or truncated.

    Args:
        line: One CDF line, without its newline
        line_number: Line number for error reporting
        referer_decoding: "uri" (reserved characters stay encoded) or
            "component" (every escape decoded)

    Returns:
        Parsed LogRecord

    Raises:
        MalformedLineError: If the line does not follow the CDF layout
    """
    fields = line.split(FIELD_SEPARATOR)
    if len(fields) != FIELD_COUNT:
        raise MalformedLineError(
            f"Expected {FIELD_COUNT} fields, got {len(fields)}",
            line_number=line_number,
            line_content=line,
        )

    raw = dict(zip(FIELD_NAMES, fields))

    decode = (
        decode_uri_component
        if referer_decoding == REFERER_DECODING_COMPONENT
        else decode_uri
    )
    try:
        referer = decode(raw["referer"])
    except UriDecodeError as e:
        raise MalformedLineError(
            f"Cannot decode referer: {e}",
            line_number=line_number,
            field="referer",
        ) from e

    return LogRecord(
        eventTime=raw["eventTime"],
        device=raw["device"],
        containerId=raw["containerId"],
        realizedTraits=split_array(raw["realizedTraits"]),
        realizedSegments=split_array(raw["realizedSegments"]),
        requestParameters=parse_request_parameters(
            raw["requestParameters"], line_number
        ),
        referer=referer,
        ip=raw["ip"],
        mid=raw["mid"],
        allSegments=split_array(raw["allSegments"]),
        allTraits=split_array(raw["allTraits"]),
    )


class CDFParser:
    """
    Streaming CDF parser.

    By default the first malformed line raises MalformedLineError. With
    skip_malformed=True malformed lines are logged, counted and skipped.
    Blank lines are always skipped.

    Usage:
        parser = CDFParser()
        for record in parser.parse(lines):
            process(record)
        print(parser.records_parsed, parser.lines_skipped)
    """

    def __init__(
        self,
        skip_malformed: bool = False,
        referer_decoding: str = REFERER_DECODING_URI,
    ):
        """
        Initialize CDF parser.

        Args:
            skip_malformed: If True, skip malformed lines instead of raising
            referer_decoding: Decoding convention for the referer field
        """
        if referer_decoding not in REFERER_DECODING_MODES:
            raise ValueError(
                f"referer_decoding must be one of {REFERER_DECODING_MODES}, "
                f"got {referer_decoding!r}"
            )
        self.skip_malformed = skip_malformed
        self.referer_decoding = referer_decoding
        self.lines_read = 0
        self.records_parsed = 0
        self.lines_skipped = 0
        self.blank_lines = 0

    def parse(self, lines: Iterable[str]) -> Iterator[LogRecord]:
        """
        Parse CDF lines lazily.

        Args:
            lines: Decoded lines without newlines

        Yields:
            LogRecord objects in input order

        Raises:
            MalformedLineError: On the first malformed line (default mode)
        """
        for line in lines:
            self.lines_read += 1

            if not line:
                self.blank_lines += 1
                continue

            try:
                record = parse_cdf_line(
                    line,
                    line_number=self.lines_read,
                    referer_decoding=self.referer_decoding,
                )
            except MalformedLineError as e:
                if not self.skip_malformed:
                    raise
                self.lines_skipped += 1
                logger.warning(f"Skipping malformed line: {e}")
                continue

            self.records_parsed += 1
            yield record

        logger.info(
            f"CDF parsing complete: {self.records_parsed} records parsed, "
            f"{self.lines_skipped} skipped"
        )
