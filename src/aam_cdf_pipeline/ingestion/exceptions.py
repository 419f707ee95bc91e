"""
Custom exceptions for the CDF pipeline.

Each pipeline stage raises its own exception class; all of them derive
from PipelineError so the orchestrator can halt on the first one.
"""

from typing import Optional


class PipelineError(Exception):
    """
    Base exception for all pipeline errors.

    All other pipeline exceptions inherit from this class,
    allowing for broad exception catching when needed.
    """

    pass


class CorruptInputError(PipelineError):
    """
    Raised when the input is not a valid gzip stream.

    Covers bad headers, corrupt deflate data and streams that end
    before the gzip trailer.

    Attributes:
        bytes_read: Compressed bytes consumed before the failure (optional)
        message: Detailed error message
    """

    def __init__(self, message: str, bytes_read: Optional[int] = None):
        self.bytes_read = bytes_read
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with stream position."""
        if self.bytes_read is not None:
            return f"{self.message} (after {self.bytes_read} compressed bytes)"
        return self.message


class SourceReadError(PipelineError):
    """
    Raised when the input source cannot be read.

    Attributes:
        source: Description of the source (optional)
        message: Detailed error message
    """

    def __init__(self, message: str, source: Optional[str] = None):
        self.source = source
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.source:
            return f"{self.message} (source={self.source!r})"
        return self.message


class MalformedLineError(PipelineError):
    """
    Raised when a line does not follow the CDF field layout.

    Used for wrong top-level field counts, request parameter chunks
    without exactly one key-value separator and undecodable
    percent escapes.

    Attributes:
        line_number: The line number where parsing failed (optional)
        line_content: The content of the problematic line (optional)
        field: The CDF field that failed (optional)
        message: Detailed error message
    """

    def __init__(
        self,
        message: str,
        line_number: Optional[int] = None,
        line_content: Optional[str] = None,
        field: Optional[str] = None,
    ):
        self.line_number = line_number
        self.line_content = line_content
        self.field = field
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with line context."""
        message = self.message
        if self.field:
            message = f"{message} (field='{self.field}')"
        if self.line_number is not None and self.line_content:
            # Truncate long lines for readability
            content = (
                self.line_content[:100] + "..."
                if len(self.line_content) > 100
                else self.line_content
            )
            return f"{message} (line {self.line_number}: {content!r})"
        elif self.line_number is not None:
            return f"{message} (line {self.line_number})"
        return message


class RecordEncodeError(PipelineError):
    """Raised when a record cannot be serialized to JSON."""

    pass


class SinkWriteError(PipelineError):
    """
    Raised when the destination stops accepting bytes.

    Output already flushed before the failure is left in place.

    Attributes:
        destination: Description of the sink (optional)
        message: Detailed error message
    """

    def __init__(self, message: str, destination: Optional[str] = None):
        self.destination = destination
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.destination:
            return f"{self.message} (destination={self.destination!r})"
        return self.message
