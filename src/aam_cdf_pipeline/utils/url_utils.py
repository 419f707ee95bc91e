"""
URL utility functions.

Percent-decoding helpers for CDF fields. Two conventions are provided
because the CDF fields need both:

- decode_uri_component: every %XX escape is decoded (request parameter values)
- decode_uri: escapes of URI delimiters stay encoded (whole referer URLs)

Neither treats '+' as a space. Malformed escapes raise UriDecodeError
instead of being passed through.
"""

import re
from urllib.parse import unquote

# Characters left encoded by whole-URI decoding
URI_RESERVED = frozenset(";/?:@&=+$,#")

_ESCAPE_RUN = re.compile(r"(?:%[0-9A-Fa-f]{2})+")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


class UriDecodeError(ValueError):
    """Raised when a value contains an invalid percent escape."""

    pass


def decode_uri_component(value: str) -> str:
    """
    Decode all percent escapes in a URI component.

    Args:
        value: Encoded component (e.g., "a%3Db%26c")

    Returns:
        Decoded string

    Raises:
        UriDecodeError: On a '%' not followed by two hex digits, or
            escapes that do not form valid UTF-8

    Examples:
        >>> decode_uri_component("http%3A%2F%2Fexample.com")
        'http://example.com'
        >>> decode_uri_component("a+b")
        'a+b'
    """
    return _decode(value, frozenset())


def decode_uri(value: str) -> str:
    """
    Decode percent escapes in a complete URI.

    Escapes that decode to a reserved delimiter (; / ? : @ & = + $ , #)
    are kept exactly as written.

    Args:
        value: Encoded URI

    Returns:
        Decoded URI

    Raises:
        UriDecodeError: On malformed escapes

    Examples:
        >>> decode_uri("https://example.com/caf%C3%A9%20menu")
        'https://example.com/café menu'
        >>> decode_uri("https://example.com/a%2Fb%23c")
        'https://example.com/a%2Fb%23c'
    """
    return _decode(value, URI_RESERVED)


def _decode(value: str, keep_encoded: frozenset) -> str:
    if "%" not in value:
        return value

    bad = _BAD_ESCAPE.search(value)
    if bad:
        raise UriDecodeError(
            f"Invalid percent escape at position {bad.start()}: "
            f"{value[bad.start():bad.start() + 3]!r}"
        )

    return _ESCAPE_RUN.sub(lambda m: _decode_run(m.group(0), keep_encoded), value)


def _decode_run(run: str, keep_encoded: frozenset) -> str:
    """Decode one run of consecutive escapes as UTF-8."""
    try:
        text = unquote(run, encoding="utf-8", errors="strict")
    except UnicodeDecodeError as e:
        raise UriDecodeError(f"Percent escapes are not valid UTF-8: {run!r}") from e

    if not keep_encoded:
        return text

    # Reserved characters are single-byte, so they map back to one escape
    escapes = [run[i : i + 3] for i in range(0, len(run), 3)]
    parts = []
    offset = 0
    for char in text:
        if char in keep_encoded:
            parts.append(escapes[offset])
        else:
            parts.append(char)
        offset += len(char.encode("utf-8"))
    return "".join(parts)
