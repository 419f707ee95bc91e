"""Utility modules."""

from .url_utils import URI_RESERVED, UriDecodeError, decode_uri, decode_uri_component

__all__ = [
    "decode_uri",
    "decode_uri_component",
    "UriDecodeError",
    "URI_RESERVED",
]
