"""
Shared fixtures for CDF pipeline tests.

Provides builders for CDF lines and gzip-compressed CDF payloads.
"""

import gzip
import os

import pytest

from aam_cdf_pipeline.config import clear_settings_cache

# Raw field values of a typical CDF line, in CDF field order
DEFAULT_RAW_FIELDS = {
    "eventTime": "2018-03-15 10:23:45",
    "device": "57842147389405828201637489270985701563",
    "containerId": "3142",
    "realizedTraits": "4567\x024568",
    "realizedSegments": "\\N",
    "requestParameters": "c_page\x03home%20page\x02d_src\x0312345",
    "referer": "https://www.example.com/landing%20page?utm=a%26b",
    "ip": "192.0.2.10",
    "mid": "12345678901234567890123456789012345678",
    "allSegments": "100\x02\\N\x02200",
    "allTraits": "4567\x024568\x024569",
}


def build_cdf_line(**overrides) -> str:
    """Build one CDF line from the default raw fields plus overrides."""
    fields = dict(DEFAULT_RAW_FIELDS)
    for name in overrides:
        if name not in fields:
            raise KeyError(f"Unknown CDF field: {name}")
    fields.update(overrides)
    return "\x01".join(fields.values())


def build_gzip(lines, trailing_newline: bool = True) -> bytes:
    """gzip-compress CDF lines joined with newlines."""
    text = "\n".join(lines)
    if trailing_newline and lines:
        text += "\n"
    return gzip.compress(text.encode("utf-8"))


@pytest.fixture
def make_cdf_line():
    """Factory fixture returning build_cdf_line."""
    return build_cdf_line


@pytest.fixture
def make_gzip():
    """Factory fixture returning build_gzip."""
    return build_gzip


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    """Keep tests independent of config.yaml and CDF_* variables on the host."""
    for key in list(os.environ):
        if key.startswith("CDF_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()
