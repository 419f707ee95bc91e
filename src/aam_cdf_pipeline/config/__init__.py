"""Configuration module."""

from .constants import (
    ARRAY_FIELDS,
    ARRAY_SEPARATOR,
    DEFAULT_CHUNK_SIZE,
    FIELD_COUNT,
    FIELD_NAMES,
    FIELD_SEPARATOR,
    KEYVAL_SEPARATOR,
    NDJSON_CONTENT_TYPE,
    NULL_SENTINEL,
)
from .settings import Settings, clear_settings_cache, get_settings
from .sops_loader import check_sops_installed, decrypt_sops_file, load_config_file

__all__ = [
    # CDF format
    "FIELD_SEPARATOR",
    "ARRAY_SEPARATOR",
    "KEYVAL_SEPARATOR",
    "NULL_SENTINEL",
    "FIELD_NAMES",
    "FIELD_COUNT",
    "ARRAY_FIELDS",
    # I/O
    "DEFAULT_CHUNK_SIZE",
    "NDJSON_CONTENT_TYPE",
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Config loading
    "load_config_file",
    "decrypt_sops_file",
    "check_sops_installed",
]
