"""
Application settings and configuration management.

Supports loading from:
1. YAML config files, optionally SOPS-encrypted (config.yaml / config.enc.yaml)
2. Environment variables (fallback)
"""

import codecs
import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

from .constants import DEFAULT_CHUNK_SIZE, REFERER_DECODING_MODES, REFERER_DECODING_URI

logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    """Runtime settings for the CDF to NDJSON pipeline."""

    # Input
    chunk_size: int = DEFAULT_CHUNK_SIZE
    encoding: str = "utf-8"
    encoding_errors: str = "replace"

    # Parser
    # Malformed lines abort the run unless skip_malformed is set
    skip_malformed: bool = False
    referer_decoding: str = REFERER_DECODING_URI

    # Output
    http_timeout_seconds: float = 60.0
    http_headers: dict = field(default_factory=dict)

    # Logging
    log_level: str = "INFO"
    progress_interval_seconds: float = 5.0

    def validate(self) -> list[str]:
        """Validate settings values. Returns list of errors."""
        errors = []

        if self.chunk_size < 1:
            errors.append(f"chunk_size must be >= 1, got {self.chunk_size}")
        if self.referer_decoding not in REFERER_DECODING_MODES:
            errors.append(
                f"referer_decoding must be one of {', '.join(REFERER_DECODING_MODES)}, "
                f"got {self.referer_decoding!r}"
            )
        if self.encoding_errors not in ("strict", "replace", "ignore"):
            errors.append(
                f"encoding_errors must be strict, replace or ignore, "
                f"got {self.encoding_errors!r}"
            )
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            errors.append(f"encoding must be a known codec, got {self.encoding!r}")
        if self.http_timeout_seconds <= 0:
            errors.append(
                f"http_timeout_seconds must be > 0, got {self.http_timeout_seconds}"
            )
        if self.progress_interval_seconds <= 0:
            errors.append(
                f"progress_interval_seconds must be > 0, "
                f"got {self.progress_interval_seconds}"
            )
        if self.log_level.upper() not in _LOG_LEVELS:
            errors.append(f"log_level must be one of {', '.join(_LOG_LEVELS)}")

        return errors

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "input": {
                "chunk_size": self.chunk_size,
                "encoding": self.encoding,
                "encoding_errors": self.encoding_errors,
            },
            "parser": {
                "skip_malformed": self.skip_malformed,
                "referer_decoding": self.referer_decoding,
            },
            "output": {
                "http_timeout_seconds": self.http_timeout_seconds,
                "http_headers": dict(self.http_headers),
            },
            "logging": {
                "level": self.log_level,
                "progress_interval_seconds": self.progress_interval_seconds,
            },
        }

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> "Settings":
        """Create Settings from configuration dictionary (e.g., from YAML)."""
        inp = config.get("input") or {}
        parser = config.get("parser") or {}
        output = config.get("output") or {}
        log = config.get("logging") or {}

        return cls(
            chunk_size=int(inp.get("chunk_size", DEFAULT_CHUNK_SIZE)),
            encoding=inp.get("encoding", "utf-8"),
            encoding_errors=inp.get("encoding_errors", "replace"),
            skip_malformed=bool(parser.get("skip_malformed", False)),
            referer_decoding=parser.get("referer_decoding", REFERER_DECODING_URI),
            http_timeout_seconds=float(output.get("http_timeout_seconds", 60.0)),
            http_headers=dict(output.get("http_headers") or {}),
            log_level=str(log.get("level", "INFO")).upper(),
            progress_interval_seconds=float(
                log.get("progress_interval_seconds", 5.0)
            ),
        )

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""

        def safe_int(key: str, default: int) -> int:
            """Safely parse int from env var, using default on error."""
            try:
                return int(os.environ.get(key, str(default)))
            except ValueError:
                return default

        def safe_float(key: str, default: float) -> float:
            """Safely parse float from env var, using default on error."""
            try:
                return float(os.environ.get(key, str(default)))
            except ValueError:
                return default

        def safe_bool(key: str, default: bool) -> bool:
            """Safely parse bool from env var."""
            return os.environ.get(key, str(default).lower()).lower() == "true"

        return cls(
            chunk_size=safe_int("CDF_CHUNK_SIZE", DEFAULT_CHUNK_SIZE),
            encoding=os.environ.get("CDF_ENCODING", "utf-8"),
            encoding_errors=os.environ.get("CDF_ENCODING_ERRORS", "replace"),
            skip_malformed=safe_bool("CDF_SKIP_MALFORMED", False),
            referer_decoding=os.environ.get(
                "CDF_REFERER_DECODING", REFERER_DECODING_URI
            ),
            http_timeout_seconds=safe_float("CDF_HTTP_TIMEOUT_SECONDS", 60.0),
            log_level=os.environ.get("CDF_LOG_LEVEL", "INFO").upper(),
            progress_interval_seconds=safe_float(
                "CDF_PROGRESS_INTERVAL_SECONDS", 5.0
            ),
        )


# Default config file path
DEFAULT_CONFIG_PATH = Path("config.yaml")


@lru_cache
def get_settings(config_path: Optional[str] = None) -> Settings:
    """
    Get cached settings instance.

    Loads from a YAML config file if available (decrypting it with SOPS
    when it is encrypted), otherwise from env vars.

    Args:
        config_path: Optional path to the config file

    Returns:
        Settings instance
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    if path.exists():
        try:
            from .sops_loader import load_config_file

            config = load_config_file(path)
            return Settings.from_dict(config)
        except (OSError, RuntimeError, ValueError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Falling back to environment variables")

    return Settings.from_env()


def clear_settings_cache() -> None:
    """Clear the cached settings (useful for testing)."""
    get_settings.cache_clear()
