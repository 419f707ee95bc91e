"""CDF to NDJSON pipeline module."""

from .cdf_pipeline import (
    CDFPipeline,
    PipelineResult,
    convert_file,
    run,
    setup_logging,
)

__all__ = [
    "CDFPipeline",
    "PipelineResult",
    "run",
    "convert_file",
    "setup_logging",
]
