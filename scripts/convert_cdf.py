#!/usr/bin/env python3
"""
Convert an Adobe Audience Manager CDF file into NDJSON.

Reads a gzip-compressed CDF file and writes one JSON object per line to a
file, standard output or an HTTP endpoint.

Usage:
    # Local file to local file
    python scripts/convert_cdf.py data/feed.gz data/feed.ndjson

    # Write to stdout
    python scripts/convert_cdf.py data/feed.gz - > feed.ndjson

    # POST to an ingestion endpoint
    python scripts/convert_cdf.py data/feed.gz https://ingest.example.com/cdf

    # Skip malformed lines instead of aborting
    python scripts/convert_cdf.py data/feed.gz out.ndjson --skip-malformed
"""

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aam_cdf_pipeline.config import get_settings
from aam_cdf_pipeline.pipeline import CDFPipeline, setup_logging

logger = logging.getLogger(__name__)


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Convert Adobe Audience Manager CDF files to NDJSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/convert_cdf.py data/feed.gz data/feed.ndjson
  python scripts/convert_cdf.py data/feed.gz - > feed.ndjson
  python scripts/convert_cdf.py data/feed.gz https://ingest.example.com/cdf
  python scripts/convert_cdf.py data/feed.gz out.ndjson --skip-malformed
        """,
    )

    parser.add_argument("input", type=Path, help="gzip-compressed CDF file")
    parser.add_argument(
        "output",
        type=str,
        help="Output NDJSON file, '-' for stdout, or an http(s) URL",
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML config file, plain or SOPS-encrypted (default: config.yaml)",
    )
    parser.add_argument(
        "--skip-malformed",
        action="store_true",
        default=None,
        help="Skip malformed lines instead of aborting the run",
    )
    parser.add_argument(
        "--referer-decoding",
        choices=["uri", "component"],
        help="How to percent-decode the referer field (default: uri)",
    )
    parser.add_argument(
        "--chunk-size",
        type=int,
        help="Bytes read from the input per chunk (default: 65536)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    if args.chunk_size is not None and args.chunk_size <= 0:
        parser.error("--chunk-size must be greater than 0")

    if not args.input.is_file():
        parser.error(f"Input file not found: {args.input}")

    settings = get_settings(args.config)
    overrides = {}
    if args.skip_malformed is not None:
        overrides["skip_malformed"] = args.skip_malformed
    if args.referer_decoding:
        overrides["referer_decoding"] = args.referer_decoding
    if args.chunk_size:
        overrides["chunk_size"] = args.chunk_size
    if overrides:
        settings = replace(settings, **overrides)

    errors = settings.validate()
    if errors:
        for error in errors:
            print(f"❌ Invalid setting: {error}", file=sys.stderr)
        return 1

    setup_logging(level=logging.DEBUG if args.verbose else settings.log_level)

    # Summary goes to stderr so stdout stays clean NDJSON
    out = sys.stderr
    print(file=out)
    print("📥 CDF to NDJSON", file=out)
    print("=" * 50, file=out)
    print(f"  Input: {args.input}", file=out)
    print(f"  Output: {args.output}", file=out)
    print(f"  Skip Malformed: {settings.skip_malformed}", file=out)
    print(f"  Referer Decoding: {settings.referer_decoding}", file=out)
    print(file=out)

    try:
        result = CDFPipeline(settings).run(args.input, args.output)
    except KeyboardInterrupt:
        print("\n⚠️  Interrupted by user", file=out)
        return 130
    except Exception as e:
        logger.exception("Unexpected error during conversion")
        print(f"❌ Fatal error: {e}", file=out)
        return 1

    print("📊 Conversion Summary", file=out)
    print("=" * 50, file=out)
    print(f"  Lines Read: {result.lines_read:,}", file=out)
    print(f"  Records Written: {result.records_written:,}", file=out)
    if result.lines_skipped:
        print(f"  Lines Skipped: {result.lines_skipped:,}", file=out)
    print(f"  Duration: {result.duration_seconds:.1f}s", file=out)

    if not result.success:
        print(file=out)
        print(f"❌ {type(result.error).__name__}: {result.error}", file=out)
        return 1

    print("✅ Done", file=out)
    return 0


if __name__ == "__main__":
    sys.exit(main())
