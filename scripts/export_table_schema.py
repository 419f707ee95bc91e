#!/usr/bin/env python3
"""
Export the destination table schema for parsed CDF logs.

Writes the JSON schema that matches the pipeline's NDJSON output, for use
when provisioning the table, e.g.:

    python scripts/export_table_schema.py -o schema.json
    bq mk --table --schema schema.json \\
        --time_partitioning_type DAY --time_partitioning_field eventTime \\
        my_dataset.aam_cdf_logs
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from aam_cdf_pipeline.schemas import (
    CDF_LOGS_PARTITION_FIELD,
    CDF_LOGS_PARTITION_TYPE,
    CDF_LOGS_TABLE,
    get_table_schema_json,
)


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Export the CDF logs table schema as JSON"
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Write the schema to this file instead of stdout",
    )
    args = parser.parse_args(argv)

    schema_json = get_table_schema_json()

    if args.output:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(schema_json + "\n", encoding="utf-8")
        print(f"✓ Schema for {CDF_LOGS_TABLE} written to {args.output}")
        print(
            f"  Partitioning: {CDF_LOGS_PARTITION_TYPE} on {CDF_LOGS_PARTITION_FIELD}"
        )
    else:
        print(schema_json)

    return 0


if __name__ == "__main__":
    sys.exit(main())
