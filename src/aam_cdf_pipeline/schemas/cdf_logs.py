"""
Destination table schema for parsed CDF logs.

The NDJSON produced by the pipeline loads into this table. Field names and
types must stay in step with LogRecord.to_dict(). The schema is written in
BigQuery's JSON schema format so it can be passed to `bq mk --schema`.
"""

import json

CDF_LOGS_TABLE = "aam_cdf_logs"

CDF_LOGS_SCHEMA = [
    {"name": "eventTime", "type": "TIMESTAMP", "mode": "REQUIRED"},
    {"name": "device", "type": "STRING", "mode": "NULLABLE"},
    {"name": "containerId", "type": "STRING", "mode": "NULLABLE"},
    {"name": "realizedTraits", "type": "STRING", "mode": "REPEATED"},
    {"name": "realizedSegments", "type": "STRING", "mode": "REPEATED"},
    {
        "name": "requestParameters",
        "type": "RECORD",
        "mode": "REPEATED",
        "fields": [
            {"name": "key", "type": "STRING", "mode": "NULLABLE"},
            {"name": "value", "type": "STRING", "mode": "NULLABLE"},
        ],
    },
    {"name": "referer", "type": "STRING", "mode": "NULLABLE"},
    {"name": "ip", "type": "STRING", "mode": "NULLABLE"},
    {"name": "mid", "type": "STRING", "mode": "NULLABLE"},
    {"name": "allSegments", "type": "STRING", "mode": "REPEATED"},
    {"name": "allTraits", "type": "STRING", "mode": "REPEATED"},
]

# Partitioning configuration (daily partitions keyed on the event time)
CDF_LOGS_PARTITION_FIELD = "eventTime"
CDF_LOGS_PARTITION_TYPE = "DAY"


def get_schema_field_names() -> list[str]:
    """Get top-level column names in schema order."""
    return [f["name"] for f in CDF_LOGS_SCHEMA]


def get_time_partitioning() -> dict:
    """Get the table's timePartitioning resource."""
    return {"type": CDF_LOGS_PARTITION_TYPE, "field": CDF_LOGS_PARTITION_FIELD}


def get_table_schema_json(indent: int = 2) -> str:
    """Get the schema as JSON text for `bq mk --schema`."""
    return json.dumps(CDF_LOGS_SCHEMA, indent=indent)
