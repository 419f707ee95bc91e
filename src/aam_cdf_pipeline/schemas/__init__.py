"""Schemas for parsed CDF log storage."""

from .cdf_logs import (
    CDF_LOGS_PARTITION_FIELD,
    CDF_LOGS_PARTITION_TYPE,
    CDF_LOGS_SCHEMA,
    CDF_LOGS_TABLE,
    get_schema_field_names,
    get_table_schema_json,
    get_time_partitioning,
)

__all__ = [
    "CDF_LOGS_TABLE",
    "CDF_LOGS_SCHEMA",
    "CDF_LOGS_PARTITION_FIELD",
    "CDF_LOGS_PARTITION_TYPE",
    "get_schema_field_names",
    "get_time_partitioning",
    "get_table_schema_json",
]
