"""
Unit tests for the CDF logs table schema.

The schema must describe exactly what the encoder emits.
"""

import json

from aam_cdf_pipeline.config import ARRAY_FIELDS, FIELD_NAMES
from aam_cdf_pipeline.ingestion import LogRecord
from aam_cdf_pipeline.schemas import (
    CDF_LOGS_SCHEMA,
    get_schema_field_names,
    get_table_schema_json,
    get_time_partitioning,
)


class TestCdfLogsSchema:
    """Tests for CDF_LOGS_SCHEMA."""

    def test_field_names_match_record(self):
        record = LogRecord(eventTime="t", device="d", containerId="c")
        assert get_schema_field_names() == list(record.to_dict())

    def test_field_names_match_cdf_order(self):
        assert get_schema_field_names() == list(FIELD_NAMES)

    def test_array_fields_repeated(self):
        by_name = {f["name"]: f for f in CDF_LOGS_SCHEMA}
        for name in ARRAY_FIELDS:
            assert by_name[name]["mode"] == "REPEATED"
            assert by_name[name]["type"] == "STRING"

    def test_request_parameters_record(self):
        by_name = {f["name"]: f for f in CDF_LOGS_SCHEMA}
        params = by_name["requestParameters"]
        assert params["type"] == "RECORD"
        assert params["mode"] == "REPEATED"
        assert [f["name"] for f in params["fields"]] == ["key", "value"]

    def test_time_partitioning(self):
        assert get_time_partitioning() == {"type": "DAY", "field": "eventTime"}

    def test_schema_json(self):
        assert json.loads(get_table_schema_json()) == CDF_LOGS_SCHEMA
