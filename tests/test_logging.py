"""Tests for logging context and operation lifecycle logging."""
import json
import logging
from datetime import datetime, timedelta

import pytest

from docstore.observability.logging_config import (
    ContextFormatter,
    OperationContext,
    OperationLogger,
    StructuredFormatter,
    generate_correlation_id,
    get_correlation_id,
    get_logger,
    get_profile_id,
    setup_logging,
)
from docstore.resilience.errors import ValidationError


class TestContext:

    def test_operation_context_sets_and_restores(self):
        assert get_profile_id() is None
        with OperationContext(correlation_id="corr-1", profile_id="p-1"):
            assert get_correlation_id() == "corr-1"
            assert get_profile_id() == "p-1"
        assert get_correlation_id() is None
        assert get_profile_id() is None

    def test_generated_correlation_id_format(self):
        corr_id = generate_correlation_id()
        assert corr_id.startswith("corr-")
        assert len(corr_id) == 17


class TestStructuredFormatter:

    def test_includes_context_ids(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)
        with OperationContext(correlation_id="corr-x", operation_id="op-y", profile_id="p-z"):
            payload = json.loads(StructuredFormatter().format(record))

        assert payload["message"] == "hello"
        assert payload["correlation_id"] == "corr-x"
        assert payload["operation_id"] == "op-y"
        assert payload["profile_id"] == "p-z"

    def test_timestamp_is_utc_and_unset_ids_are_omitted(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)
        payload = json.loads(StructuredFormatter(include_location=False).format(record))

        assert datetime.fromisoformat(payload["timestamp"]).utcoffset() == timedelta(0)
        assert "location" not in payload
        assert "correlation_id" not in payload

    def test_extra_data_and_fields(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)
        record.extra_data = {"event": "operation_start"}
        payload = json.loads(StructuredFormatter(extra_fields={"service": "docstore"}).format(record))

        assert payload["data"] == {"event": "operation_start"}
        assert payload["service"] == "docstore"


class TestContextFormatter:

    def test_prefixes_bound_ids(self):
        record = logging.LogRecord("test", logging.INFO, __file__, 1, "hello", None, None)
        with OperationContext(correlation_id="corr-x", operation_id="op-y"):
            line = ContextFormatter().format(record)

        assert "correlation=corr-x operation=op-y - hello" in line


class TestOperationLogger:

    def test_logs_success(self, caplog):
        logger = get_logger("test_operation")
        with caplog.at_level(logging.INFO, logger="test_operation"):
            with OperationLogger(logger, "move_files", profile_id="p-1"):
                pass

        events = [r.extra_data["event"] for r in caplog.records]
        assert events == ["operation_start", "operation_success"]

    def test_logs_failure_and_reraises(self, caplog):
        logger = get_logger("test_operation_fail")
        with caplog.at_level(logging.INFO, logger="test_operation_fail"):
            with pytest.raises(ValidationError):
                with OperationLogger(logger, "move_project"):
                    raise ValidationError(code="cant-move-to-same-team")

        assert caplog.records[-1].extra_data["event"] == "operation_failed"

    def test_setup_logging_level(self):
        setup_logging(level="WARNING")
        assert logging.getLogger().level == logging.WARNING
        setup_logging(level="INFO")
