"""
Tests for structured logging configuration.
"""
from __future__ import annotations

import json
import logging

from stablecoin_issuer.logging_config import (
    CorrelationIDFilter,
    LogContext,
    StructuredFormatter,
    get_correlation_id,
    log_compliance,
)


def _record(message: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("stablecoin_issuer.test", logging.INFO, __file__, 10, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestLogContext:
    """Tests for LogContext."""

    def test_sets_and_restores(self):
        assert get_correlation_id() is None
        with LogContext(correlation_id="tx_1", user_id="42"):
            assert get_correlation_id() == "tx_1"
            with LogContext(correlation_id="tx_2"):
                assert get_correlation_id() == "tx_2"
            assert get_correlation_id() == "tx_1"
        assert get_correlation_id() is None


class TestStructuredFormatter:
    """Tests for the JSON formatter."""

    def test_includes_context_and_extra(self):
        record = _record(compliance_action="blacklist")
        with LogContext(correlation_id="tx_abc", component="component_1"):
            CorrelationIDFilter().filter(record)
        data = json.loads(StructuredFormatter().format(record))

        assert data["message"] == "hello"
        assert data["level"] == "INFO"
        assert data["correlation_id"] == "tx_abc"
        assert data["component"] == "component_1"
        assert data["compliance_action"] == "blacklist"
        assert "user_id" not in data


class TestLogCompliance:
    def test_adds_action_fields(self, caplog):
        logger = logging.getLogger("stablecoin_issuer.compliance_test")
        with caplog.at_level(logging.INFO, logger=logger.name):
            log_compliance(logger, "info", "User blacklisted", action="blacklist", user_id="7")
        record = caplog.records[-1]
        assert record.compliance_action == "blacklist"
        assert record.subject_user_id == "7"
