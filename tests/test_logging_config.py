"""Tests for structured logging setup."""
import io
import json
import logging

import pytest
import structlog

from doctor_finder.logging_config import (
    QUIET_LOGGERS,
    SERVICE_NAME,
    bind_doctor,
    generate_trace_id,
    get_logger,
    request_context,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logging():
    """Put the default configuration back after each test."""
    yield
    structlog.contextvars.clear_contextvars()
    setup_logging()


def read_lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


class TestStructuredLogging:

    def test_json_entries_carry_service_and_level(self):
        stream = io.StringIO()
        setup_logging(log_level="INFO", json_logs=True, stream=stream)

        get_logger("doctor_finder.tests").info("doctor_search_completed", matched=1)

        [entry] = read_lines(stream)
        assert entry["event"] == "doctor_search_completed"
        assert entry["matched"] == 1
        assert entry["level"] == "info"
        assert entry["service"] == SERVICE_NAME
        assert entry["logger"] == "doctor_finder.tests"
        assert "timestamp" in entry

    def test_level_filters_entries(self):
        stream = io.StringIO()
        setup_logging(log_level="warning", json_logs=True, stream=stream)

        logger = get_logger("doctor_finder.tests")
        logger.info("hidden")
        logger.warning("shown")

        assert [entry["event"] for entry in read_lines(stream)] == ["shown"]
        assert logging.getLogger().level == logging.WARNING

    def test_stdlib_records_rendered_with_same_fields(self):
        stream = io.StringIO()
        setup_logging(json_logs=True, stream=stream)

        logging.getLogger("uvicorn.error").warning("worker restarted")

        [entry] = read_lines(stream)
        assert entry["event"] == "worker restarted"
        assert entry["service"] == SERVICE_NAME

    def test_client_loggers_quieted(self):
        setup_logging(log_level="DEBUG")

        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING

    def test_trace_ids_are_unique_hex(self):
        first, second = generate_trace_id(), generate_trace_id()

        assert len(first) == 12
        int(first, 16)
        assert first != second


class TestRequestContext:

    def test_request_fields_bound_into_entries(self):
        stream = io.StringIO()
        setup_logging(json_logs=True, stream=stream)

        with request_context("abc123"):
            bind_doctor("doc-1")
            get_logger("doctor_finder.tests").info("next_slot_resolved")

        [entry] = read_lines(stream)
        assert entry["trace_id"] == "abc123"
        assert entry["doctor_id"] == "doc-1"

    def test_fields_do_not_outlive_request(self):
        structlog.contextvars.bind_contextvars(worker="w1")

        with request_context("abc123"):
            bind_doctor("doc-1")
            assert structlog.contextvars.get_contextvars() == {"trace_id": "abc123", "doctor_id": "doc-1"}

        assert structlog.contextvars.get_contextvars() == {"worker": "w1"}
