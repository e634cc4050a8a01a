"""
Record Mapper - Logger Unit Tests

Tests structured JSON logging:
- Logger setup and handler de-duplication
- Descriptor resolution events
- Statement and database error events
"""

import json
import logging
from io import StringIO

import pytest

from mapper import TableDescriptor
from sample_records import UserMapper
from utils.logger import (
    logger,
    log_database_error,
    log_descriptor_resolved,
    log_resolution_error,
    log_statement,
    setup_logger,
)


@pytest.fixture
def captured_logs():
    """Capture the mapper logger's JSON output at DEBUG level."""
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(logger.handlers[0].formatter)
    previous_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    try:
        yield stream
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)


def last_event(stream: StringIO) -> dict:
    lines = [line for line in stream.getvalue().splitlines() if line]
    return json.loads(lines[-1])


class TestSetupLogger:
    """Test logger setup and configuration."""

    def test_returns_logger_instance(self):
        test_logger = setup_logger("test_mapper_logger")

        assert isinstance(test_logger, logging.Logger)
        assert test_logger.name == "test_mapper_logger"

    def test_prevents_duplicate_handlers(self):
        first = len(setup_logger("test_mapper_duplicate").handlers)
        second = len(setup_logger("test_mapper_duplicate").handlers)

        assert first == second == 1

    def test_global_logger(self):
        assert logger.name == "record_mapper"
        assert logger.propagate is False


class TestMapperEvents:
    """Test mapper event helpers."""

    def test_log_descriptor_resolved(self, captured_logs):
        table = TableDescriptor.of(UserMapper)

        log_descriptor_resolved(UserMapper, table)

        event = last_event(captured_logs)
        assert event["message"] == "Table descriptor resolved"
        assert event["event_type"] == "descriptor_resolved"
        assert event["table_name"] == "users"
        assert event["primary_key"] == "id"
        assert event["column_count"] == 6

    def test_log_resolution_error(self, captured_logs):
        log_resolution_error(ValueError("no table"), UserMapper)

        event = last_event(captured_logs)
        assert event["levelname"] == "ERROR"
        assert event["mapper_type"] == "UserMapper"
        assert event["error_type"] == "ValueError"

    def test_log_statement(self, captured_logs):
        log_statement("query_by_id", "users")

        event = last_event(captured_logs)
        assert event["statement_kind"] == "query_by_id"
        assert event["table_name"] == "users"

    def test_log_database_error_includes_traceback(self, captured_logs):
        try:
            raise RuntimeError("disk full")
        except RuntimeError as e:
            log_database_error(e, "insert users")

        event = last_event(captured_logs)
        assert event["event_type"] == "database_error"
        assert event["query_context"] == "insert users"
        assert "exc_info" in event
