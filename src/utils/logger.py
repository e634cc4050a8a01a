"""
Record Mapper - Structured Logging
Provides JSON-formatted logging so mapper and database events can be
filtered by event_type in any log aggregator.
"""

import logging
import sys
from pythonjsonlogger import jsonlogger

from .config import LOG_LEVEL, config


def setup_logger(name: str = __name__) -> logging.Logger:
    """
    Configure structured JSON logger.

    Args:
        name: Logger name (typically __name__ from calling module)

    Returns:
        Configured logger instance

    Example:
        >>> logger = setup_logger(__name__)
        >>> logger.info("Descriptor resolved", extra={
        ...     "table_name": "users",
        ...     "column_count": 6
        ... })
    """
    logger = logging.getLogger(name)

    # Prevent duplicate handlers; only this logger's own handlers count
    if logger.handlers:
        return logger

    level = getattr(logging, LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)

    formatter = jsonlogger.JsonFormatter(
        '%(asctime)s %(name)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%dT%H:%M:%S'
    )
    handler.setFormatter(formatter)

    logger.addHandler(handler)

    # Don't propagate to root logger
    logger.propagate = False

    return logger


# Global logger instance
logger = setup_logger('record_mapper')


def log_descriptor_resolved(mapper_type: type, table) -> None:
    """Log a freshly resolved table descriptor."""
    logger.debug("Table descriptor resolved", extra={
        "event_type": "descriptor_resolved",
        "mapper_type": mapper_type.__qualname__,
        "record_type": table.record_type.__qualname__,
        "table_name": table.table_name,
        "primary_key": table.primary_key_column,
        "column_count": len(table.columns),
        "environment": config.environment
    })


def log_resolution_error(error: Exception, mapper_type: type) -> None:
    """Log a mapper configuration failure before it is raised to the caller."""
    logger.error("Table descriptor resolution failed", extra={
        "event_type": "resolution_error",
        "mapper_type": getattr(mapper_type, '__qualname__', repr(mapper_type)),
        "error_type": type(error).__name__,
        "error_message": str(error)
    })


def log_statement(kind: str, table_name: str) -> None:
    """Log a synthesized statement about to be executed."""
    logger.debug("Executing mapped statement", extra={
        "event_type": "mapped_statement",
        "statement_kind": kind,
        "table_name": table_name
    })


def log_database_error(error: Exception, query_context: str = None) -> None:
    """Log database error with context."""
    logger.error("Database error", extra={
        "event_type": "database_error",
        "error_type": type(error).__name__,
        "error_message": str(error),
        "query_context": query_context
    }, exc_info=True)
