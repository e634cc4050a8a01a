"""
Record Mapper - Database Connection Management
Provides the SQLAlchemy engine and transactional connections mappers run on.
"""

from contextlib import contextmanager
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, Connection
from typing import Generator, Optional

from utils.config import DB_ECHO, config, database_url
from utils.logger import logger, log_database_error


class DatabaseConnection:
    """
    Manages a lazily created SQLAlchemy engine.

    Without an explicit URL the engine is built from DATABASE_URL, which
    must be set outside local development. Any SQLAlchemy-supported driver
    can be used as long as it is installed.
    """

    def __init__(self, url: Optional[str] = None):
        self._url = url
        self._engine: Engine = None

    def get_engine(self) -> Engine:
        """
        Get or create the SQLAlchemy engine.

        Returns:
            SQLAlchemy Engine instance

        Raises:
            ConfigurationError: If no URL is configured outside local
            DatabaseConnectionError: If engine creation fails
        """
        if self._engine is None:
            url = self._url or database_url(config)
            try:
                self._engine = create_engine(
                    url,
                    echo=DB_ECHO,
                    hide_parameters=True,  # Keep bound values out of logs
                )

                logger.info("Database engine initialized", extra={
                    "dialect": self._engine.dialect.name,
                    "environment": config.environment
                })

            except Exception as e:
                log_database_error(e, "Failed to create database engine")
                raise DatabaseConnectionError(f"Failed to create database engine: {e}")

        return self._engine

    @contextmanager
    def get_connection(self) -> Generator[Connection, None, None]:
        """
        Context manager for database connections.

        Commits when the block completes, rolls back and re-raises on error.

        Example:
            >>> with db.get_connection() as conn:
            ...     user = UserMapper(conn).query_by_id(1)
        """
        engine = self.get_engine()
        connection = engine.connect()
        try:
            yield connection
            connection.commit()
        except Exception as e:
            connection.rollback()
            log_database_error(e, "Transaction failed, rolled back")
            raise
        finally:
            connection.close()

    def close(self):
        """Dispose of the engine and its connections."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("Database engine closed")


class DatabaseConnectionError(Exception):
    """Raised when database connection fails."""
    pass


# Global database connection instance
db = DatabaseConnection()


def get_db_connection():
    """
    Get database connection context manager.

    Example:
        >>> with get_db_connection() as conn:
        ...     UserMapper(conn).insert(user)
    """
    return db.get_connection()
