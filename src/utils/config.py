"""
Record Mapper - Configuration Management
Reads settings from the environment, with python-dotenv loading a local
.env file during development.
"""

import os
from typing import Optional
from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()


class Config:
    """
    Environment-backed configuration.

    Values come from process environment variables; a .env file in the
    working directory is loaded first for local development.
    """

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'local')

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration value from the environment.

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        return os.getenv(key, default)

    def require(self, key: str) -> str:
        """
        Fetch a configuration value that has no sensible default.

        Raises:
            ConfigurationError: If the key is not set
        """
        value = self.get(key)
        if value is None or value == '':
            raise ConfigurationError(
                f"Required setting '{key}' is not set. "
                f"Export it or add it to your .env file."
            )
        return value

    def get_bool(self, key: str, default: bool) -> bool:
        """
        Get configuration value as boolean.

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Boolean value or default
        """
        value = self.get(key, str(default))
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')

    @property
    def is_local(self) -> bool:
        """Check if running in local development environment."""
        return self.environment == 'local'


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded."""
    pass


def database_url(cfg: Optional[Config] = None) -> str:
    """
    Resolve the database URL.

    Local development falls back to in-memory SQLite; any other environment
    must set DATABASE_URL explicitly.

    Raises:
        ConfigurationError: If DATABASE_URL is missing outside local
    """
    cfg = cfg or config
    if cfg.is_local:
        return cfg.get('DATABASE_URL') or LOCAL_DATABASE_URL
    return cfg.require('DATABASE_URL')


# Global configuration instance
config = Config()


# Database configuration
LOCAL_DATABASE_URL = 'sqlite://'
DB_ECHO = config.get_bool('DB_ECHO', False)

# Logging configuration
LOG_LEVEL = config.get('LOG_LEVEL', 'INFO')
