"""Configuration models and loaders."""

from .config import (
    Config,
    ConfigurationError,
    DatabaseConfig,
    LoggingConfig,
    MigrationConfig,
    WorkOSConfig,
)

__all__ = [
    'Config',
    'ConfigurationError',
    'DatabaseConfig',
    'LoggingConfig',
    'MigrationConfig',
    'WorkOSConfig',
]
