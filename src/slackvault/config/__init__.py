"""Configuration module for slackvault."""

from slackvault.config.loader import (
    ConfigError,
    ConfigFileNotFoundError,
    ConfigParseError,
    EnvVarNotFoundError,
    load_config,
)
from slackvault.config.models import (
    AppConfig,
    ArchiveConfig,
    DatabaseConfig,
    LoggingConfig,
    SearchConfig,
)

__all__ = [
    # Exceptions
    "ConfigError",
    "ConfigFileNotFoundError",
    "ConfigParseError",
    "EnvVarNotFoundError",
    # Functions
    "load_config",
    # Models
    "AppConfig",
    "ArchiveConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "SearchConfig",
]
