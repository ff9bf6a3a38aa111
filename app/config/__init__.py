"""Configuration management for the candidate notification service."""

from .environment import (
    DEFAULT_DATABASE_URL,
    EnvironmentConfig,
    load_database_url,
    load_environment_config,
)
from .exceptions import ConfigurationError
from .loader import load_app_config, load_config, validate_config_file
from .models import (
    AppConfig,
    EmailConfig,
    LogFormat,
    LogLevel,
    LoggingConfig,
    NotificationsConfig,
    OrganizationConfig,
    ServerConfig,
)

__all__ = [
    # Loader functions
    "load_config",
    "load_app_config",
    "validate_config_file",
    "load_environment_config",
    "DEFAULT_DATABASE_URL",
    "load_database_url",
    # Configuration models
    "AppConfig",
    "EmailConfig",
    "OrganizationConfig",
    "ServerConfig",
    "NotificationsConfig",
    "LoggingConfig",
    "EnvironmentConfig",
    # Enums
    "LogLevel",
    "LogFormat",
    # Exceptions
    "ConfigurationError",
]
