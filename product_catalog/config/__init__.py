"""Configuration module."""

from product_catalog.config.configuration import (
    AppConfig,
    ConfigurationError,
    DatabaseConfig,
    LoggingConfig,
    ServerConfig,
    StartupConfig,
    get_config,
    get_environment,
    load_config,
    reset_config,
)

__all__ = [
    "AppConfig",
    "ConfigurationError",
    "DatabaseConfig",
    "LoggingConfig",
    "ServerConfig",
    "StartupConfig",
    "get_config",
    "get_environment",
    "load_config",
    "reset_config",
]
