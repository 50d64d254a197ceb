"""Configuration module for the product catalog service.

Loads settings from environment-specific config files:
- APP_ENV=dev  → config_dev.yaml
- APP_ENV=test → config_test.yaml
- Default      → config.yaml

Database credentials are loaded from the environment (.env file).
Fails fast with clear error messages if required configuration is missing.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv


DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass


def _get_project_root() -> Path:
    """Get the project root directory (where config.yaml lives)."""
    # Navigate from product_catalog/config/ up to project root
    return Path(__file__).parent.parent.parent


def _get_config_filename() -> str:
    """Get config filename based on APP_ENV environment variable."""
    app_env = os.environ.get("APP_ENV", "").lower()

    if app_env == "dev":
        return "config_dev.yaml"
    elif app_env == "test":
        return "config_test.yaml"
    else:
        return "config.yaml"


def _load_yaml_config() -> dict:
    """Load configuration from environment-specific config file."""
    config_filename = _get_config_filename()
    config_path = _get_project_root() / config_filename

    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}. "
            f"Set APP_ENV to 'dev' or 'test', or create {config_filename}."
        )

    with open(config_path, "r") as f:
        return yaml.safe_load(f) or {}


def _get_required_env(key: str) -> str:
    """Get required environment variable or raise ConfigurationError."""
    value = os.environ.get(key)
    if not value:
        raise ConfigurationError(
            f"Required environment variable '{key}' is not set. "
            f"Please add it to your .env file."
        )
    return value


def _get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get optional environment variable with default."""
    return os.environ.get(key, default)


def _as_int(key: str, value) -> int:
    """Convert a setting to int or raise ConfigurationError naming the setting."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Setting '{key}' must be an integer, got {value!r}")


@dataclass(frozen=True)
class DatabaseConfig:
    """PostgreSQL connection configuration."""
    host: str
    port: int
    name: str
    user: str
    password: str
    min_pool_size: int
    max_pool_size: int

    @property
    def conninfo(self) -> str:
        """libpq connection string for psycopg."""
        return (
            f"host={self.host} port={self.port} dbname={self.name} "
            f"user={self.user} password={self.password}"
        )


@dataclass(frozen=True)
class ServerConfig:
    """HTTP server configuration."""
    host: str
    port: int


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration."""
    level: str
    format: str


@dataclass(frozen=True)
class StartupConfig:
    """Startup behaviour."""
    run_checks: bool


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration container."""
    database: DatabaseConfig
    server: ServerConfig
    logging: LoggingConfig
    startup: StartupConfig


def load_config() -> AppConfig:
    """
    Load and validate all application configuration.

    Loads from config.yaml for non-sensitive settings and .env for
    database credentials. Host and port may be overridden from the
    environment (DB_HOST, DB_PORT).

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    # Load environment variables from .env file
    load_dotenv()

    yaml_config = _load_yaml_config()

    # Build Database config
    db_section = yaml_config.get("database", {})

    min_pool_size = _as_int("database.min_pool_size", db_section.get("min_pool_size", 1))
    max_pool_size = _as_int("database.max_pool_size", db_section.get("max_pool_size", 5))
    if min_pool_size < 1 or max_pool_size < min_pool_size:
        raise ConfigurationError(
            f"Invalid pool size: min={min_pool_size}, max={max_pool_size}"
        )

    database_config = DatabaseConfig(
        host=_get_optional_env("DB_HOST") or db_section.get("host", "localhost"),
        port=_as_int("DB_PORT", _get_optional_env("DB_PORT") or db_section.get("port", 5432)),
        name=_get_required_env("DB_NAME"),
        user=_get_required_env("DB_USER"),
        password=_get_required_env("DB_PASSWORD"),
        min_pool_size=min_pool_size,
        max_pool_size=max_pool_size,
    )

    # Build Server config
    server_section = yaml_config.get("server", {})

    server_config = ServerConfig(
        host=server_section.get("host", "0.0.0.0"),
        port=_as_int("server.port", server_section.get("port", 3000)),
    )

    # Build Logging config
    logging_section = yaml_config.get("logging", {})

    logging_config = LoggingConfig(
        level=str(logging_section.get("level", "INFO")).upper(),
        format=logging_section.get("format", DEFAULT_LOG_FORMAT),
    )

    startup_section = yaml_config.get("startup", {})

    startup_config = StartupConfig(
        run_checks=bool(startup_section.get("run_checks", True)),
    )

    return AppConfig(
        database=database_config,
        server=server_config,
        logging=logging_config,
        startup=startup_config,
    )


# Module-level singleton for convenience
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Get the application configuration singleton.

    Lazy-loads configuration on first access.
    Config file is selected based on APP_ENV environment variable.

    Returns:
        AppConfig: Application configuration.

    Raises:
        ConfigurationError: If required configuration is missing.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_environment() -> str:
    """Get current environment name: 'dev', 'test' or 'default'."""
    app_env = os.environ.get("APP_ENV", "").lower()
    return app_env if app_env in ("dev", "test") else "default"


def reset_config() -> None:
    """Reset the config singleton. Useful for testing."""
    global _config
    _config = None
