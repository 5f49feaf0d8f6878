"""Harness configuration using pydantic-settings.

Configuration hierarchy:
- PollingConfig: Readiness polling budget
- WebConfig: Embedded web server endpoint and shutdown
- ResourceConfig: Configuration resource lookup
- LoggingConfig: Logging behavior
- HarnessSettings: Main config aggregating all sub-configs

Environment variable prefix: GRAPHSERVER_
Example: GRAPHSERVER_POLL_INTERVAL=0.1
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PollingConfig(BaseSettings):
    """Readiness polling configuration.

    Default budget: 6 attempts x 0.5s = ~3s before a startup is declared
    timed out. backoff > 1.0 grows the interval per attempt, capped at
    max_interval.
    """

    model_config = SettingsConfigDict(env_prefix="GRAPHSERVER_POLL_")

    interval: float = Field(default=0.5, gt=0, description="Seconds between status checks")
    max_attempts: int = Field(default=6, ge=1, description="Number of waits before timing out")
    backoff: float = Field(default=1.0, ge=1.0, description="Interval multiplier per attempt")
    max_interval: float = Field(default=5.0, gt=0, description="Upper bound for a single wait")


class WebConfig(BaseSettings):
    """Embedded web server configuration."""

    model_config = SettingsConfigDict(env_prefix="GRAPHSERVER_WEB_")

    host: str = Field(default="localhost", description="Hostname the server binds to")
    port: int = Field(default=7473, ge=1, le=65535, description="Server port")
    shutdown_timeout: float = Field(
        default=5.0,
        description="Seconds to wait for the server thread to exit on stop",
    )
    log_level: str = Field(default="warning", description="uvicorn log level")


class ResourceConfig(BaseSettings):
    """Configuration resource lookup.

    Search path entries are tried in order before the working directory
    and the bundled resources directory.
    Example: GRAPHSERVER_RESOURCE_SEARCH_PATH='["tests/resources"]'
    """

    model_config = SettingsConfigDict(env_prefix="GRAPHSERVER_RESOURCE_")

    name: str = Field(default="test-db.properties", description="Configuration resource name")
    search_path: list[Path] = Field(default_factory=list)


class LoggingConfig(BaseSettings):
    """Logging configuration.

    Supports both text and JSON formats:
    - text: Human-readable for local runs
    - json: Structured logging for CI log collection
    """

    model_config = SettingsConfigDict(env_prefix="GRAPHSERVER_LOGGING_")

    level: str = Field(default="INFO", description="Log level (DEBUG, INFO, WARNING, ERROR)")
    format: str = Field(default="text", description="Log format (text, json)")
    service_name: str = Field(default="graphserver", description="Service identifier in logs")


class HarnessSettings(BaseSettings):
    """Main harness configuration aggregating all sub-configs.

    Environment variable prefix: GRAPHSERVER_
    Sub-configs use their own prefixes (GRAPHSERVER_POLL_, GRAPHSERVER_WEB_, etc.)
    """

    model_config = SettingsConfigDict(
        env_prefix="GRAPHSERVER_",
        env_nested_delimiter="__",
    )

    polling: PollingConfig = Field(default_factory=PollingConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    resources: ResourceConfig = Field(default_factory=ResourceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache
def get_settings() -> HarnessSettings:
    """Get cached harness configuration singleton."""
    return HarnessSettings()
