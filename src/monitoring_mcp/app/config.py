"""
Application configuration module.

Uses pydantic-settings to load and validate configuration values from
environment variables (or a .env file). Construction is all-or-nothing:
a missing API key or a malformed value raises a ValidationError and no
Settings object is ever created.
"""

from typing import Literal, Optional

from pydantic import AnyHttpUrl, Field, PositiveFloat, PositiveInt, TypeAdapter, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_URL_ADAPTER = TypeAdapter(AnyHttpUrl)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """
    Validated process settings loaded from environment variables.

    Attributes:
        CLICKHOUSE_URL:       Base URL of the ClickHouse HTTP interface.
        CLICKHOUSE_TIMEOUT:   Timeout in seconds for a single ClickHouse request.
        MCP_API_KEY:          Shared secret clients send as a Bearer token. Required.
        MCP_HOST:             Interface the HTTP server binds to.
        MCP_PORT:             Port the HTTP server listens on (default: 3001).
        STARTUP_MAX_ATTEMPTS: How many times to probe ClickHouse before giving up.
        STARTUP_DELAY_MS:     Fixed pause between two startup probes.
        LOG_LEVEL:            Root logging level.
    """

    CLICKHOUSE_URL: str = "http://localhost:8123"
    CLICKHOUSE_TIMEOUT: PositiveFloat = 10.0

    MCP_API_KEY: str = Field(min_length=1)
    MCP_HOST: str = "0.0.0.0"
    MCP_PORT: PositiveInt = 3001

    # 30 x 2s covers the time docker compose needs to bring ClickHouse up.
    STARTUP_MAX_ATTEMPTS: PositiveInt = 30
    STARTUP_DELAY_MS: int = Field(default=2000, ge=0)

    LOG_LEVEL: LogLevel = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",         # Load variables from a .env file if present
        extra="ignore",          # Ignore extra env vars not listed above
        env_ignore_empty=True,   # FOO= behaves like FOO being unset
        frozen=True,
    )

    @field_validator("CLICKHOUSE_URL")
    @classmethod
    def _require_absolute_url(cls, value: str) -> str:
        try:
            _URL_ADAPTER.validate_python(value)
        except ValidationError:
            raise ValueError(f"CLICKHOUSE_URL must be an absolute http(s) URL, got {value!r}") from None
        return value

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value


def load_settings(env_file: Optional[str] = ".env", **overrides) -> Settings:
    """
    Build a Settings instance from the environment.

    Args:
        env_file:  Path of the .env file to read, or None to skip it.
        overrides: Field values that take precedence over the environment.

    Returns:
        Settings: The validated, immutable settings.

    Raises:
        pydantic.ValidationError: If a value is missing or invalid.
    """
    return Settings(_env_file=env_file, **overrides)
