"""
Centralized Configuration Management for Jobly Services.

This module is the single source of truth for configuration across the Jobly
API and its tooling. It uses Pydantic's `BaseSettings` so every parameter is
typed, validated and loaded from the environment (or a local `.env` file),
keeping application code decoupled from where its settings come from.

Core Features:
- **Type Safety**: Every parameter is strongly typed and validated on load.
- **Environment Variable Loading**: Values come from environment variables,
  following the 12-Factor App methodology.
- **`.env` File Support**: `.env` in the working directory is read during local development.
- **Singleton Access**: `get_config` returns a lazily created, process-wide
  instance; `reset_config` drops it so tests can change the environment.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_SECRET_KEY = "jobly-dev-secret"


class JoblyConfig(BaseSettings):
    """
    Defines the complete configuration schema for Jobly services.

    Each attribute corresponds to an environment variable, named by the field
    alias. The class is organized into logical sections:
    - Runtime Environment: general application settings.
    - Database Connection: PostgreSQL credentials, or a full `DATABASE_URL`
      that takes precedence (used by the test suite to point at SQLite).
    - Authentication: the JWT signing secret and token lifetime.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # --- Runtime Environment ---
    environment: Literal["local", "test", "dev", "staging", "prod"] = Field(
        default="local",
        alias="JOBLY_ENV",
        description="The deployment environment (local, test, dev, staging, prod).",
    )
    version: str = Field(
        default="0.0.0",
        alias="VERSION",
        description="The semantic version of the running service, injected at deploy time.",
    )

    # --- PostgreSQL Connection ---
    pghost: str = Field(
        default="localhost", alias="PGHOST", description="Hostname of the PostgreSQL database."
    )
    pgport: int = Field(
        default=5432, alias="PGPORT", description="Port of the PostgreSQL database."
    )
    pguser: str = Field(
        default="jobly", alias="PGUSER", description="Username for the PostgreSQL database."
    )
    pgpassword: str = Field(
        default="jobly", alias="PGPASSWORD", description="Password for the PostgreSQL database."
    )
    pgdatabase: str = Field(
        default="jobly", alias="PGDATABASE", description="Name of the PostgreSQL database."
    )
    database_url: str | None = Field(
        default=None,
        alias="DATABASE_URL",
        description=(
            "A complete SQLAlchemy URL. When set it overrides the individual "
            "PG* settings, e.g. `sqlite://` for an in-memory test database."
        ),
    )
    sql_echo: bool = Field(
        default=False, alias="SQL_ECHO", description="Echo every statement SQLAlchemy emits."
    )

    # --- Authentication ---
    secret_key: str = Field(
        default=DEV_SECRET_KEY,
        alias="SECRET_KEY",
        description="Shared secret used to sign and verify HS256 tokens.",
    )
    token_exp_minutes: int = Field(
        default=60,
        alias="TOKEN_EXP_MINUTES",
        description="Lifetime of tokens issued by `create_token`, in minutes.",
    )

    @field_validator("pgport")
    @classmethod
    def validate_pgport(cls, v: int) -> int:
        """
        Ensures that the PostgreSQL port is within the valid TCP/IP port range.

        Raises:
            ValueError: If the port is not between 1 and 65535.
        """
        if not (1 <= v <= 65535):
            raise ValueError(f"Invalid PostgreSQL port: {v} (must be 1-65535)")
        return v

    @field_validator("token_exp_minutes")
    @classmethod
    def validate_token_exp(cls, v: int) -> int:
        """Clamps the token lifetime to a reasonable range (1 minute to 1 day)."""
        return max(1, min(v, 24 * 60))

    def model_post_init(self, __context: object) -> None:
        """
        Rejects configurations that are only safe for local development.

        Raises:
            ValueError: If the development signing secret is used in production.
        """
        if self.environment == "prod" and self.secret_key == DEV_SECRET_KEY:
            raise ValueError(
                "The development SECRET_KEY is not allowed in production (JOBLY_ENV=prod)."
            )

    def get_database_url(self, driver: str = "postgresql+psycopg2") -> str:
        """
        Returns the SQLAlchemy URL for the application database.

        Args:
            driver: The SQLAlchemy driver used when building the URL from the
                PG* settings. Ignored when `DATABASE_URL` is set.
        """
        if self.database_url:
            return self.database_url
        return f"{driver}://{self.pguser}:{self.pgpassword}@{self.pghost}:{self.pgport}/{self.pgdatabase}"

    def log_summary(self) -> dict[str, str | int]:
        """
        Generates a configuration summary suitable for logging at startup.

        Secrets are never included; a `DATABASE_URL` has its password redacted.
        """
        return {
            "environment": self.environment,
            "version": self.version,
            "database_url": self._redact_url(self.get_database_url()),
            "token_exp_minutes": self.token_exp_minutes,
        }

    @staticmethod
    def _redact_url(url: str) -> str:
        """Replaces the password part of a URL with '***'."""
        if "@" in url and "://" in url:
            scheme, rest = url.split("://", 1)
            auth, host = rest.split("@", 1)
            if ":" in auth:
                user, _ = auth.split(":", 1)
                return f"{scheme}://{user}:***@{host}"
        return url


_config: JoblyConfig | None = None


def get_config() -> JoblyConfig:
    """
    Provides access to the global, singleton `JoblyConfig` instance.

    Raises:
        pydantic.ValidationError: If the environment does not match the schema.
    """
    global _config
    if _config is None:
        _config = JoblyConfig()
    return _config


def reset_config() -> None:
    """
    Resets the global configuration singleton.

    Intended for tests that modify environment variables and need the
    configuration reloaded.
    """
    global _config
    _config = None
