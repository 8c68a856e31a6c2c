# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

Settings are loaded from environment variables (and an optional ``.env``
file) with defaults suitable for local development.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from olkalou.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> settings.bootstrap.max_retry_attempts
    3
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Self

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SEED_PASSWORD = "12345"


class RemoteStoreSettings(BaseSettings):
    """Hosted Postgres (backend-as-a-service) connection configuration.

    Either set ``dsn`` to a full connection string, or set the individual
    components and let ``url`` assemble them.

    Attributes:
        dsn: Optional full connection URL. Overrides the components.
        user: Database role.
        password: Database password.
        host: Database host address.
        port: Database port number.
        database: Database name.
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
        command_timeout: Per-statement timeout in seconds.
        connect_timeout: Connection establishment timeout in seconds.
        statement_cache_size: asyncpg prepared statement cache. Set to 0
            behind a transaction-mode pooler.
    """

    model_config = SettingsConfigDict(
        env_prefix="REMOTE_DB_",
        extra="ignore",
    )

    dsn: SecretStr | None = None
    user: str = "postgres"
    password: SecretStr = SecretStr("postgres")
    host: str = "localhost"
    port: int = 5432
    database: str = "postgres"
    pool_size: int = 5
    max_overflow: int = 10
    command_timeout: float = 30.0
    connect_timeout: float = 10.0
    statement_cache_size: int = Field(default=100, ge=0)

    @property
    def url(self) -> str:
        """Build the async database URL."""
        if self.dsn is not None:
            dsn = self.dsn.get_secret_value()
            if dsn.startswith("postgresql://"):
                return dsn.replace("postgresql://", "postgresql+asyncpg://", 1)
            if dsn.startswith("postgres://"):
                return dsn.replace("postgres://", "postgresql+asyncpg://", 1)
            return dsn

        pwd = self.password.get_secret_value()
        return f"postgresql+asyncpg://{self.user}:{pwd}@{self.host}:{self.port}/{self.database}"


class RedisSettings(BaseSettings):
    """Redis configuration for the gateway cache and shared bootstrap state.

    Attributes:
        enabled: Whether a Redis server is available at all.
        host: Redis server host.
        port: Redis server port.
        password: Redis password.
        database: Redis database number.
        max_connections: Maximum connection pool size.
        cache_ttl_seconds: Expiry of gateway cache entries.
    """

    model_config = SettingsConfigDict(
        env_prefix="REDIS_",
        extra="ignore",
    )

    enabled: bool = False
    host: str = "localhost"
    port: int = 6379
    password: SecretStr | None = None
    database: int = 0
    max_connections: int = 10
    cache_ttl_seconds: int = Field(default=300, ge=1)

    @property
    def url(self) -> str:
        """Build the Redis connection URL."""
        if self.password is None:
            return f"redis://{self.host}:{self.port}/{self.database}"
        pwd = self.password.get_secret_value()
        return f"redis://:{pwd}@{self.host}:{self.port}/{self.database}"


class BootstrapSettings(BaseSettings):
    """Database bootstrap/migration configuration.

    Attributes:
        max_retry_attempts: Attempts per table probe before giving up.
        retry_delay_seconds: Base delay; attempt N waits N times this.
        insert_delay_seconds: Pause between seed inserts (rate limiting).
        user_insert_delay_seconds: Pause between default account pairs.
        schema_version: Migration version written by a completed run.
        state_backend: Where migration flags are persisted.
        state_file: JSON file used by the ``file`` backend.
        default_password: Password given to seeded staff and teacher accounts.
        seed_sample_data: Whether demo books, activities, fees and
            announcements are seeded.
    """

    model_config = SettingsConfigDict(
        env_prefix="BOOTSTRAP_",
        extra="ignore",
    )

    max_retry_attempts: int = Field(default=3, ge=1)
    retry_delay_seconds: float = Field(default=1.0, ge=0)
    insert_delay_seconds: float = Field(default=0.05, ge=0)
    user_insert_delay_seconds: float = Field(default=0.1, ge=0)
    schema_version: int = Field(default=2, ge=1)
    state_backend: Literal["file", "redis"] = "file"
    state_file: Path = Path(".olkalou/bootstrap_state.json")
    default_password: SecretStr = SecretStr(DEFAULT_SEED_PASSWORD)
    seed_sample_data: bool = True


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        remote_db: Remote store settings.
        redis: Redis settings.
        bootstrap: Bootstrap/migration settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    remote_db: RemoteStoreSettings = Field(default_factory=RemoteStoreSettings)
    redis: RedisSettings = Field(default_factory=RedisSettings)
    bootstrap: BootstrapSettings = Field(default_factory=BootstrapSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with insecure defaults.
        """
        if self.environment == "production":
            if self.bootstrap.default_password.get_secret_value() == DEFAULT_SEED_PASSWORD:
                raise ValueError(
                    "Default seed password must be changed in production. "
                    "Set BOOTSTRAP_DEFAULT_PASSWORD environment variable."
                )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
