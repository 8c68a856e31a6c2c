# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Remote store gateway using SQLAlchemy async.

The school data lives in the Postgres database of a hosted
backend-as-a-service. RemoteStoreGateway is the only path to it: it owns
the async engine, probes health, reads and inserts entity rows, and keeps
an optional expiring cache in Redis.

Uses SQLAlchemy 2.0 async API with asyncpg driver. Tables are addressed
through lightweight ``sa.table`` constructs built from the entity
models, so no ORM mapping or schema management happens here.

Example:
    from olkalou.infrastructure.database.connection import (
        init_remote_store,
        get_remote_store,
    )

    await init_remote_store(settings)

    gateway = get_remote_store()
    users = await gateway.query(User, filters={"user_type": "Principal"}, limit=1)
"""

import asyncio
import logging
import time
from datetime import datetime
from typing import TYPE_CHECKING, Any, Optional, TypeVar

import sqlalchemy as sa
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from olkalou.infrastructure.cache.redis_client import RedisClient, RedisError
from olkalou.infrastructure.database.models.base import RemoteEntity
from olkalou.utils.datetime import utc_now

if TYPE_CHECKING:
    from olkalou.core.config.settings import Settings

logger = logging.getLogger(__name__)

EntityT = TypeVar("EntityT", bound=RemoteEntity)

CACHE_PREFIX = "cache"
DEFAULT_CACHE_TTL_SECONDS = 300

# Failures that mean "the backend could not be reached" rather than a bug
_CONNECT_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)

_remote_store: Optional["RemoteStoreGateway"] = None


class RemoteStoreError(Exception):
    """Base exception for remote store operations.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying SQLAlchemy or driver error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class RemoteStoreConnectionError(RemoteStoreError):
    """The backend could not be reached or the gateway is not initialized."""


class QueryError(RemoteStoreError):
    """A read failed."""


class WriteError(RemoteStoreError):
    """An insert failed."""


class GatewayOptions(BaseModel):
    """Engine tuning.

    Attributes:
        pool_size: Connection pool size.
        max_overflow: Maximum overflow connections.
        command_timeout: Per-statement timeout in seconds.
        connect_timeout: Connection establishment timeout in seconds.
        statement_cache_size: asyncpg prepared statement cache. Set to 0
            behind a transaction-mode pooler.
        echo: Log every SQL statement.
    """

    pool_size: int = 5
    max_overflow: int = 10
    command_timeout: float = 30.0
    connect_timeout: float = 10.0
    statement_cache_size: int = 100
    echo: bool = False


class HealthCheckResult(BaseModel):
    """Outcome of a connectivity probe."""

    is_healthy: bool
    status: str
    message: str
    checked_at: datetime = Field(default_factory=utc_now)
    duration_ms: float = 0.0


def _table_for(entity_cls: type[RemoteEntity]) -> sa.TableClause:
    return sa.table(
        entity_cls.__tablename__,
        *(sa.column(name) for name in entity_cls.column_names()),
    )


class RemoteStoreGateway:
    """Async access to the hosted backend's tables.

    The engine is created by ``initialize()`` and replaced if it is called
    again. Every other operation requires an initialized gateway except
    ``health_check()``, which reports "Not Initialized" instead of raising.

    Example:
        gateway = RemoteStoreGateway(settings.remote_db.url)
        await gateway.initialize()
        books = await gateway.query(LibraryBook, limit=10)
        await gateway.close()
    """

    def __init__(
        self,
        url: Optional[str] = None,
        options: Optional[GatewayOptions] = None,
        redis_client: Optional[RedisClient] = None,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
    ) -> None:
        """Initialize the gateway without connecting.

        Args:
            url: Async SQLAlchemy URL of the backend database.
            options: Engine tuning.
            redis_client: Connected Redis client backing the cache. When
                None the cache is disabled.
            cache_ttl_seconds: Expiry for cached values unless a call
                passes its own.
        """
        self._url = url
        self._options = options or GatewayOptions()
        self._redis = redis_client
        self._cache_ttl_seconds = cache_ttl_seconds
        self._engine: Optional[AsyncEngine] = None
        self._init_lock = asyncio.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    @property
    def cache_enabled(self) -> bool:
        return self._redis is not None

    async def initialize(
        self,
        url: Optional[str] = None,
        options: Optional[GatewayOptions] = None,
    ) -> None:
        """Create the engine and verify the backend answers.

        Args:
            url: Overrides the URL given at construction.
            options: Overrides the options given at construction.

        Raises:
            RemoteStoreConnectionError: If no URL is configured or the
                connection test fails. The gateway stays uninitialized.
        """
        async with self._init_lock:
            target = url or self._url
            if not target or not target.strip():
                raise RemoteStoreConnectionError("Remote store URL is not configured")

            opts = options or self._options

            if self._engine is not None:
                await self._engine.dispose()
                self._engine = None

            engine: Optional[AsyncEngine] = None
            try:
                engine = create_async_engine(
                    target,
                    pool_size=opts.pool_size,
                    max_overflow=opts.max_overflow,
                    pool_pre_ping=True,
                    pool_recycle=1800,
                    echo=opts.echo,
                    connect_args={
                        "timeout": opts.connect_timeout,
                        "command_timeout": opts.command_timeout,
                        "statement_cache_size": opts.statement_cache_size,
                    },
                )
                async with engine.connect() as conn:
                    await conn.execute(sa.text("SELECT 1"))
            except _CONNECT_ERRORS as e:
                if engine is not None:
                    await engine.dispose()
                raise RemoteStoreConnectionError("Failed to initialize remote store", e) from e

            self._engine = engine
            self._url = target
            self._options = opts
            logger.info("Remote store initialized")

    async def try_initialize(self, max_retries: int = 3, delay: float = 2.0) -> bool:
        """Initialize, retrying with a growing delay.

        Args:
            max_retries: Number of attempts.
            delay: Seconds before the second attempt; grows 1.5x per retry.

        Returns:
            True once an attempt succeeds, False when all attempts failed.
        """
        for attempt in range(1, max_retries + 1):
            try:
                await self.initialize()
                return True
            except RemoteStoreConnectionError as e:
                logger.warning(
                    "Remote store initialization attempt %d/%d failed: %s",
                    attempt,
                    max_retries,
                    e,
                )
                if attempt < max_retries:
                    await asyncio.sleep(delay)
                    delay *= 1.5
        return False

    def _ensure_engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RemoteStoreConnectionError(
                "Remote store not initialized. Call initialize() first."
            )
        return self._engine

    async def health_check(self) -> HealthCheckResult:
        """Probe the backend with ``SELECT 1``. Never raises."""
        if self._engine is None:
            return HealthCheckResult(
                is_healthy=False,
                status="Not Initialized",
                message="Remote store has not been initialized",
            )

        started = time.perf_counter()
        try:
            async with self._engine.connect() as conn:
                await conn.execute(sa.text("SELECT 1"))
        except _CONNECT_ERRORS as e:
            return HealthCheckResult(
                is_healthy=False,
                status="Unhealthy",
                message=str(e),
                duration_ms=(time.perf_counter() - started) * 1000,
            )

        return HealthCheckResult(
            is_healthy=True,
            status="Healthy",
            message="Remote store is reachable",
            duration_ms=(time.perf_counter() - started) * 1000,
        )

    async def query(
        self,
        entity_cls: type[EntityT],
        filters: Optional[dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> list[EntityT]:
        """Read rows of one entity kind.

        Args:
            entity_cls: Entity model whose table is read.
            filters: Column name to value equality filters.
            limit: Maximum number of rows.

        Returns:
            Matching rows, unvalidated.

        Raises:
            RemoteStoreConnectionError: If the gateway is not initialized.
            QueryError: If a filter names an unknown column or the read fails.
        """
        engine = self._ensure_engine()
        table = _table_for(entity_cls)
        stmt = sa.select(table)

        for column_name, value in (filters or {}).items():
            if column_name not in table.c:
                raise QueryError(
                    f"Unknown column '{column_name}' for table '{entity_cls.__tablename__}'"
                )
            stmt = stmt.where(table.c[column_name] == value)

        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            async with engine.connect() as conn:
                result = await conn.execute(stmt)
                records = result.mappings().all()
        except _CONNECT_ERRORS as e:
            raise QueryError(f"Failed to query table '{entity_cls.__tablename__}'", e) from e

        return [entity_cls.from_record(dict(record)) for record in records]

    async def insert(self, row: RemoteEntity) -> None:
        """Insert one row.

        Raises:
            RemoteStoreConnectionError: If the gateway is not initialized.
            WriteError: If the insert fails.
        """
        engine = self._ensure_engine()
        table = _table_for(type(row))

        try:
            async with engine.begin() as conn:
                await conn.execute(sa.insert(table).values(**row.to_record()))
        except _CONNECT_ERRORS as e:
            raise WriteError(f"Failed to insert into '{row.__tablename__}'", e) from e

        logger.debug("Inserted %s row %s", row.__tablename__, row.id)

    # ========== Cache ==========

    async def get_cached(self, key: str) -> Any:
        """Read a cached value. Misses when the cache is disabled."""
        if self._redis is None:
            return None
        try:
            return await self._redis.get(f"{CACHE_PREFIX}:{key}")
        except RedisError as e:
            logger.warning("Cache read failed for %s: %s", key, e)
            return None

    async def set_cache(
        self,
        key: str,
        value: Any,
        expire_seconds: Optional[int] = None,
    ) -> None:
        """Cache a value. A no-op when the cache is disabled."""
        if self._redis is None:
            return
        try:
            await self._redis.set(
                f"{CACHE_PREFIX}:{key}",
                value,
                expire_seconds=expire_seconds or self._cache_ttl_seconds,
            )
        except RedisError as e:
            logger.warning("Cache write failed for %s: %s", key, e)

    async def clear_cache(self) -> int:
        """Drop every cached value.

        Returns:
            Number of entries removed.
        """
        if self._redis is None:
            return 0
        try:
            return await self._redis.delete_pattern(f"{CACHE_PREFIX}:*")
        except RedisError as e:
            logger.warning("Cache clear failed: %s", e)
            return 0

    async def close(self) -> None:
        """Dispose the engine and drop cached values."""
        await self.clear_cache()
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            logger.info("Remote store closed")


# ========== Module-level functions ==========


def options_from_settings(settings: "Settings") -> GatewayOptions:
    db = settings.remote_db
    return GatewayOptions(
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
        command_timeout=db.command_timeout,
        connect_timeout=db.connect_timeout,
        statement_cache_size=db.statement_cache_size,
        echo=settings.debug and settings.log_level == "DEBUG",
    )


async def init_remote_store(
    settings: "Settings",
    redis_client: Optional[RedisClient] = None,
) -> RemoteStoreGateway:
    """Initialize the global remote store gateway.

    Args:
        settings: Application settings containing remote store configuration.
        redis_client: Optional connected Redis client for the cache.

    Returns:
        The initialized gateway.

    Raises:
        RemoteStoreConnectionError: If the connection test fails.
    """
    global _remote_store

    gateway = RemoteStoreGateway(
        settings.remote_db.url,
        options=options_from_settings(settings),
        redis_client=redis_client,
        cache_ttl_seconds=settings.redis.cache_ttl_seconds,
    )
    await gateway.initialize()
    _remote_store = gateway
    return gateway


async def close_remote_store() -> None:
    """Close the global remote store gateway."""
    global _remote_store

    if _remote_store is not None:
        await _remote_store.close()
        _remote_store = None


def get_remote_store() -> RemoteStoreGateway:
    """Get the global remote store gateway.

    Raises:
        RemoteStoreConnectionError: If the gateway has not been initialized.
    """
    if _remote_store is None:
        raise RemoteStoreConnectionError(
            "Remote store not initialized. Call init_remote_store() first."
        )
    return _remote_store
