# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Redis client for the gateway cache and shared bootstrap state.

All keys are prefixed with a namespace (``olkalou:`` by default) so several
deployments can share one Redis server.

Example:
    from olkalou.infrastructure.cache import init_redis, get_redis

    await init_redis(settings)

    redis = get_redis()
    await redis.set("cache:users:all", rows, expire_seconds=300)
    await redis.hset("bootstrap_state", "grading_system_migrated", "true")
"""

import json
from typing import TYPE_CHECKING, Any, Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError as BaseRedisError

if TYPE_CHECKING:
    from olkalou.core.config.settings import Settings

_redis_client: Optional["RedisClient"] = None


class RedisError(Exception):
    """Exception raised for Redis operation failures.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying Redis error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class RedisClient:
    """Async Redis client with a key namespace.

    Values that are not strings are stored as JSON and decoded on read.

    Example:
        client = RedisClient(settings)
        await client.connect()
        await client.set("cache:books", rows, expire_seconds=60)
        rows = await client.get("cache:books")
        await client.close()
    """

    DEFAULT_NAMESPACE = "olkalou"

    def __init__(self, settings: "Settings", namespace: str = DEFAULT_NAMESPACE) -> None:
        """Initialize the Redis client.

        Args:
            settings: Application settings containing Redis configuration.
            namespace: Prefix applied to every key.
        """
        self._settings = settings
        self._namespace = namespace
        self._pool: Optional[ConnectionPool] = None
        self._redis: Optional[Redis] = None

    @property
    def namespace(self) -> str:
        return self._namespace

    async def connect(self) -> None:
        """Create the Redis connection pool.

        Raises:
            RedisError: If connection fails.
        """
        try:
            self._pool = ConnectionPool.from_url(
                self._settings.redis.url,
                max_connections=self._settings.redis.max_connections,
                decode_responses=True,
            )
            self._redis = Redis(connection_pool=self._pool)

            await self._redis.ping()
        except BaseRedisError as e:
            raise RedisError("Failed to connect to Redis", e) from e

    async def close(self) -> None:
        """Close the Redis connection pool."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None

        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None

    def _ensure_connected(self) -> Redis:
        if self._redis is None:
            raise RedisError("Redis client not connected. Call connect() first.")
        return self._redis

    def _key(self, key: str) -> str:
        return f"{self._namespace}:{key}"

    def _serialize(self, value: Any) -> str:
        if isinstance(value, str):
            return value
        return json.dumps(value, ensure_ascii=False, default=str)

    def _deserialize(self, value: Optional[str]) -> Any:
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value

    # ========== Key/value operations ==========

    async def set(
        self,
        key: str,
        value: Any,
        expire_seconds: Optional[int] = None,
    ) -> None:
        """Set a namespaced key.

        Args:
            key: The key, without namespace.
            value: The value (JSON serialized if not a string).
            expire_seconds: Optional expiration time in seconds.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            await redis.set(self._key(key), self._serialize(value), ex=expire_seconds)
        except BaseRedisError as e:
            raise RedisError(f"Failed to set key: {key}", e) from e

    async def get(self, key: str) -> Any:
        """Get a namespaced value, or None if missing or expired.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            value = await redis.get(self._key(key))
            return self._deserialize(value)
        except BaseRedisError as e:
            raise RedisError(f"Failed to get key: {key}", e) from e

    async def delete(self, key: str) -> bool:
        """Delete a namespaced key.

        Returns:
            True if the key was deleted, False if it didn't exist.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            result = await redis.delete(self._key(key))
            return result > 0
        except BaseRedisError as e:
            raise RedisError(f"Failed to delete key: {key}", e) from e

    async def delete_pattern(self, pattern: str = "*") -> int:
        """Delete every namespaced key matching a glob pattern.

        Args:
            pattern: Key pattern relative to the namespace.

        Returns:
            Number of keys deleted.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            keys = [key async for key in redis.scan_iter(match=self._key(pattern))]
            if keys:
                return await redis.delete(*keys)
            return 0
        except BaseRedisError as e:
            raise RedisError(f"Failed to delete keys: {pattern}", e) from e

    # ========== Hash operations ==========

    async def hget(self, key: str, field: str) -> Optional[str]:
        """Read one field of a namespaced hash.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            return await redis.hget(self._key(key), field)
        except BaseRedisError as e:
            raise RedisError(f"Failed to read hash field: {key}/{field}", e) from e

    async def hset(self, key: str, field: str, value: str) -> None:
        """Write one field of a namespaced hash.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            await redis.hset(self._key(key), field, value)
        except BaseRedisError as e:
            raise RedisError(f"Failed to write hash field: {key}/{field}", e) from e

    async def hdel(self, key: str, *fields: str) -> int:
        """Remove fields from a namespaced hash.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            return await redis.hdel(self._key(key), *fields)
        except BaseRedisError as e:
            raise RedisError(f"Failed to delete hash fields: {key}", e) from e

    async def hgetall(self, key: str) -> dict[str, str]:
        """Read a whole namespaced hash.

        Raises:
            RedisError: If the operation fails.
        """
        redis = self._ensure_connected()
        try:
            return await redis.hgetall(self._key(key))
        except BaseRedisError as e:
            raise RedisError(f"Failed to read hash: {key}", e) from e

    # ========== Health check ==========

    async def ping(self) -> bool:
        """Check if Redis is reachable."""
        try:
            redis = self._ensure_connected()
            await redis.ping()
            return True
        except (RedisError, BaseRedisError):
            return False


# ========== Module-level functions ==========


async def init_redis(settings: "Settings") -> RedisClient:
    """Initialize the global Redis client.

    Args:
        settings: Application settings containing Redis configuration.

    Returns:
        The connected client.

    Raises:
        RedisError: If connection fails.
    """
    global _redis_client

    client = RedisClient(settings)
    await client.connect()
    _redis_client = client
    return client


async def close_redis() -> None:
    """Close the global Redis client."""
    global _redis_client

    if _redis_client is not None:
        await _redis_client.close()
        _redis_client = None


def get_redis() -> RedisClient:
    """Get the global Redis client.

    Raises:
        RedisError: If Redis has not been initialized.
    """
    if _redis_client is None:
        raise RedisError("Redis not initialized. Call init_redis() first.")
    return _redis_client
