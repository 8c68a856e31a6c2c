# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the remote store gateway and the Redis client.

Nothing here talks to a server: the gateway is exercised uninitialized
and the Redis connection is replaced by mocks.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as BaseRedisConnectionError

from olkalou.core.config.settings import RedisSettings, RemoteStoreSettings, Settings
from olkalou.infrastructure.cache.redis_client import RedisClient, RedisError
from olkalou.infrastructure.database.connection import (
    DEFAULT_CACHE_TTL_SECONDS,
    GatewayOptions,
    QueryError,
    RemoteStoreConnectionError,
    RemoteStoreError,
    RemoteStoreGateway,
    _table_for,
    get_remote_store,
    init_remote_store,
    options_from_settings,
)
from olkalou.infrastructure.database.models import Student, User


@pytest.fixture
def redis_client() -> RedisClient:
    """RedisClient whose connection is a mock."""
    client = RedisClient(Settings())
    client._redis = MagicMock()
    return client


class TestRemoteStoreError:
    """Tests for the error hierarchy."""

    def test_str_includes_original_error(self) -> None:
        error = QueryError("Failed to query table 'users'", ValueError("boom"))

        assert str(error) == "Failed to query table 'users': boom"
        assert isinstance(error, RemoteStoreError)

    def test_str_without_original_error(self) -> None:
        assert str(RemoteStoreConnectionError("down")) == "down"


class TestTableMapping:
    """Tests for table constructs built from entity models."""

    def test_table_uses_tablename_and_aliases(self) -> None:
        table = _table_for(Student)

        assert table.name == "students"
        assert "class" in table.c
        assert "class_name" not in table.c
        assert "id" in table.c


class TestUninitializedGateway:
    """Tests for a gateway before initialize()."""

    @pytest.mark.asyncio
    async def test_health_check_reports_not_initialized(self) -> None:
        gateway = RemoteStoreGateway("postgresql+asyncpg://u:p@localhost/db")

        result = await gateway.health_check()

        assert result.is_healthy is False
        assert result.status == "Not Initialized"
        assert gateway.is_initialized is False

    @pytest.mark.asyncio
    async def test_query_requires_initialize(self) -> None:
        gateway = RemoteStoreGateway()

        with pytest.raises(RemoteStoreConnectionError):
            await gateway.query(User, limit=1)

    @pytest.mark.asyncio
    async def test_insert_requires_initialize(self) -> None:
        gateway = RemoteStoreGateway()

        with pytest.raises(RemoteStoreConnectionError):
            await gateway.insert(User.draft())

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", [None, "", "   "])
    async def test_initialize_requires_url(self, url) -> None:
        gateway = RemoteStoreGateway(url)

        with pytest.raises(RemoteStoreConnectionError, match="not configured"):
            await gateway.initialize()

        assert gateway.is_initialized is False

    @pytest.mark.asyncio
    async def test_try_initialize_gives_up(self, monkeypatch) -> None:
        """Test that try_initialize retries, then reports failure."""
        gateway = RemoteStoreGateway("postgresql+asyncpg://u:p@localhost/db")
        attempts = AsyncMock(side_effect=RemoteStoreConnectionError("refused"))
        monkeypatch.setattr(gateway, "initialize", attempts)

        assert await gateway.try_initialize(max_retries=3, delay=0) is False
        assert attempts.await_count == 3

    @pytest.mark.asyncio
    async def test_try_initialize_recovers(self, monkeypatch) -> None:
        gateway = RemoteStoreGateway("postgresql+asyncpg://u:p@localhost/db")
        attempts = AsyncMock(side_effect=[RemoteStoreConnectionError("refused"), None])
        monkeypatch.setattr(gateway, "initialize", attempts)

        assert await gateway.try_initialize(max_retries=3, delay=0) is True
        assert attempts.await_count == 2

    @pytest.mark.asyncio
    async def test_close_without_engine(self) -> None:
        gateway = RemoteStoreGateway()

        await gateway.close()

        assert gateway.is_initialized is False

    def test_get_remote_store_before_init(self) -> None:
        with pytest.raises(RemoteStoreConnectionError):
            get_remote_store()


class TestGatewayCache:
    """Tests for the expiring cache."""

    @pytest.mark.asyncio
    async def test_cache_disabled_without_redis(self) -> None:
        gateway = RemoteStoreGateway()

        await gateway.set_cache("books", [1, 2])

        assert gateway.cache_enabled is False
        assert await gateway.get_cached("books") is None
        assert await gateway.clear_cache() == 0

    @pytest.mark.asyncio
    async def test_cache_uses_prefixed_keys(self) -> None:
        redis = MagicMock()
        redis.set = AsyncMock()
        redis.get = AsyncMock(return_value=[1, 2])
        gateway = RemoteStoreGateway(redis_client=redis, cache_ttl_seconds=60)

        await gateway.set_cache("books", [1, 2])
        cached = await gateway.get_cached("books")

        redis.set.assert_awaited_once_with("cache:books", [1, 2], expire_seconds=60)
        redis.get.assert_awaited_once_with("cache:books")
        assert cached == [1, 2]

    @pytest.mark.asyncio
    async def test_entries_expire_by_default(self) -> None:
        redis = MagicMock()
        redis.set = AsyncMock()
        gateway = RemoteStoreGateway(redis_client=redis)

        await gateway.set_cache("books", [1, 2])
        await gateway.set_cache("fees", {"total": 45000}, expire_seconds=5)

        assert redis.set.await_args_list[0].kwargs == {"expire_seconds": DEFAULT_CACHE_TTL_SECONDS}
        assert redis.set.await_args_list[1].kwargs == {"expire_seconds": 5}

    @pytest.mark.asyncio
    async def test_init_remote_store_uses_configured_ttl(self, monkeypatch) -> None:
        monkeypatch.setattr(RemoteStoreGateway, "initialize", AsyncMock())
        redis = MagicMock()
        redis.set = AsyncMock()
        settings = Settings(redis=RedisSettings(cache_ttl_seconds=45))

        gateway = await init_remote_store(settings, redis_client=redis)
        await gateway.set_cache("books", [1, 2])

        assert get_remote_store() is gateway
        redis.set.assert_awaited_once_with("cache:books", [1, 2], expire_seconds=45)

    @pytest.mark.asyncio
    async def test_cache_errors_read_as_miss(self) -> None:
        redis = MagicMock()
        redis.get = AsyncMock(side_effect=RedisError("Redis not connected"))
        gateway = RemoteStoreGateway(redis_client=redis)

        assert await gateway.get_cached("books") is None

    @pytest.mark.asyncio
    async def test_close_clears_cache(self) -> None:
        redis = MagicMock()
        redis.delete_pattern = AsyncMock(return_value=3)
        gateway = RemoteStoreGateway(redis_client=redis)

        await gateway.close()

        redis.delete_pattern.assert_awaited_once_with("cache:*")


class TestOptionsFromSettings:
    """Tests for options_from_settings."""

    def test_copies_pool_settings(self) -> None:
        settings = Settings(
            debug=False,
            remote_db=RemoteStoreSettings(
                pool_size=3, max_overflow=4, command_timeout=12, statement_cache_size=0
            ),
        )

        options = options_from_settings(settings)

        assert options == GatewayOptions(
            pool_size=3,
            max_overflow=4,
            command_timeout=12,
            connect_timeout=settings.remote_db.connect_timeout,
            statement_cache_size=0,
            echo=False,
        )


class TestRedisClient:
    """Tests for RedisClient with a mocked connection."""

    @pytest.mark.asyncio
    async def test_operations_require_connect(self) -> None:
        client = RedisClient(Settings())

        with pytest.raises(RedisError):
            await client.get("key")
        assert await client.ping() is False

    @pytest.mark.asyncio
    async def test_keys_are_namespaced(self, redis_client) -> None:
        redis_client._redis.set = AsyncMock()

        await redis_client.set("cache:books", {"a": 1}, expire_seconds=30)

        redis_client._redis.set.assert_awaited_once_with(
            "olkalou:cache:books", '{"a": 1}', ex=30
        )

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, redis_client) -> None:
        redis_client._redis.get = AsyncMock(return_value='{"a": 1}')

        assert await redis_client.get("cache:books") == {"a": 1}

    @pytest.mark.asyncio
    async def test_get_returns_plain_strings(self, redis_client) -> None:
        redis_client._redis.get = AsyncMock(return_value="plain text")

        assert await redis_client.get("note") == "plain text"

    @pytest.mark.asyncio
    async def test_hash_operations_are_namespaced(self, redis_client) -> None:
        redis_client._redis.hset = AsyncMock()
        redis_client._redis.hdel = AsyncMock(return_value=2)

        await redis_client.hset("bootstrap_state", "a", "true")
        removed = await redis_client.hdel("bootstrap_state", "a", "b")

        redis_client._redis.hset.assert_awaited_once_with("olkalou:bootstrap_state", "a", "true")
        redis_client._redis.hdel.assert_awaited_once_with("olkalou:bootstrap_state", "a", "b")
        assert removed == 2

    @pytest.mark.asyncio
    async def test_driver_errors_are_wrapped(self, redis_client) -> None:
        redis_client._redis.hgetall = AsyncMock(side_effect=BaseRedisConnectionError("refused"))

        with pytest.raises(RedisError) as exc_info:
            await redis_client.hgetall("bootstrap_state")

        assert isinstance(exc_info.value.original_error, BaseRedisConnectionError)
