# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for bootstrap state persistence.

Covers the JSON file store, the Redis store (against a mocked client)
and the MigrationStateTracker on top of them.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest

from olkalou.core.config.settings import BootstrapSettings, Settings
from olkalou.infrastructure.cache.redis_client import RedisError
from olkalou.infrastructure.state import (
    ALL_STATE_KEYS,
    JsonFileStateStore,
    MigrationFlag,
    MigrationStateTracker,
    RedisStateStore,
    StateStoreError,
    create_state_store,
)


class TestJsonFileStateStore:
    """Tests for JsonFileStateStore."""

    @pytest.mark.asyncio
    async def test_missing_file_reads_empty(self, state_store) -> None:
        assert await state_store.get("anything") is None
        assert await state_store.get_all() == {}

    @pytest.mark.asyncio
    async def test_set_creates_file(self, state_store, state_file) -> None:
        """Test that the first write creates parent directories and the file."""
        await state_store.set("grading_system_migrated", True)

        assert json.loads(state_file.read_text()) == {"grading_system_migrated": True}
        assert await state_store.get("grading_system_migrated") is True

    @pytest.mark.asyncio
    async def test_values_survive_new_instance(self, state_store, state_file) -> None:
        await state_store.set("last_migration_version", 2)

        reopened = JsonFileStateStore(state_file)

        assert await reopened.get("last_migration_version") == 2

    @pytest.mark.asyncio
    async def test_delete_ignores_absent_keys(self, state_store) -> None:
        await state_store.set("a", 1)
        await state_store.set("b", 2)

        await state_store.delete("a", "missing")

        assert await state_store.get_all() == {"b": 2}

    @pytest.mark.asyncio
    async def test_corrupt_file_reads_empty(self, state_store, state_file) -> None:
        """Test that an unreadable document is treated as no state."""
        state_file.parent.mkdir(parents=True)
        state_file.write_text("{not json")

        assert await state_store.get_all() == {}

        await state_store.set("a", True)
        assert await state_store.get_all() == {"a": True}

    @pytest.mark.asyncio
    async def test_non_object_document_reads_empty(self, state_store, state_file) -> None:
        state_file.parent.mkdir(parents=True)
        state_file.write_text("[1, 2]")

        assert await state_store.get_all() == {}

    @pytest.mark.asyncio
    async def test_no_temporary_files_left(self, state_store, state_file) -> None:
        await state_store.set("a", 1)
        await state_store.set("b", 2)

        assert [p.name for p in state_file.parent.iterdir()] == [state_file.name]

    @pytest.mark.asyncio
    async def test_unwritable_location_raises(self, tmp_path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = JsonFileStateStore(blocker / "state.json")

        with pytest.raises(StateStoreError):
            await store.set("a", 1)


class TestRedisStateStore:
    """Tests for RedisStateStore with a mocked client."""

    @pytest.fixture
    def redis_client(self) -> MagicMock:
        client = MagicMock()
        client.hget = AsyncMock(return_value=None)
        client.hset = AsyncMock()
        client.hdel = AsyncMock(return_value=1)
        client.hgetall = AsyncMock(return_value={})
        return client

    @pytest.mark.asyncio
    async def test_set_stores_json_text(self, redis_client) -> None:
        store = RedisStateStore(redis_client)

        await store.set("grading_system_migrated", True)

        redis_client.hset.assert_awaited_once_with(
            "bootstrap_state", "grading_system_migrated", "true"
        )

    @pytest.mark.asyncio
    async def test_get_decodes_json(self, redis_client) -> None:
        redis_client.hget.return_value = "2"
        store = RedisStateStore(redis_client)

        assert await store.get("last_migration_version") == 2

    @pytest.mark.asyncio
    async def test_get_all_decodes_every_field(self, redis_client) -> None:
        redis_client.hgetall.return_value = {"a": "true", "b": "2"}
        store = RedisStateStore(redis_client)

        assert await store.get_all() == {"a": True, "b": 2}

    @pytest.mark.asyncio
    async def test_invalid_json_value_reads_unset(self, redis_client) -> None:
        redis_client.hget.return_value = "{not json"
        store = RedisStateStore(redis_client)

        assert await store.get("grading_system_migrated") is None

    @pytest.mark.asyncio
    async def test_invalid_json_in_hash_does_not_hide_other_keys(self, redis_client) -> None:
        redis_client.hgetall.return_value = {
            "grading_system_migrated": "tru",
            "last_migration_version": "2",
        }
        tracker = MigrationStateTracker(RedisStateStore(redis_client))

        state = await tracker.snapshot()

        assert state.grading_seeded is False
        assert state.schema_version == 2

    @pytest.mark.asyncio
    async def test_delete_without_keys_is_noop(self, redis_client) -> None:
        await RedisStateStore(redis_client).delete()

        redis_client.hdel.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_redis_errors_are_wrapped(self, redis_client) -> None:
        redis_client.hget.side_effect = RedisError("Redis not connected")
        store = RedisStateStore(redis_client)

        with pytest.raises(StateStoreError) as exc_info:
            await store.get("a")

        assert isinstance(exc_info.value.original_error, RedisError)


class TestCreateStateStore:
    """Tests for the state store factory."""

    def test_file_backend_by_default(self, state_file) -> None:
        settings = Settings(bootstrap=BootstrapSettings(state_file=state_file))

        store = create_state_store(settings)

        assert isinstance(store, JsonFileStateStore)
        assert store.path == state_file

    def test_redis_backend_requires_client(self) -> None:
        settings = Settings(bootstrap=BootstrapSettings(state_backend="redis"))

        with pytest.raises(StateStoreError):
            create_state_store(settings)

    def test_redis_backend(self) -> None:
        settings = Settings(bootstrap=BootstrapSettings(state_backend="redis"))

        store = create_state_store(settings, MagicMock())

        assert isinstance(store, RedisStateStore)


class TestMigrationStateTracker:
    """Tests for MigrationStateTracker."""

    @pytest.mark.asyncio
    async def test_flags_default_to_false(self, tracker) -> None:
        for flag in MigrationFlag:
            assert await tracker.get_flag(flag) is False
        assert await tracker.get_version() == 0

    @pytest.mark.asyncio
    async def test_set_flag_uses_persisted_key(self, tracker, state_store) -> None:
        await tracker.set_flag(MigrationFlag.SAMPLE_DATA_SEEDED)

        assert await state_store.get("dummy_data_migrated_v2") is True

    @pytest.mark.asyncio
    async def test_version_round_trip(self, tracker) -> None:
        await tracker.set_version(2)

        assert await tracker.get_version() == 2

    @pytest.mark.asyncio
    async def test_string_values_are_coerced(self, tracker, state_store) -> None:
        """Test that values written by other tools are still understood."""
        await state_store.set("supabase_tables_verified", "True")
        await state_store.set("last_migration_version", "2")

        state = await tracker.snapshot()

        assert state.tables_verified is True
        assert state.schema_version == 2

    @pytest.mark.asyncio
    async def test_clear_all_removes_every_key(self, tracker, state_store) -> None:
        for flag in MigrationFlag:
            await tracker.set_flag(flag)
        await tracker.set_version(2)
        await state_store.set("unrelated", "kept")

        await tracker.clear_all()

        assert await state_store.get_all() == {"unrelated": "kept"}
        assert len(ALL_STATE_KEYS) == 5

    @pytest.mark.asyncio
    async def test_snapshot(self, tracker) -> None:
        await tracker.set_flag(MigrationFlag.TABLES_VERIFIED)
        await tracker.set_flag(MigrationFlag.GRADING_SEEDED)

        state = await tracker.snapshot()

        assert state.tables_verified is True
        assert state.grading_seeded is True
        assert state.default_users_seeded is False
        assert state.sample_data_seeded is False

    def test_tracker_exposes_store(self, state_store) -> None:
        assert MigrationStateTracker(state_store).store is state_store
