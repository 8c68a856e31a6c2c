# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Per-step completion flags for the database bootstrap.

Each flag moves from false to true once, after its step's remote writes
have completed, and only a reset clears it again. The persisted key names
are kept stable so existing installs keep their progress.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel

from olkalou.infrastructure.state.store import StateStore

CURRENT_SCHEMA_VERSION = 2
SCHEMA_VERSION_KEY = "last_migration_version"


class MigrationFlag(str, Enum):
    """Bootstrap steps whose completion is remembered."""

    TABLES_VERIFIED = "supabase_tables_verified"
    GRADING_SEEDED = "grading_system_migrated"
    DEFAULT_USERS_SEEDED = "default_users_created"
    SAMPLE_DATA_SEEDED = "dummy_data_migrated_v2"


ALL_STATE_KEYS: tuple[str, ...] = (*(flag.value for flag in MigrationFlag), SCHEMA_VERSION_KEY)


class MigrationState(BaseModel):
    """Snapshot of every flag and the stored schema version."""

    tables_verified: bool = False
    grading_seeded: bool = False
    default_users_seeded: bool = False
    sample_data_seeded: bool = False
    schema_version: int = 0


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    if isinstance(value, int):
        return value != 0
    return False


def _as_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


class MigrationStateTracker:
    """Reads and writes bootstrap flags through a StateStore.

    Example:
        tracker = MigrationStateTracker(JsonFileStateStore(path))
        if not await tracker.get_flag(MigrationFlag.GRADING_SEEDED):
            ...
            await tracker.set_flag(MigrationFlag.GRADING_SEEDED)
    """

    def __init__(self, store: StateStore) -> None:
        self._store = store

    @property
    def store(self) -> StateStore:
        return self._store

    async def get_flag(self, flag: MigrationFlag) -> bool:
        """Return the flag, false when never set.

        Raises:
            StateStoreError: If the store cannot be read.
        """
        return _as_bool(await self._store.get(flag.value))

    async def set_flag(self, flag: MigrationFlag, value: bool = True) -> None:
        """Persist the flag.

        Raises:
            StateStoreError: If the store cannot be written.
        """
        await self._store.set(flag.value, value)

    async def get_version(self) -> int:
        return _as_int(await self._store.get(SCHEMA_VERSION_KEY))

    async def set_version(self, version: int) -> None:
        await self._store.set(SCHEMA_VERSION_KEY, version)

    async def clear_all(self) -> None:
        """Forget every flag and the stored schema version."""
        await self._store.delete(*ALL_STATE_KEYS)

    async def snapshot(self) -> MigrationState:
        """Read all state in one pass."""
        data = await self._store.get_all()
        return MigrationState(
            tables_verified=_as_bool(data.get(MigrationFlag.TABLES_VERIFIED.value)),
            grading_seeded=_as_bool(data.get(MigrationFlag.GRADING_SEEDED.value)),
            default_users_seeded=_as_bool(data.get(MigrationFlag.DEFAULT_USERS_SEEDED.value)),
            sample_data_seeded=_as_bool(data.get(MigrationFlag.SAMPLE_DATA_SEEDED.value)),
            schema_version=_as_int(data.get(SCHEMA_VERSION_KEY)),
        )
