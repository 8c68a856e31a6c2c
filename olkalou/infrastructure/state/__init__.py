# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Bootstrap progress persistence.

Example:
    from olkalou.infrastructure.state import (
        MigrationFlag,
        MigrationStateTracker,
        create_state_store,
    )

    tracker = MigrationStateTracker(create_state_store(settings))
    await tracker.set_flag(MigrationFlag.TABLES_VERIFIED)
"""

from olkalou.infrastructure.state.store import (
    JsonFileStateStore,
    RedisStateStore,
    StateStore,
    StateStoreError,
    create_state_store,
)
from olkalou.infrastructure.state.tracker import (
    ALL_STATE_KEYS,
    CURRENT_SCHEMA_VERSION,
    SCHEMA_VERSION_KEY,
    MigrationFlag,
    MigrationState,
    MigrationStateTracker,
)

__all__ = [
    # Stores
    "StateStore",
    "JsonFileStateStore",
    "RedisStateStore",
    "StateStoreError",
    "create_state_store",
    # Tracker
    "MigrationFlag",
    "MigrationState",
    "MigrationStateTracker",
    "CURRENT_SCHEMA_VERSION",
    "SCHEMA_VERSION_KEY",
    "ALL_STATE_KEYS",
]
