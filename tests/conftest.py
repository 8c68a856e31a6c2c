# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (in-memory gateway, temporary state files)
- Integration tests (live database, skipped unless configured)
"""

import asyncio
from collections import Counter, defaultdict
from pathlib import Path
from typing import Any, Optional

import pytest
from passlib.context import CryptContext

from olkalou.core.config.settings import BootstrapSettings, clear_settings_cache
from olkalou.infrastructure.database import connection
from olkalou.infrastructure.database.connection import (
    HealthCheckResult,
    QueryError,
    RemoteStoreConnectionError,
    WriteError,
)
from olkalou.infrastructure.database.models import RemoteEntity
from olkalou.infrastructure.database.seeds import accounts
from olkalou.infrastructure.state import JsonFileStateStore, MigrationStateTracker


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )


# =============================================================================
# In-memory Remote Store
# =============================================================================


class FakeGateway:
    """In-memory stand-in for RemoteStoreGateway.

    Rows are kept per table. Failures are injected per table: a positive
    count fails that many calls then recovers, -1 fails forever.
    """

    def __init__(self) -> None:
        self.tables: dict[str, list[RemoteEntity]] = defaultdict(list)
        self.is_initialized = False
        self.healthy = True
        self.health_message = "Remote store is reachable"
        self.initialize_error: Optional[Exception] = None
        self.query_failures: dict[str, int] = {}
        self.insert_failures: dict[str, int] = {}
        self.query_delay = 0.0

        self.initialize_calls = 0
        self.health_calls = 0
        self.query_calls: Counter[str] = Counter()
        self.insert_calls: Counter[str] = Counter()

    async def initialize(self, url: Optional[str] = None, options: Any = None) -> None:
        self.initialize_calls += 1
        if self.initialize_error is not None:
            raise self.initialize_error
        self.is_initialized = True

    async def health_check(self) -> HealthCheckResult:
        self.health_calls += 1
        if not self.is_initialized:
            return HealthCheckResult(
                is_healthy=False,
                status="Not Initialized",
                message="Remote store has not been initialized",
            )
        if not self.healthy:
            return HealthCheckResult(is_healthy=False, status="Unhealthy", message=self.health_message)
        return HealthCheckResult(is_healthy=True, status="Healthy", message=self.health_message)

    @staticmethod
    def _consume(failures: dict[str, int], table: str) -> bool:
        remaining = failures.get(table, 0)
        if remaining == 0:
            return False
        if remaining > 0:
            failures[table] = remaining - 1
        return True

    async def query(
        self,
        entity_cls: type[RemoteEntity],
        filters: Optional[dict[str, Any]] = None,
        limit: Optional[int] = None,
    ) -> list[RemoteEntity]:
        table = entity_cls.__tablename__
        self.query_calls[table] += 1
        if not self.is_initialized:
            raise RemoteStoreConnectionError("Remote store not initialized. Call initialize() first.")
        if self.query_delay:
            await asyncio.sleep(self.query_delay)
        if self._consume(self.query_failures, table):
            raise QueryError(f'relation "{table}" does not exist')

        rows = [
            row
            for row in self.tables[table]
            if all(row.to_record().get(name) == value for name, value in (filters or {}).items())
        ]
        return rows if limit is None else rows[:limit]

    async def insert(self, row: RemoteEntity) -> None:
        table = row.__tablename__
        self.insert_calls[table] += 1
        if self._consume(self.insert_failures, table):
            raise WriteError(f"Failed to insert into '{table}'")
        self.tables[table].append(row)

    async def close(self) -> None:
        self.is_initialized = False

    def rows(self, entity_cls: type[RemoteEntity]) -> list[RemoteEntity]:
        return list(self.tables[entity_cls.__tablename__])

    def seed(self, row: RemoteEntity) -> None:
        """Place a row without counting it as an insert."""
        self.tables[row.__tablename__].append(row)

    @property
    def total_inserts(self) -> int:
        return sum(self.insert_calls.values())


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch: pytest.MonkeyPatch) -> None:
    """Use the cheapest bcrypt cost so seeding the roster stays fast."""
    monkeypatch.setattr(
        accounts,
        "pwd_context",
        CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=4),
    )


@pytest.fixture(autouse=True)
def reset_module_singletons(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(connection, "_remote_store", None)
    clear_settings_cache()


@pytest.fixture
def gateway() -> FakeGateway:
    """Provide an empty in-memory remote store."""
    return FakeGateway()


@pytest.fixture
def state_file(tmp_path: Path) -> Path:
    return tmp_path / "state" / "bootstrap_state.json"


@pytest.fixture
def state_store(state_file: Path) -> JsonFileStateStore:
    return JsonFileStateStore(state_file)


@pytest.fixture
def tracker(state_store: JsonFileStateStore) -> MigrationStateTracker:
    return MigrationStateTracker(state_store)


@pytest.fixture
def bootstrap_config() -> BootstrapSettings:
    """Bootstrap settings without pauses between retries or inserts."""
    return BootstrapSettings(
        max_retry_attempts=3,
        retry_delay_seconds=0,
        insert_delay_seconds=0,
        user_insert_delay_seconds=0,
    )
