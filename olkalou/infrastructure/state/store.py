# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Local key/value persistence for bootstrap progress.

Two backends share the StateStore interface:
- JsonFileStateStore: a flat JSON object in a local file (default)
- RedisStateStore: one Redis hash, for deployments running several workers

Only single-key operations are atomic. There are no cross-key transactions.
"""

import asyncio
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional

from olkalou.infrastructure.cache.redis_client import RedisClient, RedisError

if TYPE_CHECKING:
    from olkalou.core.config.settings import Settings

logger = logging.getLogger(__name__)

REDIS_STATE_KEY = "bootstrap_state"


class StateStoreError(Exception):
    """Exception raised when bootstrap state cannot be read or written.

    Attributes:
        message: Human-readable error description.
        original_error: The underlying I/O or Redis error.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None) -> None:
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class StateStore(ABC):
    """Key/value store for bootstrap flags.

    Values are JSON scalars (bool, int or str).
    """

    @abstractmethod
    async def get(self, key: str) -> Any:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    async def set(self, key: str, value: Any) -> None:
        """Store a value under key."""

    @abstractmethod
    async def delete(self, *keys: str) -> None:
        """Remove keys. Absent keys are ignored."""

    @abstractmethod
    async def get_all(self) -> dict[str, Any]:
        """Return every stored key and value."""


class JsonFileStateStore(StateStore):
    """State kept in a JSON file.

    Every write rewrites the whole file through a temporary file followed by
    ``os.replace``, so readers never see a partial document. A missing file
    reads as empty, and so does a corrupt one (after logging it).

    Example:
        store = JsonFileStateStore(Path(".olkalou/bootstrap_state.json"))
        await store.set("grading_system_migrated", True)
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path)
        self._lock = asyncio.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as e:
            raise StateStoreError(f"Failed to read state file {self._path}", e) from e

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("State file %s is corrupt, treating it as empty: %s", self._path, e)
            return {}

        if not isinstance(data, dict):
            logger.warning("State file %s does not hold an object, treating it as empty", self._path)
            return {}
        return data

    def _write(self, data: dict[str, Any]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(data, fh, indent=2, sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StateStoreError(f"Failed to write state file {self._path}", e) from e

    async def get(self, key: str) -> Any:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            data[key] = value
            await asyncio.to_thread(self._write, data)

    async def delete(self, *keys: str) -> None:
        async with self._lock:
            data = await asyncio.to_thread(self._read)
            if not any(key in data for key in keys):
                return
            for key in keys:
                data.pop(key, None)
            await asyncio.to_thread(self._write, data)

    async def get_all(self) -> dict[str, Any]:
        async with self._lock:
            return await asyncio.to_thread(self._read)


class RedisStateStore(StateStore):
    """State kept in one Redis hash (``olkalou:bootstrap_state``).

    Values are stored as JSON text so bools and ints round-trip. A value
    that is not valid JSON reads as absent (after logging it).
    """

    def __init__(self, redis_client: RedisClient, key: str = REDIS_STATE_KEY) -> None:
        self._redis = redis_client
        self._key = key

    def _decode(self, key: str, raw: str) -> Any:
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("State key %s holds invalid JSON, treating it as unset: %s", key, e)
            return None

    async def get(self, key: str) -> Any:
        try:
            raw = await self._redis.hget(self._key, key)
        except RedisError as e:
            raise StateStoreError(f"Failed to read state key {key}", e) from e
        return None if raw is None else self._decode(key, raw)

    async def set(self, key: str, value: Any) -> None:
        try:
            await self._redis.hset(self._key, key, json.dumps(value))
        except RedisError as e:
            raise StateStoreError(f"Failed to write state key {key}", e) from e

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self._redis.hdel(self._key, *keys)
        except RedisError as e:
            raise StateStoreError("Failed to delete state keys", e) from e

    async def get_all(self) -> dict[str, Any]:
        try:
            raw = await self._redis.hgetall(self._key)
        except RedisError as e:
            raise StateStoreError("Failed to read state", e) from e
        return {key: self._decode(key, value) for key, value in raw.items()}


def create_state_store(
    settings: "Settings",
    redis_client: Optional[RedisClient] = None,
) -> StateStore:
    """Build the state store selected by ``BOOTSTRAP_STATE_BACKEND``.

    Raises:
        StateStoreError: If the Redis backend is selected without a client.
    """
    if settings.bootstrap.state_backend == "redis":
        if redis_client is None:
            raise StateStoreError("Redis state backend selected but Redis is not configured")
        return RedisStateStore(redis_client)
    return JsonFileStateStore(settings.bootstrap.state_file)
