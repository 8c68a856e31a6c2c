# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for the hosted Postgres backend.

This package provides:
- RemoteStoreGateway: async engine, health probe, row reads and inserts
- models: row models for every remote table
- seeds: builders for the grading scale, default accounts and demo data

Example:
    from olkalou.infrastructure.database import init_remote_store, get_remote_store

    await init_remote_store(settings)
    gateway = get_remote_store()
    health = await gateway.health_check()
"""

from olkalou.infrastructure.database.connection import (
    GatewayOptions,
    HealthCheckResult,
    QueryError,
    RemoteStoreConnectionError,
    RemoteStoreError,
    RemoteStoreGateway,
    WriteError,
    close_remote_store,
    get_remote_store,
    init_remote_store,
    options_from_settings,
)

__all__ = [
    # Gateway
    "RemoteStoreGateway",
    "GatewayOptions",
    "HealthCheckResult",
    "options_from_settings",
    # Errors
    "RemoteStoreError",
    "RemoteStoreConnectionError",
    "QueryError",
    "WriteError",
    # Module-level gateway
    "init_remote_store",
    "get_remote_store",
    "close_remote_store",
]
