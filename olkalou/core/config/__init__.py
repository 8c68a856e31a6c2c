# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for Olkalou.

Example:
    >>> from olkalou.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.environment)
    'development'
"""

from olkalou.core.config.settings import (
    DEFAULT_SEED_PASSWORD,
    BootstrapSettings,
    RedisSettings,
    RemoteStoreSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    # Subsettings
    "RemoteStoreSettings",
    "RedisSettings",
    "BootstrapSettings",
    "DEFAULT_SEED_PASSWORD",
]
