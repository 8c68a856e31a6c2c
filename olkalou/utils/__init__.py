# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for Olkalou.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations and academic terms
- phone: Kenyan phone number formatting
"""

from olkalou.utils.datetime import (
    age_on,
    current_term,
    days_ago,
    days_from_now,
    ensure_utc,
    format_iso,
    is_expired,
    utc_day_start,
    utc_now,
    years_ago,
)
from olkalou.utils.logging import bind_context, clear_context, get_logger, setup_logging
from olkalou.utils.phone import format_kenyan_phone

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "ensure_utc",
    "utc_day_start",
    "days_ago",
    "days_from_now",
    "years_ago",
    "age_on",
    "current_term",
    "is_expired",
    "format_iso",
    # Phone
    "format_kenyan_phone",
]
