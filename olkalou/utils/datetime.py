# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for Olkalou.

All timestamps written to the remote store are timezone-aware UTC. Seed data
and entity invariants build their dates through these helpers so naive and
aware datetimes are never mixed.

Usage:
------
    from olkalou.utils.datetime import utc_now, days_from_now

    # Pydantic model defaults
    created_at: datetime = Field(default_factory=utc_now)

    # Relative dates for seed rows
    due_date = days_from_now(30)
"""

from datetime import date, datetime, timedelta, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def utc_day_start(dt: datetime) -> datetime:
    """Get midnight UTC of the day containing dt."""
    dt_utc = ensure_utc(dt)
    return dt_utc.replace(hour=0, minute=0, second=0, microsecond=0)


def days_ago(days: int) -> datetime:
    """Get a datetime N days ago from now.

    Args:
        days: Number of days to go back.

    Returns:
        Timezone-aware UTC datetime.
    """
    return utc_now() - timedelta(days=days)


def days_from_now(days: int) -> datetime:
    """Get a datetime N days from now.

    Args:
        days: Number of days to add.

    Returns:
        Timezone-aware UTC datetime.
    """
    return utc_now() + timedelta(days=days)


def years_ago(years: int) -> datetime:
    """Get the same calendar moment N years ago.

    February 29th falls back to February 28th in non-leap years.
    """
    current = utc_now()
    try:
        return current.replace(year=current.year - years)
    except ValueError:
        return current.replace(year=current.year - years, day=28)


def age_on(birth_date: date | datetime, today: date | None = None) -> int:
    """Compute age in whole years.

    Args:
        birth_date: Date of birth.
        today: Reference date. Defaults to today in UTC.

    Returns:
        Completed years between birth_date and today.
    """
    if isinstance(birth_date, datetime):
        birth_date = birth_date.date()
    today = today or utc_now().date()

    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def current_term(at: datetime | date | None = None) -> int:
    """Get the academic term for a date.

    Term 1 runs January to April, term 2 May to August and
    term 3 September to December.

    Args:
        at: Reference date. Defaults to now (UTC).

    Returns:
        Term number 1, 2 or 3.
    """
    month = (at or utc_now()).month
    if month <= 4:
        return 1
    if month <= 8:
        return 2
    return 3


def is_expired(expiry: datetime | None) -> bool:
    """Check if a datetime has passed.

    Args:
        expiry: The expiry datetime to check.

    Returns:
        True if expired or expiry is None, False otherwise.
    """
    if expiry is None:
        return True

    return utc_now() > ensure_utc(expiry)


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as ISO 8601 string.

    Args:
        dt: Datetime to format.

    Returns:
        ISO 8601 formatted string or None.
    """
    if dt is None:
        return None

    return ensure_utc(dt).isoformat()
