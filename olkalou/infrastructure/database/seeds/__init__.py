# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed package.

This package builds the rows written by the bootstrap:
- Grading: the twelve-band KCSE scale
- Accounts: default staff, teacher and student logins with profiles
- Sample: demo books, activities, a fee account and announcements

Builders return unvalidated rows; validation and insertion happen in the
bootstrap service.
"""

from olkalou.infrastructure.database.seeds.accounts import (
    AccountSeed,
    build_default_accounts,
    hash_password,
    verify_password,
)
from olkalou.infrastructure.database.seeds.grading import (
    GRADING_BANDS,
    SEED_AUTHOR,
    build_grading_scale,
)
from olkalou.infrastructure.database.seeds.sample import (
    build_activities,
    build_announcements,
    build_fees,
    build_library_books,
)

__all__ = [
    "SEED_AUTHOR",
    # Grading
    "GRADING_BANDS",
    "build_grading_scale",
    # Accounts
    "AccountSeed",
    "build_default_accounts",
    "hash_password",
    "verify_password",
    # Sample data
    "build_library_books",
    "build_activities",
    "build_fees",
    "build_announcements",
]
