# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Library catalogue and book lending."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from olkalou.infrastructure.database.models.base import RemoteEntity, require_member
from olkalou.utils.datetime import ensure_utc, utc_now


class IssueStatus(str, Enum):
    ISSUED = "Issued"
    RETURNED = "Returned"
    OVERDUE = "Overdue"
    LOST = "Lost"
    DAMAGED = "Damaged"


_ISSUE_STATUSES = frozenset(s.value for s in IssueStatus)


class LibraryBook(RemoteEntity):
    """A catalogue title and its copy counts.

    Copies not available, damaged or lost are out on loan, so the three
    counted states together never exceed ``total_copies``.
    """

    __tablename__ = "library_books"

    book_id: str = Field(default="", min_length=1, max_length=50)
    title: str = Field(default="", min_length=2, max_length=255)
    author: str = Field(default="", min_length=2, max_length=255)
    isbn: str | None = Field(default=None, max_length=20)
    category: str = Field(default="", min_length=1, max_length=100)
    subcategory: str | None = Field(default=None, max_length=100)
    publisher: str | None = Field(default=None, max_length=255)
    publication_year: int | None = Field(default=None, ge=1900, le=2050)
    edition: str | None = Field(default=None, max_length=50)
    language: str = Field(default="English", max_length=50)
    total_copies: int = Field(default=1, ge=1, le=1000)
    available_copies: int = Field(default=0, ge=0, le=1000)
    damaged_copies: int = Field(default=0, ge=0, le=1000)
    lost_copies: int = Field(default=0, ge=0, le=1000)
    description: str | None = Field(default=None, max_length=1000)
    image_url: str | None = None

    @property
    def is_available(self) -> bool:
        return self.available_copies > 0

    @property
    def issued_copies(self) -> int:
        return self.total_copies - self.available_copies - self.damaged_copies - self.lost_copies

    def check_invariants(self) -> list[str]:
        if self.available_copies + self.damaged_copies + self.lost_copies > self.total_copies:
            return ["Sum of available, damaged, and lost copies cannot exceed total copies"]
        return []


class BookIssue(RemoteEntity):
    """A copy lent to a student."""

    __tablename__ = "book_issues"

    book_id: str = Field(default="", min_length=1)
    student_id: str = Field(default="", min_length=1)
    issue_date: datetime = Field(default_factory=utc_now)
    due_date: datetime
    return_date: datetime | None = None
    status: str = Field(default=IssueStatus.ISSUED.value, max_length=50)
    issued_by: str = Field(default="", min_length=1, max_length=100)
    returned_to: str | None = Field(default=None, max_length=100)
    fine_amount: float | None = Field(default=None, ge=0)
    fine_paid: bool = False
    notes: str | None = Field(default=None, max_length=500)

    @property
    def is_overdue(self) -> bool:
        return self.status == IssueStatus.ISSUED.value and utc_now() > ensure_utc(self.due_date)

    @property
    def days_overdue(self) -> int:
        if not self.is_overdue:
            return 0
        return (utc_now() - ensure_utc(self.due_date)).days

    def check_invariants(self) -> list[str]:
        errors = require_member(self.status, _ISSUE_STATUSES, "Invalid issue status")
        issued = ensure_utc(self.issue_date)
        if ensure_utc(self.due_date) <= issued:
            errors.append("Due date must be after issue date")
        if self.return_date is not None and ensure_utc(self.return_date) < issued:
            errors.append("Return date cannot be before issue date")
        return errors
