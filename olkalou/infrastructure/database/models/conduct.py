# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Daily attendance and disciplinary cases."""

from datetime import datetime, time
from enum import Enum

from pydantic import Field

from olkalou.infrastructure.database.models.base import RemoteEntity, require_member
from olkalou.utils.datetime import ensure_utc, utc_now


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"
    EXCUSED = "Excused"
    SICK = "Sick"


class Severity(str, Enum):
    MINOR = "Minor"
    MAJOR = "Major"
    CRITICAL = "Critical"


class CaseStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    RESOLVED = "Resolved"


_ATTENDANCE_STATUSES = frozenset(s.value for s in AttendanceStatus)
_SEVERITIES = frozenset(s.value for s in Severity)
_CASE_STATUSES = frozenset(s.value for s in CaseStatus)


class Attendance(RemoteEntity):
    __tablename__ = "attendance"

    student_id: str = Field(default="", min_length=1)
    date: datetime
    status: str = Field(default="", min_length=1, max_length=20)
    time_in: time | None = None
    time_out: time | None = None
    reason: str | None = Field(default=None, max_length=500)
    marked_by: str = Field(default="", min_length=1, max_length=100)

    def check_invariants(self) -> list[str]:
        errors = require_member(self.status, _ATTENDANCE_STATUSES, "Invalid attendance status")
        if self.time_in is not None and self.time_out is not None and self.time_out <= self.time_in:
            errors.append("Time out must be after time in")
        return errors


class DisciplinaryIssue(RemoteEntity):
    """A disciplinary case against a student.

    Suspensions carry a duration in days and a start date.
    """

    __tablename__ = "disciplinary_issues"

    student_id: str = Field(default="", min_length=1)
    issue_type: str = Field(default="", min_length=1, max_length=100)
    issue_description: str = Field(default="", min_length=10, max_length=2000)
    action_taken: str | None = Field(default=None, max_length=1000)
    severity_level: str = Field(default=Severity.MINOR.value, max_length=20)
    is_suspension: bool = False
    suspension_duration: int | None = Field(default=None, ge=1, le=365)
    suspension_start_date: datetime | None = None
    suspension_end_date: datetime | None = None
    issued_by: str = Field(default="", min_length=1, max_length=100)
    approved_by: str | None = Field(default=None, max_length=100)
    status: str = Field(default=CaseStatus.PENDING.value, max_length=50)
    issue_date: datetime = Field(default_factory=utc_now)
    approval_date: datetime | None = None
    resolution_date: datetime | None = None
    parent_notified: bool = False
    notification_date: datetime | None = None

    def check_invariants(self) -> list[str]:
        errors = require_member(self.severity_level, _SEVERITIES, "Invalid severity level")
        errors.extend(require_member(self.status, _CASE_STATUSES, "Invalid status"))

        if self.is_suspension:
            if self.suspension_duration is None:
                errors.append("Suspension duration is required for suspensions")
            if self.suspension_start_date is None:
                errors.append("Suspension start date is required for suspensions")

        if (
            self.suspension_start_date is not None
            and self.suspension_end_date is not None
            and ensure_utc(self.suspension_end_date) <= ensure_utc(self.suspension_start_date)
        ):
            errors.append("Suspension end date must be after start date")
        return errors
