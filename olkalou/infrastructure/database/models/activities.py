# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Co-curricular activities, registrations and student achievements."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from olkalou.infrastructure.database.models.base import RemoteEntity, require_member
from olkalou.utils.datetime import ensure_utc, utc_now


class ActivityType(str, Enum):
    SPORTS = "Sports"
    ACADEMIC = "Academic"
    CULTURAL = "Cultural"
    SOCIAL = "Social"
    RELIGIOUS = "Religious"
    FIELD_TRIP = "Field Trip"


class RegistrationStatus(str, Enum):
    REGISTERED = "Registered"
    ATTENDED = "Attended"
    ABSENT = "Absent"
    CANCELLED = "Cancelled"


class AchievementType(str, Enum):
    ACADEMIC = "Academic"
    SPORTS = "Sports"
    LEADERSHIP = "Leadership"
    ARTS = "Arts"
    COMMUNITY_SERVICE = "Community Service"
    OTHER = "Other"


class AchievementLevel(str, Enum):
    SCHOOL = "School"
    COUNTY = "County"
    REGIONAL = "Regional"
    NATIONAL = "National"
    INTERNATIONAL = "International"


_ACTIVITY_TYPES = frozenset(t.value for t in ActivityType)
_REGISTRATION_STATUSES = frozenset(s.value for s in RegistrationStatus)
_ACHIEVEMENT_TYPES = frozenset(t.value for t in AchievementType)
_ACHIEVEMENT_LEVELS = frozenset(lvl.value for lvl in AchievementLevel)

ACTIVE_STATUS = "Active"


class Activity(RemoteEntity):
    """A school event students may register for.

    Attributes:
        date: Day of the event.
        start_time: Start instant, on ``date``.
        end_time: End instant. Always after ``start_time``.
        registration_deadline: Closes registration. Before ``date``.
    """

    __tablename__ = "activities"

    activity_id: str = Field(default="", min_length=1, max_length=50)
    title: str = Field(default="", min_length=3, max_length=255)
    description: str = Field(default="", min_length=10, max_length=2000)
    date: datetime
    start_time: datetime
    end_time: datetime
    venue: str | None = Field(default=None, max_length=255)
    activity_type: str = Field(default="", min_length=1, max_length=50)
    organizer: str = Field(default="", min_length=1, max_length=100)
    target_forms: list[str] = Field(default_factory=list)
    is_optional: bool = True
    registration_deadline: datetime | None = None
    max_participants: int | None = Field(default=None, ge=1, le=10000)
    current_participants: int = Field(default=0, ge=0, le=10000)
    requirements: str | None = Field(default=None, max_length=1000)
    status: str = Field(default=ACTIVE_STATUS, max_length=50)

    @property
    def is_upcoming(self) -> bool:
        return ensure_utc(self.date) > utc_now() and self.status == ACTIVE_STATUS

    @property
    def is_past(self) -> bool:
        return ensure_utc(self.date) < utc_now()

    @property
    def can_register(self) -> bool:
        """Registration is open for optional, active events with room left."""
        if not self.is_optional or self.status != ACTIVE_STATUS:
            return False
        if self.registration_deadline is None or ensure_utc(self.registration_deadline) <= utc_now():
            return False
        return self.max_participants is None or self.current_participants < self.max_participants

    def check_invariants(self) -> list[str]:
        errors: list[str] = []
        if ensure_utc(self.end_time) <= ensure_utc(self.start_time):
            errors.append("End time must be after start time")
        if self.registration_deadline is not None and ensure_utc(
            self.registration_deadline
        ) >= ensure_utc(self.date):
            errors.append("Registration deadline must be before activity date")
        errors.extend(require_member(self.activity_type, _ACTIVITY_TYPES, "Invalid activity type"))
        return errors


class ActivityRegistration(RemoteEntity):
    __tablename__ = "activity_registrations"

    activity_id: str = Field(default="", min_length=1)
    student_id: str = Field(default="", min_length=1)
    registration_date: datetime = Field(default_factory=utc_now)
    status: str = Field(default=RegistrationStatus.REGISTERED.value, max_length=50)
    payment_status: str | None = Field(default=None, max_length=50)
    attendance_marked: bool = False
    attendance_date: datetime | None = None
    notes: str | None = Field(default=None, max_length=500)

    def check_invariants(self) -> list[str]:
        return require_member(self.status, _REGISTRATION_STATUSES, "Invalid registration status")


class Achievement(RemoteEntity):
    """An award or recognition earned by a student."""

    __tablename__ = "achievements"

    student_id: str = Field(default="", min_length=1)
    achievement_id: str = Field(default="", min_length=1, max_length=50)
    title: str = Field(default="", min_length=3, max_length=255)
    description: str = Field(default="", min_length=10, max_length=1000)
    type: str = Field(default="", min_length=1, max_length=50)
    date: datetime
    awarded_by: str = Field(default="", min_length=1, max_length=100)
    category: str = Field(default="", min_length=1, max_length=100)
    level: str = Field(default="", min_length=1, max_length=50)
    position: int | None = Field(default=None, ge=1, le=100)
    points: int | None = Field(default=None, ge=0, le=1000)
    certificate_path: str | None = Field(default=None, max_length=500)
    certificate_url: str | None = None
    is_verified: bool = False
    verified_by: str | None = Field(default=None, max_length=100)
    verification_date: datetime | None = None

    def check_invariants(self) -> list[str]:
        errors = require_member(self.type, _ACHIEVEMENT_TYPES, "Invalid achievement type")
        errors.extend(require_member(self.level, _ACHIEVEMENT_LEVELS, "Invalid achievement level"))
        return errors
