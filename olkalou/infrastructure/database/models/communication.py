# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Announcements published to students, staff and parents."""

from datetime import datetime
from enum import Enum

from pydantic import Field

from olkalou.infrastructure.database.models.base import RemoteEntity, require_member
from olkalou.utils.datetime import ensure_utc, utc_now


class AnnouncementType(str, Enum):
    GENERAL = "General"
    ACADEMIC = "Academic"
    EVENT = "Event"
    EMERGENCY = "Emergency"
    FEE = "Fee"
    ADMINISTRATIVE = "Administrative"


class AnnouncementPriority(str, Enum):
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"
    URGENT = "Urgent"


_ANNOUNCEMENT_TYPES = frozenset(t.value for t in AnnouncementType)
_PRIORITIES = frozenset(p.value for p in AnnouncementPriority)


class Announcement(RemoteEntity):
    """A notice with an optional publish window.

    Attributes:
        target_audience: Groups addressed, e.g. Students, Parents.
        target_forms: Forms addressed. Empty means all.
        publish_date: Not shown before this instant.
        expiry_date: Not shown from this instant. After ``publish_date``.
    """

    __tablename__ = "announcements"

    title: str = Field(default="", min_length=3, max_length=255)
    content: str = Field(default="", min_length=10, max_length=5000)
    announcement_type: str = Field(default=AnnouncementType.GENERAL.value, max_length=50)
    priority: str = Field(default=AnnouncementPriority.NORMAL.value, max_length=20)
    target_audience: list[str] = Field(default_factory=list)
    target_forms: list[str] = Field(default_factory=list)
    is_published: bool = False
    publish_date: datetime | None = None
    expiry_date: datetime | None = None
    is_active: bool = True

    @property
    def is_currently_active(self) -> bool:
        now = utc_now()
        if not (self.is_published and self.is_active):
            return False
        if self.publish_date is not None and ensure_utc(self.publish_date) > now:
            return False
        return self.expiry_date is None or ensure_utc(self.expiry_date) > now

    def check_invariants(self) -> list[str]:
        errors = require_member(
            self.announcement_type, _ANNOUNCEMENT_TYPES, "Invalid announcement type"
        )
        errors.extend(require_member(self.priority, _PRIORITIES, "Invalid priority level"))
        if (
            self.publish_date is not None
            and self.expiry_date is not None
            and ensure_utc(self.expiry_date) <= ensure_utc(self.publish_date)
        ):
            errors.append("Expiry date must be after publish date")
        return errors
