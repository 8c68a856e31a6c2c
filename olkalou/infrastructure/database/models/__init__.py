# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Row models for every table in the remote backend.

ENTITY_TYPES lists all kinds in the order their tables are verified.

Example:
    from olkalou.infrastructure.database.models import ENTITY_TYPES, User

    for entity_cls in ENTITY_TYPES:
        print(entity_cls.__tablename__)
"""

from olkalou.infrastructure.database.models.academic import (
    KCSE_GRADES,
    KCSE_SCALE,
    Assignment,
    AssignmentSubmission,
    AssignmentType,
    Exam,
    ExamType,
    GradingBand,
    Mark,
    SubmissionStatus,
    TimetableSlot,
    grade_for_percentage,
    points_for_grade,
)
from olkalou.infrastructure.database.models.activities import (
    Achievement,
    AchievementLevel,
    AchievementType,
    Activity,
    ActivityRegistration,
    ActivityType,
    RegistrationStatus,
)
from olkalou.infrastructure.database.models.base import (
    EntityValidationError,
    RemoteEntity,
    ValidationResult,
    new_id,
)
from olkalou.infrastructure.database.models.communication import (
    Announcement,
    AnnouncementPriority,
    AnnouncementType,
)
from olkalou.infrastructure.database.models.conduct import (
    Attendance,
    AttendanceStatus,
    CaseStatus,
    DisciplinaryIssue,
    Severity,
)
from olkalou.infrastructure.database.models.finance import (
    Fees,
    FeesPayment,
    PaymentMethod,
    PaymentStatus,
)
from olkalou.infrastructure.database.models.library import BookIssue, IssueStatus, LibraryBook
from olkalou.infrastructure.database.models.people import (
    EmployeeType,
    Gender,
    Staff,
    StaffPosition,
    Student,
    Teacher,
    User,
    UserType,
)
from olkalou.infrastructure.database.models.system import (
    AppSetting,
    AuditAction,
    AuditLogEntry,
    SettingCategory,
)

ENTITY_TYPES: tuple[type[RemoteEntity], ...] = (
    User,
    Student,
    Teacher,
    Staff,
    Fees,
    FeesPayment,
    Assignment,
    AssignmentSubmission,
    Mark,
    GradingBand,
    DisciplinaryIssue,
    LibraryBook,
    BookIssue,
    Activity,
    ActivityRegistration,
    Achievement,
    Announcement,
    Attendance,
    TimetableSlot,
    Exam,
    AppSetting,
    AuditLogEntry,
)

__all__ = [
    # Base
    "RemoteEntity",
    "ValidationResult",
    "EntityValidationError",
    "new_id",
    "ENTITY_TYPES",
    # People
    "User",
    "UserType",
    "Student",
    "Gender",
    "Teacher",
    "EmployeeType",
    "Staff",
    "StaffPosition",
    # Finance
    "Fees",
    "FeesPayment",
    "PaymentStatus",
    "PaymentMethod",
    # Academic
    "Assignment",
    "AssignmentType",
    "AssignmentSubmission",
    "SubmissionStatus",
    "Mark",
    "ExamType",
    "GradingBand",
    "Exam",
    "TimetableSlot",
    "KCSE_SCALE",
    "KCSE_GRADES",
    "grade_for_percentage",
    "points_for_grade",
    # Library
    "LibraryBook",
    "BookIssue",
    "IssueStatus",
    # Activities
    "Activity",
    "ActivityType",
    "ActivityRegistration",
    "RegistrationStatus",
    "Achievement",
    "AchievementType",
    "AchievementLevel",
    # Communication
    "Announcement",
    "AnnouncementType",
    "AnnouncementPriority",
    # Conduct
    "Attendance",
    "AttendanceStatus",
    "DisciplinaryIssue",
    "Severity",
    "CaseStatus",
    # System
    "AppSetting",
    "SettingCategory",
    "AuditLogEntry",
    "AuditAction",
]
