# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Academic records: assignments, marks, the grading scale, exams and the timetable.

Grades follow the Kenyan KCSE twelve-point scale, A (80-100) down to E (0-29).
"""

from datetime import datetime, time
from enum import Enum

from pydantic import Field

from olkalou.infrastructure.database.models.base import RemoteEntity, require_member
from olkalou.utils.datetime import ensure_utc, utc_now

# (grade, minimum percentage, points), highest first
KCSE_SCALE: tuple[tuple[str, int, int], ...] = (
    ("A", 80, 12),
    ("A-", 75, 11),
    ("B+", 70, 10),
    ("B", 65, 9),
    ("B-", 60, 8),
    ("C+", 55, 7),
    ("C", 50, 6),
    ("C-", 45, 5),
    ("D+", 40, 4),
    ("D", 35, 3),
    ("D-", 30, 2),
    ("E", 0, 1),
)
KCSE_GRADES = frozenset(grade for grade, _, _ in KCSE_SCALE)
_POINTS_BY_GRADE = {grade: points for grade, _, points in KCSE_SCALE}


def grade_for_percentage(percentage: float) -> str:
    """Map a percentage to its KCSE letter grade.

    Example:
        >>> grade_for_percentage(79)
        'A-'
    """
    for grade, minimum, _ in KCSE_SCALE:
        if percentage >= minimum:
            return grade
    return "E"


def points_for_grade(grade: str | None) -> int:
    """Map a KCSE letter grade to its points. Unknown grades score 0."""
    if grade is None:
        return 0
    return _POINTS_BY_GRADE.get(grade.upper(), 0)


class AssignmentType(str, Enum):
    ASSIGNMENT = "Assignment"
    PROJECT = "Project"
    TEST = "Test"
    QUIZ = "Quiz"
    LAB_REPORT = "Lab Report"


class SubmissionStatus(str, Enum):
    SUBMITTED = "Submitted"
    GRADED = "Graded"
    LATE = "Late"
    PENDING_REVIEW = "Pending Review"
    RETURNED = "Returned"


class ExamType(str, Enum):
    CAT = "CAT"
    MID_TERM = "Mid-Term"
    END_OF_TERM = "End of Term"
    MOCK = "Mock"
    KCSE = "KCSE"
    QUIZ = "Quiz"


_ASSIGNMENT_TYPES = frozenset(t.value for t in AssignmentType)
_SUBMISSION_STATUSES = frozenset(s.value for s in SubmissionStatus)
_EXAM_TYPES = frozenset(t.value for t in ExamType)
# Quizzes are scheduled as exams but never recorded as marks
_MARK_EXAM_TYPES = _EXAM_TYPES - {ExamType.QUIZ.value}


class Assignment(RemoteEntity):
    """Work set for a form."""

    __tablename__ = "assignments"

    assignment_id: str = Field(default="", min_length=1, max_length=50)
    title: str = Field(default="", min_length=3, max_length=255)
    subject: str = Field(default="", min_length=1, max_length=100)
    description: str = Field(default="", min_length=10, max_length=2000)
    instructions: str | None = Field(default=None, max_length=2000)
    due_date: datetime
    max_marks: int = Field(default=0, ge=1, le=1000)
    form: str = Field(default="", min_length=1, max_length=20)
    target_classes: list[str] = Field(default_factory=list)
    file_path: str | None = Field(default=None, max_length=500)
    file_url: str | None = None
    assignment_type: str = Field(default=AssignmentType.ASSIGNMENT.value, max_length=50)
    is_published: bool = True
    allow_late_submission: bool = False
    late_penalty_percentage: float | None = Field(default=None, ge=0, le=100)

    @property
    def is_overdue(self) -> bool:
        return utc_now() > ensure_utc(self.due_date)

    @property
    def days_until_due(self) -> int:
        return (ensure_utc(self.due_date) - utc_now()).days

    def check_invariants(self) -> list[str]:
        errors = require_member(self.assignment_type, _ASSIGNMENT_TYPES, "Invalid assignment type")
        if isinstance(self.due_date, datetime) and ensure_utc(self.due_date) <= utc_now():
            errors.append("Due date must be in the future")
        return errors


class AssignmentSubmission(RemoteEntity):
    """A student's submission for an assignment."""

    __tablename__ = "assignment_submissions"

    assignment_id: str = Field(default="", min_length=1)
    student_id: str = Field(default="", min_length=1)
    submission_text: str | None = Field(default=None, max_length=5000)
    submission_path: str | None = Field(default=None, max_length=500)
    submission_url: str | None = None
    obtained_marks: int | None = Field(default=None, ge=0, le=1000)
    teacher_comments: str | None = Field(default=None, max_length=1000)
    status: str = Field(default=SubmissionStatus.SUBMITTED.value, max_length=50)
    submission_date: datetime = Field(default_factory=utc_now)
    graded_by: str | None = Field(default=None, max_length=100)
    graded_date: datetime | None = None
    is_late: bool = False
    late_penalty_applied: float | None = Field(default=None, ge=0, le=100)
    final_marks: int | None = Field(default=None, ge=0, le=1000)

    @property
    def percentage(self) -> float | None:
        if self.obtained_marks is None or not self.final_marks:
            return None
        return self.obtained_marks / self.final_marks * 100

    def check_invariants(self) -> list[str]:
        errors = require_member(self.status, _SUBMISSION_STATUSES, "Invalid submission status")
        if not any(
            (value or "").strip()
            for value in (self.submission_text, self.submission_path, self.submission_url)
        ):
            errors.append("Submission must include text, file, or URL")
        return errors


class Mark(RemoteEntity):
    """A student's result in one subject for one exam sitting."""

    __tablename__ = "marks"

    student_id: str = Field(default="", min_length=1)
    subject: str = Field(default="", min_length=1, max_length=100)
    opening_marks: float | None = Field(default=None, ge=0, le=100)
    midterm_marks: float | None = Field(default=None, ge=0, le=100)
    final_exam_marks: float | None = Field(default=None, ge=0, le=100)
    total_marks: float = Field(default=0, ge=0, le=100)
    max_marks: float = Field(default=100, ge=1, le=100)
    percentage: float = Field(default=0, ge=0, le=100)
    grade: str = Field(default="", min_length=1, max_length=5)
    points: float | None = Field(default=None, ge=0, le=12)
    term: int = Field(default=1, ge=1, le=3)
    year: int = Field(default_factory=lambda: utc_now().year, ge=2020, le=2050)
    exam_type: str = Field(default=ExamType.END_OF_TERM.value, max_length=50)
    teacher_id: str = Field(default="", min_length=1)
    is_approved: bool = False
    approved_by: str | None = Field(default=None, max_length=100)
    approval_date: datetime | None = None
    teacher_comments: str | None = Field(default=None, max_length=500)

    def apply_grade(self) -> None:
        """Derive grade and points from the current percentage."""
        self.grade = grade_for_percentage(self.percentage)
        self.points = points_for_grade(self.grade)

    def check_invariants(self) -> list[str]:
        errors = require_member(self.exam_type, _MARK_EXAM_TYPES, "Invalid exam type")
        errors.extend(require_member(self.grade, KCSE_GRADES, "Invalid grade"))
        return errors


class GradingBand(RemoteEntity):
    """One row of the grading scale."""

    __tablename__ = "grading_system"

    grade: str = Field(default="", min_length=1, max_length=5)
    min_percentage: float = Field(default=0, ge=0, le=100)
    max_percentage: float = Field(default=0, ge=0, le=100)
    points: float = Field(default=0, ge=0, le=12)
    description: str | None = Field(default=None, max_length=500)
    is_active: bool = True

    def covers(self, percentage: float) -> bool:
        return self.min_percentage <= percentage <= self.max_percentage

    def check_invariants(self) -> list[str]:
        if self.min_percentage >= self.max_percentage:
            return ["Minimum percentage must be less than maximum percentage"]
        return []


class Exam(RemoteEntity):
    """A scheduled examination paper."""

    __tablename__ = "exams"

    exam_id: str = Field(default="", min_length=1, max_length=50)
    title: str = Field(default="", min_length=3, max_length=255)
    exam_type: str = Field(default="", min_length=1, max_length=50)
    subject: str = Field(default="", min_length=1, max_length=100)
    form: str = Field(default="", min_length=1, max_length=20)
    date: datetime
    start_time: time
    duration_minutes: int = Field(default=0, ge=15, le=300)
    max_marks: int = Field(default=0, ge=1, le=1000)
    room: str | None = Field(default=None, max_length=50)
    instructions: str | None = Field(default=None, max_length=2000)
    term: int = Field(default=1, ge=1, le=3)
    year: int = Field(default_factory=lambda: utc_now().year, ge=2020, le=2050)
    is_published: bool = False

    def check_invariants(self) -> list[str]:
        return require_member(self.exam_type, _EXAM_TYPES, "Invalid exam type")


class TimetableSlot(RemoteEntity):
    """One lesson in the weekly timetable."""

    __tablename__ = "timetable"

    class_name: str = Field(default="", alias="class", min_length=1, max_length=20)
    day_of_week: int = Field(default=1, ge=1, le=7)
    period: int = Field(default=1, ge=1, le=10)
    start_time: time
    end_time: time
    subject: str = Field(default="", min_length=1, max_length=100)
    teacher_id: str = Field(default="", min_length=1)
    room: str | None = Field(default=None, max_length=50)
    term: int = Field(default=1, ge=1, le=3)
    year: int = Field(default_factory=lambda: utc_now().year, ge=2020, le=2050)
    is_active: bool = True

    def check_invariants(self) -> list[str]:
        if self.end_time <= self.start_time:
            return ["End time must be after start time"]
        return []
