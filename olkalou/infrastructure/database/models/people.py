# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Accounts and the people profiles attached to them.

A ``User`` is the login account. Students, teachers and staff each have a
profile row pointing back to their account through ``user_id``.
"""

from datetime import date, datetime, timedelta
from enum import Enum

from pydantic import Field

from olkalou.infrastructure.database.models.base import RemoteEntity, require_member
from olkalou.utils.datetime import age_on, ensure_utc, utc_now

PASSWORD_MAX_AGE_DAYS = 90


class UserType(str, Enum):
    """Account roles."""

    STUDENT = "Student"
    TEACHER = "Teacher"
    PRINCIPAL = "Principal"
    DEPUTY_PRINCIPAL = "DeputyPrincipal"
    SECRETARY = "Secretary"
    BURSAR = "Bursar"
    LIBRARIAN = "Librarian"
    STAFF = "Staff"


class Gender(str, Enum):
    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class EmployeeType(str, Enum):
    """Teacher employment terms.

    - BOM: Employed by the school Board of Management
    - NTSC: Non-TSC teacher paid by the school; needs a TSC number on file
    """

    BOM = "BOM"
    NTSC = "NTSC"
    CONTRACT = "Contract"
    VOLUNTEER = "Volunteer"


class StaffPosition(str, Enum):
    PRINCIPAL = "Principal"
    DEPUTY_PRINCIPAL = "DeputyPrincipal"
    SECRETARY = "Secretary"
    BURSAR = "Bursar"
    LIBRARIAN = "Librarian"
    LAB_TECHNICIAN = "LabTechnician"
    COMPUTER_LAB_TECHNICIAN = "ComputerLabTechnician"
    COOK = "Cook"
    GARDENER = "Gardener"
    BOARDING_MASTER = "BoardingMaster"


VALID_FORMS = frozenset({"Form1", "Form2", "Form3", "Form4"})
VALID_CLASSES = frozenset({"A", "B", "C", "S", "N"})
MIN_STUDENT_AGE = 10
MAX_STUDENT_AGE = 25

_USER_TYPES = frozenset(t.value for t in UserType)
_GENDERS = frozenset(g.value for g in Gender)
_EMPLOYEE_TYPES = frozenset(t.value for t in EmployeeType)
_STAFF_POSITIONS = frozenset(p.value for p in StaffPosition)


class User(RemoteEntity):
    """Login account.

    Attributes:
        phone_number: Login phone number in +254 format.
        password: Password hash.
        user_type: One of UserType.
        locked_until: Account is locked until this instant.
    """

    __tablename__ = "users"

    phone_number: str = Field(default="", min_length=10, max_length=15)
    password: str = Field(default="", min_length=6, max_length=255)
    user_type: str = Field(default="", min_length=1, max_length=50)
    is_active: bool = True
    last_login: datetime | None = None
    password_changed: bool = False
    password_changed_at: datetime | None = None
    failed_login_attempts: int = Field(default=0, ge=0)
    locked_until: datetime | None = None
    email: str | None = Field(default=None, max_length=255)
    profile_completed: bool = False
    terms_accepted: bool = False
    terms_accepted_at: datetime | None = None

    @property
    def is_locked(self) -> bool:
        return self.locked_until is not None and ensure_utc(self.locked_until) > utc_now()

    @property
    def requires_password_change(self) -> bool:
        """True until the password is changed, and again once it is stale."""
        if not self.password_changed:
            return True
        if self.password_changed_at is None:
            return False
        changed_at = ensure_utc(self.password_changed_at)
        return changed_at + timedelta(days=PASSWORD_MAX_AGE_DAYS) < utc_now()

    def check_invariants(self) -> list[str]:
        return require_member(self.user_type, _USER_TYPES, "Invalid user type")


class Student(RemoteEntity):
    """Student profile."""

    __tablename__ = "students"

    user_id: str = Field(default="", min_length=1)
    student_id: str = Field(default="", min_length=1, max_length=50)
    admission_no: str = Field(default="", min_length=1, max_length=50)
    full_name: str = Field(default="", min_length=2, max_length=255)
    form: str = Field(default="", min_length=1, max_length=20)
    class_name: str = Field(default="", alias="class", min_length=1, max_length=20)
    email: str | None = Field(default=None, max_length=255)
    date_of_birth: date
    gender: str = Field(default="", min_length=1)
    address: str | None = Field(default=None, max_length=500)
    parent_phone: str = Field(default="", min_length=10, max_length=15)
    guardian_name: str | None = Field(default=None, max_length=255)
    guardian_phone: str | None = Field(default=None, max_length=15)
    emergency_contact: str | None = Field(default=None, max_length=15)
    year: int = Field(default_factory=lambda: utc_now().year, ge=2020, le=2050)
    term: int = Field(default=1, ge=1, le=3)
    enrollment_date: datetime = Field(default_factory=utc_now)
    is_active: bool = True
    profile_picture_url: str | None = None
    status: str = Field(default="Active", min_length=1, max_length=50)
    medical_info: str | None = Field(default=None, max_length=1000)
    nationality: str = Field(default="Kenyan", max_length=100)
    religion: str | None = Field(default=None, max_length=100)
    previous_school: str | None = Field(default=None, max_length=255)
    kcse_index_number: str | None = Field(default=None, max_length=50)

    @property
    def age(self) -> int:
        return age_on(self.date_of_birth)

    @property
    def full_class_name(self) -> str:
        return f"{self.form}{self.class_name}"

    def check_invariants(self) -> list[str]:
        errors = require_member(self.gender, _GENDERS, "Invalid gender")
        if isinstance(self.date_of_birth, date):
            if not MIN_STUDENT_AGE <= self.age <= MAX_STUDENT_AGE:
                errors.append(
                    f"Student age must be between {MIN_STUDENT_AGE} and {MAX_STUDENT_AGE} years"
                )
        if self.form not in VALID_FORMS or self.class_name not in VALID_CLASSES:
            errors.append("Invalid form and class combination")
        return errors


class Teacher(RemoteEntity):
    """Teacher profile."""

    __tablename__ = "teachers"

    user_id: str = Field(default="", min_length=1)
    teacher_id: str = Field(default="", min_length=1, max_length=50)
    full_name: str = Field(default="", min_length=2, max_length=255)
    employee_type: str = Field(default="", min_length=1, max_length=50)
    tsc_number: str | None = Field(default=None, max_length=50)
    ntsc_payment: float | None = Field(default=None, ge=0)
    subjects: list[str] = Field(default_factory=list)
    assigned_forms: list[str] = Field(default_factory=list)
    qualification: str | None = Field(default=None, max_length=500)
    experience_years: int | None = Field(default=None, ge=0, le=50)
    employment_date: datetime | None = None
    department: str | None = Field(default=None, max_length=100)
    is_class_teacher: bool = False
    class_teacher_for: str | None = Field(default=None, max_length=50)
    is_active: bool = True
    profile_picture_url: str | None = None
    performance_rating: float | None = Field(default=None, ge=1, le=5)
    email: str | None = Field(default=None, max_length=255)
    phone_number: str | None = Field(default=None, max_length=15)
    national_id: str | None = Field(default=None, max_length=20)
    bank_account: str | None = Field(default=None, max_length=50)
    monthly_salary: float | None = Field(default=None, ge=0)

    def check_invariants(self) -> list[str]:
        errors = require_member(self.employee_type, _EMPLOYEE_TYPES, "Invalid employee type")
        if self.employee_type == EmployeeType.NTSC.value and not (self.tsc_number or "").strip():
            errors.append("TSC number is required for NTSC employees")
        return errors


class Staff(RemoteEntity):
    """Non-teaching staff profile, including the school administration."""

    __tablename__ = "staff"

    user_id: str = Field(default="", min_length=1)
    staff_id: str = Field(default="", min_length=1, max_length=50)
    full_name: str = Field(default="", min_length=2, max_length=255)
    position: str = Field(default="", min_length=1, max_length=100)
    department: str | None = Field(default=None, max_length=100)
    employment_date: datetime | None = None
    qualification: str | None = Field(default=None, max_length=500)
    salary: float | None = Field(default=None, ge=0)
    office_location: str | None = Field(default=None, max_length=100)
    is_active: bool = True
    profile_picture_url: str | None = None
    permissions: list[str] = Field(default_factory=list)
    email: str | None = Field(default=None, max_length=255)
    phone_number: str | None = Field(default=None, max_length=15)
    national_id: str | None = Field(default=None, max_length=20)
    bank_account: str | None = Field(default=None, max_length=50)

    def check_invariants(self) -> list[str]:
        return require_member(self.position, _STAFF_POSITIONS, "Invalid staff position")
