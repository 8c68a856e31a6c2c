# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Default account seed data.

The roster is the school administration (principal, deputy, secretary),
one class teacher and one student. Each entry pairs a login account with
the profile row that belongs to it. Profiles are built without a
``user_id``; the caller stamps it once the account row exists.
"""

from dataclasses import dataclass
from datetime import date

from passlib.context import CryptContext

from olkalou.infrastructure.database.models.base import RemoteEntity
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
from olkalou.infrastructure.database.seeds.grading import SEED_AUTHOR
from olkalou.utils.datetime import current_term, utc_now, years_ago
from olkalou.utils.phone import format_kenyan_phone

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

EMAIL_DOMAIN = "graceschool.ac.ke"


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


@dataclass
class AccountSeed:
    """A login account and the profile row that belongs to it."""

    user: User
    profile: RemoteEntity

    def link(self) -> None:
        """Point the profile at its account."""
        self.profile.user_id = self.user.id


def _account(phone: str, password: str, user_type: UserType, email_name: str) -> User:
    return User.draft(
        phone_number=format_kenyan_phone(phone),
        password=hash_password(password),
        user_type=user_type.value,
        email=f"{email_name}@{EMAIL_DOMAIN}",
        profile_completed=True,
        terms_accepted=True,
        terms_accepted_at=utc_now(),
        created_by=SEED_AUTHOR,
    )


def _staff(
    phone: str,
    password: str,
    user_type: UserType,
    email_name: str,
    *,
    staff_id: str,
    full_name: str,
    position: StaffPosition,
    department: str,
    years_employed: int,
    salary: float,
    permissions: list[str],
) -> AccountSeed:
    user = _account(phone, password, user_type, email_name)
    profile = Staff.draft(
        staff_id=staff_id,
        full_name=full_name,
        position=position.value,
        department=department,
        email=user.email,
        phone_number=user.phone_number,
        employment_date=years_ago(years_employed),
        salary=salary,
        permissions=permissions,
        created_by=SEED_AUTHOR,
    )
    return AccountSeed(user=user, profile=profile)


def build_default_accounts(default_password: str) -> list[AccountSeed]:
    """Build the default roster in insertion order.

    Args:
        default_password: Plain password for staff and teacher accounts.
            The student logs in with their student id.

    Returns:
        Account/profile pairs with hashed passwords and formatted phones.
    """
    principal = _staff(
        "254724437239",
        default_password,
        UserType.PRINCIPAL,
        "principal",
        staff_id="PRC/2025/001",
        full_name="Dr. Grace Wanjiku",
        position=StaffPosition.PRINCIPAL,
        department="Administration",
        years_employed=5,
        salary=150000,
        permissions=["ALL"],
    )
    deputy = _staff(
        "254700998877",
        default_password,
        UserType.DEPUTY_PRINCIPAL,
        "deputy",
        staff_id="DPR/2025/001",
        full_name="Mr. John Kamau",
        position=StaffPosition.DEPUTY_PRINCIPAL,
        department="Academic Affairs",
        years_employed=3,
        salary=120000,
        permissions=["ACADEMIC", "DISCIPLINE", "REPORTS"],
    )
    secretary = _staff(
        "254712345678",
        default_password,
        UserType.SECRETARY,
        "secretary",
        staff_id="SEC/2025/001",
        full_name="Mrs. Mary Nyambura",
        position=StaffPosition.SECRETARY,
        department="Administration",
        years_employed=2,
        salary=60000,
        permissions=["STUDENTS", "COMMUNICATION", "RECORDS"],
    )

    teacher_user = _account("254711223344", default_password, UserType.TEACHER, "teacher")
    teacher = AccountSeed(
        user=teacher_user,
        profile=Teacher.draft(
            teacher_id="TCH/2025/001",
            full_name="Mr. Peter Mwangi",
            employee_type=EmployeeType.NTSC.value,
            tsc_number="12345678",
            email=teacher_user.email,
            phone_number=teacher_user.phone_number,
            subjects=["Mathematics", "Physics"],
            assigned_forms=["Form3", "Form4"],
            department="Sciences",
            employment_date=years_ago(1),
            qualification="BSc. Mathematics, PGDE",
            experience_years=5,
            monthly_salary=45000,
            is_class_teacher=True,
            class_teacher_for="Form3A",
            created_by=SEED_AUTHOR,
        ),
    )

    student_id = "GRS/2025/001"
    student_user = _account("254700112233", student_id, UserType.STUDENT, "john.doe")
    student = AccountSeed(
        user=student_user,
        profile=Student.draft(
            student_id=student_id,
            admission_no="GRS/001/2025",
            full_name="John Doe Mwangi",
            form="Form4",
            class_name="A",
            email=student_user.email,
            parent_phone=student_user.phone_number,
            date_of_birth=date(2006, 5, 15),
            gender=Gender.MALE.value,
            address="P.O. Box 123, Ol Kalou",
            guardian_name="Jane Doe Mwangi",
            guardian_phone=format_kenyan_phone("254700112234"),
            year=utc_now().year,
            term=current_term(),
            enrollment_date=years_ago(3),
            status="Active",
            nationality="Kenyan",
            religion="Christian",
            created_by=SEED_AUTHOR,
        ),
    )

    return [principal, deputy, secretary, teacher, student]
