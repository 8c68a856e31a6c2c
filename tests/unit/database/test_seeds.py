# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for seed data builders."""

from datetime import timedelta

import pytest

from olkalou.infrastructure.database.models import Staff, Student, Teacher, UserType
from olkalou.infrastructure.database.seeds import (
    SEED_AUTHOR,
    build_activities,
    build_announcements,
    build_default_accounts,
    build_fees,
    build_grading_scale,
    build_library_books,
    verify_password,
)
from olkalou.utils.datetime import utc_now


class TestGradingScale:
    """Tests for the KCSE grading scale seed."""

    def test_twelve_valid_bands(self) -> None:
        bands = build_grading_scale()

        assert len(bands) == 12
        assert all(band.validate_entity().is_valid for band in bands)
        assert all(band.created_by == SEED_AUTHOR for band in bands)

    @pytest.mark.parametrize("percentage", range(0, 101))
    def test_every_percentage_has_exactly_one_band(self, percentage: int) -> None:
        matches = [band for band in build_grading_scale() if band.covers(percentage)]

        assert len(matches) == 1

    @pytest.mark.parametrize(
        ("percentage", "grade", "points"),
        [(100, "A", 12), (80, "A", 12), (79, "A-", 11), (0, "E", 1)],
    )
    def test_boundaries(self, percentage: int, grade: str, points: int) -> None:
        (band,) = [band for band in build_grading_scale() if band.covers(percentage)]

        assert band.grade == grade
        assert band.points == points

    def test_builds_fresh_rows(self) -> None:
        first = build_grading_scale()
        second = build_grading_scale()

        assert {band.id for band in first}.isdisjoint(band.id for band in second)


class TestDefaultAccounts:
    """Tests for the default roster."""

    @pytest.fixture
    def roster(self):
        return build_default_accounts("12345")

    def test_roster_order_and_profiles(self, roster) -> None:
        user_types = [seed.user.user_type for seed in roster]

        assert user_types == [
            UserType.PRINCIPAL.value,
            UserType.DEPUTY_PRINCIPAL.value,
            UserType.SECRETARY.value,
            UserType.TEACHER.value,
            UserType.STUDENT.value,
        ]
        assert [type(seed.profile) for seed in roster] == [Staff, Staff, Staff, Teacher, Student]

    def test_phones_are_international(self, roster) -> None:
        assert all(seed.user.phone_number.startswith("+254") for seed in roster)
        assert roster[0].user.phone_number == "+254724437239"

    def test_passwords_are_hashed(self, roster) -> None:
        principal, *_, student = roster

        assert principal.user.password.startswith("$2")
        assert verify_password("12345", principal.user.password)
        assert verify_password(student.profile.student_id, student.user.password)

    def test_profiles_valid_once_linked(self, roster) -> None:
        """Verify that every pair passes validation after the account id is stamped."""
        for seed in roster:
            assert seed.user.validate_entity().is_valid
            assert not seed.profile.validate_entity().is_valid

            seed.link()

            assert seed.profile.user_id == seed.user.id
            assert seed.profile.validate_entity().errors == []

    def test_teacher_is_ntsc_class_teacher(self, roster) -> None:
        teacher = roster[3].profile

        assert teacher.employee_type == "NTSC"
        assert teacher.tsc_number
        assert teacher.class_teacher_for == "Form3A"

    def test_student_is_form_four(self, roster) -> None:
        student = roster[4].profile

        assert student.full_class_name == "Form4A"
        assert student.parent_phone == roster[4].user.phone_number


class TestSampleData:
    """Tests for demo data builders."""

    def test_library_books_are_valid(self) -> None:
        books = build_library_books()

        assert books
        assert all(book.validate_entity().is_valid for book in books)

    def test_activities_are_valid_and_upcoming(self) -> None:
        activities = build_activities()

        assert len(activities) == 3
        assert all(activity.validate_entity().errors == [] for activity in activities)
        assert all(activity.is_upcoming for activity in activities)

    def test_activity_target_forms_are_independent(self) -> None:
        first, _, third = build_activities()

        first.target_forms.append("Form5")

        assert "Form5" not in third.target_forms

    def test_fees_for_student(self) -> None:
        now = utc_now()
        fees = build_fees("student-row-1", now=now)

        assert fees.student_id == "student-row-1"
        assert fees.due_date == now + timedelta(days=30)
        assert fees.validate_entity().is_valid is True
        assert fees.is_overdue is False

    def test_announcements_are_valid(self) -> None:
        announcements = build_announcements()

        assert announcements
        assert all(a.validate_entity().errors == [] for a in announcements)
