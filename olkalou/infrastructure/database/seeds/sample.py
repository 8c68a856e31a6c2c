# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Demo data seed: library books, activities, a fee account and announcements.

Dates are relative to the moment the rows are built so the demo always
shows upcoming events and current notices.
"""

from datetime import datetime, timedelta

from olkalou.infrastructure.database.models.activities import Activity, ActivityType
from olkalou.infrastructure.database.models.communication import (
    Announcement,
    AnnouncementPriority,
    AnnouncementType,
)
from olkalou.infrastructure.database.models.finance import Fees, PaymentStatus
from olkalou.infrastructure.database.models.library import LibraryBook
from olkalou.infrastructure.database.seeds.grading import SEED_AUTHOR
from olkalou.utils.datetime import current_term, utc_day_start, utc_now

ALL_FORMS = ["Form1", "Form2", "Form3", "Form4"]


def build_library_books() -> list[LibraryBook]:
    books = [
        {
            "book_id": "LIB001",
            "title": "Advanced Mathematics Form 4",
            "author": "Dr. James Wachira",
            "isbn": "9789966000019",
            "category": "Mathematics",
            "subcategory": "Secondary Education",
            "publisher": "East African Publishers",
            "publication_year": 2022,
            "edition": "3rd Edition",
            "language": "English",
            "total_copies": 25,
            "available_copies": 18,
            "damaged_copies": 2,
            "lost_copies": 1,
            "description": "Comprehensive mathematics textbook covering Form 4 curriculum",
        },
        {
            "book_id": "LIB002",
            "title": "Physics Principles and Practice",
            "author": "Prof. Mary Kiprotich",
            "isbn": "9789966000026",
            "category": "Science",
            "subcategory": "Physics",
            "publisher": "Longhorn Publishers",
            "publication_year": 2023,
            "edition": "2nd Edition",
            "language": "English",
            "total_copies": 20,
            "available_copies": 15,
            "damaged_copies": 1,
            "lost_copies": 0,
            "description": "Detailed physics concepts for secondary school students",
        },
        {
            "book_id": "LIB003",
            "title": "English Literature Anthology",
            "author": "Prof. Susan Macharia",
            "isbn": "9789966000033",
            "category": "Literature",
            "subcategory": "English",
            "publisher": "Kenya Literature Bureau",
            "publication_year": 2022,
            "edition": "1st Edition",
            "language": "English",
            "total_copies": 30,
            "available_copies": 22,
            "damaged_copies": 3,
            "lost_copies": 1,
            "description": "Collection of African and world literature for secondary schools",
        },
        {
            "book_id": "LIB004",
            "title": "Kiswahili Fasihi",
            "author": "Dkt. Ali Hassan",
            "isbn": "9789966000040",
            "category": "Languages",
            "subcategory": "Kiswahili",
            "publisher": "Jomo Kenyatta Foundation",
            "publication_year": 2021,
            "edition": "4th Edition",
            "language": "Kiswahili",
            "total_copies": 25,
            "available_copies": 20,
            "damaged_copies": 1,
            "lost_copies": 0,
            "description": "Kitabu cha fasihi ya Kiswahili kwa shule za upili",
        },
    ]
    return [LibraryBook.draft(**data, created_by=SEED_AUTHOR) for data in books]


def _event_window(
    now: datetime, days_ahead: int, start_hour: int, end_hour: int
) -> tuple[datetime, datetime, datetime]:
    day = utc_day_start(now + timedelta(days=days_ahead))
    return (
        now + timedelta(days=days_ahead),
        day + timedelta(hours=start_hour),
        day + timedelta(hours=end_hour),
    )


def build_activities(now: datetime | None = None) -> list[Activity]:
    now = now or utc_now()
    activities = [
        {
            "activity_id": "ACT001",
            "title": "Inter-House Sports Day",
            "description": (
                "Annual sports competition between school houses featuring athletics, "
                "football, volleyball, and basketball events. All students are encouraged "
                "to participate and support their houses."
            ),
            "window": (14, 8, 17),
            "venue": "School Sports Complex",
            "activity_type": ActivityType.SPORTS,
            "organizer": "Sports Department",
            "target_forms": list(ALL_FORMS),
            "is_optional": True,
            "deadline_days": 7,
            "max_participants": 200,
            "current_participants": 45,
            "requirements": "Sports attire, water bottle, and house colors",
        },
        {
            "activity_id": "ACT002",
            "title": "Science Exhibition",
            "description": (
                "Students showcase their science projects and innovations. Categories "
                "include Physics, Chemistry, Biology, and Computer Science. Prizes will "
                "be awarded for the best projects."
            ),
            "window": (21, 9, 16),
            "venue": "School Hall",
            "activity_type": ActivityType.ACADEMIC,
            "organizer": "Science Department",
            "target_forms": ["Form3", "Form4"],
            "is_optional": True,
            "deadline_days": 14,
            "max_participants": 100,
            "current_participants": 32,
            "requirements": "Science project, display materials, and presentation skills",
        },
        {
            "activity_id": "ACT003",
            "title": "Cultural Day Celebration",
            "description": (
                "Celebration of Kenya's diverse cultures through traditional dances, "
                "songs, food, and dress. Students will represent different communities "
                "and their rich heritage."
            ),
            "window": (35, 10, 15),
            "venue": "School Amphitheater",
            "activity_type": ActivityType.CULTURAL,
            "organizer": "Humanities Department",
            "target_forms": list(ALL_FORMS),
            "is_optional": False,
            "deadline_days": 28,
            "max_participants": 300,
            "current_participants": 89,
            "requirements": "Traditional attire representing various Kenyan communities",
        },
    ]

    rows = []
    for data in activities:
        event_date, start, end = _event_window(now, *data.pop("window"))
        activity_type = data.pop("activity_type")
        deadline = now + timedelta(days=data.pop("deadline_days"))
        rows.append(
            Activity.draft(
                **data,
                activity_type=activity_type.value,
                date=event_date,
                start_time=start,
                end_time=end,
                registration_deadline=deadline,
                status="Active",
                created_by=SEED_AUTHOR,
            )
        )
    return rows


def build_fees(student_row_id: str, now: datetime | None = None) -> Fees:
    """Build a part-paid fee account for the current term.

    Args:
        student_row_id: Row id of the student the account belongs to.
    """
    now = now or utc_now()
    return Fees.draft(
        student_id=student_row_id,
        total_fees=80000,
        paid_amount=55000,
        balance=25000,
        year=now.year,
        term=current_term(now),
        due_date=now + timedelta(days=30),
        payment_status=PaymentStatus.PARTIAL.value,
        last_payment_date=now - timedelta(days=15),
        discount_amount=0,
        created_by=SEED_AUTHOR,
    )


def build_announcements(now: datetime | None = None) -> list[Announcement]:
    now = now or utc_now()
    announcements = [
        (
            "Term 1 Examination Timetable",
            "The examination timetable for Term 1 has been released. Students are advised "
            "to check the notice board for their specific examination dates and times. "
            "Examinations will commence on Monday, March 25th, 2025. All students must be "
            "present 30 minutes before their scheduled exam time.",
            AnnouncementType.ACADEMIC,
            AnnouncementPriority.HIGH,
            ["Students", "Teachers", "Parents"],
            2,
            30,
        ),
        (
            "Fee Payment Reminder",
            "This is a reminder to all parents and guardians that school fees for Term 1 "
            "are due by the end of this month. Students with outstanding fees may not be "
            "allowed to sit for examinations. For any fee-related queries, please contact "
            "the school bursar during office hours.",
            AnnouncementType.FEE,
            AnnouncementPriority.NORMAL,
            ["Parents", "Students"],
            5,
            15,
        ),
        (
            "COVID-19 Safety Protocols",
            "All students, staff, and visitors are reminded to observe COVID-19 safety "
            "protocols while on school premises. This includes wearing masks in designated "
            "areas, maintaining social distance, and regular hand washing. Any student "
            "feeling unwell should report to the school nurse immediately.",
            AnnouncementType.GENERAL,
            AnnouncementPriority.HIGH,
            ["Students", "Teachers", "Staff", "Parents"],
            1,
            60,
        ),
    ]

    return [
        Announcement.draft(
            title=title,
            content=content,
            announcement_type=kind.value,
            priority=priority.value,
            target_audience=audience,
            target_forms=list(ALL_FORMS),
            is_published=True,
            publish_date=now - timedelta(days=published_days_ago),
            expiry_date=now + timedelta(days=expires_in_days),
            created_by=SEED_AUTHOR,
        )
        for title, content, kind, priority, audience, published_days_ago, expires_in_days
        in announcements
    ]
