# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading scale seed data.

Twelve KCSE bands covering every whole percentage from 0 to 100 exactly once.
"""

from olkalou.infrastructure.database.models.academic import GradingBand

SEED_AUTHOR = "system"

# (grade, min %, max %, points, description)
GRADING_BANDS: tuple[tuple[str, int, int, int, str], ...] = (
    ("A", 80, 100, 12, "Excellent"),
    ("A-", 75, 79, 11, "Very Good"),
    ("B+", 70, 74, 10, "Good"),
    ("B", 65, 69, 9, "Good"),
    ("B-", 60, 64, 8, "Above Average"),
    ("C+", 55, 59, 7, "Above Average"),
    ("C", 50, 54, 6, "Average"),
    ("C-", 45, 49, 5, "Average"),
    ("D+", 40, 44, 4, "Below Average"),
    ("D", 35, 39, 3, "Below Average"),
    ("D-", 30, 34, 2, "Poor"),
    ("E", 0, 29, 1, "Very Poor"),
)


def build_grading_scale() -> list[GradingBand]:
    """Build fresh grading rows, highest band first."""
    return [
        GradingBand.draft(
            grade=grade,
            min_percentage=minimum,
            max_percentage=maximum,
            points=points,
            description=description,
            created_by=SEED_AUTHOR,
        )
        for grade, minimum, maximum, points, description in GRADING_BANDS
    ]
