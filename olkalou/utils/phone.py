# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Kenyan phone number normalisation."""

KENYA_COUNTRY_CODE = "254"


def format_kenyan_phone(phone_number: str | None) -> str:
    """Normalise a Kenyan phone number to +254 international format.

    Accepted inputs are ``254XXXXXXXXX``, ``0XXXXXXXXX`` and the bare
    nine-digit subscriber number, with any punctuation. Anything else is
    returned unchanged.

    Args:
        phone_number: Raw phone number.

    Returns:
        The formatted number, or an empty string for blank input.

    Example:
        >>> format_kenyan_phone("0724 437 239")
        '+254724437239'
    """
    if phone_number is None or not phone_number.strip():
        return ""

    digits = "".join(ch for ch in phone_number if ch.isdigit())

    if digits.startswith(KENYA_COUNTRY_CODE) and len(digits) == 12:
        return f"+{digits}"

    if digits.startswith("0") and len(digits) == 10:
        return f"+{KENYA_COUNTRY_CODE}{digits[1:]}"

    if len(digits) == 9:
        return f"+{KENYA_COUNTRY_CODE}{digits}"

    return phone_number
