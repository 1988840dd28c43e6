from __future__ import annotations

from datetime import date, datetime

from ..models.participant import Gender

"""Age-group calculator.

Derives a gender-prefixed bucket label ("M 30-39", "F U18", ...) from a birth
date string and a resolved gender, as of a given ``today``.
"""

__all__ = [
    "age_bucket",
    "age_on",
    "compute_age_group",
    "parse_birth_date",
]

# ISO (fromisoformat) is tried first
_DATE_FORMATS = ("%Y/%m/%d", "%d/%m/%Y", "%d-%m-%Y")


def parse_birth_date(raw: str) -> date | None:
    """Parse a roster birth date; returns None when the value is not a date."""
    value = raw.strip()
    if not value:
        return None
    try:
        return datetime.fromisoformat(value).date()
    except ValueError:
        pass
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def age_on(birth: date, today: date) -> int:
    """Whole years between ``birth`` and ``today``."""
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def age_bucket(age: int) -> str:
    if age < 18:
        return "U18"
    if age < 30:
        return "18-29"
    if age < 40:
        return "30-39"
    if age < 50:
        return "40-49"
    if age < 60:
        return "50-59"
    if age < 70:
        return "60-69"
    return "70+"


def compute_age_group(birth_date: str, gender: Gender, today: date) -> str | None:
    """Gender-prefixed bucket label, or None when it cannot be computed.

    None is returned for an Unknown gender and for an empty or unparseable birth
    date; the caller then keeps the raw ageGroup column value.
    """
    if gender is Gender.UNKNOWN:
        return None
    birth = parse_birth_date(birth_date)
    if birth is None:
        return None
    return f"{gender.prefix} {age_bucket(age_on(birth, today))}"
