"""Field validation for contact forms and birthday filters.

Validators collect every problem instead of stopping at the first one so the
client can show them together in a single toast.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Tuple

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^[0-9]{7,15}$")
DAY_RE = re.compile(r"^(0?[1-9]|[12][0-9]|3[01])$")
DIGITS_RE = re.compile(r"^[0-9]+$")
ISO_DATE_RE = re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$")

MIN_FILTER_YEAR = 1925

NAME_REQUIRED = "Name is required"
INVALID_EMAIL = "Invalid email format"
INVALID_PHONE = "Please enter a valid phone number (7 to 15 digits)."
INVALID_BIRTHDAY = "Birthday must be a valid date in YYYY-MM-DD format."

# Month abbreviations accepted by the birthday filter, mapped to "01".."12".
MONTHS = {
    "ene": "01", "feb": "02", "mar": "03", "abr": "04", "may": "05", "jun": "06",
    "jul": "07", "ago": "08", "sep": "09", "oct": "10", "nov": "11", "dic": "12",
    "jan": "01", "apr": "04", "aug": "08", "dec": "12",
}


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def is_valid_phone(value: str) -> bool:
    return bool(PHONE_RE.match(value))


@dataclass(frozen=True)
class ContactFields:
    name: str
    phone: Optional[str]
    email: Optional[str]
    birthday: Optional[date]

    def as_values(self) -> dict:
        return {
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "birthday": self.birthday,
        }


def clean_contact_fields(
    name: Optional[str],
    phone: Optional[str],
    email: Optional[str],
    birthday: Optional[str],
) -> Tuple[Optional[ContactFields], List[str]]:
    """Trim, normalise blanks to None and validate a contact form.

    Returns ``(fields, [])`` on success or ``(None, errors)``.
    """
    errors: List[str] = []
    clean_name = (name or "").strip()
    clean_phone = blank_to_none(phone)
    clean_email = blank_to_none(email)
    raw_birthday = blank_to_none(birthday)

    if not clean_name:
        errors.append(NAME_REQUIRED)
    if clean_email is not None and not is_valid_email(clean_email):
        errors.append(INVALID_EMAIL)
    if clean_phone is not None and not is_valid_phone(clean_phone):
        errors.append(INVALID_PHONE)

    parsed_birthday = None
    if raw_birthday is not None:
        # fromisoformat also takes 19900315 and week dates
        if not ISO_DATE_RE.match(raw_birthday):
            errors.append(INVALID_BIRTHDAY)
        else:
            try:
                parsed_birthday = date.fromisoformat(raw_birthday)
            except ValueError:
                errors.append(INVALID_BIRTHDAY)

    if errors:
        return None, errors
    return ContactFields(clean_name, clean_phone, clean_email, parsed_birthday), []


@dataclass(frozen=True)
class BirthdayFilter:
    """Normalised birthday filter: two-digit day/month, four-digit year."""
    day: Optional[str] = None
    month: Optional[str] = None
    year: Optional[str] = None

    @property
    def active(self) -> bool:
        return any((self.day, self.month, self.year))


def normalize_month(value: str) -> Optional[str]:
    """Return the two-digit month for an abbreviation or number, else None."""
    token = value.strip().lower()
    if DIGITS_RE.match(token):
        number = int(token)
        return f"{number:02d}" if 1 <= number <= 12 else None
    return MONTHS.get(token)


def parse_birthday_filter(
    day: Optional[str],
    month: Optional[str],
    year: Optional[str],
) -> Tuple[Optional[BirthdayFilter], List[str]]:
    errors: List[str] = []
    day = blank_to_none(day)
    month = blank_to_none(month)
    year = blank_to_none(year)

    norm_day = None
    if day is not None:
        if not DAY_RE.match(day):
            errors.append("Day must be a number between 1 and 31 (1 or 2 digits, e.g. 5 or 05).")
        else:
            norm_day = day.zfill(2)

    norm_month = None
    if month is not None:
        norm_month = normalize_month(month)
        if norm_month is None:
            errors.append("Month must be a month abbreviation (e.g. Mar) or a number between 1 and 12.")

    if year is not None:
        if not DIGITS_RE.match(year):
            errors.append("Year filter must contain whole numbers only.")
        elif len(year) > 4:
            errors.append("Year filter cannot have more than 4 digits.")
        elif len(year) < 4 or int(year) < MIN_FILTER_YEAR:
            errors.append(f"Year filter is invalid (minimum {MIN_FILTER_YEAR}).")

    if errors:
        return None, errors
    return BirthdayFilter(day=norm_day, month=norm_month, year=year), []
