"""
In-memory search, birthday filtering and sorting for a user's contacts.

Works on any objects exposing ``name``, ``phone``, ``email`` and
``birthday`` (ORM rows or plain dataclasses), so the same logic serves the
API and the tests.
"""
from __future__ import annotations

import unicodedata
from datetime import date
from typing import Iterable, List, Optional, Sequence

from contactbook.utils.validation import BirthdayFilter

SORT_NAME = "name"
SORT_BIRTHDAY = "birthday"
SORT_KEYS = (SORT_NAME, SORT_BIRTHDAY)

# Contacts without a birthday sort as if born on the Unix epoch
_MISSING_BIRTHDAY = date(1970, 1, 1)


def _fold(text: str) -> str:
    """Case- and accent-insensitive key, so 'Álvaro' sorts next to 'Alvaro'."""
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def matches_search(contact, term: Optional[str]) -> bool:
    """Substring match on name, email (case-insensitive) or phone."""
    if not term:
        return True
    needle = term.lower()
    if needle in (contact.name or "").lower():
        return True
    if contact.email and needle in contact.email.lower():
        return True
    if contact.phone and needle in str(contact.phone):
        return True
    return False


def matches_birthday(contact, birthday_filter: Optional[BirthdayFilter]) -> bool:
    """Compare day/month/year parts; contacts without a birthday always pass."""
    if birthday_filter is None or not birthday_filter.active:
        return True
    birthday = contact.birthday
    if birthday is None:
        return True
    year, month, day = birthday.isoformat().split("-")
    if birthday_filter.day and day != birthday_filter.day:
        return False
    if birthday_filter.month and month != birthday_filter.month:
        return False
    if birthday_filter.year and year != birthday_filter.year:
        return False
    return True


def filter_contacts(
    contacts: Iterable,
    term: Optional[str] = None,
    birthday_filter: Optional[BirthdayFilter] = None,
) -> List:
    return [
        c for c in contacts
        if matches_search(c, term) and matches_birthday(c, birthday_filter)
    ]


def sort_contacts(contacts: Sequence, sort: Optional[str] = None) -> List:
    """Return a sorted copy; unknown sort keys keep the incoming order."""
    ordered = list(contacts)
    if sort not in SORT_KEYS:
        return ordered
    if sort == SORT_NAME:
        ordered.sort(key=lambda c: _fold(c.name or ""))
    else:
        ordered.sort(key=lambda c: c.birthday or _MISSING_BIRTHDAY)
    return ordered


def filters_active(term: Optional[str], birthday_filter: Optional[BirthdayFilter]) -> bool:
    return bool(term and term.strip()) or bool(birthday_filter and birthday_filter.active)


def apply_view(
    contacts: Iterable,
    term: Optional[str] = None,
    birthday_filter: Optional[BirthdayFilter] = None,
    sort: Optional[str] = None,
) -> List:
    """Search, filter, then sort: the full list view pipeline."""
    return sort_contacts(filter_contacts(contacts, term, birthday_filter), sort)
