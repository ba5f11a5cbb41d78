"""
SQLAlchemy models for the contact book.

Exposes `Base`, `now_utc` and the ORM classes.
"""

from .base import Base, now_utc  # re-export

from .users import User
from .contacts import Contact

__all__ = [
    "Base",
    "now_utc",
    "User",
    "Contact",
]
