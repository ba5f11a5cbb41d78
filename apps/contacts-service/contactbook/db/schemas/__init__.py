"""
Pydantic schemas for requests and responses.
"""

from .users import UserInfo
from .contacts import (
    ContactPayload,
    ContactCreate,
    ContactUpdate,
    Contact,
    ContactList,
)
from .notifications import ToastLevel, Toast, ActionResult, ExportResult

__all__ = [
    "UserInfo",
    "ContactPayload",
    "ContactCreate",
    "ContactUpdate",
    "Contact",
    "ContactList",
    "ToastLevel",
    "Toast",
    "ActionResult",
    "ExportResult",
]
