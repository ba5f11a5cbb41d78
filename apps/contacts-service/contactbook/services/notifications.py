"""
Toast notifications returned alongside write responses.

Message text lives here so every endpoint words the same event the same way.
"""
from typing import Optional

from contactbook.db import schemas

LEVEL_SUCCESS = 'success'
LEVEL_DANGER = 'danger'
LEVEL_INFO = 'info'

TOAST_DURATION_MS = 3000


def toast(message: str, level: str = LEVEL_INFO) -> schemas.Toast:
    return schemas.Toast(level=level, message=message, duration_ms=TOAST_DURATION_MS)


def action_result(message: str, level: str, contact=None) -> schemas.ActionResult:
    """Wrap a message into the success envelope with a matching toast."""
    return schemas.ActionResult(
        success=True,
        message=message,
        toast=toast(message, level),
        contact=schemas.Contact.model_validate(contact) if contact is not None else None,
    )


def contact_created(contact) -> schemas.ActionResult:
    return action_result(f"Contact {contact.name} created successfully.", LEVEL_SUCCESS, contact)


def contact_updated(contact) -> schemas.ActionResult:
    return action_result(f"Contact {contact.name} updated.", LEVEL_SUCCESS, contact)


def contact_deleted(name: Optional[str]) -> schemas.ActionResult:
    if name:
        return action_result(f"Contact {name} deleted.", LEVEL_DANGER)
    return action_result("Contact deleted.", LEVEL_DANGER)


def format_errors(errors, heading: Optional[str] = None) -> str:
    """Join validation errors into one newline-separated toast body."""
    lines = [heading] if heading else []
    lines.extend(errors)
    return "\n".join(lines)
