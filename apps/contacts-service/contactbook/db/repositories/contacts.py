"""
Contact repository functions.

Every statement is parameterized and filtered on ``owner_email`` so a
session can only see and change its own contacts.
"""
from __future__ import annotations

from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contactbook.db import models
from contactbook.db.models import now_utc
from contactbook.utils.validation import ContactFields


def create_contact(db: Session, owner_email: str, fields: ContactFields) -> models.Contact:
    db_contact = models.Contact(owner_email=owner_email, **fields.as_values())
    try:
        db.add(db_contact)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(db_contact)
    return db_contact


def get_contact(db: Session, owner_email: str, contact_id: int) -> Optional[models.Contact]:
    return db.execute(
        select(models.Contact).where(
            models.Contact.id == contact_id,
            models.Contact.owner_email == owner_email,
        )
    ).scalar_one_or_none()


def list_contacts(db: Session, owner_email: str) -> List[models.Contact]:
    """All contacts of one owner in insertion order."""
    return list(
        db.execute(
            select(models.Contact)
            .where(models.Contact.owner_email == owner_email)
            .order_by(models.Contact.id)
        ).scalars()
    )


def count_contacts(db: Session, owner_email: str) -> int:
    return db.execute(
        select(func.count(models.Contact.id)).where(models.Contact.owner_email == owner_email)
    ).scalar_one()


def update_contact(db: Session, owner_email: str, contact_id: int, fields: ContactFields) -> int:
    """Replace all editable fields in one ownership-guarded UPDATE.

    Returns the number of affected rows; 0 means the contact does not exist
    or belongs to someone else.
    """
    stmt = (
        update(models.Contact)
        .where(
            models.Contact.id == contact_id,
            models.Contact.owner_email == owner_email,
        )
        .values(updated_at=now_utc(), **fields.as_values())
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return result.rowcount


def delete_contact(db: Session, owner_email: str, contact_id: int) -> Optional[str]:
    """Delete an owned contact; return its name, or None if nothing was removed."""
    existing = get_contact(db, owner_email, contact_id)
    if existing is None:
        return None
    name = existing.name
    stmt = (
        delete(models.Contact)
        .where(
            models.Contact.id == contact_id,
            models.Contact.owner_email == owner_email,
        )
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    if result.rowcount == 0:
        return None
    return name


def delete_all_contacts(db: Session, owner_email: str) -> int:
    try:
        result = db.execute(
            delete(models.Contact).where(models.Contact.owner_email == owner_email)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    return result.rowcount
