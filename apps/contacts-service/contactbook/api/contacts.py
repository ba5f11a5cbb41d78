"""
Contacts API endpoints.

Owner-scoped CRUD plus search, birthday filters, sorting and the simulated
CSV export. Success responses carry a toast for the client to display.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from contactbook.db import schemas
from contactbook.db.database import get_db
from contactbook.db.repositories import contacts as contact_repo
from contactbook.api.deps import get_current_user_context
from contactbook.services import contact_filters, notifications
from contactbook.services.export_service import export_contacts_csv
from contactbook.utils.feature_flags import birthday_filters_enabled, csv_export_enabled
from contactbook.utils.validation import blank_to_none, clean_contact_fields, parse_birthday_filter

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/contacts", tags=["contacts"])

NOT_FOUND = "Contact not found"
NOT_FOUND_OR_FORBIDDEN = "Contact not found or you do not have permission"
EMPTY_LIST_MESSAGE = "No contacts found."
INVALID_FILTERS = "Invalid date filters. Please correct them."


def _raise_db_failure(exc: SQLAlchemyError, detail: str):
    logger.error("database error: %s", exc)
    if isinstance(exc, OperationalError):
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database connection error")
    raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


def _check_contact_id(contact_id: int):
    if contact_id <= 0:
        raise HTTPException(status_code=422, detail="Invalid contact id")


def _clean_payload(payload: schemas.ContactPayload):
    fields, errors = clean_contact_fields(
        name=payload.name,
        phone=payload.phone,
        email=payload.email,
        birthday=payload.birthday,
    )
    if errors:
        raise HTTPException(
            status_code=422,
            detail=notifications.format_errors(errors),
        )
    return fields


@router.get("/", response_model=schemas.ContactList)
def list_contacts_endpoint(
    q: Optional[str] = None,
    day: Optional[str] = None,
    month: Optional[str] = None,
    year: Optional[str] = None,
    sort: Optional[str] = Query(default=None, description=f"One of {', '.join(contact_filters.SORT_KEYS)}"),
    db: Session = Depends(get_db),
    user_context = Depends(get_current_user_context),
):
    u, current_user = user_context

    birthday_filter = None
    if birthday_filters_enabled() and any(blank_to_none(v) for v in (day, month, year)):
        birthday_filter, errors = parse_birthday_filter(day, month, year)
        if errors:
            raise HTTPException(
                status_code=422,
                detail=notifications.format_errors(errors, heading=INVALID_FILTERS),
            )

    term = blank_to_none(q)
    try:
        contacts = contact_repo.list_contacts(db, owner_email=current_user["email"])
    except SQLAlchemyError as exc:
        _raise_db_failure(exc, "Error loading contacts")

    view = contact_filters.apply_view(contacts, term=term, birthday_filter=birthday_filter, sort=sort)
    return schemas.ContactList(
        items=[schemas.Contact.model_validate(c) for c in view],
        total=len(view),
        filters_active=contact_filters.filters_active(term, birthday_filter),
        message=None if view else EMPTY_LIST_MESSAGE,
    )


@router.post("/", response_model=schemas.ActionResult, status_code=status.HTTP_201_CREATED)
def create_contact_endpoint(
    payload: schemas.ContactCreate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_user_context),
):
    u, current_user = user_context
    fields = _clean_payload(payload)
    try:
        created = contact_repo.create_contact(db, owner_email=current_user["email"], fields=fields)
    except SQLAlchemyError as exc:
        _raise_db_failure(exc, "Error creating contact")
    logger.info("contact_created: id=%s owner=%s", created.id, current_user["email"])
    return notifications.contact_created(created)


@router.post("/export", response_model=schemas.ExportResult)
def export_contacts_endpoint(
    db: Session = Depends(get_db),
    user_context = Depends(get_current_user_context),
):
    if not csv_export_enabled():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="CSV export is disabled")
    u, current_user = user_context
    try:
        contacts = contact_repo.list_contacts(db, owner_email=current_user["email"])
    except SQLAlchemyError as exc:
        _raise_db_failure(exc, "Error exporting contacts")
    return export_contacts_csv(current_user["email"], contacts)


@router.get("/{contact_id}", response_model=schemas.Contact)
def get_contact_endpoint(
    contact_id: int,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_user_context),
):
    _check_contact_id(contact_id)
    u, current_user = user_context
    try:
        db_contact = contact_repo.get_contact(db, owner_email=current_user["email"], contact_id=contact_id)
    except SQLAlchemyError as exc:
        _raise_db_failure(exc, "Error loading contact")
    if not db_contact:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    return db_contact


@router.put("/{contact_id}", response_model=schemas.ActionResult)
def update_contact_endpoint(
    contact_id: int,
    payload: schemas.ContactUpdate,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_user_context),
):
    _check_contact_id(contact_id)
    fields = _clean_payload(payload)
    u, current_user = user_context
    owner_email = current_user["email"]
    try:
        affected = contact_repo.update_contact(db, owner_email=owner_email, contact_id=contact_id, fields=fields)
    except SQLAlchemyError as exc:
        _raise_db_failure(exc, "Error updating contact")
    if affected == 0:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_OR_FORBIDDEN)
    try:
        updated = contact_repo.get_contact(db, owner_email=owner_email, contact_id=contact_id)
    except SQLAlchemyError as exc:
        _raise_db_failure(exc, "Error updating contact")
    # Deleted by a concurrent request after the UPDATE committed
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND)
    logger.info("contact_updated: id=%s owner=%s", contact_id, owner_email)
    return notifications.contact_updated(updated)


@router.delete("/{contact_id}", response_model=schemas.ActionResult)
def delete_contact_endpoint(
    contact_id: int,
    db: Session = Depends(get_db),
    user_context = Depends(get_current_user_context),
):
    _check_contact_id(contact_id)
    u, current_user = user_context
    owner_email = current_user["email"]
    try:
        deleted_name = contact_repo.delete_contact(db, owner_email=owner_email, contact_id=contact_id)
    except SQLAlchemyError as exc:
        _raise_db_failure(exc, "Error deleting contact")
    if deleted_name is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_OR_FORBIDDEN)
    logger.info("contact_deleted: id=%s owner=%s", contact_id, owner_email)
    return notifications.contact_deleted(deleted_name)
