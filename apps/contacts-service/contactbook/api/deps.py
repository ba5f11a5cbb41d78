"""
API dependency helpers.

Provides the dependency-resolved session user for routes.
"""
import logging
from typing import Optional, Tuple, Dict, Any

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from contactbook.db.database import get_db
from contactbook.api.auth import resolve_identity_from_headers, get_or_create_user
from contactbook.utils.runtime import DevModeMisconfigured, dev_identity

logger = logging.getLogger(__name__)

SESSION_NOT_VALID = "Session not valid"


def resolve_session_identity(
    x_auth_request_user: Optional[str] = None,
    x_auth_request_email: Optional[str] = None,
    x_forwarded_user: Optional[str] = None,
    x_forwarded_email: Optional[str] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """Return (display name, email) for the caller, honouring DEV_MODE."""
    try:
        dev_user = dev_identity()
    except DevModeMisconfigured as exc:
        logger.error("DEV_MODE misconfiguration detected: %s", exc)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="DEV_MODE misconfigured")
    if dev_user is not None:
        return dev_user
    return resolve_identity_from_headers(
        x_auth_request_user=x_auth_request_user,
        x_auth_request_email=x_auth_request_email,
        x_forwarded_user=x_forwarded_user,
        x_forwarded_email=x_forwarded_email,
    )


# Contract:
# Returns (sqlalchemy User model, current_user_context_dict)
# Raises 401 if identity cannot be resolved.

def get_current_user_context(
    db: Session = Depends(get_db),
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
) -> Tuple[Any, Dict[str, Any]]:
    name, email = resolve_session_identity(
        x_auth_request_user=x_auth_request_user,
        x_auth_request_email=x_auth_request_email,
        x_forwarded_user=x_forwarded_user,
        x_forwarded_email=x_forwarded_email,
    )
    if not email:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=SESSION_NOT_VALID)
    user = get_or_create_user(db, email=email, display_name=name)
    current_user = {
        "id": user.id,
        "email": user.email,
        "display_name": user.display_name,
    }
    return user, current_user
