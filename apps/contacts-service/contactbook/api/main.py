"""
FastAPI app assembly: logging, middleware and router wiring.
"""
import logging
import os
from typing import Optional

from fastapi import FastAPI, Header, Depends, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from starlette.requests import Request
from starlette.responses import JSONResponse

# Configure logging
LOG_LEVEL_NAME = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL = getattr(logging, LOG_LEVEL_NAME, logging.INFO)
logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)
logger.setLevel(LOG_LEVEL)
logger.info("app_startup: log_level=%s", LOG_LEVEL_NAME)

from contactbook import __version__
from contactbook.db import schemas
from contactbook.db.database import get_db
from contactbook.db.repositories import contacts as contact_repo
from contactbook.api.auth import get_or_create_user
from contactbook.api.contacts import router as contacts_router
from contactbook.api.deps import SESSION_NOT_VALID, resolve_session_identity
from contactbook.utils.runtime import dev_mode_requested

app = FastAPI(
    title="Contact Book Service",
    description="API for managing a personal contact list: create, edit, delete, search, filter and sort.",
    version=__version__,
)

# Avoid implicit trailing-slash redirects for predictable URLs
app.router.redirect_slashes = False

DEFAULT_ORIGINS = [
    "http://localhost",
    "http://localhost:3000",
    "http://localhost:8000",
]


def _cors_origins():
    raw = os.getenv("CORS_ORIGINS", "")
    configured = [o.strip() for o in raw.split(",") if o.strip()]
    return configured or DEFAULT_ORIGINS


app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware: reject writes from requests that carry no identity at all
@app.middleware("http")
async def enforce_session_for_writes(request: Request, call_next):
    if request.method in ("POST", "PUT", "PATCH", "DELETE") and not dev_mode_requested():
        h = request.headers
        user_present = (
            h.get("x-auth-request-user")
            or h.get("x-auth-request-email")
            or h.get("x-forwarded-user")
            or h.get("x-forwarded-email")
        )
        if not user_present:
            return JSONResponse({"detail": SESSION_NOT_VALID}, status_code=status.HTTP_401_UNAUTHORIZED)
    return await call_next(request)


app.include_router(contacts_router)


@app.get("/user-info", response_model=schemas.UserInfo)
def get_user_info(
    x_auth_request_user: Optional[str] = Header(default=None),
    x_auth_request_email: Optional[str] = Header(default=None),
    x_forwarded_user: Optional[str] = Header(default=None),
    x_forwarded_email: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
):
    """
    Return the session user and how many contacts they own.
    - Dev mode (DEV_MODE=true): a stable dev@localhost user.
    - Normal mode: identity from the proxy headers; unauthenticated otherwise.
    """
    name, email = resolve_session_identity(
        x_auth_request_user=x_auth_request_user,
        x_auth_request_email=x_auth_request_email,
        x_forwarded_user=x_forwarded_user,
        x_forwarded_email=x_forwarded_email,
    )
    if not email:
        return schemas.UserInfo(authenticated=False)
    user = get_or_create_user(db, email=email, display_name=name)
    return schemas.UserInfo(
        authenticated=True,
        email=user.email,
        display_name=user.display_name,
        contact_count=contact_repo.count_contacts(db, owner_email=user.email),
        dev_mode=dev_mode_requested(),
    )


@app.get("/health")
def health_check():
    return {"status": "ok", "service": "contacts-service"}
