"""
App assembly entry point.

Re-exports the FastAPI `app` from `contactbook.api.main` so servers can be
pointed at `app:app`.
"""

from contactbook.api.main import app  # noqa: F401
