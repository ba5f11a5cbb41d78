"""Contact book service: owner-scoped contact management over HTTP."""

__version__ = "1.0.0"
