"""Business logic services package with public service helpers."""

from .contact_filters import apply_view, filter_contacts, sort_contacts, filters_active
from .export_service import export_contacts_csv

__all__ = [
    "apply_view",
    "filter_contacts",
    "sort_contacts",
    "filters_active",
    "export_contacts_csv",
]
