"""
Simulated CSV export.

No file is produced; the export is logged and acknowledged with an info toast.
"""
import logging
from typing import Sequence

from contactbook.db import schemas
from contactbook.services.notifications import LEVEL_INFO, toast

logger = logging.getLogger(__name__)

EXPORT_FIELDS = ("id", "name", "phone", "email", "birthday")


def export_contacts_csv(owner_email: str, contacts: Sequence) -> schemas.ExportResult:
    logger.info(
        "csv_export_simulated: owner=%s contacts=%d fields=%s",
        owner_email,
        len(contacts),
        ",".join(EXPORT_FIELDS),
    )
    message = "CSV export finished."
    return schemas.ExportResult(
        success=True,
        message=message,
        toast=toast(message, LEVEL_INFO),
        exported=len(contacts),
    )
