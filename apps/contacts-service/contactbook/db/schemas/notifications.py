from typing import Literal, Optional
from pydantic import BaseModel

from .contacts import Contact

ToastLevel = Literal['success', 'danger', 'info']


class Toast(BaseModel):
    level: ToastLevel = 'info'
    message: str
    duration_ms: int = 3000


class ActionResult(BaseModel):
    success: bool = True
    message: str
    toast: Toast
    contact: Optional[Contact] = None


class ExportResult(BaseModel):
    success: bool = True
    message: str
    toast: Toast
    exported: int = 0
