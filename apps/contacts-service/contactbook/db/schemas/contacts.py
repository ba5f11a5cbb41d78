from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, field_validator


class ContactPayload(BaseModel):
    """Raw form fields as submitted; cleaned by `contactbook.utils.validation`."""
    name: str = ''
    phone: Optional[str] = None
    email: Optional[str] = None
    birthday: Optional[str] = None

    @field_validator("phone", mode="before")
    @classmethod
    def _phone_as_text(cls, v):
        # Older clients send the phone as a JSON number
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class ContactCreate(ContactPayload):
    pass


class ContactUpdate(ContactPayload):
    pass


class Contact(BaseModel):
    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    birthday: Optional[date] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class ContactList(BaseModel):
    items: List[Contact]
    total: int
    filters_active: bool = False
    message: Optional[str] = None
