from typing import Optional
from pydantic import BaseModel


class UserInfo(BaseModel):
    authenticated: bool
    email: Optional[str] = None
    display_name: Optional[str] = None
    contact_count: Optional[int] = None
    dev_mode: bool = False
