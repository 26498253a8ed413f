import uuid
from datetime import datetime
from pydantic import EmailStr, Field
from nephrolite.core.casing import CamelModel
from nephrolite.core.constants import Role

class UserCreate(CamelModel):
    email: EmailStr
    display_name: str = Field(..., min_length=1, max_length=120)
    role: Role = "staff"
    phone_number: str | None = None
    is_active: bool = True

class UserUpdate(CamelModel):
    display_name: str | None = Field(None, min_length=1, max_length=120)
    phone_number: str | None = None
    is_active: bool | None = None

class RoleChange(CamelModel):
    role: Role

class UserOut(CamelModel):
    id: uuid.UUID
    email: str
    display_name: str
    role: str
    phone_number: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
