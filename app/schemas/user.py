# app/schemas/user.py
from pydantic import Field
from datetime import datetime
from typing import Optional
from app.models.enums import Role
from app.schemas.common import ApiModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserOut(ApiModel):
    id: int
    name: Optional[str]
    email: str
    role: Role
    created_at: datetime
    updated_at: datetime


class UserDetailOut(UserOut):
    vehicle_count: int = 0
    request_count: int = 0


class UserSummary(ApiModel):
    id: int
    name: Optional[str]
    email: str


class ProfileUpdate(ApiModel):
    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)


class UserUpdate(ProfileUpdate):
    role: Optional[Role] = None


class PasswordUpdate(ApiModel):
    current_password: str = Field(..., min_length=6)
    new_password: str = Field(..., min_length=6)
