# app/schemas/auth.py
from pydantic import Field
from typing import Optional
from app.schemas.common import ApiModel
from app.schemas.user import UserOut, EMAIL_PATTERN


class RegisterIn(ApiModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    name: Optional[str] = None


class LoginIn(ApiModel):
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)


class AuthOut(ApiModel):
    access_token: str = Field(..., alias="Access_token")
    user: UserOut
