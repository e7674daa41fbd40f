import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from .common import CamelModel
from ..models.constants import (
    EMAIL_PATTERN, MIN_PASSWORD_LENGTH, PHONE_PATTERN, SessionState, UserRole
)
from ..services.validators import normalize_date


class UserRegister(CamelModel):
    name: str = Field(..., min_length=1)
    lastname: str = Field(..., min_length=1)
    email: str
    password: str = Field(..., min_length=MIN_PASSWORD_LENGTH)
    phone: str
    birthdate: str
    role: UserRole = UserRole.USER

    @field_validator("name", "lastname")
    @classmethod
    def strip_names(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not re.match(EMAIL_PATTERN, v):
            raise ValueError("invalid email format")
        return v

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v: str) -> str:
        v = v.strip()
        if not v or not re.match(PHONE_PATTERN, v):
            raise ValueError("invalid phone format")
        return v

    @field_validator("birthdate")
    @classmethod
    def validate_birthdate(cls, v: str) -> str:
        try:
            return normalize_date(v)
        except ValueError:
            raise ValueError("birthdate must be formatted as YYYY-MM-DD")


class UserLogin(BaseModel):
    email: str
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserOut(CamelModel):
    id: str
    name: str
    lastname: str
    email: str
    phone: Optional[str] = None
    birthdate: Optional[str] = None
    role: UserRole
    state: SessionState = SessionState.CLOSED
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class TokenClaims(BaseModel):
    id: str
    email: str
    role: UserRole


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    user: UserOut
    token: Optional[str] = None


class VerifyResponse(BaseModel):
    success: bool = True
    message: str
    user: TokenClaims
