# backend/rentdesk/schemas/account.py
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from rentdesk.core.validators import MIN_NAME_LENGTH, MIN_PASSWORD_LENGTH, sanitize_input


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    name: str
    company_name: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return value

    @field_validator("name")
    @classmethod
    def name_length(cls, value: str) -> str:
        value = value.strip()
        if len(value) < MIN_NAME_LENGTH:
            raise ValueError(f"Name must be at least {MIN_NAME_LENGTH} characters")
        return value


class ProfileUpdate(BaseModel):
    """
    Editable account fields.

    Anything else in the body (email, password, subscription, stats) is
    ignored; those change through their own flows. `settings` is merged
    into the stored block key by key.
    """
    name: Optional[str] = None
    company_name: Optional[str] = None
    avatar_url: Optional[str] = Field(None, max_length=500)
    settings: Optional[Dict[str, Any]] = None

    @model_validator(mode="before")
    @classmethod
    def strip_strings(cls, data):
        return sanitize_input(data)

    @field_validator("name")
    @classmethod
    def name_length(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if len(value) < MIN_NAME_LENGTH:
            raise ValueError(f"Name must be at least {MIN_NAME_LENGTH} characters")
        return value


class PasswordChange(BaseModel):
    current_password: str
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"New password must be at least {MIN_PASSWORD_LENGTH} characters")
        return value


class AccountResponse(BaseModel):
    id: str
    email: str
    name: str
    company_name: Optional[str] = None
    avatar_url: Optional[str] = None
    subscription: Dict[str, Any]
    limits: Dict[str, int]
    stats: Dict[str, Any]
    settings: Dict[str, Any]
    email_verified: bool
    last_login: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AuthResponse(Token):
    account: AccountResponse
