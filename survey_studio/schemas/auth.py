"""Pydantic schemas for administrator sign-in."""

from datetime import datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, field_validator


class LoginForm(BaseModel):
    """Admin login credentials."""
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def email_format(cls, v: str) -> str:
        try:
            result = validate_email(v.strip(), check_deliverability=False)
        except EmailNotValidError:
            raise ValueError('Invalid email address')
        return result.normalized.lower()

    @field_validator('password')
    @classmethod
    def password_length(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError('Password must be at least 6 characters')
        return v


class SessionRead(BaseModel):
    """Issued admin session."""
    access_token: str
    token_type: str = "bearer"
    email: str
    expires_at: datetime
