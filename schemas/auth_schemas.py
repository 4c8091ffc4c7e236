from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, ValidationInfo, field_validator
import re


def validate_password_strength(value: str) -> str:
    """
    Password must be at least 8 characters and contain:
    - At least one letter
    - At least one digit
    """
    if len(value) < 8:
        raise ValueError('The password must be at least 8 characters.')

    if not re.search(r'[A-Za-z]', value):
        raise ValueError('The password must contain at least one letter.')

    if not re.search(r'\d', value):
        raise ValueError('The password must contain at least one digit.')

    return value


def validate_confirmation(value: str, info: ValidationInfo) -> str:
    password = info.data.get('password')
    # password already failed its own validation; don't pile on
    if password is not None and value != password:
        raise ValueError('The password confirmation does not match.')
    return value


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    created_at: datetime
    updated_at: datetime


class RegisterRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    email: EmailStr
    password: str
    password_confirmation: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, value):
        if not value.strip():
            raise ValueError('The name field is required.')
        return value.strip()

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        return validate_password_strength(value)

    @field_validator('password_confirmation')
    @classmethod
    def validate_password_confirmation(cls, value, info: ValidationInfo):
        return validate_confirmation(value, info)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class RefreshTokenRequest(BaseModel):
    refresh_token: str

    @field_validator('refresh_token')
    @classmethod
    def validate_token(cls, value):
        if not value or not value.strip():
            raise ValueError('The refresh token is required.')
        return value


class LogoutRequest(BaseModel):
    """Omitting refresh_token logs the user out on every device."""
    refresh_token: Optional[str] = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    password: str
    password_confirmation: str

    @field_validator('password')
    @classmethod
    def validate_password(cls, value):
        return validate_password_strength(value)

    @field_validator('password_confirmation')
    @classmethod
    def validate_password_confirmation(cls, value, info: ValidationInfo):
        return validate_confirmation(value, info)
