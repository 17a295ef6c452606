import re
from datetime import date, datetime
from typing import Literal, Optional

from ninja import Schema
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.validators import validate_email
from pydantic import field_validator

NAME_PATTERN = re.compile(r"^[A-Za-z\s]{2,50}$")
PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")
PASSWORD_PATTERN = re.compile(
    r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&#^()_\-+=])[A-Za-z\d@$!%*?&#^()_\-+=]{8,}$"
)

Gender = Literal["male", "female", "other", "prefer-not-to-say"]


def check_email(v: str) -> str:
    v = v.strip().lower()
    try:
        validate_email(v)
    except DjangoValidationError:
        raise ValueError("Please provide a valid email")
    return v


def check_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not NAME_PATTERN.match(v):
        raise ValueError("Name must be 2-50 characters and contain only letters and spaces")
    return v


def check_phone(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    if not PHONE_PATTERN.match(v):
        raise ValueError("Please provide a valid 10-digit Indian mobile number")
    return v


def check_password(v: str) -> str:
    if not PASSWORD_PATTERN.match(v):
        raise ValueError(
            "Password must be at least 8 characters and contain an uppercase letter, "
            "a lowercase letter, a number and a special character"
        )
    return v


class LoginSchema(Schema):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def clean_email(cls, v):
        return check_email(v)


class TokenSchema(Schema):
    access: str
    refresh: str
    user_id: int
    email: str


class RefreshSchema(Schema):
    refresh: str


class RegisterSchema(Schema):
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    password: str
    gender: Optional[Gender] = None

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v):
        return check_name(v)

    @field_validator("email")
    @classmethod
    def clean_email(cls, v):
        return check_email(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return check_phone(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return check_password(v)


class EmailSchema(Schema):
    email: str

    @field_validator("email")
    @classmethod
    def clean_email(cls, v):
        return check_email(v)


class ResetPasswordSchema(Schema):
    password: str

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        return check_password(v)


class UserOutSchema(Schema):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    gender: Optional[str] = None
    date_of_birth: Optional[date] = None
    avatar: Optional[str] = None
    subscription_tier: Optional[str] = None
    subscription_active: Optional[bool] = None
    is_premium: bool
    is_email_verified: Optional[bool] = None
    is_phone_verified: Optional[bool] = None
    login_count: Optional[int] = None
    preferences: Optional[dict] = None
    is_staff: bool
    date_joined: datetime
    last_login: Optional[datetime] = None


class AuthDataSchema(Schema):
    user: UserOutSchema
    tokens: TokenSchema


class AuthResponse(Schema):
    success: bool
    message: str
    data: AuthDataSchema


class UserResponse(Schema):
    success: bool
    message: str
    data: UserOutSchema


class MessageResponse(Schema):
    success: bool
    message: str
    data: Optional[dict] = None
