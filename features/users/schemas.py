from datetime import date
from typing import Dict, List, Literal, Optional

from ninja import Schema
from pydantic import Field, field_validator, model_validator

from features.analysis.schemas import AnalysisSummarySchema, PaginationSchema
from features.auth.schemas import Gender, UserOutSchema, check_name, check_phone


class ProfileUpdateSchema(Schema):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
    gender: Optional[Gender] = None
    date_of_birth: Optional[date] = None
    avatar: Optional[str] = Field(default=None, max_length=500)

    @model_validator(mode="before")
    @classmethod
    def at_least_one_field(cls, values):
        if not values:
            raise ValueError("At least one field must be provided for update.")
        return values

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_name(cls, v):
        return check_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return check_phone(v)


class NotificationPreferencesSchema(Schema):
    email: Optional[bool] = None
    sms: Optional[bool] = None
    push: Optional[bool] = None


class VastuPreferencesSchema(Schema):
    region: Optional[Literal["north-india", "south-india", "east-india", "west-india"]] = None
    elements: Optional[Dict[Literal["earth", "water", "fire", "air", "space"], bool]] = None


class PreferencesUpdateSchema(Schema):
    language: Optional[Literal["en", "hi", "ta", "te"]] = None
    notifications: Optional[NotificationPreferencesSchema] = None
    vastu_preferences: Optional[VastuPreferencesSchema] = None


class UserStatsSchema(Schema):
    total_analyses: int
    completed_analyses: int
    processing_analyses: int
    pending_analyses: int
    failed_analyses: int
    average_score: Optional[float] = None
    recent_analyses: List[AnalysisSummarySchema]


class UserStatsResponse(Schema):
    success: bool
    message: str
    data: UserStatsSchema


class PreferencesResponse(Schema):
    success: bool
    message: str
    data: dict


class UserListQuery(Schema):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)


class AdminUserUpdateSchema(Schema):
    is_staff: Optional[bool] = None
    is_active: Optional[bool] = None
    subscription_tier: Optional[Literal["free", "premium", "expert"]] = None
    subscription_active: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def at_least_one_field(cls, values):
        if not values:
            raise ValueError("At least one field must be provided for update.")
        return values


class UserPageSchema(Schema):
    items: List[UserOutSchema]
    pagination: PaginationSchema


class UserPageResponse(Schema):
    success: bool
    message: str
    data: UserPageSchema
