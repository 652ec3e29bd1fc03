"""Pydantic record and field contracts shared by the API and store clients."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from content_calendar.models.content_type import DEFAULT_COLOR
from content_calendar.services.calendar_math import from_date_key, to_date_key

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


def _validate_date_key(value: str) -> str:
    return to_date_key(from_date_key(value))


def _reject_null(value, info):
    if value is None:
        raise ValueError(f"{info.field_name} cannot be null")
    return value


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


# Content Type Schemas
class ContentTypeCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    color: str = Field(default=DEFAULT_COLOR, pattern=HEX_COLOR_PATTERN)

    @field_validator("color", mode="before")
    @classmethod
    def default_color(cls, value: Optional[str]) -> str:
        if isinstance(value, str):
            value = value.strip()
        return value or DEFAULT_COLOR


class ContentTypeUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    color: Optional[str] = Field(None, pattern=HEX_COLOR_PATTERN)

    @field_validator("name", "color")
    @classmethod
    def not_null(cls, value: Optional[str], info: ValidationInfo) -> str:
        return _reject_null(value, info)


class ContentTypeRecord(BaseModel):
    id: str
    name: str
    color: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


# Calendar Event Schemas
class EventCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: str = Field(..., description="ISO date key, YYYY-MM-DD")
    content_type_id: Optional[str] = None
    is_completed: bool = False

    @field_validator("event_date")
    @classmethod
    def check_date(cls, value: str) -> str:
        return _validate_date_key(value)

    @field_validator("description")
    @classmethod
    def clean_description(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)


class EventUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: Optional[str] = None
    content_type_id: Optional[str] = None
    is_completed: Optional[bool] = None
    updated_at: Optional[datetime] = None

    @field_validator("title", "event_date", "is_completed", "updated_at")
    @classmethod
    def not_null(cls, value, info: ValidationInfo):
        return _reject_null(value, info)

    @field_validator("description")
    @classmethod
    def clean_description(cls, value: Optional[str]) -> Optional[str]:
        return _blank_to_none(value)

    @field_validator("event_date")
    @classmethod
    def check_date(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return _validate_date_key(value)


class CalendarEventRecord(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    event_date: str
    content_type_id: Optional[str] = None
    is_completed: bool = False
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
