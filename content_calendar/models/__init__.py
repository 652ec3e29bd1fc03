"""Database models for the content calendar."""

from content_calendar.models.calendar_event import CalendarEvent
from content_calendar.models.content_type import DEFAULT_COLOR, ContentType

__all__ = [
    "CalendarEvent",
    "ContentType",
    "DEFAULT_COLOR",
]
