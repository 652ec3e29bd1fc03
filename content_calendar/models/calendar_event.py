"""Calendar event model for dated content items."""

from typing import Optional

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from content_calendar.models.base import BaseModel


class CalendarEvent(BaseModel):
    """A single dated, titled item, optionally typed and marked complete."""

    __tablename__ = "calendar_events"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ISO YYYY-MM-DD; string order equals date order
    event_date: Mapped[str] = mapped_column(String(10), index=True, nullable=False)

    # Soft reference, no foreign key: deleting a content type leaves it dangling
    content_type_id: Mapped[Optional[str]] = mapped_column(String(36), nullable=True, index=True)

    is_completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    def __repr__(self) -> str:
        return f"<CalendarEvent(id={self.id}, title={self.title}, date={self.event_date})>"
