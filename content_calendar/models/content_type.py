"""Content type model: a named, colored category shown in the legend."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from content_calendar.models.base import BaseModel

DEFAULT_COLOR = "#1a1a1a"


class ContentType(BaseModel):
    """User-defined category ("note") used to tag calendar events."""

    __tablename__ = "content_types"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(20), default=DEFAULT_COLOR, nullable=False)

    def __repr__(self) -> str:
        return f"<ContentType(id={self.id}, name={self.name}, color={self.color})>"
