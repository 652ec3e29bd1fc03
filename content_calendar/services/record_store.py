"""Record store boundary for content types and calendar events.

The controller and the API depend on the :class:`RecordStore` protocol only.
:class:`SqlRecordStore` talks to the database through an async SQLAlchemy
session; the HTTP client lives in ``content_calendar.adapters``.
"""

import logging
from typing import Any, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from content_calendar.models.calendar_event import CalendarEvent
from content_calendar.models.content_type import ContentType
from content_calendar.models.schemas import (
    CalendarEventRecord,
    ContentTypeCreate,
    ContentTypeRecord,
    ContentTypeUpdate,
    EventCreate,
    EventUpdate,
)
from content_calendar.services.calendar_math import year_bounds

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Any failure of a record store operation."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class RecordNotFoundError(StoreError):
    """Update or delete targeted an id that does not exist."""

    def __init__(self, table: str, record_id: str):
        super().__init__(f"{table} record {record_id} not found")
        self.table = table
        self.record_id = record_id


class RecordStore(Protocol):
    """Protocol defining the record store interface."""

    async def list_content_types(self) -> list[ContentTypeRecord]:
        """List content types in insertion order."""
        ...

    async def insert_content_type(self, fields: ContentTypeCreate) -> ContentTypeRecord:
        ...

    async def update_content_type(
        self, record_id: str, fields: ContentTypeUpdate
    ) -> ContentTypeRecord:
        ...

    async def delete_content_type(self, record_id: str) -> None:
        ...

    async def list_events(self, year: int) -> list[CalendarEventRecord]:
        """List events dated within the year, ascending by date."""
        ...

    async def insert_event(self, fields: EventCreate) -> CalendarEventRecord:
        ...

    async def update_event(self, record_id: str, fields: EventUpdate) -> CalendarEventRecord:
        ...

    async def delete_event(self, record_id: str) -> None:
        ...


class SqlRecordStore:
    """Record store backed by an async SQLAlchemy session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # -------------------------------------------------------------------------
    # Content types
    # -------------------------------------------------------------------------

    async def list_content_types(self) -> list[ContentTypeRecord]:
        query = select(ContentType).order_by(ContentType.created_at.asc())
        rows = await self._fetch_all(query, "content_types")
        return [ContentTypeRecord.model_validate(row) for row in rows]

    async def insert_content_type(self, fields: ContentTypeCreate) -> ContentTypeRecord:
        row = await self._insert(ContentType(**fields.model_dump()), "content_types")
        return ContentTypeRecord.model_validate(row)

    async def update_content_type(
        self, record_id: str, fields: ContentTypeUpdate
    ) -> ContentTypeRecord:
        row = await self._update(
            ContentType, record_id, fields.model_dump(exclude_unset=True), "content_types"
        )
        return ContentTypeRecord.model_validate(row)

    async def delete_content_type(self, record_id: str) -> None:
        await self._delete(ContentType, record_id, "content_types")

    # -------------------------------------------------------------------------
    # Calendar events
    # -------------------------------------------------------------------------

    async def list_events(self, year: int) -> list[CalendarEventRecord]:
        start, end = year_bounds(year)
        # Insertion time breaks ties between events on the same date
        query = (
            select(CalendarEvent)
            .where(CalendarEvent.event_date >= start, CalendarEvent.event_date <= end)
            .order_by(CalendarEvent.event_date.asc(), CalendarEvent.created_at.asc())
        )
        rows = await self._fetch_all(query, "calendar_events")
        return [CalendarEventRecord.model_validate(row) for row in rows]

    async def insert_event(self, fields: EventCreate) -> CalendarEventRecord:
        row = await self._insert(CalendarEvent(**fields.model_dump()), "calendar_events")
        return CalendarEventRecord.model_validate(row)

    async def update_event(self, record_id: str, fields: EventUpdate) -> CalendarEventRecord:
        values = fields.model_dump(exclude_unset=True)
        if values.get("updated_at") is None:
            values.pop("updated_at", None)
        row = await self._update(CalendarEvent, record_id, values, "calendar_events")
        return CalendarEventRecord.model_validate(row)

    async def delete_event(self, record_id: str) -> None:
        await self._delete(CalendarEvent, record_id, "calendar_events")

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _fetch_all(self, query, table: str) -> list[Any]:
        try:
            result = await self.db.execute(query)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Failed to list {table}: {e}")
            raise StoreError(f"Failed to list {table}", cause=e) from e

    async def _insert(self, row, table: str):
        try:
            self.db.add(row)
            await self.db.commit()
            await self.db.refresh(row)
            return row
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to insert into {table}: {e}")
            raise StoreError(f"Failed to insert into {table}", cause=e) from e

    async def _update(self, model, record_id: str, values: dict[str, Any], table: str):
        try:
            row = await self.db.get(model, record_id)
            if row is None:
                raise RecordNotFoundError(table, record_id)
            for key, value in values.items():
                setattr(row, key, value)
            await self.db.commit()
            await self.db.refresh(row)
            return row
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to update {table} {record_id}: {e}")
            raise StoreError(f"Failed to update {table} {record_id}", cause=e) from e

    async def _delete(self, model, record_id: str, table: str) -> None:
        try:
            row = await self.db.get(model, record_id)
            if row is None:
                raise RecordNotFoundError(table, record_id)
            await self.db.delete(row)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"Failed to delete {table} {record_id}: {e}")
            raise StoreError(f"Failed to delete {table} {record_id}", cause=e) from e
