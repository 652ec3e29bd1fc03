"""Pytest configuration and fixtures for content calendar tests."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import itertools
import uuid
from datetime import date, datetime, timedelta, timezone
from typing import AsyncGenerator, Optional

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy import StaticPool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from content_calendar.core.database import Base, get_db
from content_calendar.main import app as main_app
from content_calendar.models import CalendarEvent, ContentType  # noqa: F401
from content_calendar.models.schemas import (
    CalendarEventRecord,
    ContentTypeCreate,
    ContentTypeRecord,
    ContentTypeUpdate,
    EventCreate,
    EventUpdate,
)
from content_calendar.services.calendar_math import year_bounds
from content_calendar.services.record_store import RecordNotFoundError, StoreError


# -------------------------------------------------------------------------
# Database Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
async def async_engine():
    """Create an async SQLite engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for testing."""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with async_session_maker() as session:
        yield session
        await session.rollback()


@pytest.fixture
def app(db_session: AsyncSession) -> FastAPI:
    """Create a FastAPI app instance with test database."""

    async def override_get_db():
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db
    yield main_app
    main_app.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# -------------------------------------------------------------------------
# In-memory record store
# -------------------------------------------------------------------------


class FakeRecordStore:
    """Record store kept in dicts, with per-operation failure injection.

    Add an operation name (e.g. ``"delete_content_type"``) to ``fail_on`` to
    make it raise :class:`StoreError`. Every call is appended to ``calls``.
    """

    def __init__(self) -> None:
        self.content_types: dict[str, ContentTypeRecord] = {}
        self.events: dict[str, CalendarEventRecord] = {}
        self.fail_on: set[str] = set()
        self.calls: list[tuple] = []
        self._clock = itertools.count()

    def _now(self) -> datetime:
        return datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=next(self._clock))

    def _record(self, operation: str, *args) -> None:
        self.calls.append((operation, *args))
        if operation in self.fail_on:
            raise StoreError(f"{operation} failed", cause=RuntimeError("injected"))

    async def list_content_types(self) -> list[ContentTypeRecord]:
        self._record("list_content_types")
        return sorted(self.content_types.values(), key=lambda ct: ct.created_at)

    async def insert_content_type(self, fields: ContentTypeCreate) -> ContentTypeRecord:
        self._record("insert_content_type", fields)
        now = self._now()
        record = ContentTypeRecord(
            id=str(uuid.uuid4()), created_at=now, updated_at=now, **fields.model_dump()
        )
        self.content_types[record.id] = record
        return record

    async def update_content_type(
        self, record_id: str, fields: ContentTypeUpdate
    ) -> ContentTypeRecord:
        self._record("update_content_type", record_id, fields)
        if record_id not in self.content_types:
            raise RecordNotFoundError("content_types", record_id)
        record = self.content_types[record_id].model_copy(
            update={**fields.model_dump(exclude_unset=True), "updated_at": self._now()}
        )
        self.content_types[record_id] = record
        return record

    async def delete_content_type(self, record_id: str) -> None:
        self._record("delete_content_type", record_id)
        if self.content_types.pop(record_id, None) is None:
            raise RecordNotFoundError("content_types", record_id)

    async def list_events(self, year: int) -> list[CalendarEventRecord]:
        self._record("list_events", year)
        start, end = year_bounds(year)
        selected = [e for e in self.events.values() if start <= e.event_date <= end]
        return sorted(selected, key=lambda e: e.event_date)

    async def insert_event(self, fields: EventCreate) -> CalendarEventRecord:
        self._record("insert_event", fields)
        now = self._now()
        record = CalendarEventRecord(
            id=str(uuid.uuid4()), created_at=now, updated_at=now, **fields.model_dump()
        )
        self.events[record.id] = record
        return record

    async def update_event(self, record_id: str, fields: EventUpdate) -> CalendarEventRecord:
        self._record("update_event", record_id, fields)
        if record_id not in self.events:
            raise RecordNotFoundError("calendar_events", record_id)
        values = fields.model_dump(exclude_unset=True)
        values["updated_at"] = values.get("updated_at") or self._now()
        record = self.events[record_id].model_copy(update=values)
        self.events[record_id] = record
        return record

    async def delete_event(self, record_id: str) -> None:
        self._record("delete_event", record_id)
        if self.events.pop(record_id, None) is None:
            raise RecordNotFoundError("calendar_events", record_id)

    def count(self, operation: str) -> int:
        return sum(1 for call in self.calls if call[0] == operation)


@pytest.fixture
def fake_store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def fixed_today() -> date:
    """Stable "today" for grid and navigation tests."""
    return date(2024, 3, 15)


# -------------------------------------------------------------------------
# Sample Data Fixtures
# -------------------------------------------------------------------------


@pytest.fixture
async def sample_content_types(db_session: AsyncSession) -> list[ContentType]:
    """Two content types, red then green."""
    red = ContentType(name="Reels", color="#ff0000")
    db_session.add(red)
    await db_session.commit()
    green = ContentType(name="Stories", color="#00ff00")
    db_session.add(green)
    await db_session.commit()
    await db_session.refresh(red)
    await db_session.refresh(green)
    return [red, green]


@pytest.fixture
async def sample_events(
    db_session: AsyncSession,
    sample_content_types: list[ContentType],
) -> list[CalendarEvent]:
    """Events across 2024 plus one in 2023 and one in 2025."""
    red, green = sample_content_types
    rows = [
        CalendarEvent(title="Launch teaser", event_date="2024-03-15", content_type_id=red.id),
        CalendarEvent(title="Behind the scenes", event_date="2024-03-15", content_type_id=green.id),
        CalendarEvent(title="New year post", event_date="2024-01-01", content_type_id=red.id),
        CalendarEvent(title="Year end recap", event_date="2024-12-31", content_type_id=None),
        CalendarEvent(title="Old post", event_date="2023-12-31", content_type_id=red.id),
        CalendarEvent(title="Future post", event_date="2025-01-01", content_type_id=green.id),
    ]
    for row in rows:
        db_session.add(row)
        await db_session.commit()
    for row in rows:
        await db_session.refresh(row)
    return rows
