"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from content_calendar.core.database import get_db
from content_calendar.services.record_store import SqlRecordStore


async def get_record_store(db: Annotated[AsyncSession, Depends(get_db)]) -> SqlRecordStore:
    """Record store bound to the request's database session."""
    return SqlRecordStore(db)
