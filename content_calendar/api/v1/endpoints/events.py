"""Calendar event endpoints."""

from datetime import date
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from content_calendar.api.deps import get_record_store
from content_calendar.models.schemas import CalendarEventRecord, EventCreate, EventUpdate
from content_calendar.services.record_store import RecordNotFoundError, RecordStore

router = APIRouter()


@router.get("", response_model=list[CalendarEventRecord])
async def list_events(
    store: Annotated[RecordStore, Depends(get_record_store)],
    year: Optional[int] = Query(None, ge=1, le=9999, description="Calendar year, defaults to now"),
):
    """List one year's events ascending by date."""
    return await store.list_events(year or date.today().year)


@router.post("", response_model=CalendarEventRecord, status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    store: Annotated[RecordStore, Depends(get_record_store)],
):
    """Create an event."""
    return await store.insert_event(data)


@router.patch("/{event_id}", response_model=CalendarEventRecord)
async def update_event(
    event_id: str,
    data: EventUpdate,
    store: Annotated[RecordStore, Depends(get_record_store)],
):
    """Apply a partial update to an event."""
    try:
        return await store.update_event(event_id, data)
    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        )


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    store: Annotated[RecordStore, Depends(get_record_store)],
):
    """Delete an event."""
    try:
        await store.delete_event(event_id)
    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
