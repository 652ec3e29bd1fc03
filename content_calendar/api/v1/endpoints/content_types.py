"""Content type ("note") endpoints backing the calendar legend."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status

from content_calendar.api.deps import get_record_store
from content_calendar.models.schemas import (
    ContentTypeCreate,
    ContentTypeRecord,
    ContentTypeUpdate,
)
from content_calendar.services.record_store import RecordNotFoundError, RecordStore

router = APIRouter()


@router.get("", response_model=list[ContentTypeRecord])
async def list_content_types(
    store: Annotated[RecordStore, Depends(get_record_store)],
):
    """List content types in creation order."""
    return await store.list_content_types()


@router.post("", response_model=ContentTypeRecord, status_code=status.HTTP_201_CREATED)
async def create_content_type(
    data: ContentTypeCreate,
    store: Annotated[RecordStore, Depends(get_record_store)],
):
    """Create a content type."""
    return await store.insert_content_type(data)


@router.patch("/{content_type_id}", response_model=ContentTypeRecord)
async def update_content_type(
    content_type_id: str,
    data: ContentTypeUpdate,
    store: Annotated[RecordStore, Depends(get_record_store)],
):
    """Rename or recolor a content type."""
    try:
        return await store.update_content_type(content_type_id, data)
    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Content type not found",
        )


@router.delete("/{content_type_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_content_type(
    content_type_id: str,
    store: Annotated[RecordStore, Depends(get_record_store)],
):
    """Delete a content type. Events that reference it are left untouched."""
    try:
        await store.delete_content_type(content_type_id)
    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Content type not found",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)
