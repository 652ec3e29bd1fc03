"""HTTP record store client.

Talks to the content calendar service's ``/api/v1`` routes with httpx, so a
controller running outside the service process uses the same
:class:`~content_calendar.services.record_store.RecordStore` interface as one
wired straight to the database.
"""

import logging
from typing import Any, Optional

import httpx

from content_calendar.core.config import get_settings
from content_calendar.models.schemas import (
    CalendarEventRecord,
    ContentTypeCreate,
    ContentTypeRecord,
    ContentTypeUpdate,
    EventCreate,
    EventUpdate,
)
from content_calendar.services.record_store import RecordNotFoundError, StoreError

logger = logging.getLogger(__name__)


class HttpRecordStore:
    """Record store that forwards every operation to the HTTP API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API root, e.g. ``http://localhost:8000/api/v1``.
                Defaults to ``settings.store_base_url``.
            client: Pre-built client to use instead of creating one. Its
                ``base_url`` is respected when ``base_url`` is omitted.
            timeout: Request timeout in seconds.
        """
        settings = get_settings()
        self._owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(
                base_url=base_url or settings.store_base_url,
                timeout=timeout or settings.store_timeout_seconds,
            )
        elif base_url:
            client.base_url = base_url
        self._client = client

    async def aclose(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def __aenter__(self) -> "HttpRecordStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # -------------------------------------------------------------------------
    # Content types
    # -------------------------------------------------------------------------

    async def list_content_types(self) -> list[ContentTypeRecord]:
        data = await self._request("GET", "/content-types", table="content_types")
        return [ContentTypeRecord.model_validate(item) for item in data]

    async def insert_content_type(self, fields: ContentTypeCreate) -> ContentTypeRecord:
        data = await self._request(
            "POST", "/content-types", table="content_types", json=fields.model_dump(mode="json")
        )
        return ContentTypeRecord.model_validate(data)

    async def update_content_type(
        self, record_id: str, fields: ContentTypeUpdate
    ) -> ContentTypeRecord:
        data = await self._request(
            "PATCH",
            f"/content-types/{record_id}",
            table="content_types",
            record_id=record_id,
            json=fields.model_dump(mode="json", exclude_unset=True),
        )
        return ContentTypeRecord.model_validate(data)

    async def delete_content_type(self, record_id: str) -> None:
        await self._request(
            "DELETE", f"/content-types/{record_id}", table="content_types", record_id=record_id
        )

    # -------------------------------------------------------------------------
    # Calendar events
    # -------------------------------------------------------------------------

    async def list_events(self, year: int) -> list[CalendarEventRecord]:
        data = await self._request(
            "GET", "/events", table="calendar_events", params={"year": year}
        )
        return [CalendarEventRecord.model_validate(item) for item in data]

    async def insert_event(self, fields: EventCreate) -> CalendarEventRecord:
        data = await self._request(
            "POST", "/events", table="calendar_events", json=fields.model_dump(mode="json")
        )
        return CalendarEventRecord.model_validate(data)

    async def update_event(self, record_id: str, fields: EventUpdate) -> CalendarEventRecord:
        data = await self._request(
            "PATCH",
            f"/events/{record_id}",
            table="calendar_events",
            record_id=record_id,
            json=fields.model_dump(mode="json", exclude_unset=True),
        )
        return CalendarEventRecord.model_validate(data)

    async def delete_event(self, record_id: str) -> None:
        await self._request(
            "DELETE", f"/events/{record_id}", table="calendar_events", record_id=record_id
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        table: str,
        record_id: Optional[str] = None,
        **kwargs: Any,
    ) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404 and record_id is not None:
                raise RecordNotFoundError(table, record_id) from e
            logger.error(f"{method} {path} failed with status {e.response.status_code}")
            raise StoreError(
                f"{method} {path} failed with status {e.response.status_code}", cause=e
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise StoreError(f"{method} {path} failed", cause=e) from e

        if response.status_code == 204 or not response.content:
            return None
        return response.json()
