"""View state controller for the content calendar.

Owns the navigable state (year, month, view mode) and the selection state,
reads collections through a :class:`QueryCache`, and turns user intents into
record store calls followed by cache invalidation.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Callable, Hashable, Iterator, Optional

from content_calendar.models.content_type import DEFAULT_COLOR
from content_calendar.models.schemas import (
    CalendarEventRecord,
    ContentTypeCreate,
    ContentTypeRecord,
    ContentTypeUpdate,
    EventCreate,
    EventUpdate,
)
from content_calendar.services.calendar_math import DateKeyError, from_date_key
from content_calendar.services.presentation import (
    DayEvents,
    HeaderView,
    LegendEntry,
    MonthView,
    ViewMode,
    YearView,
    build_day_events,
    build_header,
    build_legend,
    build_month_view,
    build_year_view,
    resolve_content_type,
)
from content_calendar.services.query_cache import CONTENT_TYPES_KEY, QueryCache, events_key
from content_calendar.services.record_store import RecordStore, StoreError

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Error loading calendar data. Please try again."


class IntentValidationError(ValueError):
    """Form input rejected before any store call."""

    def __init__(self, field_name: str, message: str):
        super().__init__(message)
        self.field = field_name


class IntentInFlightError(RuntimeError):
    """An identical intent is still awaiting the store."""

    def __init__(self, token: tuple):
        super().__init__(f"Intent already in flight: {token!r}")
        self.token = token


@dataclass
class EventInput:
    """Event form submission."""

    title: str
    event_date: str
    content_type_id: Optional[str]
    description: str = ""
    is_completed: bool = False
    id: Optional[str] = None


@dataclass
class NoteInput:
    """Content type ("note") form submission."""

    name: str
    color: str = DEFAULT_COLOR
    id: Optional[str] = None


@dataclass
class CalendarPage:
    """Everything the page needs for one render, or a full-page error."""

    content_types: list[ContentTypeRecord] = field(default_factory=list)
    events: list[CalendarEventRecord] = field(default_factory=list)
    error: Optional[str] = None


class CalendarController:
    """Navigation, selection and mutation intents over a record store."""

    def __init__(
        self,
        store: RecordStore,
        cache: Optional[QueryCache] = None,
        today: Callable[[], date] = date.today,
    ):
        """Initialize the controller at the current month.

        Args:
            store: Record store used for every read and write.
            cache: Keyed cache of fetched collections; a fresh one by default.
            today: Clock returning the real-world current date.
        """
        self.store = store
        self.cache = cache or QueryCache()
        self._today = today

        now = today()
        self.year = now.year
        self.month = now.month - 1
        self.view_mode = ViewMode.MONTHLY

        self.selected_event: Optional[CalendarEventRecord] = None
        self.selected_date: Optional[date] = None
        self.selected_note: Optional[ContentTypeRecord] = None
        self.note_to_delete: Optional[ContentTypeRecord] = None

        self._in_flight: set[Hashable] = set()

    # -------------------------------------------------------------------------
    # Navigation
    # -------------------------------------------------------------------------

    def previous(self) -> None:
        if self.view_mode == ViewMode.MONTHLY:
            if self.month == 0:
                self.month = 11
                self.year -= 1
            else:
                self.month -= 1
        else:
            self.year -= 1

    def next(self) -> None:
        if self.view_mode == ViewMode.MONTHLY:
            if self.month == 11:
                self.month = 0
                self.year += 1
            else:
                self.month += 1
        else:
            self.year += 1

    def jump_to_today(self) -> None:
        now = self._today()
        self.year = now.year
        self.month = now.month - 1

    def jump_to_year(self, year: int) -> None:
        self.year = year

    def select_month(self, month: int) -> None:
        """Open a month from the yearly overview."""
        if not 0 <= month < 12:
            raise ValueError(f"Month index must be within 0..11, got {month}")
        self.month = month
        self.view_mode = ViewMode.MONTHLY

    def set_view_mode(self, mode: ViewMode) -> None:
        self.view_mode = ViewMode(mode)

    # -------------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------------

    def open_date(self, value: date) -> None:
        self.selected_event = None
        self.selected_date = value

    def open_event(self, event: CalendarEventRecord) -> None:
        self.selected_date = None
        self.selected_event = event

    def add_event(self) -> None:
        self.open_date(self._today())

    def close_event_form(self) -> None:
        self.selected_event = None
        self.selected_date = None

    def add_note(self) -> None:
        self.selected_note = None

    def edit_note(self, note: ContentTypeRecord) -> None:
        self.selected_note = note

    def close_note_form(self) -> None:
        self.selected_note = None

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def content_types(self) -> list[ContentTypeRecord]:
        return await self.cache.get_or_fetch(CONTENT_TYPES_KEY, self.store.list_content_types)

    async def events(self, year: Optional[int] = None) -> list[CalendarEventRecord]:
        year = self.year if year is None else year
        return await self.cache.get_or_fetch(
            events_key(year), lambda: self.store.list_events(year)
        )

    async def load_page(self) -> CalendarPage:
        """Load both collections; a failure of either yields the error page."""
        try:
            content_types = await self.content_types()
            events = await self.events()
        except StoreError as e:
            logger.error(f"Failed to load calendar data for {self.year}: {e}")
            return CalendarPage(error=LOAD_ERROR_MESSAGE)
        return CalendarPage(content_types=content_types, events=events)

    async def month_view(self) -> MonthView:
        return build_month_view(
            self.year,
            self.month,
            await self.events(),
            await self.content_types(),
            today=self._today(),
        )

    async def year_view(self) -> YearView:
        return build_year_view(
            self.year,
            await self.events(),
            await self.content_types(),
            today=self._today(),
        )

    async def day_events(self, value: date) -> DayEvents:
        return build_day_events(
            value,
            await self.events(value.year),
            await self.content_types(),
        )

    async def legend(self) -> list[LegendEntry]:
        return build_legend(await self.content_types())

    def header(self) -> HeaderView:
        return build_header(self.year, self.month, self.view_mode, today=self._today())

    # -------------------------------------------------------------------------
    # Intents
    # -------------------------------------------------------------------------

    def is_pending(self, *token: Hashable) -> bool:
        """Loading flag for a form, e.g. ``is_pending("save_event", "new")``."""
        return tuple(token) in self._in_flight

    @contextmanager
    def _intent(self, *token: Hashable) -> Iterator[None]:
        key = tuple(token)
        if key in self._in_flight:
            raise IntentInFlightError(key)
        self._in_flight.add(key)
        try:
            yield
        finally:
            self._in_flight.discard(key)

    async def save_event(self, data: EventInput) -> CalendarEventRecord:
        """Create or update an event depending on whether ``data.id`` is set."""
        title = (data.title or "").strip()
        if not title:
            raise IntentValidationError("title", "Title is required")
        if not data.event_date:
            raise IntentValidationError("event_date", "Date is required")
        try:
            event_day = from_date_key(data.event_date)
        except DateKeyError as e:
            raise IntentValidationError("event_date", str(e)) from e
        if not data.content_type_id:
            raise IntentValidationError("content_type_id", "Content type is required")

        description = (data.description or "").strip() or None

        with self._intent("save_event", data.id or "new"):
            try:
                if data.id:
                    record = await self.store.update_event(
                        data.id,
                        EventUpdate(
                            title=title,
                            description=description,
                            event_date=data.event_date,
                            content_type_id=data.content_type_id,
                            is_completed=data.is_completed,
                            updated_at=datetime.now(timezone.utc),
                        ),
                    )
                else:
                    record = await self.store.insert_event(
                        EventCreate(
                            title=title,
                            description=description,
                            event_date=data.event_date,
                            content_type_id=data.content_type_id,
                            is_completed=data.is_completed,
                        )
                    )
            except StoreError as e:
                logger.error(f"Failed to save event: {e}")
                raise

        self._invalidate_events(event_day.year, *self._cached_event_years(data.id))
        self.close_event_form()
        return record

    async def delete_event(self, event_id: str) -> None:
        """Delete an event immediately; events need no confirmation."""
        years = self._cached_event_years(event_id)

        with self._intent("delete_event", event_id):
            try:
                await self.store.delete_event(event_id)
            except StoreError as e:
                logger.error(f"Failed to delete event {event_id}: {e}")
                raise

        self._invalidate_events(*years)
        self.close_event_form()

    async def save_note(self, data: NoteInput) -> ContentTypeRecord:
        """Create or update a content type depending on whether ``data.id`` is set."""
        name = (data.name or "").strip()
        if not name:
            raise IntentValidationError("name", "Name is required")
        color = data.color or DEFAULT_COLOR

        with self._intent("save_note", data.id or "new"):
            try:
                if data.id:
                    record = await self.store.update_content_type(
                        data.id, ContentTypeUpdate(name=name, color=color)
                    )
                else:
                    record = await self.store.insert_content_type(
                        ContentTypeCreate(name=name, color=color)
                    )
            except StoreError as e:
                logger.error(f"Failed to save note: {e}")
                raise

        self.cache.invalidate(CONTENT_TYPES_KEY)
        self.close_note_form()
        return record

    async def request_delete_note(self, note_id: str) -> Optional[ContentTypeRecord]:
        """Mark a content type for deletion; nothing is removed until confirmed."""
        self.note_to_delete = resolve_content_type(note_id, await self.content_types())
        return self.note_to_delete

    async def confirm_delete_note(self) -> None:
        """Delete the pending content type. On failure the target stays pending."""
        target = self.note_to_delete
        if target is None:
            return

        with self._intent("delete_note", target.id):
            try:
                await self.store.delete_content_type(target.id)
            except StoreError as e:
                logger.error(f"Failed to delete note {target.id}: {e}")
                raise

        self.cache.invalidate(CONTENT_TYPES_KEY)
        self.note_to_delete = None
        if self.selected_note is not None and self.selected_note.id == target.id:
            self.selected_note = None

    def cancel_delete_note(self) -> None:
        self.note_to_delete = None

    def _cached_event_years(self, event_id: Optional[str]) -> set[int]:
        """Years whose cached event list holds ``event_id``."""
        years: set[int] = set()
        if not event_id:
            return years
        if self.selected_event is not None and self.selected_event.id == event_id:
            years.add(from_date_key(self.selected_event.event_date).year)
        for key in self.cache.keys():
            if not (isinstance(key, tuple) and key[0] == "events"):
                continue
            if any(event.id == event_id for event in self.cache.peek(key, [])):
                years.add(key[1])
        return years

    def _invalidate_events(self, *years: int) -> None:
        for year in set(years):
            self.cache.invalidate(events_key(year))
