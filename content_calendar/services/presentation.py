"""View models for the month grid, year overview, legend and day sheet.

Everything here is a pure function of the fetched collections; events whose
content type is missing render untyped with the fallback color.
"""

from datetime import date
from enum import Enum
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel

from content_calendar.models.content_type import DEFAULT_COLOR
from content_calendar.models.schemas import CalendarEventRecord, ContentTypeRecord
from content_calendar.services.calendar_math import (
    WEEKDAY_INITIALS,
    WEEKDAY_LABELS,
    build_month_grid,
    format_display_date,
    month_name,
    short_month_name,
    to_date_key,
    year_options,
)

MAX_VISIBLE_EVENTS = 3


class ViewMode(str, Enum):
    """Calendar display mode."""

    MONTHLY = "monthly"
    YEARLY = "yearly"


# -------------------------------------------------------------------------
# View models
# -------------------------------------------------------------------------


class EventChip(BaseModel):
    id: str
    title: str
    color: str
    content_type_name: Optional[str] = None
    is_completed: bool = False


class MonthCell(BaseModel):
    date: str
    day_label: str  # zero-padded day of month
    is_current_month: bool
    is_today: bool
    events: list[EventChip]
    overflow_count: int = 0


class MonthView(BaseModel):
    year: int
    month: int
    month_name: str
    weekday_labels: list[str]
    cells: list[MonthCell]


class MiniCell(BaseModel):
    date: str
    day: int
    is_current_month: bool
    is_today: bool
    dot_color: Optional[str] = None


class MiniMonth(BaseModel):
    month: int
    short_name: str
    cells: list[MiniCell]


class YearView(BaseModel):
    year: int
    weekday_initials: list[str]
    months: list[MiniMonth]


class DayEvents(BaseModel):
    date: str
    title: str
    events: list[EventChip]


class LegendEntry(BaseModel):
    id: str
    name: str
    color: str


class HeaderView(BaseModel):
    year: int
    month: int
    month_name: str
    view_mode: ViewMode
    year_options: list[int]


# -------------------------------------------------------------------------
# Content type resolution
# -------------------------------------------------------------------------


def resolve_content_type(
    content_type_id: Optional[str],
    content_types: Iterable[ContentTypeRecord],
) -> Optional[ContentTypeRecord]:
    """Return the content type with the given id, or None if absent."""
    if not content_type_id:
        return None
    for content_type in content_types:
        if content_type.id == content_type_id:
            return content_type
    return None


def resolve_color(
    content_type_id: Optional[str],
    content_types: Iterable[ContentTypeRecord],
) -> str:
    """Color of the referenced content type, DEFAULT_COLOR when unresolved or blank."""
    content_type = resolve_content_type(content_type_id, content_types)
    if content_type is None or not content_type.color:
        return DEFAULT_COLOR
    return content_type.color


def group_events_by_date(
    events: Iterable[CalendarEventRecord],
) -> dict[str, list[CalendarEventRecord]]:
    """Bucket events by date key, keeping fetch order within each date."""
    grouped: dict[str, list[CalendarEventRecord]] = {}
    for event in events:
        grouped.setdefault(event.event_date, []).append(event)
    return grouped


def to_chip(event: CalendarEventRecord, content_types: Sequence[ContentTypeRecord]) -> EventChip:
    content_type = resolve_content_type(event.content_type_id, content_types)
    return EventChip(
        id=event.id,
        title=event.title,
        color=resolve_color(event.content_type_id, content_types),
        content_type_name=content_type.name if content_type else None,
        is_completed=event.is_completed,
    )


# -------------------------------------------------------------------------
# Builders
# -------------------------------------------------------------------------


def build_month_view(
    year: int,
    month: int,
    events: Sequence[CalendarEventRecord],
    content_types: Sequence[ContentTypeRecord],
    today: Optional[date] = None,
) -> MonthView:
    grouped = group_events_by_date(events)
    cells = []
    for day in build_month_grid(year, month, today=today):
        day_events = grouped.get(day.key, [])
        cells.append(
            MonthCell(
                date=day.key,
                day_label=f"{day.date.day:02d}",
                is_current_month=day.is_current_month,
                is_today=day.is_today,
                events=[to_chip(e, content_types) for e in day_events[:MAX_VISIBLE_EVENTS]],
                overflow_count=max(len(day_events) - MAX_VISIBLE_EVENTS, 0),
            )
        )
    return MonthView(
        year=year,
        month=month,
        month_name=month_name(month).upper(),
        weekday_labels=list(WEEKDAY_LABELS),
        cells=cells,
    )


def build_year_view(
    year: int,
    events: Sequence[CalendarEventRecord],
    content_types: Sequence[ContentTypeRecord],
    today: Optional[date] = None,
) -> YearView:
    grouped = group_events_by_date(events)
    months = []
    for month in range(12):
        cells = []
        for day in build_month_grid(year, month, today=today):
            day_events = grouped.get(day.key)
            cells.append(
                MiniCell(
                    date=day.key,
                    day=day.date.day,
                    is_current_month=day.is_current_month,
                    is_today=day.is_today,
                    dot_color=(
                        resolve_color(day_events[0].content_type_id, content_types)
                        if day_events
                        else None
                    ),
                )
            )
        months.append(MiniMonth(month=month, short_name=short_month_name(month), cells=cells))
    return YearView(year=year, weekday_initials=list(WEEKDAY_INITIALS), months=months)


def build_day_events(
    value: date,
    events: Sequence[CalendarEventRecord],
    content_types: Sequence[ContentTypeRecord],
) -> DayEvents:
    key = to_date_key(value)
    return DayEvents(
        date=key,
        title=format_display_date(value),
        events=[to_chip(e, content_types) for e in events if e.event_date == key],
    )


def build_legend(content_types: Sequence[ContentTypeRecord]) -> list[LegendEntry]:
    return [
        LegendEntry(id=ct.id, name=ct.name, color=ct.color or DEFAULT_COLOR)
        for ct in content_types
    ]


def build_header(
    year: int,
    month: int,
    view_mode: ViewMode,
    today: Optional[date] = None,
) -> HeaderView:
    today = today or date.today()
    return HeaderView(
        year=year,
        month=month,
        month_name=month_name(month).upper(),
        view_mode=view_mode,
        year_options=year_options(today.year),
    )
