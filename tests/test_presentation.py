"""Tests for month/year view models and content type resolution."""

from datetime import date, datetime, timezone

from content_calendar.models.content_type import DEFAULT_COLOR
from content_calendar.models.schemas import CalendarEventRecord, ContentTypeRecord
from content_calendar.services.presentation import (
    MAX_VISIBLE_EVENTS,
    ViewMode,
    build_day_events,
    build_header,
    build_legend,
    build_month_view,
    build_year_view,
    group_events_by_date,
    resolve_color,
    resolve_content_type,
)

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)
TODAY = date(2024, 3, 15)


def make_type(type_id: str, name: str, color: str) -> ContentTypeRecord:
    return ContentTypeRecord(id=type_id, name=name, color=color, created_at=NOW, updated_at=NOW)


def make_event(event_id: str, event_date: str, type_id=None, **kwargs) -> CalendarEventRecord:
    return CalendarEventRecord(
        id=event_id,
        title=kwargs.pop("title", f"Event {event_id}"),
        event_date=event_date,
        content_type_id=type_id,
        created_at=NOW,
        updated_at=NOW,
        **kwargs,
    )


TYPE_A = make_type("a", "Reels", "#ff0000")
TYPE_B = make_type("b", "Stories", "#00ff00")


class TestResolution:
    """Tests for resolving content types and colors."""

    def test_resolves_existing_type(self):
        assert resolve_content_type("b", [TYPE_A, TYPE_B]) is TYPE_B
        assert resolve_color("a", [TYPE_A, TYPE_B]) == "#ff0000"

    def test_null_reference_uses_fallback(self):
        assert resolve_content_type(None, [TYPE_A]) is None
        assert resolve_color(None, [TYPE_A]) == DEFAULT_COLOR

    def test_dangling_reference_uses_fallback(self):
        assert resolve_content_type("deleted", [TYPE_A]) is None
        assert resolve_color("deleted", [TYPE_A]) == DEFAULT_COLOR

    def test_blank_color_uses_fallback(self):
        blank = make_type("c", "Blank", "")
        assert resolve_color("c", [blank]) == DEFAULT_COLOR

    def test_group_events_keeps_fetch_order(self):
        events = [
            make_event("1", "2024-03-15"),
            make_event("2", "2024-03-16"),
            make_event("3", "2024-03-15"),
        ]
        grouped = group_events_by_date(events)
        assert [e.id for e in grouped["2024-03-15"]] == ["1", "3"]
        assert [e.id for e in grouped["2024-03-16"]] == ["2"]


class TestMonthView:
    """Tests for build_month_view."""

    def test_two_types_on_same_day(self):
        events = [
            make_event("1", "2024-03-15", "a", title="Teaser"),
            make_event("2", "2024-03-15", "b", title="BTS"),
        ]
        view = build_month_view(2024, 2, events, [TYPE_A, TYPE_B], today=TODAY)

        assert view.month_name == "MARCH"
        assert view.weekday_labels[0] == "SUN"
        assert len(view.cells) == 42

        cell = next(c for c in view.cells if c.date == "2024-03-15")
        assert cell.is_today is True
        assert cell.day_label == "15"
        assert [(chip.title, chip.color) for chip in cell.events] == [
            ("Teaser", "#ff0000"),
            ("BTS", "#00ff00"),
        ]
        assert [chip.content_type_name for chip in cell.events] == ["Reels", "Stories"]
        assert cell.overflow_count == 0

    def test_overflow_after_three_events(self):
        events = [make_event(str(i), "2024-03-05", "a") for i in range(5)]
        view = build_month_view(2024, 2, events, [TYPE_A], today=TODAY)

        cell = next(c for c in view.cells if c.date == "2024-03-05")
        assert cell.day_label == "05"
        assert len(cell.events) == MAX_VISIBLE_EVENTS
        assert [chip.id for chip in cell.events] == ["0", "1", "2"]
        assert cell.overflow_count == 2

    def test_dangling_event_renders_untyped(self):
        events = [make_event("1", "2024-03-01", "removed", is_completed=True)]
        view = build_month_view(2024, 2, events, [TYPE_A], today=TODAY)

        chip = next(c for c in view.cells if c.date == "2024-03-01").events[0]
        assert chip.color == DEFAULT_COLOR
        assert chip.content_type_name is None
        assert chip.is_completed is True

    def test_padding_cells_show_neighbour_events(self):
        events = [make_event("1", "2024-02-29", "a")]
        view = build_month_view(2024, 2, events, [TYPE_A], today=TODAY)

        cell = view.cells[4]
        assert cell.date == "2024-02-29"
        assert cell.is_current_month is False
        assert len(cell.events) == 1


class TestYearView:
    """Tests for build_year_view."""

    def test_dot_uses_first_event_color(self):
        events = [
            make_event("1", "2024-03-15", "b"),
            make_event("2", "2024-03-15", "a"),
            make_event("3", "2024-07-04", "gone"),
        ]
        view = build_year_view(2024, events, [TYPE_A, TYPE_B], today=TODAY)

        assert len(view.months) == 12
        assert view.weekday_initials == ["S", "M", "T", "W", "T", "F", "S"]
        march = view.months[2]
        assert march.short_name == "Mar"
        assert len(march.cells) == 42

        day = next(c for c in march.cells if c.date == "2024-03-15")
        assert day.dot_color == "#00ff00"
        assert day.is_today is True

        july = view.months[6]
        assert next(c for c in july.cells if c.date == "2024-07-04").dot_color == DEFAULT_COLOR
        assert next(c for c in july.cells if c.date == "2024-07-05").dot_color is None


class TestDaySheetLegendHeader:
    """Tests for the day sheet, legend and header builders."""

    def test_day_events(self):
        events = [
            make_event("1", "2024-03-15", "a"),
            make_event("2", "2024-03-16", "a"),
            make_event("3", "2024-03-15", None),
            make_event("4", "2024-03-15", "a"),
            make_event("5", "2024-03-15", "b"),
        ]
        sheet = build_day_events(date(2024, 3, 15), events, [TYPE_A, TYPE_B])

        assert sheet.title == "Friday, March 15, 2024"
        assert [chip.id for chip in sheet.events] == ["1", "3", "4", "5"]
        assert sheet.events[1].color == DEFAULT_COLOR

    def test_legend_keeps_order(self):
        legend = build_legend([TYPE_B, TYPE_A])
        assert [(entry.name, entry.color) for entry in legend] == [
            ("Stories", "#00ff00"),
            ("Reels", "#ff0000"),
        ]

    def test_header(self):
        header = build_header(2030, 0, ViewMode.YEARLY, today=TODAY)
        assert header.month_name == "JANUARY"
        assert header.view_mode == ViewMode.YEARLY
        assert header.year_options[0] == 2014
        assert header.year_options[-1] == 2034
