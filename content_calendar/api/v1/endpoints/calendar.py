"""Calendar view endpoints: month grid, year overview, day sheet and legend."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, status

from content_calendar.api.deps import get_record_store
from content_calendar.services.calendar_controller import CalendarController
from content_calendar.services.calendar_math import DateKeyError, from_date_key
from content_calendar.services.presentation import (
    DayEvents,
    HeaderView,
    LegendEntry,
    MonthView,
    ViewMode,
    YearView,
)
from content_calendar.services.record_store import RecordStore

router = APIRouter()


def get_controller(
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> CalendarController:
    return CalendarController(store)


@router.get("/month/{year}/{month}", response_model=MonthView)
async def get_month_view(
    controller: Annotated[CalendarController, Depends(get_controller)],
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=0, le=11, description="Zero-indexed month, 0 = January"),
):
    """42-cell month grid decorated with the year's events."""
    controller.jump_to_year(year)
    controller.select_month(month)
    return await controller.month_view()


@router.get("/year/{year}", response_model=YearView)
async def get_year_view(
    controller: Annotated[CalendarController, Depends(get_controller)],
    year: int = Path(..., ge=1, le=9999),
):
    """Twelve mini month grids with a colored dot on days that have events."""
    controller.jump_to_year(year)
    controller.set_view_mode(ViewMode.YEARLY)
    return await controller.year_view()


@router.get("/day/{date_key}", response_model=DayEvents)
async def get_day_events(
    date_key: str,
    controller: Annotated[CalendarController, Depends(get_controller)],
):
    """All events of a single date, for the day sheet."""
    try:
        value = from_date_key(date_key)
    except DateKeyError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        )
    return await controller.day_events(value)


@router.get("/legend", response_model=list[LegendEntry])
async def get_legend(
    controller: Annotated[CalendarController, Depends(get_controller)],
):
    """Legend entries in creation order."""
    return await controller.legend()


@router.get("/header/{year}/{month}", response_model=HeaderView)
async def get_header(
    controller: Annotated[CalendarController, Depends(get_controller)],
    year: int = Path(..., ge=1, le=9999),
    month: int = Path(..., ge=0, le=11),
    view_mode: ViewMode = ViewMode.MONTHLY,
):
    """Header title and year picker options."""
    controller.jump_to_year(year)
    controller.select_month(month)
    controller.set_view_mode(view_mode)
    return controller.header()
