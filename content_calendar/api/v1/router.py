"""API v1 router aggregating all endpoint routers.

Record store:
  /api/v1/content-types (list, create, update, delete)
  /api/v1/events (list by year, create, update, delete)

Calendar views:
  /api/v1/calendar/month/{year}/{month}, /year/{year}, /day/{date_key}
  /api/v1/calendar/legend, /header/{year}/{month}
"""

from fastapi import APIRouter

from content_calendar.api.v1.endpoints import calendar, content_types, events

api_router = APIRouter()

# -------------------------------------------------------------------------
# Record store tables
# -------------------------------------------------------------------------
api_router.include_router(content_types.router, prefix="/content-types", tags=["content-types"])
api_router.include_router(events.router, prefix="/events", tags=["events"])

# -------------------------------------------------------------------------
# Calendar views
# -------------------------------------------------------------------------
api_router.include_router(calendar.router, prefix="/calendar", tags=["calendar"])
