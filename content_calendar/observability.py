"""Logging setup and request logging middleware."""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] [%(request_id)s] %(message)s"


def get_request_id() -> str | None:
    """Return the current request id if set by middleware."""
    return request_id_ctx.get()


class RequestIdFilter(logging.Filter):
    """Expose the current request id to log formatters as ``request_id``."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the application."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log one JSON line when it finishes.

    Calendar path parameters (year, month, date key, record id) and the
    ``year`` query are copied into the line so a slow or failing view can be
    traced to the period it rendered. Health probes log at DEBUG; 5xx
    responses log at WARNING.
    """

    QUIET_PATHS = frozenset({"/health"})

    def __init__(self, app: ASGIApp, logger: logging.Logger | None = None) -> None:
        super().__init__(app)
        self.logger = logger or logging.getLogger("content_calendar.request")

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_ctx.set(request_id)
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            self.logger.log(
                self._level(request.url.path, status_code),
                json.dumps(self._payload(request, status_code, started)),
            )
            request_id_ctx.reset(token)

    def _level(self, path: str, status_code: int) -> int:
        if status_code >= 500:
            return logging.WARNING
        if path in self.QUIET_PATHS:
            return logging.DEBUG
        return logging.INFO

    @staticmethod
    def _payload(request: Request, status_code: int, started: float) -> dict:
        route = request.scope.get("route")
        payload = {
            "method": request.method,
            "route": getattr(route, "path", request.url.path),
            "status": status_code,
            "ms": round((time.perf_counter() - started) * 1000, 1),
        }
        params = dict(request.scope.get("path_params") or {})
        if "year" in request.query_params:
            params.setdefault("year", request.query_params["year"])
        if params:
            payload["params"] = params
        return payload
