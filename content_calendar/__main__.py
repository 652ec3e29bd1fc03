"""Run the API server: ``python -m content_calendar``."""

import uvicorn

from content_calendar.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "content_calendar.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
