"""Keyed cache of fetched collections with explicit invalidation."""

import logging
from typing import Any, Awaitable, Callable, Hashable, Optional

logger = logging.getLogger(__name__)

CONTENT_TYPES_KEY = "content_types"


def events_key(year: int) -> tuple[str, int]:
    return ("events", year)


class QueryCache:
    """Map of cache key to the last fetched value.

    Reads go through :meth:`get_or_fetch`; writers call :meth:`invalidate` for
    the key they affected so the next read refetches. Failed loads are not
    cached.
    """

    def __init__(self) -> None:
        self._entries: dict[Hashable, Any] = {}

    def __contains__(self, key: Hashable) -> bool:
        return key in self._entries

    def peek(self, key: Hashable, default: Optional[Any] = None) -> Any:
        return self._entries.get(key, default)

    async def get_or_fetch(self, key: Hashable, loader: Callable[[], Awaitable[Any]]) -> Any:
        if key in self._entries:
            return self._entries[key]
        return await self.refresh(key, loader)

    async def refresh(self, key: Hashable, loader: Callable[[], Awaitable[Any]]) -> Any:
        value = await loader()
        self._entries[key] = value
        logger.debug(f"Cache filled: {key!r}")
        return value

    def invalidate(self, key: Hashable) -> None:
        if self._entries.pop(key, None) is not None:
            logger.debug(f"Cache invalidated: {key!r}")

    def keys(self) -> list[Hashable]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()
