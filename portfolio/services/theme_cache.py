"""
Process-wide cache of the active theme.

Public pages read the active theme on every load; this keeps those reads off
the database for a short TTL. There is a single system-wide entry, so the
cache is keyed by a constant. Concurrent misses may each hit the loader.
Every invalidation bumps a generation counter; a load that started before
the bump returns its value but does not store it.
"""

import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from ..core.config import settings
from ..core.logging_config import get_logger

logger = get_logger(__name__)

ACTIVE_THEME_CACHE_KEY = "active-theme"


class ActiveThemeCache:
    """TTL memo around an async loader that fails open"""

    def __init__(
        self,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl_seconds
        self._clock = clock
        self._store: Dict[str, Tuple[float, Any]] = {}  # key -> (expires_at, value)
        self._generation = 0

    def peek(self) -> Tuple[bool, Any]:
        """Return (hit, value) without calling the loader"""
        entry = self._store.get(ACTIVE_THEME_CACHE_KEY)
        if entry is None:
            return False, None
        expires_at, value = entry
        if self._clock() >= expires_at:
            self._store.pop(ACTIVE_THEME_CACHE_KEY, None)
            return False, None
        return True, value

    def set(self, value: Any) -> None:
        self._store[ACTIVE_THEME_CACHE_KEY] = (self._clock() + self.ttl, value)

    def invalidate(self) -> None:
        self._generation += 1
        self._store.pop(ACTIVE_THEME_CACHE_KEY, None)

    async def get(self, loader: Callable[[], Awaitable[Optional[Any]]]) -> Optional[Any]:
        """Return the cached active theme, calling ``loader`` on miss or expiry.

        A loader failure is logged and yields None; the failure is not cached,
        so the next call retries.
        """
        hit, value = self.peek()
        if hit:
            return value

        generation = self._generation
        try:
            value = await loader()
        except Exception:
            logger.exception("Failed to load active theme, serving no theme")
            return None

        if generation == self._generation:
            self.set(value)
        return value


active_theme_cache = ActiveThemeCache(ttl_seconds=settings.ACTIVE_THEME_CACHE_TTL_SECONDS)
