from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable

from .models import CachedPage

LOGGER = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


class PageCache:
    """Single-entry TTL cache around page construction.

    The lock is held across check, rebuild and write-back, so requests
    arriving while a rebuild is running wait for it and then get the new
    page instead of starting their own.  *build* must not raise; an error
    page it returns is cached for the full TTL like any other page.
    """

    def __init__(
        self,
        build: Callable[[], str],
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._build = build
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._page: CachedPage | None = None  # None = never built (stale)
        self.rebuild_count = 0

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    @property
    def built_at(self) -> float | None:
        page = self._page
        return page.built_at if page is not None else None

    def age_seconds(self) -> float | None:
        page = self._page
        if page is None:
            return None
        return self._clock() - page.built_at

    def _is_fresh(self, page: CachedPage | None, now: float) -> bool:
        return page is not None and now - page.built_at < self._ttl

    def get_page(self) -> str:
        with self._lock:
            now = self._clock()
            if self._is_fresh(self._page, now):
                return self._page.content  # type: ignore[union-attr]

            t0 = time.perf_counter()
            content = self._build()
            self._page = CachedPage(built_at=self._clock(), content=content)
            self.rebuild_count += 1
            LOGGER.info(
                "Rebuilt page #%d in %.1fms (ttl %.0fs)",
                self.rebuild_count,
                (time.perf_counter() - t0) * 1000,
                self._ttl,
            )
            return content

    def warm(self) -> None:
        """Build the first page eagerly so no request sees a cold cache."""
        self.get_page()
