from __future__ import annotations

import logging
import sys
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.responses import HTMLResponse

from . import config as cfg
from .page_cache import PageCache
from .pipeline import PageBuilder, create_page_builder

# ── Configure logging ────────────────────────────────────────────────────────
logging.basicConfig(
    level=getattr(logging, cfg.LOG_LEVEL, logging.INFO),
    format="%(levelname)s:     %(name)s: %(message)s",
    stream=sys.stderr,
    force=True,
)
LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    t0 = time.perf_counter()
    app.state.page_cache.warm()
    LOGGER.info(
        "Startup complete: first page built in %.2fs (profile=%s, snapshots in %s)",
        time.perf_counter() - t0,
        cfg.PROFILE,
        cfg.SNAPSHOT_DIR,
    )
    yield


def create_app(
    *,
    page_builder: PageBuilder | None = None,
    page_cache: PageCache | None = None,
) -> FastAPI:
    """Build the FastAPI app around one process-wide page cache."""
    if page_cache is None:
        page_builder = page_builder or create_page_builder()
        page_cache = PageCache(page_builder.build, ttl_seconds=cfg.PAGE_TTL_SECONDS)

    app = FastAPI(title="Member Portal", lifespan=lifespan)
    app.state.page_cache = page_cache
    app.state.page_builder = page_builder

    # ── Request logging middleware ───────────────────────────────────────────
    @app.middleware("http")
    async def _request_logging_middleware(request: Request, call_next) -> Response:  # type: ignore[no-untyped-def]
        """Log every request with method, path, and response time."""
        t_start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - t_start) * 1000
        LOGGER.info(
            "%s %s %d (%.1fms)",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
        )
        return response

    # Sync handlers run in the threadpool; the cache lock serializes rebuilds.
    @app.get("/", response_class=HTMLResponse)
    def index(request: Request) -> HTMLResponse:
        return HTMLResponse(request.app.state.page_cache.get_page())

    @app.get("/health")
    def health(request: Request) -> dict:
        """Cache and snapshot status."""
        cache: PageCache = request.app.state.page_cache
        builder: PageBuilder | None = request.app.state.page_builder
        age = cache.age_seconds()
        body: dict = {
            "status": "ok",
            "ready": age is not None,
            "page_age_s": round(age, 1) if age is not None else None,
            "ttl_s": cache.ttl_seconds,
            "rebuilds": cache.rebuild_count,
        }
        if builder is not None:
            feeds = {}
            for feed_id in (builder.primary_feed_id, builder.secondary_feed_id):
                snapshot_age = builder.store.age_seconds(builder.store.path_for(feed_id))
                feeds[str(feed_id)] = {
                    "source": builder.loader.last_source.get(feed_id),
                    "snapshot_age_s": round(snapshot_age, 1) if snapshot_age is not None else None,
                }
            body["feeds"] = feeds
            if builder.last_build_ok is False:
                body["status"] = "degraded"  # cached page is the critical-error page
        return body

    return app


app = create_app()
