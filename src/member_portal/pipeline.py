"""Page construction: load both feeds, aggregate, render.

``PageBuilder.build()`` never raises.  Any failure in the chain (no snapshot
yet, malformed feed, unreadable file, or anything unexpected) is logged and
turned into the error variant of the page, which the page cache then stores
like any other content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from . import config as cfg
from .aggregator import aggregate
from .errors import PortalError
from .feed_client import DirectoryFeedClient
from .feed_loader import FallbackFeedLoader
from .models import OfficeHolder, PageLink
from .renderer import render_page
from .snapshot_store import SnapshotStore

LOGGER = logging.getLogger(__name__)


@dataclass
class PageBuilder:
    loader: FallbackFeedLoader
    primary_feed_id: int = 1
    secondary_feed_id: int = 2
    member_links: list[PageLink] = field(default_factory=list)
    external_links: list[PageLink] = field(default_factory=list)
    last_build_ok: bool | None = field(default=None, repr=False)  # None = never built

    @property
    def store(self) -> SnapshotStore:
        return self.loader.store

    def load_directory(self) -> list[OfficeHolder]:
        """Fetch (or fall back for) both feeds and aggregate them.

        Raises ``PortalError`` subclasses; see ``build`` for the safe variant.
        """
        primary = self.loader.load(self.primary_feed_id, self.store.path_for(self.primary_feed_id))
        secondary = self.loader.load(
            self.secondary_feed_id, self.store.path_for(self.secondary_feed_id)
        )
        return aggregate(primary, secondary)

    def build(self) -> str:
        try:
            directory = self.load_directory()
        except PortalError:
            LOGGER.exception("Office directory unavailable, rendering error page.")
            return self._error_page()
        except Exception:
            LOGGER.exception("Unexpected error building directory, rendering error page.")
            return self._error_page()
        self.last_build_ok = True
        LOGGER.info("Rendered office directory with %d entries.", len(directory))
        return render_page(
            directory,
            member_links=self.member_links,
            external_links=self.external_links,
        )

    def _error_page(self) -> str:
        self.last_build_ok = False
        return render_page(
            None,
            member_links=self.member_links,
            external_links=self.external_links,
            error=True,
        )


def create_page_builder(
    *,
    client: DirectoryFeedClient | None = None,
    store: SnapshotStore | None = None,
) -> PageBuilder:
    """Wire a ``PageBuilder`` from ``config`` settings."""
    client = client or DirectoryFeedClient(timeout_seconds=cfg.REQUEST_TIMEOUT_SECONDS)
    store = store or SnapshotStore(cfg.SNAPSHOT_DIR)
    loader = FallbackFeedLoader(
        client,
        store,
        stale_after_seconds=cfg.SNAPSHOT_STALE_HOURS * 3600,
    )
    return PageBuilder(
        loader=loader,
        primary_feed_id=cfg.PRIMARY_FEED_ID,
        secondary_feed_id=cfg.SECONDARY_FEED_ID,
        member_links=cfg.get_member_links(),
        external_links=cfg.get_external_links(),
    )
