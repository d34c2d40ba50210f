"""Remote feed with degrade-to-snapshot fallback."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Protocol

from .errors import ConfigError, NetworkError, RemoteResponseError, SnapshotIOError
from .snapshot_store import SnapshotStore

LOGGER = logging.getLogger(__name__)


class FeedSource(Protocol):
    def fetch(self, feed_id: int) -> str: ...


def is_valid_json(payload: str) -> bool:
    try:
        json.loads(payload)
    except (TypeError, ValueError, RecursionError):
        return False
    return True


class FallbackFeedLoader:
    """Load a feed from the directory service, else from its last snapshot.

    At most one upstream call per ``load``.  A fresh payload that parses as
    JSON is persisted best-effort and returned even if persisting fails.
    Anything else (missing credentials, network failure, garbage body) falls
    back to the snapshot on disk; a missing or unreadable snapshot propagates
    as ``SnapshotIOError``.
    """

    def __init__(
        self,
        client: FeedSource,
        store: SnapshotStore,
        *,
        stale_after_seconds: float | None = None,
    ) -> None:
        self.client = client
        self.store = store
        self.stale_after_seconds = stale_after_seconds
        self.last_source: dict[int, str] = {}  # feed_id -> "remote" | "snapshot"

    def load(self, feed_id: int, snapshot_path: Path) -> str:
        try:
            payload = self.client.fetch(feed_id)
        except (ConfigError, NetworkError, RemoteResponseError) as exc:
            LOGGER.warning("Feed %d unavailable, using snapshot: %s", feed_id, exc)
        else:
            if is_valid_json(payload):
                try:
                    self.store.write(snapshot_path, payload)
                except SnapshotIOError as exc:
                    LOGGER.warning("Could not persist snapshot for feed %d: %s", feed_id, exc)
                self.last_source[feed_id] = "remote"
                return payload
            LOGGER.warning(
                "Feed %d returned invalid JSON (%d bytes), using snapshot.",
                feed_id,
                len(payload),
            )

        content = self.store.read(snapshot_path)
        self._warn_stale(feed_id, snapshot_path)
        self.last_source[feed_id] = "snapshot"
        return content

    def _warn_stale(self, feed_id: int, snapshot_path: Path) -> None:
        """Log a warning if the snapshot is older than the stale threshold."""
        if self.stale_after_seconds is None:
            return
        age = self.store.age_seconds(snapshot_path)
        if age is not None and age > self.stale_after_seconds:
            LOGGER.warning(
                "Snapshot for feed %d is %.1f hours old (threshold: %.0f).",
                feed_id,
                age / 3600,
                self.stale_after_seconds / 3600,
            )
