"""Last-known-good feed payloads on local disk, one file per feed."""

from __future__ import annotations

import logging
import os
import time
import uuid
from contextlib import suppress
from pathlib import Path

from .errors import SnapshotIOError, SnapshotNotFoundError

LOGGER = logging.getLogger(__name__)


class SnapshotStore:
    """Read and overwrite raw feed snapshots under *root*."""

    def __init__(self, root: Path | str = Path("tmp")) -> None:
        self.root = Path(root)
        self.write_count = 0

    def path_for(self, feed_id: int) -> Path:
        return self.root / f"feed_{feed_id}.json"

    def read(self, path: Path) -> str:
        try:
            content = path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise SnapshotNotFoundError(f"no snapshot at {path}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise SnapshotIOError(f"failed to read snapshot {path}: {exc}") from exc
        LOGGER.info("Loaded snapshot %s (%d bytes)", path, len(content))
        return content

    def write(self, path: Path, content: str) -> None:
        """Replace the snapshot at *path* with *content*.

        The payload goes to a temp file in the same directory first and is
        then moved over the target, so a failed write leaves the previous
        snapshot intact.
        """
        tmp_path = path.with_name(f".tmp-{path.name}-{uuid.uuid4().hex}")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding="utf-8")
            os.replace(tmp_path, path)
        except OSError as exc:
            with suppress(OSError):
                tmp_path.unlink()
            raise SnapshotIOError(f"failed to write snapshot {path}: {exc}") from exc
        self.write_count += 1
        LOGGER.info("Saved snapshot to %s (%d bytes)", path, len(content))

    def age_seconds(self, path: Path) -> float | None:
        """Return the age of a snapshot in seconds, or None if it doesn't exist."""
        try:
            mtime = path.stat().st_mtime
        except OSError:
            return None
        return max(0.0, time.time() - mtime)
