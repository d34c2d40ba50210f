from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

import requests
from requests.adapters import HTTPAdapter

from .config import DirectoryCredentials, directory_credentials
from .errors import NetworkError, RemoteResponseError

LOGGER = logging.getLogger(__name__)


@dataclass
class DirectoryFeedClient:
    """Fetch raw feed payloads from the external directory service.

    One POST per call, no retries: the caller decides what to do when the
    service is down.  Credentials are resolved on every call so a fixed
    ``.env`` takes effect without restarting the server.
    """

    timeout_seconds: float = 20.0
    credentials: Callable[[], DirectoryCredentials] = directory_credentials
    fetch_count: int = field(default=0, repr=False)
    _session: requests.Session = field(default_factory=requests.Session, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self) -> None:
        """Mount an adapter with retries disabled."""
        adapter = HTTPAdapter(
            max_retries=0,
            pool_connections=2,
            pool_maxsize=2,
        )
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)

    def fetch(self, feed_id: int) -> str:
        """Return the raw body for *feed_id*.

        Raises ``ConfigError`` when credentials are incomplete, ``NetworkError``
        when the request fails, and ``RemoteResponseError`` when the body
        cannot be decoded.
        """
        creds = self.credentials()
        with self._lock:
            self.fetch_count += 1

        form = {
            "username": creds.username,
            "password": creds.password,
            "id": str(feed_id),
        }
        try:
            resp = self._session.post(creds.url, data=form, timeout=self.timeout_seconds)
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise NetworkError(f"feed {feed_id}: request to directory service failed: {exc}") from exc

        # requests guesses ISO-8859-1 for text/* without a charset; feeds are UTF-8.
        declared = "charset" in resp.headers.get("Content-Type", "").lower()
        try:
            body = resp.content.decode((declared and resp.encoding) or "utf-8")
        except (requests.RequestException, LookupError, UnicodeDecodeError) as exc:
            raise RemoteResponseError(f"feed {feed_id}: unreadable response body: {exc}") from exc

        LOGGER.debug("Fetched feed %d (%d bytes)", feed_id, len(body))
        return body
