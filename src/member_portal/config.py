"""Centralized configuration for the member portal.

All settings live here so they can be overridden by environment variables or a
``.env`` file without touching source code.

**Profile system:** Set ``PORTAL_PROFILE=dev`` (default) or ``PORTAL_PROFILE=prod``
to get sensible defaults for each environment.  Any individual ``PORTAL_*`` var
still overrides the profile value.

Directory service credentials are *not* read at import time.  They are only
required when a feed is actually fetched, so the server starts (and serves the
last snapshot) even when they are missing::

    from member_portal.config import directory_credentials

    creds = directory_credentials()  # raises ConfigError if incomplete
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigError
from .models import PageLink

# Load .env from current working directory (project root when running uvicorn)
load_dotenv()

LOGGER = logging.getLogger(__name__)

# ── Profile: one knob for the whole environment ──────────────────────────────

PROFILE: str = os.getenv("PORTAL_PROFILE", "dev").lower().strip()

_PROFILE_DEFAULTS: dict[str, dict[str, str]] = {
    "dev": {
        "PORTAL_SNAPSHOT_DIR": "tmp",
        "PORTAL_REQUEST_TIMEOUT": "10",
        "PORTAL_LOG_LEVEL": "DEBUG",
    },
    "prod": {
        "PORTAL_SNAPSHOT_DIR": "data",
        "PORTAL_REQUEST_TIMEOUT": "20",
        "PORTAL_LOG_LEVEL": "INFO",
    },
}

if PROFILE not in _PROFILE_DEFAULTS:
    LOGGER.warning("Unknown PORTAL_PROFILE=%r, falling back to 'dev'.", PROFILE)
    PROFILE = "dev"

_defaults = _PROFILE_DEFAULTS[PROFILE]


def _env(key: str, fallback: str = "") -> str:
    """Read an env var, falling back to profile default then *fallback*."""
    return os.getenv(key, _defaults.get(key, fallback))


# ── Feeds ────────────────────────────────────────────────────────────────────
# Primary feed: office assignments with person fields.
# Secondary feed: catalog of every office that should exist.
PRIMARY_FEED_ID: int = int(_env("PORTAL_PRIMARY_FEED_ID", "1"))
SECONDARY_FEED_ID: int = int(_env("PORTAL_SECONDARY_FEED_ID", "2"))

# ── Directories ──────────────────────────────────────────────────────────────
SNAPSHOT_DIR: Path = Path(_env("PORTAL_SNAPSHOT_DIR", "tmp"))

# ── Timing ───────────────────────────────────────────────────────────────────
PAGE_TTL_SECONDS: float = 300.0
REQUEST_TIMEOUT_SECONDS: float = float(_env("PORTAL_REQUEST_TIMEOUT", "20"))
SNAPSHOT_STALE_HOURS: float = float(_env("PORTAL_SNAPSHOT_STALE_HOURS", "72"))

# ── Logging ──────────────────────────────────────────────────────────────────
LOG_LEVEL: str = _env("PORTAL_LOG_LEVEL", "INFO").upper()

# ── Static link lists ────────────────────────────────────────────────────────

DEFAULT_MEMBER_LINKS: list[PageLink] = [
    PageLink("Semesterprogramm", "/static/semesterprogramm.pdf"),
    PageLink("Protokolle", "/protokolle/"),
    PageLink("Mitgliederverzeichnis", "/mitglieder/"),
]

DEFAULT_EXTERNAL_LINKS: list[PageLink] = [
    PageLink("Dachverband", "https://www.example.org/verband"),
    PageLink("Hausverein", "https://www.example.org/hausverein"),
]


def parse_links(raw: str) -> list[PageLink]:
    """Parse ``"Title|URL,Title|URL"`` into page links.

    Entries without a ``|`` separator or with an empty title/URL are skipped.
    """
    links: list[PageLink] = []
    for entry in raw.split(","):
        title, sep, url = entry.partition("|")
        if not sep or not title.strip() or not url.strip():
            continue
        links.append(PageLink(title.strip(), url.strip()))
    return links


def get_member_links() -> list[PageLink]:
    """Return member-area links from ``PORTAL_MEMBER_LINKS`` or defaults."""
    custom = _env("PORTAL_MEMBER_LINKS").strip()
    if custom:
        return parse_links(custom)
    return list(DEFAULT_MEMBER_LINKS)


def get_external_links() -> list[PageLink]:
    """Return external links from ``PORTAL_EXTERNAL_LINKS`` or defaults."""
    custom = _env("PORTAL_EXTERNAL_LINKS").strip()
    if custom:
        return parse_links(custom)
    return list(DEFAULT_EXTERNAL_LINKS)


# ── Directory service credentials (read lazily) ──────────────────────────────

_CREDENTIAL_VARS = ("PORTAL_DIRECTORY_USER", "PORTAL_DIRECTORY_PASSWORD", "PORTAL_DIRECTORY_URL")


@dataclass(frozen=True)
class DirectoryCredentials:
    username: str
    password: str
    url: str


def directory_credentials() -> DirectoryCredentials:
    """Read directory service credentials from the environment.

    Raises ``ConfigError`` listing every variable that is unset or blank.
    """
    values = {key: os.getenv(key, "").strip() for key in _CREDENTIAL_VARS}
    missing = [key for key, value in values.items() if not value]
    if missing:
        raise ConfigError(missing)
    return DirectoryCredentials(
        username=values["PORTAL_DIRECTORY_USER"],
        password=values["PORTAL_DIRECTORY_PASSWORD"],
        url=values["PORTAL_DIRECTORY_URL"],
    )
