from __future__ import annotations

import json
from pathlib import Path

import pytest

from member_portal.errors import NetworkError
from member_portal.feed_loader import FallbackFeedLoader
from member_portal.models import PageLink
from member_portal.pipeline import PageBuilder
from member_portal.snapshot_store import SnapshotStore

PRIMARY_FEED_ID = 1
SECONDARY_FEED_ID = 2


def person(
    offices: str,
    given_name: str,
    *,
    email: str = "",
    surname: str = "",
    nickname: str = "",
    reelection: str = "",
    year: str = "",
) -> dict:
    """One primary-feed record in the directory service's wire shape."""
    return {
        "DATENSATZ": {
            "AMT": offices,
            "E-MAIL": email,
            "VORNAME-PRIVATPERSON": given_name,
            "NACHNAME-PRIVATPERSON": surname,
            "BIERNAME": nickname,
            "NEUWAHL": reelection,
            "JAHR": year,
        }
    }


def catalog(*offices: str) -> str:
    return json.dumps({str(i): {"DATENSATZ": {"AMT": o}} for i, o in enumerate(offices, 1)})


class FakeFeedClient:
    """Stands in for ``DirectoryFeedClient``; counts calls per feed."""

    def __init__(self, payloads: dict[int, str] | None = None) -> None:
        self.payloads: dict[int, str] = dict(payloads or {})
        self.errors: dict[int, Exception] = {}
        self.calls: list[int] = []

    @property
    def fetch_count(self) -> int:
        return len(self.calls)

    def fetch(self, feed_id: int) -> str:
        self.calls.append(feed_id)
        if feed_id in self.errors:
            raise self.errors[feed_id]
        if feed_id not in self.payloads:
            raise NetworkError(f"feed {feed_id}: connection refused")
        return self.payloads[feed_id]


# ── Feed payload fixtures ─────────────────────────────────────────────────────


@pytest.fixture
def primary_payload() -> str:
    return json.dumps(
        {
            "1": person(
                "Kassier",
                "Ann",
                email="a@x.de",
                surname="Bee",
                nickname="AB",
                reelection="2025",
                year="26",
            )
        }
    )


@pytest.fixture
def secondary_payload() -> str:
    return catalog("Kassier", "Schriftführer")


# ── Pipeline fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def store(tmp_path: Path) -> SnapshotStore:
    return SnapshotStore(tmp_path / "snapshots")


@pytest.fixture
def fake_client(primary_payload: str, secondary_payload: str) -> FakeFeedClient:
    return FakeFeedClient({PRIMARY_FEED_ID: primary_payload, SECONDARY_FEED_ID: secondary_payload})


@pytest.fixture
def loader(fake_client: FakeFeedClient, store: SnapshotStore) -> FallbackFeedLoader:
    return FallbackFeedLoader(fake_client, store)


@pytest.fixture
def page_builder(loader: FallbackFeedLoader) -> PageBuilder:
    return PageBuilder(
        loader=loader,
        primary_feed_id=PRIMARY_FEED_ID,
        secondary_feed_id=SECONDARY_FEED_ID,
        member_links=[PageLink("Protokolle", "/protokolle/")],
        external_links=[PageLink("Dachverband", "https://www.example.org/verband")],
    )
