from __future__ import annotations

from dataclasses import dataclass

VACANT_GIVEN_NAME = "vakant"
NO_REELECTION_LABEL = "N/A"


@dataclass(frozen=True)
class OfficeHolder:
    office_title: str  # e.g. "Kassier"
    email: str  # empty when vacant
    given_name: str  # "vakant" for an unfilled office
    surname: str
    nickname: str  # BIERNAME in the feed
    reelection_label: str  # e.g. "2025/26" or "N/A"

    @property
    def is_vacant(self) -> bool:
        return self.given_name == VACANT_GIVEN_NAME


def vacant_office(office_title: str) -> OfficeHolder:
    """Placeholder record for an office nobody currently holds."""
    return OfficeHolder(
        office_title=office_title,
        email="",
        given_name=VACANT_GIVEN_NAME,
        surname="",
        nickname="",
        reelection_label=NO_REELECTION_LABEL,
    )


@dataclass(frozen=True)
class PageLink:
    title: str
    url: str


@dataclass(frozen=True)
class CachedPage:
    built_at: float  # monotonic clock reading
    content: str
