"""Turn the assignment and catalog feeds into the office-holder directory.

The primary feed maps opaque record ids to people, each holding one or more
offices (``AMT`` is comma-separated).  The secondary feed lists every office
that should exist; offices nobody holds get a single ``vakant`` placeholder.

Parsing is strict: one malformed record aborts the whole aggregation with
``MalformedFeedError``.  A half-parsed directory is never returned.
"""

from __future__ import annotations

import json
from typing import Any

from .errors import MalformedFeedError
from .models import NO_REELECTION_LABEL, OfficeHolder, vacant_office

PRIMARY = "primary"
SECONDARY = "secondary"

_RECORD_KEY = "DATENSATZ"
_OFFICE = "AMT"
_EMAIL = "E-MAIL"
_GIVEN_NAME = "VORNAME-PRIVATPERSON"
_SURNAME = "NACHNAME-PRIVATPERSON"
_NICKNAME = "BIERNAME"
_REELECTION = "NEUWAHL"
_YEAR = "JAHR"


def _parse_feed(payload: str, feed: str) -> dict[str, Any]:
    try:
        data = json.loads(payload)
    except (TypeError, ValueError, RecursionError) as exc:
        raise MalformedFeedError(f"payload is not valid JSON: {exc}", feed=feed) from exc
    if not isinstance(data, dict):
        raise MalformedFeedError(
            f"expected a JSON object, got {type(data).__name__}", feed=feed
        )
    return data


def _record_fields(record_id: str, record: Any, feed: str) -> dict[str, Any]:
    if not isinstance(record, dict):
        raise MalformedFeedError(f"record {record_id!r} is not an object", feed=feed)
    fields = record.get(_RECORD_KEY)
    if not isinstance(fields, dict):
        raise MalformedFeedError(
            f"record {record_id!r} has no {_RECORD_KEY} object", feed=feed, field=_RECORD_KEY
        )
    return fields


def _require_str(fields: dict[str, Any], name: str, record_id: str, feed: str) -> str:
    value = fields.get(name)
    if not isinstance(value, str):
        problem = "missing" if value is None else f"not a string ({type(value).__name__})"
        raise MalformedFeedError(f"record {record_id!r}: {problem}", feed=feed, field=name)
    return value


def split_offices(raw: str) -> list[str]:
    """Split a comma-separated ``AMT`` value, dropping blank tokens."""
    return [token.strip() for token in raw.split(",") if token.strip()]


def reelection_label(reelection: str, year: str) -> str:
    """Compose ``NEUWAHL`` and ``JAHR`` into one label, e.g. ``"2025/26"``."""
    parts = [p for p in (reelection.strip(), year.strip()) if p]
    return "/".join(parts) if parts else NO_REELECTION_LABEL


def _holders_by_office(primary: dict[str, Any]) -> dict[str, list[OfficeHolder]]:
    groups: dict[str, list[OfficeHolder]] = {}
    for record_id, record in primary.items():
        fields = _record_fields(record_id, record, PRIMARY)
        offices = split_offices(_require_str(fields, _OFFICE, record_id, PRIMARY))
        email = _require_str(fields, _EMAIL, record_id, PRIMARY)
        given_name = _require_str(fields, _GIVEN_NAME, record_id, PRIMARY)
        surname = _require_str(fields, _SURNAME, record_id, PRIMARY)
        nickname = _require_str(fields, _NICKNAME, record_id, PRIMARY)
        label = reelection_label(
            _require_str(fields, _REELECTION, record_id, PRIMARY),
            _require_str(fields, _YEAR, record_id, PRIMARY),
        )
        for office in offices:
            groups.setdefault(office, []).append(
                OfficeHolder(
                    office_title=office,
                    email=email,
                    given_name=given_name,
                    surname=surname,
                    nickname=nickname,
                    reelection_label=label,
                )
            )
    return groups


def _catalog_offices(secondary: dict[str, Any]) -> list[str]:
    offices: list[str] = []
    for record_id, record in secondary.items():
        fields = _record_fields(record_id, record, SECONDARY)
        offices.extend(split_offices(_require_str(fields, _OFFICE, record_id, SECONDARY)))
    return offices


def aggregate(primary_payload: str, secondary_payload: str) -> list[OfficeHolder]:
    """Build the office-holder directory from both raw feed payloads.

    Output order: offices by title (code-point order), holders within an
    office by given name.  Both feeds are fully validated before anything is
    returned.
    """
    groups = _holders_by_office(_parse_feed(primary_payload, PRIMARY))
    catalog = _catalog_offices(_parse_feed(secondary_payload, SECONDARY))

    for office in catalog:
        if office not in groups:
            groups[office] = [vacant_office(office)]

    directory: list[OfficeHolder] = []
    for office in sorted(groups):
        directory.extend(sorted(groups[office], key=lambda h: h.given_name))
    return directory
