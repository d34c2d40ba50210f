"""Error types for the office-holder directory pipeline."""

from __future__ import annotations


class PortalError(RuntimeError):
    """Base error for directory fetch, snapshot and aggregation failures."""


class ConfigError(PortalError):
    """Directory service credentials or URL are missing from the environment."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"missing directory service settings: {', '.join(self.missing)}")


class NetworkError(PortalError):
    """The remote call failed, timed out, or returned an error status."""


class RemoteResponseError(PortalError):
    """The transport succeeded but the response body could not be read."""


class MalformedFeedError(PortalError):
    """A feed payload is not a JSON object or violates the record schema."""

    def __init__(self, message: str, *, feed: str = "", field: str | None = None) -> None:
        self.feed = feed
        self.field = field
        detail = message
        if field is not None:
            detail = f"{message} (field {field!r})"
        if feed:
            detail = f"{feed} feed: {detail}"
        super().__init__(detail)


class SnapshotIOError(PortalError):
    """Reading or writing a snapshot file failed."""


class SnapshotNotFoundError(SnapshotIOError):
    """No snapshot has been written for this feed yet."""
