from __future__ import annotations


class SyncZoneError(Exception):
    """Base class for planner errors."""


class UnknownZoneError(SyncZoneError, ValueError):
    """Raised when a zone id is not known to the time zone database."""

    def __init__(self, zone_id: str) -> None:
        super().__init__(f"Unknown time zone: {zone_id!r}")
        self.zone_id = zone_id


class InvalidWallClockError(SyncZoneError, ValueError):
    """Raised for malformed wall-clock input (bad field values or text).

    Also covers local times that map outside the supported instant range.
    """


class ReferenceIndexError(SyncZoneError, IndexError):
    """Raised when a reference clock slot is missing or out of range."""
