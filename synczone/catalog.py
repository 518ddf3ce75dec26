"""Static catalog of time zones offered in the zone pickers.

The abbreviation and offset label stored here are nominal (standard time).
``describe`` computes both from the zone database for a given instant and
only falls back to the stored labels when the database has no abbreviation.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from synczone.formatting import format_offset
from synczone.models import ZoneDescriptor
from synczone.utils.time import in_zone, resolve_zone, utc_now

UNKNOWN_ABBREV = "LOC"


def _zone(zone_id: str, name: str, abbrev: str, offset: str) -> ZoneDescriptor:
    return ZoneDescriptor(id=zone_id, name=name, abbrev=abbrev, gmt_offset_label=offset)


COMMON_TIMEZONES: tuple[ZoneDescriptor, ...] = (
    _zone("UTC", "UTC (Universal Time)", "UTC", "GMT+00:00"),
    # North America
    _zone("America/New_York", "New York, USA (Eastern)", "EST", "GMT-05:00"),
    _zone("America/Toronto", "Toronto, Canada (Eastern)", "EST", "GMT-05:00"),
    _zone("America/Chicago", "Chicago, USA (Central)", "CST", "GMT-06:00"),
    _zone("America/Winnipeg", "Winnipeg, Canada (Central)", "CST", "GMT-06:00"),
    _zone("America/Denver", "Denver, USA (Mountain)", "MST", "GMT-07:00"),
    _zone("America/Phoenix", "Phoenix, USA (Mountain - No DST)", "MST", "GMT-07:00"),
    _zone("America/Los_Angeles", "Los Angeles, USA (Pacific)", "PST", "GMT-08:00"),
    _zone("America/Vancouver", "Vancouver, Canada (Pacific)", "PST", "GMT-08:00"),
    _zone("America/Anchorage", "Anchorage, USA (Alaska)", "AKST", "GMT-09:00"),
    _zone("Pacific/Honolulu", "Honolulu, USA (Hawaii)", "HST", "GMT-10:00"),
    # Europe
    _zone("Europe/London", "London, UK", "GMT", "GMT+00:00"),
    _zone("Europe/Dublin", "Dublin, Ireland", "GMT", "GMT+00:00"),
    _zone("Europe/Paris", "Paris, France", "CET", "GMT+01:00"),
    _zone("Europe/Berlin", "Berlin, Germany", "CET", "GMT+01:00"),
    _zone("Europe/Zurich", "Zurich, Switzerland", "CET", "GMT+01:00"),
    _zone("Europe/Amsterdam", "Amsterdam, Netherlands", "CET", "GMT+01:00"),
    _zone("Europe/Rome", "Rome, Italy", "CET", "GMT+01:00"),
    _zone("Europe/Madrid", "Madrid, Spain", "CET", "GMT+01:00"),
    # Asia
    _zone("Asia/Kolkata", "New Delhi, India", "IST", "GMT+05:30"),
    # Australia
    _zone("Australia/Perth", "Perth, Australia (Western)", "AWST", "GMT+08:00"),
    _zone("Australia/Adelaide", "Adelaide, Australia (Central)", "ACST", "GMT+09:30"),
    _zone("Australia/Brisbane", "Brisbane, Australia (Eastern)", "AEST", "GMT+10:00"),
    _zone("Australia/Sydney", "Sydney, Australia (Eastern)", "AEST", "GMT+10:00"),
    _zone("Australia/Melbourne", "Melbourne, Australia (Eastern)", "AEST", "GMT+10:00"),
)

_BY_ID: dict[str, ZoneDescriptor] = {zone.id: zone for zone in COMMON_TIMEZONES}
if len(_BY_ID) != len(COMMON_TIMEZONES):  # pragma: no cover - guards edits to the table
    raise RuntimeError("duplicate zone id in COMMON_TIMEZONES")


def lookup(zone_id: str) -> Optional[ZoneDescriptor]:
    """Catalog entry for ``zone_id`` or ``None`` when it is not listed."""
    return _BY_ID.get(zone_id)


def list_zones() -> list[ZoneDescriptor]:
    return list(COMMON_TIMEZONES)


def abbreviation(zone_id: str) -> str:
    entry = lookup(zone_id)
    return entry.abbrev if entry else UNKNOWN_ABBREV


def describe(zone_id: str, instant: Optional[datetime] = None) -> ZoneDescriptor:
    """Descriptor with abbreviation and offset in effect at ``instant``.

    Raises:
        UnknownZoneError: If the zone database does not know ``zone_id``.
    """
    resolve_zone(zone_id)
    local = in_zone(instant or utc_now(), zone_id)
    entry = lookup(zone_id)

    abbrev = local.tzname()
    # tzdata uses numeric names such as "+0530" for zones without a letter code
    if not abbrev or abbrev[0] in "+-":
        abbrev = entry.abbrev if entry else UNKNOWN_ABBREV

    return ZoneDescriptor(
        id=zone_id,
        name=entry.name if entry else zone_id,
        abbrev=abbrev,
        gmt_offset_label=format_offset(local.utcoffset()),
    )
