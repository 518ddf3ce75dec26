"""Conversion between absolute instants and per-zone wall-clock fields.

Resolution policy for local times around daylight-saving transitions:

* an ambiguous local time (fall-back overlap) resolves to the earlier
  instant, i.e. the first time the wall clock shows it;
* a nonexistent local time (spring-forward gap) is read with the offset in
  effect before the transition, which moves it forward by the size of the
  gap (02:30 on a US spring-forward day becomes 03:30 daylight time).

Malformed field combinations are rejected, never normalized.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Optional
import zoneinfo

from pydantic import ValidationError

from synczone.errors import InvalidWallClockError, UnknownZoneError
from synczone.models import (
    INSTANT_MAX,
    INSTANT_MIN,
    Meridiem,
    WallClockEdit,
    WallClockFields,
    WallClockKind,
)

UTC = timezone.utc

_EDITABLE_FIELDS = ("year", "month", "day", "hour", "minute", "second")


@lru_cache(maxsize=None)
def resolve_zone(zone_id: str) -> zoneinfo.ZoneInfo:
    if not zone_id or not isinstance(zone_id, str):
        raise UnknownZoneError(str(zone_id))
    try:
        return zoneinfo.ZoneInfo(zone_id)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as exc:
        # ValueError covers malformed keys such as absolute paths
        raise UnknownZoneError(zone_id) from exc


def is_known_zone(zone_id: str) -> bool:
    try:
        resolve_zone(zone_id)
    except UnknownZoneError:
        return False
    return True


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


def ensure_instant(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("instant must be timezone-aware")
    try:
        value = value.astimezone(UTC)
    except OverflowError as exc:
        raise InvalidWallClockError("instant is out of range") from exc
    if not INSTANT_MIN <= value <= INSTANT_MAX:
        raise InvalidWallClockError(f"instant {value.isoformat()} is out of range")
    return value


def in_zone(instant: datetime, zone_id: str) -> datetime:
    """Aware datetime for ``instant`` expressed in ``zone_id``."""
    return ensure_instant(instant).astimezone(resolve_zone(zone_id))


def to_wall_clock(instant: datetime, zone_id: str) -> WallClockFields:
    return WallClockFields.from_datetime(in_zone(instant, zone_id))


def from_wall_clock(fields: WallClockFields, zone_id: str) -> datetime:
    tz = resolve_zone(zone_id)
    local = fields.to_naive().replace(tzinfo=tz, fold=0)
    try:
        return ensure_instant(local)
    except OverflowError as exc:
        # zoneinfo can overflow while computing the offset at the calendar edges
        raise InvalidWallClockError(f"{fields} cannot be placed in {zone_id}") from exc


def classify_wall_clock(fields: WallClockFields, zone_id: str) -> WallClockKind:
    tz = resolve_zone(zone_id)
    naive = fields.to_naive()
    early = naive.replace(tzinfo=tz, fold=0)
    late = naive.replace(tzinfo=tz, fold=1)
    if early.utcoffset() == late.utcoffset():
        return "normal"
    # In a gap the wall time does not survive a trip through UTC
    projected = early.astimezone(UTC).astimezone(tz).replace(tzinfo=None)
    if projected != naive:
        return "gap"
    return "overlap"


def to_24_hour(hour12: int, meridiem: Meridiem | str) -> int:
    if not 1 <= hour12 <= 12:
        raise InvalidWallClockError(f"12-hour clock value out of range: {hour12}")
    marker = str(meridiem).upper()
    if marker not in ("AM", "PM"):
        raise InvalidWallClockError(f"Unknown meridiem: {meridiem!r}")
    if hour12 == 12:
        return 12 if marker == "PM" else 0
    return hour12 + 12 if marker == "PM" else hour12


def to_12_hour(hour: int) -> tuple[int, Meridiem]:
    if not 0 <= hour <= 23:
        raise InvalidWallClockError(f"hour out of range: {hour}")
    meridiem: Meridiem = "PM" if hour >= 12 else "AM"
    return (hour % 12) or 12, meridiem


def parse_local_input(value: str) -> dict[str, int]:
    """Parse a datetime-local value (``YYYY-MM-DDTHH:MM[:SS]``).

    Returns only the fields present in the text so that missing seconds can
    be carried over from the current projection.
    """
    text = (value or "").strip()
    if not text:
        raise InvalidWallClockError("empty wall-clock value")
    for fmt, has_seconds in (("%Y-%m-%dT%H:%M:%S", True), ("%Y-%m-%dT%H:%M", False)):
        try:
            parsed = datetime.strptime(text.replace(" ", "T", 1), fmt)
        except ValueError:
            continue
        fields = {
            "year": parsed.year,
            "month": parsed.month,
            "day": parsed.day,
            "hour": parsed.hour,
            "minute": parsed.minute,
        }
        if has_seconds:
            fields["second"] = parsed.second
        return fields
    raise InvalidWallClockError(f"malformed wall-clock value: {value!r}")


def merge_wall_clock(base: WallClockFields, edit: WallClockEdit) -> WallClockFields:
    """Rebuild a complete tuple from ``base`` with the edited fields applied."""
    if edit.is_empty():
        raise InvalidWallClockError("edit carries no fields")

    updates: dict[str, int] = {}
    if edit.value is not None:
        updates.update(parse_local_input(edit.value))

    for name in _EDITABLE_FIELDS:
        field_value = getattr(edit, name)
        if field_value is not None:
            updates[name] = field_value

    if edit.hour12 is not None or edit.meridiem is not None:
        if edit.hour is not None:
            raise InvalidWallClockError("hour and hour12 are mutually exclusive")
        current_hour12, current_meridiem = to_12_hour(updates.get("hour", base.hour))
        updates["hour"] = to_24_hour(
            edit.hour12 if edit.hour12 is not None else current_hour12,
            edit.meridiem or current_meridiem,
        )

    # Sub-second precision only survives when the seconds were not touched
    if "second" in updates:
        updates["microsecond"] = 0

    try:
        return WallClockFields.model_validate({**base.model_dump(), **updates})
    except ValidationError as exc:
        raise InvalidWallClockError(str(exc)) from exc


def next_top_of_hour(now: Optional[datetime] = None) -> datetime:
    current = ensure_instant(now or utc_now())
    return current.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
