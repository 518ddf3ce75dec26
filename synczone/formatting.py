"""Text rendering of instants for the meeting views.

Month and weekday names are English and independent of the process locale.
"""
from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional

from synczone.utils.time import in_zone, to_12_hour

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def format_time(local: datetime) -> str:
    """``h:mm a``, e.g. ``9:05 PM``."""
    hour12, meridiem = to_12_hour(local.hour)
    return f"{hour12}:{local.minute:02d} {meridiem}"


def format_date(local: datetime) -> str:
    """``EEE, MMM d``, e.g. ``Fri, Mar 15``."""
    return f"{_WEEKDAYS[local.weekday()]}, {_MONTHS[local.month - 1]} {local.day}"


def format_clock(local: datetime) -> str:
    """``hh:mm:ss`` on a 12-hour dial."""
    hour12, _ = to_12_hour(local.hour)
    return f"{hour12:02d}:{local.minute:02d}:{local.second:02d}"


def format_meridiem(local: datetime) -> str:
    return to_12_hour(local.hour)[1]


def format_input_value(local: datetime) -> str:
    """Value for a datetime-local input (``yyyy-MM-dd'T'HH:mm``)."""
    return local.strftime("%Y-%m-%dT%H:%M")


def format_offset(offset: Optional[timedelta]) -> str:
    if offset is None:
        return "GMT+00:00"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, rem = divmod(abs(total), 3600)
    return f"GMT{sign}{hours:02d}:{rem // 60:02d}"


def format_meeting_label(instant: datetime, zone_id: str) -> str:
    """Label handed to the agenda collaborator, e.g. ``3:00 PM, Fri, Mar 15``."""
    local = in_zone(instant, zone_id)
    return f"{format_time(local)}, {format_date(local)}"
