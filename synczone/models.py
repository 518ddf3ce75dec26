from __future__ import annotations

import calendar
from datetime import datetime, timedelta, timezone
from typing import Annotated, Literal, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator

from synczone.config import settings

Role = Literal["user", "counterpart", "reference"]
CardRole = Literal["user", "counterpart"]
Meridiem = Literal["AM", "PM"]
WallClockKind = Literal["normal", "gap", "overlap"]


# Every instant in this window can be projected into any zone without overflow
INSTANT_MIN = datetime.min.replace(tzinfo=timezone.utc) + timedelta(days=1)
INSTANT_MAX = datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=1)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValueError("instant must be timezone-aware")
    try:
        value = value.astimezone(timezone.utc)
    except OverflowError as exc:
        raise ValueError("instant is out of range") from exc
    if not INSTANT_MIN <= value <= INSTANT_MAX:
        raise ValueError(f"instant {value.isoformat()} is out of range")
    return value


# Absolute point in time, always normalized to UTC
Instant = Annotated[datetime, AfterValidator(_as_utc)]


class StrictModel(BaseModel):
    """Base class enforcing consistent validation rules."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class FrozenModel(StrictModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)


class ZoneDescriptor(FrozenModel):
    id: str
    name: str
    abbrev: str  # e.g. IST, EST
    gmt_offset_label: str  # e.g. GMT+05:30


class WallClockFields(FrozenModel):
    """Naive local date and time as a wall clock in some zone would show it."""

    year: int = Field(ge=1, le=9999)
    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)
    hour: int = Field(0, ge=0, le=23)
    minute: int = Field(0, ge=0, le=59)
    second: int = Field(0, ge=0, le=59)
    microsecond: int = Field(0, ge=0, le=999_999)

    @model_validator(mode="after")
    def _day_in_month(self) -> "WallClockFields":
        last_day = calendar.monthrange(self.year, self.month)[1]
        if self.day > last_day:
            raise ValueError(
                f"day {self.day} is out of range for {self.year}-{self.month:02d}"
            )
        return self

    def to_naive(self) -> datetime:
        return datetime(
            self.year,
            self.month,
            self.day,
            self.hour,
            self.minute,
            self.second,
            self.microsecond,
        )

    @classmethod
    def from_datetime(cls, value: datetime) -> "WallClockFields":
        return cls(
            year=value.year,
            month=value.month,
            day=value.day,
            hour=value.hour,
            minute=value.minute,
            second=value.second,
            microsecond=value.microsecond,
        )


class WallClockEdit(StrictModel):
    """Partial wall-clock change coming from a single input widget.

    ``value`` carries a datetime-local string (``YYYY-MM-DDTHH:MM[:SS]``);
    ``hour12`` + ``meridiem`` may replace ``hour``. Fields left as ``None``
    keep their current value.
    """

    value: Optional[str] = None
    year: Optional[int] = None
    month: Optional[int] = None
    day: Optional[int] = None
    hour: Optional[int] = None
    hour12: Optional[int] = None
    meridiem: Optional[Meridiem] = None
    minute: Optional[int] = None
    second: Optional[int] = None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in type(self).model_fields)


class MeetingSelection(FrozenModel):
    instant: Instant
    user_zone: str
    counterpart_zone: str
    reference_zones: tuple[str, ...] = ()


class MeetingDetails(StrictModel):
    topic: str
    duration_minutes: int = Field(
        default_factory=lambda: settings.default_meeting_duration, gt=0
    )


class AgendaResponse(StrictModel):
    """Structured agenda text returned by the language model."""

    agenda: str = Field(description="A markdown formatted list of agenda items.")
    etiquette_tip: str = Field(
        description="A friendly tip about the meeting time suitability."
    )


class ZoneCard(StrictModel):
    title: str
    role: CardRole
    zone: ZoneDescriptor
    wall_clock: WallClockFields
    input_value: str
    hour12: int
    meridiem: Meridiem
    time_label: str
    date_label: str


class ZoneSummary(StrictModel):
    zone_id: str
    label: str
    sub: str
    time_label: str
    date_label: str


class ReferenceClock(StrictModel):
    zone_id: str
    label: str
    sub_label: str
    time_label: str
    date_label: str


class CountdownView(StrictModel):
    total_seconds: int = Field(ge=0)
    passed: bool
    days: Optional[int] = None
    hours: Optional[int] = None
    minutes: Optional[int] = None
    seconds: Optional[int] = None
    label: str


class LiveStatus(StrictModel):
    zone_id: str
    now: Instant
    clock_label: str
    meridiem: Meridiem
    countdown: CountdownView


class MeetingView(StrictModel):
    instant: Instant
    accepted: bool = True
    user: ZoneCard
    counterpart: ZoneCard
    summary: list[ZoneSummary]
    references: list[ReferenceClock]
    live: LiveStatus


class EditRequest(StrictModel):
    role: CardRole
    edit: WallClockEdit


class ZoneChangeRequest(StrictModel):
    zone_id: str
    index: Optional[int] = Field(default=None, ge=0)
