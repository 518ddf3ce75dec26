from datetime import datetime, timedelta, timezone
import pytest
from synczone.models import MeetingDetails, MeetingSelection, WallClockFields


def test_wall_clock_rejects_day_outside_month():
    with pytest.raises(ValueError):
        WallClockFields(year=2024, month=4, day=31)
    with pytest.raises(ValueError):
        WallClockFields(year=2023, month=2, day=29)

    leap = WallClockFields(year=2024, month=2, day=29, hour=23, minute=59, second=59)
    assert leap.to_naive() == datetime(2024, 2, 29, 23, 59, 59)


def test_selection_normalizes_instant_to_utc():
    plus_five_thirty = timezone(timedelta(hours=5, minutes=30))
    selection = MeetingSelection(
        instant=datetime(2024, 3, 15, 20, 30, tzinfo=plus_five_thirty),
        user_zone="Asia/Kolkata",
        counterpart_zone="America/New_York",
    )
    assert selection.instant == datetime(2024, 3, 15, 15, 0, tzinfo=timezone.utc)
    assert selection.instant.utcoffset() == timedelta(0)

    with pytest.raises(ValueError):
        MeetingSelection(
            instant=datetime(2024, 3, 15, 15, 0),
            user_zone="UTC",
            counterpart_zone="UTC",
        )
    with pytest.raises(ValueError):
        MeetingSelection(
            instant=datetime.max.replace(tzinfo=timezone.utc),
            user_zone="UTC",
            counterpart_zone="UTC",
        )


def test_meeting_details_default_duration():
    details = MeetingDetails(topic="Quarterly review")
    assert details.duration_minutes == 30
    with pytest.raises(ValueError):
        MeetingDetails(topic="x", duration_minutes=0)
