from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from synczone.countdown import (
    PASSED_LABEL,
    LiveClockDriver,
    countdown,
    format_countdown,
    live_status,
)
from synczone.state import MeetingState

NOW = datetime(2024, 3, 15, 14, 47, 0, tzinfo=timezone.utc)


def test_countdown_components() -> None:
    view = countdown(NOW + timedelta(seconds=90061), NOW)
    assert not view.passed
    assert (view.days, view.hours, view.minutes, view.seconds) == (1, 1, 1, 1)
    assert view.label == "1d 1h 1m 1s"


def test_countdown_omits_zero_days() -> None:
    view = countdown(NOW + timedelta(minutes=13), NOW)
    assert view.label == "0h 13m 0s"
    assert format_countdown(view) == view.label


@pytest.mark.parametrize("delta", [timedelta(seconds=-1), timedelta(0), timedelta(milliseconds=400)])
def test_countdown_passed(delta: timedelta) -> None:
    view = countdown(NOW + delta, NOW)
    assert view.passed
    assert view.total_seconds == 0
    assert view.days is None
    assert view.label == PASSED_LABEL
    assert not view.label.startswith("-")


def test_countdown_long_passed_reports_zero_seconds() -> None:
    view = countdown(NOW - timedelta(days=3, hours=2), NOW)
    assert view.passed
    assert view.total_seconds == 0
    assert format_countdown(view) == PASSED_LABEL


def test_live_status_in_reference_zone() -> None:
    status = live_status(NOW + timedelta(minutes=13), "Asia/Kolkata", NOW)
    assert status.clock_label == "08:17:00"
    assert status.meridiem == "PM"
    assert status.countdown.label == "0h 13m 0s"


def test_driver_tick_without_loop(state: MeetingState) -> None:
    driver = LiveClockDriver(state, "Asia/Kolkata", clock=lambda: NOW)
    status = driver.tick()
    assert driver.latest is status
    assert status.countdown.total_seconds == 13 * 60
    assert not driver.running


def test_driver_runs_and_stops(state: MeetingState) -> None:
    async def scenario() -> LiveClockDriver:
        driver = LiveClockDriver(state, "UTC", interval=0.01, clock=lambda: NOW)
        async with driver:
            assert driver.running
            await asyncio.sleep(0.05)
        assert not driver.running
        return driver

    driver = asyncio.run(scenario())
    assert driver.ticks >= 2


def test_driver_stops_when_body_raises(state: MeetingState) -> None:
    holder: list[LiveClockDriver] = []

    async def scenario() -> None:
        driver = LiveClockDriver(state, "UTC", interval=0.01, clock=lambda: NOW)
        holder.append(driver)
        async with driver:
            raise RuntimeError("view torn down")

    with pytest.raises(RuntimeError):
        asyncio.run(scenario())
    assert not holder[0].running


def test_driver_sees_instant_changes(state: MeetingState) -> None:
    driver = LiveClockDriver(state, "UTC", clock=lambda: NOW)
    assert driver.tick().countdown.total_seconds == 780
    state.set_instant(NOW - timedelta(minutes=5))
    assert driver.tick().countdown.passed


def test_driver_rejects_bad_configuration(state: MeetingState) -> None:
    with pytest.raises(ValueError):
        LiveClockDriver(state, "UTC", interval=0)
    with pytest.raises(ValueError):
        LiveClockDriver(state, "Mars/Olympus")
