from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from synczone.formatting import format_clock, format_meridiem
from synczone.models import CountdownView, LiveStatus
from synczone.state import MeetingState
from synczone.utils.time import ensure_instant, in_zone, resolve_zone, utc_now

logger = logging.getLogger(__name__)

PASSED_LABEL = "Started / Passed"


def seconds_until(target: datetime, now: datetime) -> int:
    delta = ensure_instant(target) - ensure_instant(now)
    # Truncate toward zero like a whole-second difference
    return int(delta.total_seconds())


def countdown(target: datetime, now: datetime) -> CountdownView:
    remaining = seconds_until(target, now)
    if remaining <= 0:
        return CountdownView(total_seconds=0, passed=True, label=PASSED_LABEL)

    days, rem = divmod(remaining, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)
    view = CountdownView(
        total_seconds=remaining,
        passed=False,
        days=days,
        hours=hours,
        minutes=minutes,
        seconds=seconds,
        label="",
    )
    return view.model_copy(update={"label": format_countdown(view)})


def format_countdown(view: CountdownView) -> str:
    if view.passed:
        return PASSED_LABEL
    if view.days:
        return f"{view.days}d {view.hours}h {view.minutes}m {view.seconds}s"
    return f"{view.hours}h {view.minutes}m {view.seconds}s"


def live_status(target: datetime, zone_id: str, now: datetime) -> LiveStatus:
    local = in_zone(now, zone_id)
    return LiveStatus(
        zone_id=zone_id,
        now=now,
        clock_label=format_clock(local),
        meridiem=format_meridiem(local),
        countdown=countdown(target, now),
    )


class LiveClockDriver:
    """Recomputes the live footer on a fixed cadence.

    Use ``async with driver:`` (or ``start``/``stop``) so the periodic task
    is always cancelled when the view goes away.
    """

    def __init__(
        self,
        state: MeetingState,
        zone_id: str,
        *,
        interval: float = 1.0,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        resolve_zone(zone_id)
        self._state = state
        self._zone_id = zone_id
        self._interval = interval
        self._clock = clock
        self._task: Optional[asyncio.Task[None]] = None
        self._latest: Optional[LiveStatus] = None
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def latest(self) -> Optional[LiveStatus]:
        return self._latest

    def tick(self) -> LiveStatus:
        status = live_status(self._state.instant, self._zone_id, self._clock())
        self._latest = status
        self.ticks += 1
        return status

    def start(self) -> None:
        if self.running:
            return
        self.tick()
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Live clock started for %s every %.2fs", self._zone_id, self._interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Live clock stopped after %d ticks", self.ticks)

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self.tick()
            except Exception:  # pragma: no cover - keep the clock alive
                logger.exception("Live clock tick failed")

    async def __aenter__(self) -> "LiveClockDriver":
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.stop()
