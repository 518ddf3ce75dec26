from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from statistics import mean
from time import perf_counter

from synczone.catalog import COMMON_TIMEZONES
from synczone.models import WallClockEdit
from synczone.planner import MeetingPlanner
from synczone.services.agenda_client import AgendaClient, OfflineAgendaProvider
from synczone.utils.time import from_wall_clock, to_wall_clock

_START = datetime(2024, 3, 8, tzinfo=timezone.utc)


@dataclass(slots=True)
class BenchmarkClock:
    now: datetime = field(default_factory=lambda: _START)

    def __call__(self) -> datetime:
        return self.now


def _round_trips(samples: int) -> int:
    converted = 0
    for zone in COMMON_TIMEZONES:
        for step in range(samples):
            instant = _START + timedelta(minutes=37 * step)
            from_wall_clock(to_wall_clock(instant, zone.id), zone.id)
            converted += 1
    return converted


def run(iterations: int = 250, samples: int = 40) -> None:
    planner = MeetingPlanner(
        agenda=AgendaClient(provider=OfflineAgendaProvider("bench")),
        clock=BenchmarkClock(),
    )

    conversions = 0
    timings: list[float] = []
    for i in range(iterations):
        start = perf_counter()
        conversions += _round_trips(samples)
        planner.edit("user", WallClockEdit(minute=i % 60))
        planner.view()
        timings.append(perf_counter() - start)

    total = sum(timings)
    print(f"Iterations: {iterations}")
    print(f"Round trips: {conversions}")
    print(f"Total time: {total:.4f}s")
    print(f"Average per loop: {mean(timings)*1000:.2f} ms")
    print(f"Min/Max: {min(timings)*1000:.2f} ms / {max(timings)*1000:.2f} ms")


if __name__ == "__main__":  # pragma: no cover - manual entrypoint
    run()
