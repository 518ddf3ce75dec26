from __future__ import annotations

from datetime import datetime, timezone

import pytest

from synczone.models import AgendaResponse
from synczone.planner import MeetingPlanner
from synczone.services.agenda_client import AgendaClient, AgendaContext
from synczone.state import MeetingState

# 2024-03-15T14:47:00Z, a Friday; New York is already on daylight time
FIXED_NOW = datetime(2024, 3, 15, 14, 47, 0, tzinfo=timezone.utc)

REFERENCE_ZONES = (
    "America/Los_Angeles",
    "America/New_York",
    "Europe/London",
    "Asia/Kolkata",
)


class FixedClock:
    def __init__(self, now: datetime = FIXED_NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class StubAgendaProvider:
    name = "stub"

    def __init__(self) -> None:
        self.calls: list[AgendaContext] = []

    def generate(self, ctx: AgendaContext) -> AgendaResponse:
        self.calls.append(ctx)
        return AgendaResponse(
            agenda=f"- Intro to {ctx.topic}\n- Wrap-up",
            etiquette_tip="Evening for you, morning for the client.",
        )


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def stub_provider() -> StubAgendaProvider:
    return StubAgendaProvider()


@pytest.fixture
def state() -> MeetingState:
    return MeetingState(
        datetime(2024, 3, 15, 15, 0, tzinfo=timezone.utc),
        user_zone="Asia/Kolkata",
        counterpart_zone="America/New_York",
        reference_zones=REFERENCE_ZONES,
    )


@pytest.fixture
def planner(state: MeetingState, clock: FixedClock, stub_provider: StubAgendaProvider) -> MeetingPlanner:
    return MeetingPlanner(
        state=state,
        agenda=AgendaClient(provider=stub_provider),
        clock=clock,
        live_zone="Asia/Kolkata",
    )
