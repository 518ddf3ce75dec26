from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional

from synczone import catalog
from synczone.config import settings
from synczone.countdown import LiveClockDriver, live_status
from synczone.formatting import format_date, format_input_value, format_meeting_label, format_time
from synczone.models import (
    AgendaResponse,
    CardRole,
    LiveStatus,
    MeetingDetails,
    MeetingView,
    ReferenceClock,
    Role,
    WallClockEdit,
    WallClockFields,
    ZoneCard,
    ZoneSummary,
)
from synczone.services.agenda_client import AgendaClient
from synczone.state import MeetingState
from synczone.utils.time import in_zone, next_top_of_hour, to_12_hour, utc_now

logger = logging.getLogger(__name__)

CARD_TITLES: dict[CardRole, str] = {
    "user": "Your Location",
    "counterpart": "Client Location",
}
SUMMARY_REFERENCE_ZONE = "Asia/Kolkata"
SUMMARY_REFERENCE_LABEL = "IST (India)"


class MeetingPlanner:
    """Builds meeting views from the single meeting instant and routes edits."""

    def __init__(
        self,
        *,
        state: MeetingState | None = None,
        agenda: AgendaClient | None = None,
        clock: Callable[[], datetime] = utc_now,
        live_zone: str | None = None,
    ) -> None:
        self.clock = clock
        self.state = state or MeetingState(
            next_top_of_hour(clock()),
            user_zone=settings.user_timezone,
            counterpart_zone=settings.counterpart_timezone,
            reference_zones=settings.reference_timezones,
        )
        self.agenda = agenda or AgendaClient()
        self.live_zone = live_zone or settings.live_clock_timezone
        self.live_clock = LiveClockDriver(
            self.state,
            self.live_zone,
            interval=settings.tick_interval_seconds,
            clock=clock,
        )
        self.last_agenda: Optional[AgendaResponse] = None
        self._agenda_generation = 0

    # ------------------------------------------------------------------- View
    def view(self, *, accepted: bool = True) -> MeetingView:
        selection = self.state.selection
        instant = selection.instant
        return MeetingView(
            instant=instant,
            accepted=accepted,
            user=self._card("user", selection.user_zone, instant),
            counterpart=self._card("counterpart", selection.counterpart_zone, instant),
            summary=self._summary(instant),
            references=[self._reference(zone_id, instant) for zone_id in selection.reference_zones],
            live=self.live_status(),
        )

    def live_status(self, now: datetime | None = None) -> LiveStatus:
        if now is None and self.live_clock.running and self.live_clock.latest is not None:
            return self.live_clock.latest
        return live_status(self.state.instant, self.live_zone, now or self.clock())

    # ---------------------------------------------------------------- Updates
    def edit(self, role: CardRole, edit: WallClockEdit) -> MeetingView:
        accepted = self.state.apply_edit(role, edit)
        if accepted:
            logger.info("Meeting moved to %s via %s edit", self.state.instant.isoformat(), role)
            if self.live_clock.running:
                # Do not wait for the next tick to show the new countdown
                self.live_clock.tick()
        return self.view(accepted=accepted)

    def change_zone(self, role: Role, zone_id: str, index: int | None = None) -> MeetingView:
        self.state.set_zone(role, zone_id, index)
        return self.view()

    # ----------------------------------------------------------------- Agenda
    async def generate_agenda(self, details: MeetingDetails) -> AgendaResponse | None:
        """Ask the agenda collaborator about the current selection.

        Returns ``None`` when the request was cancelled or superseded while
        it was in flight.
        """
        self._agenda_generation += 1
        token = self._agenda_generation
        selection = self.state.selection

        result = await asyncio.to_thread(
            self.agenda.generate,
            details.topic,
            details.duration_minutes,
            format_meeting_label(selection.instant, selection.user_zone),
            self._zone_label(selection.user_zone, selection.instant),
            format_meeting_label(selection.instant, selection.counterpart_zone),
            self._zone_label(selection.counterpart_zone, selection.instant),
        )

        if token != self._agenda_generation:
            logger.info("Discarding agenda for cancelled request #%d", token)
            return None
        self.last_agenda = result
        return result

    def cancel_agenda(self) -> None:
        self._agenda_generation += 1

    # -------------------------------------------------------------- Internals
    @staticmethod
    def _zone_label(zone_id: str, instant: datetime) -> str:
        descriptor = catalog.describe(zone_id, instant)
        return f"{descriptor.name} ({descriptor.abbrev})"

    @staticmethod
    def _card(role: CardRole, zone_id: str, instant: datetime) -> ZoneCard:
        local = in_zone(instant, zone_id)
        hour12, meridiem = to_12_hour(local.hour)
        return ZoneCard(
            title=CARD_TITLES[role],
            role=role,
            zone=catalog.describe(zone_id, instant),
            wall_clock=WallClockFields.from_datetime(local),
            input_value=format_input_value(local),
            hour12=hour12,
            meridiem=meridiem,
            time_label=format_time(local),
            date_label=format_date(local),
        )

    def _summary(self, instant: datetime) -> list[ZoneSummary]:
        selection = self.state.selection
        rows = [
            (
                selection.user_zone,
                f"{catalog.describe(selection.user_zone, instant).abbrev} (User)",
                "Your Time",
            ),
            (
                selection.counterpart_zone,
                f"{catalog.describe(selection.counterpart_zone, instant).abbrev} (Client)",
                "Client Time",
            ),
            (SUMMARY_REFERENCE_ZONE, SUMMARY_REFERENCE_LABEL, "Reference"),
        ]
        summary = []
        for zone_id, label, sub in rows:
            local = in_zone(instant, zone_id)
            summary.append(
                ZoneSummary(
                    zone_id=zone_id,
                    label=label,
                    sub=sub,
                    time_label=format_time(local),
                    date_label=format_date(local),
                )
            )
        return summary

    @staticmethod
    def _reference(zone_id: str, instant: datetime) -> ReferenceClock:
        local = in_zone(instant, zone_id)
        descriptor = catalog.describe(zone_id, instant)
        return ReferenceClock(
            zone_id=zone_id,
            label=descriptor.abbrev,
            sub_label=descriptor.name,
            time_label=format_time(local),
            date_label=format_date(local),
        )
