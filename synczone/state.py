from __future__ import annotations

import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from synczone.errors import InvalidWallClockError, ReferenceIndexError
from synczone.models import MeetingSelection, Role, WallClockEdit
from synczone.utils.time import (
    ensure_instant,
    from_wall_clock,
    merge_wall_clock,
    resolve_zone,
    to_wall_clock,
)

logger = logging.getLogger(__name__)


class MeetingState:
    """Owner of the meeting instant and the zones it is viewed through.

    The selection is an immutable snapshot. Every update builds a new one and
    swaps the reference, so readers see either the old or the new selection.
    """

    def __init__(
        self,
        instant: datetime,
        *,
        user_zone: str,
        counterpart_zone: str,
        reference_zones: Sequence[str] = (),
    ) -> None:
        for zone_id in (user_zone, counterpart_zone, *reference_zones):
            resolve_zone(zone_id)
        self._selection = MeetingSelection(
            instant=ensure_instant(instant),
            user_zone=user_zone,
            counterpart_zone=counterpart_zone,
            reference_zones=tuple(reference_zones),
        )

    # ------------------------------------------------------------------ reads
    @property
    def selection(self) -> MeetingSelection:
        return self._selection

    @property
    def instant(self) -> datetime:
        return self._selection.instant

    def zone_for(self, role: Role, index: Optional[int] = None) -> str:
        selection = self._selection
        if role == "user":
            return selection.user_zone
        if role == "counterpart":
            return selection.counterpart_zone
        if role == "reference":
            return selection.reference_zones[self._reference_index(index)]
        raise ValueError(f"Unknown role: {role!r}")

    # ---------------------------------------------------------------- updates
    def set_instant(self, instant: datetime) -> None:
        new_instant = ensure_instant(instant)
        self._selection = self._selection.model_copy(update={"instant": new_instant})
        logger.debug("Meeting instant set to %s", new_instant.isoformat())

    def set_zone(self, role: Role, zone_id: str, index: Optional[int] = None) -> None:
        """Change the zone a role is viewed through; the instant is untouched."""
        resolve_zone(zone_id)
        selection = self._selection
        if role == "user":
            update = {"user_zone": zone_id}
        elif role == "counterpart":
            update = {"counterpart_zone": zone_id}
        elif role == "reference":
            zones = list(selection.reference_zones)
            zones[self._reference_index(index)] = zone_id
            update = {"reference_zones": tuple(zones)}
        else:
            raise ValueError(f"Unknown role: {role!r}")
        self._selection = selection.model_copy(update=update)
        logger.debug("Zone for %s set to %s", role, zone_id)

    def set_reference_zones(self, zone_ids: Iterable[str]) -> None:
        zones = tuple(zone_ids)
        for zone_id in zones:
            resolve_zone(zone_id)
        self._selection = self._selection.model_copy(update={"reference_zones": zones})

    def apply_edit(self, role: Role, edit: WallClockEdit, index: Optional[int] = None) -> bool:
        """Apply a wall-clock edit made in ``role``'s zone.

        Returns ``False`` and keeps the previous instant when the edit cannot
        be parsed, produces an invalid date or falls outside the
        supported calendar range.
        """
        zone_id = self.zone_for(role, index)
        current = to_wall_clock(self.instant, zone_id)
        try:
            fields = merge_wall_clock(current, edit)
            self.set_instant(from_wall_clock(fields, zone_id))
        except InvalidWallClockError as exc:
            logger.warning("Ignoring wall-clock edit in %s: %s", zone_id, exc)
            return False
        return True

    # -------------------------------------------------------------- internals
    def _reference_index(self, index: Optional[int]) -> int:
        count = len(self._selection.reference_zones)
        if index is None or not 0 <= index < count:
            raise ReferenceIndexError(f"reference index {index!r} out of range (0..{count - 1})")
        return index
