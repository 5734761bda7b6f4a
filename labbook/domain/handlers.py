"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

import logging

from labbook.domain.bus import EventBus
from labbook.domain.events import (
    BookingCommitted,
    BookingRejected,
    LaboratoryDeleted,
    RoomDeleted,
)
from labbook.domain.models import ActivityEntry, ActivityType
from labbook.repos.memory import (
    ActivityRepository,
    BookingRepository,
    RoomRepository,
)

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to all repositories."""

    def __init__(
        self,
        bus: EventBus,
        room_repo: RoomRepository,
        booking_repo: BookingRepository,
        activity_repo: ActivityRepository,
    ) -> None:
        self.bus = bus
        self.room_repo = room_repo
        self.booking_repo = booking_repo
        self.activity_repo = activity_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(BookingCommitted, self.on_booking_committed)
        self.bus.subscribe(BookingRejected, self.on_booking_rejected)
        self.bus.subscribe(LaboratoryDeleted, self.on_laboratory_deleted)
        self.bus.subscribe(RoomDeleted, self.on_room_deleted)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_booking_committed(self, event: BookingCommitted) -> None:
        booking = self.booking_repo.get(event.booking_id)
        if booking is None:
            return

        logger.info(
            "Booking %s committed for lab %s room %s (%s - %s)",
            booking.id,
            booking.lab_id,
            booking.room_id,
            booking.window.start.isoformat(),
            booking.window.end.isoformat(),
        )
        self.activity_repo.add(
            ActivityEntry(
                lab_id=event.lab_id,
                room_id=event.room_id,
                type=ActivityType.COMMITTED,
                payload={"booking_id": booking.id, "user_id": booking.user_id},
            )
        )

    def on_booking_rejected(self, event: BookingRejected) -> None:
        logger.info(
            "Booking for lab %s room %s rejected: %s",
            event.lab_id,
            event.room_id,
            event.reason,
        )
        payload = {"reason": str(event.reason), "user_id": event.user_id}
        if event.conflicting_booking_id is not None:
            payload["conflicting_booking_id"] = event.conflicting_booking_id
        self.activity_repo.add(
            ActivityEntry(
                lab_id=event.lab_id,
                room_id=event.room_id,
                type=ActivityType.REJECTED,
                payload=payload,
            )
        )

    def on_laboratory_deleted(self, event: LaboratoryDeleted) -> None:
        # Rooms go first, then every booking held in them.
        room_ids = self.room_repo.delete_for_lab(event.lab_id)
        removed = self.booking_repo.delete_for_rooms(room_ids)
        logger.info(
            "Laboratory %s deleted with %d rooms and %d bookings",
            event.lab_id,
            len(room_ids),
            removed,
        )

    def on_room_deleted(self, event: RoomDeleted) -> None:
        removed = self.booking_repo.delete_for_rooms([event.room_id])
        logger.info("Room %s deleted with %d bookings", event.room_id, removed)
