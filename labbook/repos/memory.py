"""In-memory repositories for laboratories, rooms, bookings and activity."""

from __future__ import annotations

import itertools
import logging
import threading
from datetime import datetime, timedelta, timezone

from labbook.domain.errors import NotFoundError, PersistenceConflictError
from labbook.domain.models import (
    ActivityEntry,
    Booking,
    BookingCandidate,
    Laboratory,
    Room,
    TimeWindow,
)
from labbook.services.conflicts import find_conflict

logger = logging.getLogger(__name__)


class LaboratoryRepository:
    """Dict-backed store for Laboratory instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[int, Laboratory] = {}
        self._ids = itertools.count(1)

    def create(self, **fields) -> Laboratory:
        lab = Laboratory(id=next(self._ids), **fields)
        self._store[lab.id] = lab
        return lab

    def get(self, lab_id: int) -> Laboratory | None:
        return self._store.get(lab_id)

    def list_all(self) -> list[Laboratory]:
        return list(self._store.values())

    def update(self, lab_id: int, **changes) -> Laboratory:
        lab = self._store.get(lab_id)
        if lab is None:
            raise NotFoundError(f"laboratory {lab_id} not found")
        updated = lab.model_copy(update=changes)
        self._store[lab_id] = updated
        return updated

    def delete(self, lab_id: int) -> None:
        self._store.pop(lab_id, None)


class RoomRepository:
    """Dict-backed store for Room instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[int, Room] = {}
        self._ids = itertools.count(1)

    def create(self, **fields) -> Room:
        room = Room(id=next(self._ids), **fields)
        self._store[room.id] = room
        return room

    def get(self, room_id: int) -> Room | None:
        return self._store.get(room_id)

    def list_all(self) -> list[Room]:
        return list(self._store.values())

    def list_for_lab(self, lab_id: int) -> list[Room]:
        return [r for r in self._store.values() if r.lab_id == lab_id]

    def update(self, room_id: int, **changes) -> Room:
        room = self._store.get(room_id)
        if room is None:
            raise NotFoundError(f"room {room_id} not found")
        updated = room.model_copy(update=changes)
        self._store[room_id] = updated
        return updated

    def delete(self, room_id: int) -> None:
        self._store.pop(room_id, None)

    def delete_for_lab(self, lab_id: int) -> list[int]:
        """Delete every room of a laboratory and return their ids."""
        removed = [rid for rid, r in self._store.items() if r.lab_id == lab_id]
        for rid in removed:
            del self._store[rid]
        return removed


class BookingRepository:
    """Dict-backed booking store and the authoritative commit point.

    ``create_booking`` re-runs the overlap check against the committed set
    while holding a lock, so two candidates that both passed a stale pre-check
    cannot both be committed. Reads and deletes take the same lock.
    """

    def __init__(self) -> None:
        self._store: dict[int, Booking] = {}
        self._ids = itertools.count(1)
        self._lock = threading.RLock()

    def create_booking(self, candidate: BookingCandidate) -> Booking:
        with self._lock:
            witness = find_conflict(
                candidate, self.list_bookings(candidate.lab_id, candidate.room_id)
            )
            if witness is not None:
                raise PersistenceConflictError(
                    f"overlaps booking {witness.id}", conflicting_booking=witness
                )
            booking = Booking(id=next(self._ids), **candidate.model_dump())
            self._store[booking.id] = booking
        logger.debug("Stored booking %s", booking.id)
        return booking

    def get(self, booking_id: int) -> Booking | None:
        with self._lock:
            return self._store.get(booking_id)

    def list_bookings(self, lab_id: int, room_id: int) -> list[Booking]:
        return self.list_all(lab_id=lab_id, room_id=room_id)

    def list_all(
        self,
        lab_id: int | None = None,
        room_id: int | None = None,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Booking]:
        """Return bookings in chronological order, optionally filtered.

        *start*/*end* keep only bookings whose window overlaps ``[start, end)``.
        """
        with self._lock:
            bookings = [
                b
                for b in self._store.values()
                if (lab_id is None or b.lab_id == lab_id)
                and (room_id is None or b.room_id == room_id)
                and (start is None or b.window.end > start)
                and (end is None or b.window.start < end)
            ]
        return sorted(bookings, key=lambda b: (b.window.start, b.id))

    def delete_for_rooms(self, room_ids: list[int]) -> int:
        """Delete all bookings held in the given rooms; return how many."""
        with self._lock:
            removed = [bid for bid, b in self._store.items() if b.room_id in room_ids]
            for bid in removed:
                del self._store[bid]
        return len(removed)


class ActivityRepository:
    """List-backed store for ActivityEntry instances."""

    def __init__(self) -> None:
        self._entries: list[ActivityEntry] = []

    def add(self, entry: ActivityEntry) -> None:
        self._entries.append(entry)

    def list_for_room(self, lab_id: int, room_id: int) -> list[ActivityEntry]:
        return sorted(
            [e for e in self._entries if e.lab_id == lab_id and e.room_id == room_id],
            key=lambda e: e.timestamp,
        )


# ---------------------------------------------------------------------------
# Seed data – a laboratory with two rooms and a few upcoming bookings
# ---------------------------------------------------------------------------


def seed_demo_data(
    lab_repo: LaboratoryRepository,
    room_repo: RoomRepository,
    booking_repo: BookingRepository,
) -> None:
    tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).replace(
        hour=0, minute=0, second=0, microsecond=0
    )

    chemistry = lab_repo.create(
        name="Chemistry Lab", location="Building A, 2nd floor", capacity=40
    )
    bench = room_repo.create(lab_id=chemistry.id, name="Bench Room", capacity=20)
    fume = room_repo.create(lab_id=chemistry.id, name="Fume Hood Room", capacity=8)

    for room, hour, purpose in (
        (bench, 9, "Titration practical"),
        (bench, 11, "Spectroscopy demo"),
        (fume, 14, "Solvent distillation"),
    ):
        booking_repo.create_booking(
            BookingCandidate(
                lab_id=chemistry.id,
                room_id=room.id,
                user_id=1,
                purpose=purpose,
                window=TimeWindow(
                    start=tomorrow + timedelta(hours=hour),
                    end=tomorrow + timedelta(hours=hour + 2),
                ),
            )
        )
