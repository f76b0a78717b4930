from __future__ import annotations

import copy
import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple

from ..models.participant import AvoidConstraint
from ..models.records import BookingRecord, GuestRecord
from ..models.venue import SeatAssignment, Table, Venue
from .base import PairingStore


class InMemoryPairingStore(PairingStore):
    """Dictionary-backed store.

    A transaction snapshots the whole state and restores it if the block
    raises. The store lock is held for the duration of a transaction, so
    one writer at a time works on the store.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._depth = 0
        self.guests: Dict[str, GuestRecord] = {}
        self.bookings: List[BookingRecord] = []
        self.constraints: List[Tuple[Optional[str], AvoidConstraint]] = []
        self.venues: Dict[str, Tuple[str, Venue]] = {}
        self.tables: Dict[str, Table] = {}
        self.assignments: Dict[str, List[SeatAssignment]] = {}

    def _new_id(self, prefix: str) -> str:
        return f"{prefix}-{uuid.uuid4().hex[:12]}"

    def _snapshot(self) -> dict:
        return copy.deepcopy(
            {
                "guests": self.guests,
                "bookings": self.bookings,
                "constraints": self.constraints,
                "venues": self.venues,
                "tables": self.tables,
                "assignments": self.assignments,
            }
        )

    def _restore(self, snapshot: dict) -> None:
        for name, value in snapshot.items():
            setattr(self, name, value)

    def _commit(self) -> None:
        """Hook run when the outermost transaction succeeds."""

    @contextmanager
    def transaction(self) -> Iterator["InMemoryPairingStore"]:
        with self._lock:
            snapshot = self._snapshot() if self._depth == 0 else None
            self._depth += 1
            try:
                yield self
            except BaseException:
                self._depth -= 1
                if snapshot is not None:
                    self._restore(snapshot)
                raise
            self._depth -= 1
            if snapshot is not None:
                try:
                    self._commit()
                except BaseException:
                    self._restore(snapshot)
                    raise

    def add_guest(self, guest: GuestRecord) -> GuestRecord:
        with self.transaction():
            if guest.id in self.guests:
                raise ValueError(f"Guest {guest.id} already exists")
            self.guests[guest.id] = guest
        return guest

    def list_guests(self, event_id: str) -> List[GuestRecord]:
        return [g for g in self.guests.values() if g.event_id == event_id]

    def find_guest(self, event_id: str, participant_id: str) -> Optional[GuestRecord]:
        for guest in self.guests.values():
            if guest.event_id == event_id and guest.matches(participant_id):
                return guest
        return None

    def add_booking(self, booking: BookingRecord) -> BookingRecord:
        with self.transaction():
            self.bookings.append(booking)
        return booking

    def list_bookings(self, event_id: str) -> List[BookingRecord]:
        return [b for b in self.bookings if b.event_id == event_id]

    def add_constraint(self, constraint: AvoidConstraint, event_id: Optional[str] = None) -> None:
        with self.transaction():
            self.constraints.append((event_id, constraint))

    def list_avoid_constraints(self, event_id: str) -> List[AvoidConstraint]:
        return [c for scope, c in self.constraints if scope in (None, event_id)]

    def get_venue(self, venue_id: str) -> Optional[Venue]:
        entry = self.venues.get(venue_id)
        return entry[1] if entry else None

    def create_venue(self, event_id: str, venue: Venue) -> Venue:
        stored = Venue(
            name=venue.name,
            capacity=venue.capacity,
            id=self._new_id("venue"),
            address=venue.address,
            contact_info=venue.contact_info,
        )
        with self.transaction():
            self.venues[stored.id] = (event_id, stored)
        return stored

    def list_venues(self, event_id: str) -> List[Venue]:
        return [venue for scope, venue in self.venues.values() if scope == event_id]

    def create_table(self, venue_id: str, table_number: int, capacity: int) -> Table:
        if venue_id not in self.venues:
            raise KeyError(f"Unknown venue: {venue_id}")
        table = Table(
            id=self._new_id("table"),
            venue_id=venue_id,
            table_number=table_number,
            capacity=capacity,
        )
        with self.transaction():
            self.tables[table.id] = table
        return table

    def list_tables(self, venue_id: str) -> List[Table]:
        tables = [t for t in self.tables.values() if t.venue_id == venue_id]
        return sorted(tables, key=lambda t: t.table_number)

    def add_assignment(self, event_id: str, assignment: SeatAssignment) -> None:
        with self.transaction():
            self.assignments.setdefault(event_id, []).append(assignment)

    def list_assignments(self, event_id: str) -> List[SeatAssignment]:
        return list(self.assignments.get(event_id, []))

    def reset_notification_flags(self, event_id: str) -> int:
        count = 0
        with self.transaction():
            for guest in self.list_guests(event_id):
                guest.pairing_notification_sent = False
                count += 1
        return count

    def clear_event(self, event_id: str) -> None:
        with self.transaction():
            self.assignments.pop(event_id, None)
            venue_ids = {vid for vid, (scope, _) in self.venues.items() if scope == event_id}
            self.tables = {
                tid: t for tid, t in self.tables.items() if t.venue_id not in venue_ids
            }
            for venue_id in venue_ids:
                del self.venues[venue_id]
            self.reset_notification_flags(event_id)
