from __future__ import annotations

from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Iterator, List, Optional

from ..models.participant import AvoidConstraint
from ..models.records import BookingRecord, GuestRecord
from ..models.venue import SeatAssignment, Table, Venue


class PairingStore(ABC):
    """Persistence collaborator used by the matching pipeline.

    Writes made inside :meth:`transaction` are all-or-nothing.
    """

    # guests and bookings
    @abstractmethod
    def add_guest(self, guest: GuestRecord) -> GuestRecord:
        """Store a guest record."""

    @abstractmethod
    def list_guests(self, event_id: str) -> List[GuestRecord]:
        """Return the guests of an event in insertion order."""

    @abstractmethod
    def find_guest(self, event_id: str, participant_id: str) -> Optional[GuestRecord]:
        """Find a guest by guest id or linked user id."""

    @abstractmethod
    def add_booking(self, booking: BookingRecord) -> BookingRecord:
        """Store a booking."""

    @abstractmethod
    def list_bookings(self, event_id: str) -> List[BookingRecord]:
        """Return every booking of an event, whatever its status."""

    # constraints
    @abstractmethod
    def add_constraint(self, constraint: AvoidConstraint, event_id: Optional[str] = None) -> None:
        """Store an avoid constraint, global when ``event_id`` is ``None``."""

    @abstractmethod
    def list_avoid_constraints(self, event_id: str) -> List[AvoidConstraint]:
        """Return global constraints plus those scoped to ``event_id``."""

    # venues, tables, assignments
    @abstractmethod
    def get_venue(self, venue_id: str) -> Optional[Venue]:
        """Return a stored venue."""

    @abstractmethod
    def create_venue(self, event_id: str, venue: Venue) -> Venue:
        """Persist a new venue for an event and return it with its id."""

    @abstractmethod
    def list_venues(self, event_id: str) -> List[Venue]:
        """Return the venues of an event."""

    @abstractmethod
    def create_table(self, venue_id: str, table_number: int, capacity: int) -> Table:
        """Create a table at a venue."""

    @abstractmethod
    def list_tables(self, venue_id: str) -> List[Table]:
        """Return the tables of a venue ordered by table number."""

    @abstractmethod
    def add_assignment(self, event_id: str, assignment: SeatAssignment) -> None:
        """Record a seat assignment."""

    @abstractmethod
    def list_assignments(self, event_id: str) -> List[SeatAssignment]:
        """Return the seat assignments of an event."""

    @abstractmethod
    def reset_notification_flags(self, event_id: str) -> int:
        """Mark every guest of an event as not yet notified; return the count."""

    @abstractmethod
    def clear_event(self, event_id: str) -> None:
        """Delete assignments, tables and venues of an event and reset its flags."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator["PairingStore"]:
        """Group writes so they are applied together or not at all."""
