from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Venue:
    """A restaurant (or any location) with a fixed number of seats.

    ``id`` is ``None`` for a venue that still has to be created.
    """

    name: str
    capacity: int
    id: Optional[str] = None
    address: Optional[str] = None
    contact_info: Optional[str] = None

    def __post_init__(self) -> None:
        if self.capacity < 0:
            raise ValueError("Venue capacity must be non-negative")
        self.name = self.name.strip()


@dataclass
class Table:
    id: str
    venue_id: str
    table_number: int
    capacity: int


@dataclass(frozen=True)
class SeatAssignment:
    participant_id: str
    venue_id: str
    table_id: str
    seat_number: int
