from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from ..errors import CapacityShortfallError, DistributionError, NoVenuesError, UnknownVenueError
from ..models.group import Group
from ..models.venue import SeatAssignment, Table, Venue
from ..store.base import PairingStore
from .roster import roster_ids

logger = logging.getLogger(__name__)


@dataclass
class TablePlacement:
    table: Table
    group_name: str | None
    assignments: List[SeatAssignment] = field(default_factory=list)


@dataclass
class VenuePlacement:
    venue: Venue
    tables: List[TablePlacement] = field(default_factory=list)

    @property
    def total_guests(self) -> int:
        return sum(len(t.assignments) for t in self.tables)


@dataclass
class DistributionResult:
    """Venues, tables and seats written by one distribution run."""

    venues: List[VenuePlacement] = field(default_factory=list)
    skipped_participants: List[str] = field(default_factory=list)

    @property
    def assignments(self) -> List[SeatAssignment]:
        return [a for v in self.venues for t in v.tables for a in t.assignments]

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "total_venues": len(self.venues),
            "total_tables": sum(len(v.tables) for v in self.venues),
            "total_guests": len(self.assignments),
            "skipped_participants": len(self.skipped_participants),
        }


class VenueDistributor:
    """Bin-pack groups into venues and write one table per group.

    Groups are placed largest first. Each goes to the venue with the most
    remaining seats that can still hold it; ties go to the venue listed
    first. Tables already standing at a reused venue count against its
    capacity. Every placement decision is made before anything is written,
    and an event that still has seat assignments must be cleared first.
    """

    @staticmethod
    def check_capacity(
        groups: Sequence[Group],
        venues: Sequence[Venue],
        free_seats: Optional[Sequence[int]] = None,
    ) -> None:
        if not venues:
            raise NoVenuesError("No venues provided")
        required = sum(g.size for g in groups)
        available = sum(free_seats if free_seats is not None else (v.capacity for v in venues))
        if available < required:
            raise CapacityShortfallError(
                f"Insufficient venue capacity. Need {required} seats, "
                f"but only {available} available.",
                required=required,
                available=available,
            )

    @staticmethod
    def plan(
        groups: Sequence[Group],
        venues: Sequence[Venue],
        free_seats: Optional[Sequence[int]] = None,
    ) -> List[Tuple[Group, int]]:
        """Return ``(group, venue index)`` placements without side effects.

        ``free_seats`` gives the seats still open per venue and defaults to
        each venue's full capacity.
        """
        VenueDistributor.check_capacity(groups, venues, free_seats)
        remaining = list(free_seats) if free_seats is not None else [v.capacity for v in venues]
        available = sum(remaining)
        placements: List[Tuple[Group, int]] = []
        for group in sorted(groups, key=lambda g: g.size, reverse=True):
            best = None
            for index, seats in enumerate(remaining):
                if seats >= group.size and (best is None or seats > remaining[best]):
                    best = index
            if best is None:
                required = sum(g.size for g in groups)
                raise CapacityShortfallError(
                    f"No venue has {group.size} free seats left for {group.name or 'a group'}; "
                    f"remaining capacity is {remaining}",
                    required=required,
                    available=available,
                )
            remaining[best] -= group.size
            placements.append((group, best))
        return placements

    @staticmethod
    def resolve_venues(store: PairingStore, venues: Sequence[Venue]) -> List[Venue]:
        """Swap venues given by id for their stored records."""
        resolved = []
        for venue in venues:
            if venue.id is None:
                resolved.append(venue)
                continue
            stored = store.get_venue(venue.id)
            if stored is None:
                raise UnknownVenueError(f"Unknown venue: {venue.id}")
            resolved.append(stored)
        return resolved

    @staticmethod
    def free_seats(store: PairingStore, venues: Sequence[Venue]) -> List[int]:
        """Capacity left at each venue once its existing tables are counted."""
        seats = []
        for venue in venues:
            taken = sum(t.capacity for t in store.list_tables(venue.id)) if venue.id else 0
            seats.append(max(0, venue.capacity - taken))
        return seats

    @staticmethod
    def distribute(
        store: PairingStore,
        event_id: str,
        groups: Sequence[Group],
        venues: Sequence[Venue],
    ) -> DistributionResult:
        if not groups:
            raise DistributionError("No groups to distribute")
        if store.list_assignments(event_id):
            raise DistributionError(
                f"Event {event_id} already has seat assignments; clear them before distributing again"
            )
        venues = VenueDistributor.resolve_venues(store, venues)
        placements = VenueDistributor.plan(
            groups, venues, VenueDistributor.free_seats(store, venues)
        )

        result = DistributionResult()
        with store.transaction():
            known = roster_ids(store, event_id)
            stored_venues = [
                v if v.id is not None else store.create_venue(event_id, v) for v in venues
            ]
            reset = store.reset_notification_flags(event_id)
            logger.info("Reset pairing notification flag for %d guest(s)", reset)

            for index, venue in enumerate(stored_venues):
                venue_result = VenuePlacement(venue=venue)
                table_number = len(store.list_tables(venue.id)) + 1
                for group, venue_index in placements:
                    if venue_index != index:
                        continue
                    table = store.create_table(venue.id, table_number, group.size)
                    table_result = TablePlacement(table=table, group_name=group.name)
                    seat_number = 1
                    for participant in group.participants:
                        if participant.id not in known:
                            logger.warning(
                                "Participant %s no longer exists for event %s, seat skipped",
                                participant.id,
                                event_id,
                            )
                            result.skipped_participants.append(participant.id)
                            continue
                        assignment = SeatAssignment(
                            participant_id=participant.id,
                            venue_id=venue.id,
                            table_id=table.id,
                            seat_number=seat_number,
                        )
                        store.add_assignment(event_id, assignment)
                        table_result.assignments.append(assignment)
                        seat_number += 1
                    venue_result.tables.append(table_result)
                    table_number += 1
                result.venues.append(venue_result)

        logger.info("Distribution for event %s: %s", event_id, result.summary)
        return result

    @staticmethod
    def clear(store: PairingStore, event_id: str) -> None:
        """Wipe venues, tables, assignments and notification flags of an event."""
        with store.transaction():
            store.clear_event(event_id)
        logger.info("Cleared pairing assignments for event %s", event_id)
