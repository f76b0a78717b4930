"""File-backed store persisting a whole pairing state as one YAML document.

Layout::

    guests: [{id, event_id, name, email, user_id, age, gender, personality,
              pairing_notification_sent}]
    bookings: [{user_id, event_id, status, email, profile, assessment_answers}]
    constraints: [{participant_id_a, participant_id_b, reason, event_id}]
    venues: [{id, event_id, name, capacity, address, contact_info}]
    tables: [{id, venue_id, table_number, capacity}]
    assignments: {event_id: [{participant_id, venue_id, table_id, seat_number}]}

The file is rewritten atomically each time an outermost transaction commits.
"""
from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict

import yaml

from ..models.participant import AvoidConstraint
from ..models.records import BookingRecord, GuestRecord
from ..models.venue import SeatAssignment, Table, Venue
from .memory import InMemoryPairingStore

logger = logging.getLogger(__name__)


class YamlPairingStore(InMemoryPairingStore):
    def __init__(self, path: str | os.PathLike) -> None:
        super().__init__()
        self.path = Path(path)
        if self.path.exists():
            with open(self.path, "r", encoding="utf8") as handle:
                data = yaml.safe_load(handle) or {}
            if not isinstance(data, dict):
                raise ValueError(f"{self.path}: expected a mapping at the top level")
            self._load(data)

    def _load(self, data: Dict[str, Any]) -> None:
        try:
            for row in data.get("guests") or []:
                guest = GuestRecord(**row)
                guest.id, guest.event_id = str(guest.id), str(guest.event_id)
                self.guests[guest.id] = guest
            for row in data.get("bookings") or []:
                booking = BookingRecord(**row)
                booking.user_id, booking.event_id = str(booking.user_id), str(booking.event_id)
                self.bookings.append(booking)
            for row in data.get("constraints") or []:
                row = dict(row)
                event_id = row.pop("event_id", None)
                event_id = None if event_id is None else str(event_id)
                self.constraints.append(
                    (
                        event_id,
                        AvoidConstraint(
                            str(row["participant_id_a"]),
                            str(row["participant_id_b"]),
                            row.get("reason", ""),
                        ),
                    )
                )
            for row in data.get("venues") or []:
                row = dict(row)
                event_id = str(row.pop("event_id"))
                venue = Venue(**row)
                self.venues[venue.id] = (event_id, venue)
            for row in data.get("tables") or []:
                table = Table(**row)
                self.tables[table.id] = table
            for event_id, rows in (data.get("assignments") or {}).items():
                self.assignments[str(event_id)] = [SeatAssignment(**row) for row in rows]
        except (KeyError, TypeError) as exc:
            raise ValueError(f"{self.path}: malformed pairing data ({exc})") from exc

    def _dump(self) -> Dict[str, Any]:
        constraints = []
        for event_id, constraint in self.constraints:
            row = asdict(constraint)
            row["event_id"] = event_id
            constraints.append(row)
        venues = []
        for event_id, venue in self.venues.values():
            row = asdict(venue)
            row["event_id"] = event_id
            venues.append(row)
        return {
            "guests": [asdict(g) for g in self.guests.values()],
            "bookings": [asdict(b) for b in self.bookings],
            "constraints": constraints,
            "venues": venues,
            "tables": [asdict(t) for t in self.tables.values()],
            "assignments": {
                event_id: [asdict(a) for a in rows]
                for event_id, rows in self.assignments.items()
            },
        }

    def _commit(self) -> None:
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=".pairing-", suffix=".yaml", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf8") as handle:
                yaml.safe_dump(self._dump(), handle, sort_keys=False, allow_unicode=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.debug("Saved pairing state to %s", self.path)
