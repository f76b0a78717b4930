"""Build the participant roster of an event from upstream records."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping
from typing import List, Set

from ..errors import RosterError
from ..models.participant import Participant
from ..models.records import BookingRecord, GuestRecord
from ..scoring.model import default_participant, score_participant
from ..store.base import PairingStore

logger = logging.getLogger(__name__)


def participant_from_guest(guest: GuestRecord) -> Participant:
    answers = guest.personality
    if answers is not None and not isinstance(answers, Mapping):
        logger.warning("Guest %s has unreadable personality data, using default", guest.id)
        answers = None
    if not answers:
        logger.info("Guest %s has no personality data, using default", guest.name or guest.id)
        return default_participant(guest.id, age=guest.age, gender=guest.gender, name=guest.name)
    return score_participant(
        guest.id, answers, age=guest.age, gender=guest.gender, name=guest.name
    )


def participant_from_booking(booking: BookingRecord) -> Participant:
    profile = booking.profile or {}
    answers = booking.assessment_answers
    age = profile.get("age")
    gender = profile.get("gender")
    if not answers or not isinstance(answers, Mapping):
        return default_participant(
            booking.user_id, age=age, gender=gender, name=booking.display_name
        )
    return score_participant(
        booking.user_id,
        answers,
        age=age,
        gender=gender,
        relationship_status=profile.get("relationshipStatus"),
        name=booking.display_name,
    )


def build_roster(store: PairingStore, event_id: str) -> List[Participant]:
    """Return the categorized participants of ``event_id``.

    Guest records are preferred; when an event has none, confirmed bookings
    joined with profile and assessment data are used instead.
    """
    guests = store.list_guests(event_id)
    if guests:
        roster = [participant_from_guest(g) for g in guests]
        logger.info("Built roster of %d from guest records for event %s", len(roster), event_id)
    else:
        bookings = [b for b in store.list_bookings(event_id) if b.is_confirmed]
        roster = [participant_from_booking(b) for b in bookings]
        logger.info("No guests for event %s, built roster of %d from bookings", event_id, len(roster))

    ids = [p.id for p in roster]
    if len(ids) != len(set(ids)):
        raise RosterError(f"Event {event_id} has duplicate participant ids")
    return roster


def roster_ids(store: PairingStore, event_id: str) -> Set[str]:
    """Participant ids that may be seated for ``event_id``.

    Follows the same source choice as :func:`build_roster`. Guests answer
    to their own id and to their linked user id.
    """
    guests = store.list_guests(event_id)
    if guests:
        ids = {g.id for g in guests}
        ids.update(g.user_id for g in guests if g.user_id)
        return ids
    return {b.user_id for b in store.list_bookings(event_id) if b.is_confirmed}


def import_bookings_as_guests(store: PairingStore, event_id: str) -> int:
    """Create guest records for confirmed bookings not imported yet."""
    known = {g.user_id for g in store.list_guests(event_id) if g.user_id}
    imported = 0
    with store.transaction():
        for booking in store.list_bookings(event_id):
            if not booking.is_confirmed or booking.user_id in known:
                continue
            profile = booking.profile or {}
            store.add_guest(
                GuestRecord(
                    id=uuid.uuid4().hex,
                    event_id=event_id,
                    name=booking.display_name,
                    email=booking.email or None,
                    user_id=booking.user_id,
                    age=profile.get("age"),
                    gender=profile.get("gender"),
                    personality=booking.assessment_answers,
                )
            )
            known.add(booking.user_id)
            imported += 1
    logger.info("Imported %d booking(s) as guests for event %s", imported, event_id)
    return imported
