import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dinner_groups.engine.roster import build_roster, import_bookings_as_guests
from dinner_groups.errors import RosterError
from dinner_groups.models import Category
from dinner_groups.models.records import BookingRecord
from dinner_groups.store import InMemoryPairingStore
from tests.utils import guest


def _booking(user_id, status="confirmed", answers=None, **profile):
    return BookingRecord(
        user_id=user_id,
        event_id="evt",
        status=status,
        email=f"{user_id}@example.com",
        profile=profile,
        assessment_answers=answers,
    )


def test_roster_from_guests():
    store = InMemoryPairingStore()
    store.add_guest(guest("g1", age=30, gender="female", personality={"dinnerVibe": "observing", "wardrobeStyle": "timeless"}))
    store.add_guest(guest("g2", age=31, gender="male"))
    store.add_guest(guest("g3", event_id="other"))

    roster = build_roster(store, "evt")

    assert [p.id for p in roster] == ["g1", "g2"]
    assert roster[0].category is Category.PLANNERS
    assert roster[0].gender == "female"
    # no personality data
    assert roster[1].category is Category.FREE_SPIRITS


def test_roster_ignores_unreadable_personality(caplog):
    store = InMemoryPairingStore()
    store.add_guest(guest("g1", personality="not-a-mapping"))
    roster = build_roster(store, "evt")
    assert roster[0].category is Category.FREE_SPIRITS
    assert "unreadable personality" in caplog.text


def test_roster_falls_back_to_confirmed_bookings():
    store = InMemoryPairingStore()
    store.add_booking(
        _booking(
            "u1",
            answers={"dinnerVibe": "steering", "spending": "1500+"},
            age=28,
            gender="Male",
            relationshipStatus="single",
            firstName="Sam",
            lastName="Tes",
        )
    )
    store.add_booking(_booking("u2"))
    store.add_booking(_booking("u3", status="cancelled"))

    roster = build_roster(store, "evt")

    assert [p.id for p in roster] == ["u1", "u2"]
    assert roster[0].category is Category.STORYTELLERS
    assert roster[0].name == "Sam Tes"
    assert roster[0].age == 28
    assert roster[0].gender == "male"
    assert roster[0].budget_band == "1500+"
    assert roster[0].relationship_status == "single"
    assert roster[1].category is Category.FREE_SPIRITS


def test_roster_rejects_duplicate_ids():
    store = InMemoryPairingStore()
    store.add_booking(_booking("u1"))
    store.add_booking(_booking("u1"))
    with pytest.raises(RosterError):
        build_roster(store, "evt")


def test_import_bookings_as_guests_is_idempotent():
    store = InMemoryPairingStore()
    store.add_booking(_booking("u1", answers={"dinnerVibe": "adapting"}, age=33))
    store.add_booking(_booking("u2"))
    store.add_booking(_booking("u3", status="cancelled"))

    assert import_bookings_as_guests(store, "evt") == 2
    assert import_bookings_as_guests(store, "evt") == 0

    guests = store.list_guests("evt")
    assert sorted(g.user_id for g in guests) == ["u1", "u2"]
    imported = next(g for g in guests if g.user_id == "u1")
    assert imported.age == 33
    assert imported.personality == {"dinnerVibe": "adapting"}
    # seats can now be resolved by user id
    assert store.find_guest("evt", "u1") is imported
