import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dinner_groups.engine.distribution import VenueDistributor
from dinner_groups.engine.formation import generate_groups
from dinner_groups.engine.roster import build_roster
from dinner_groups.errors import (
    CapacityShortfallError,
    DistributionError,
    NoVenuesError,
    UnknownVenueError,
)
from dinner_groups.models import Group, Venue
from dinner_groups.models.records import BookingRecord
from dinner_groups.store import InMemoryPairingStore
from tests.utils import guest, person


def _setup(sizes):
    store = InMemoryPairingStore()
    groups = []
    for index, size in enumerate(sizes):
        members = [person(f"g{index}-{seat}") for seat in range(size)]
        for member in members:
            store.add_guest(guest(member.id, pairing_notification_sent=True))
        groups.append(Group(members, name=f"Group {index + 1}"))
    return store, groups


def test_plan_places_largest_groups_first():
    _, groups = _setup([4, 6, 6])
    venues = [Venue(name="A", capacity=10), Venue(name="B", capacity=8)]
    placements = VenueDistributor.plan(groups, venues)
    assert [(g.name, v) for g, v in placements] == [
        ("Group 2", 0),
        ("Group 3", 1),
        ("Group 1", 0),
    ]


def test_plan_ties_go_to_first_venue():
    _, groups = _setup([5, 5])
    venues = [Venue(name="A", capacity=10), Venue(name="B", capacity=10)]
    placements = VenueDistributor.plan(groups, venues)
    assert [v for _, v in placements] == [0, 1]


def test_distribute_writes_tables_and_seats():
    store, groups = _setup([6, 6, 4])
    venues = [Venue(name="A", capacity=10), Venue(name="B", capacity=8)]

    result = VenueDistributor.distribute(store, "evt", groups, venues)

    assert result.summary == {
        "total_venues": 2,
        "total_tables": 3,
        "total_guests": 16,
        "skipped_participants": 0,
    }
    first, second = result.venues
    assert first.venue.name == "A"
    assert [t.group_name for t in first.tables] == ["Group 1", "Group 3"]
    assert [t.table.table_number for t in first.tables] == [1, 2]
    assert [t.table.capacity for t in first.tables] == [6, 4]
    assert first.total_guests == 10
    assert [t.group_name for t in second.tables] == ["Group 2"]
    assert second.tables[0].table.table_number == 1

    seats = [a.seat_number for a in first.tables[0].assignments]
    assert seats == [1, 2, 3, 4, 5, 6]
    assert {a.venue_id for a in first.tables[0].assignments} == {first.venue.id}

    assert len(store.list_venues("evt")) == 2
    assert len(store.list_assignments("evt")) == 16
    assert all(not g.pairing_notification_sent for g in store.list_guests("evt"))


def test_capacity_shortfall_writes_nothing():
    store, groups = _setup([6, 6])
    venues = [Venue(name="A", capacity=10)]
    with pytest.raises(CapacityShortfallError) as excinfo:
        VenueDistributor.distribute(store, "evt", groups, venues)
    assert str(excinfo.value) == "Insufficient venue capacity. Need 12 seats, but only 10 available."
    assert excinfo.value.required == 12
    assert excinfo.value.available == 10
    assert store.list_venues("evt") == []
    assert store.list_assignments("evt") == []


def test_fragmented_capacity_is_rejected_before_writing():
    store, groups = _setup([6, 6])
    venues = [Venue(name="A", capacity=7), Venue(name="B", capacity=7), Venue(name="C", capacity=3)]
    with pytest.raises(CapacityShortfallError):
        VenueDistributor.plan(groups + [Group([person("x"), person("y"), person("z"), person("w")])], venues)
    with pytest.raises(CapacityShortfallError):
        VenueDistributor.distribute(store, "evt", groups + [Group([person("x"), person("y"), person("z"), person("w")])], venues)
    assert store.list_venues("evt") == []


def test_no_venues_and_no_groups():
    store, groups = _setup([6])
    with pytest.raises(NoVenuesError):
        VenueDistributor.distribute(store, "evt", groups, [])
    with pytest.raises(DistributionError, match="No groups to distribute"):
        VenueDistributor.distribute(store, "evt", [], [Venue(name="A", capacity=10)])


def test_missing_guest_is_skipped(caplog):
    store, groups = _setup([5])
    groups[0].add_participant(person("ghost"))
    result = VenueDistributor.distribute(store, "evt", groups, [Venue(name="A", capacity=10)])
    assert result.skipped_participants == ["ghost"]
    assert [a.seat_number for a in result.assignments] == [1, 2, 3, 4, 5]
    assert "ghost" in caplog.text


def test_existing_venue_reused_by_id():
    store, groups = _setup([6])
    stored = store.create_venue("evt", Venue(name="Bistro", capacity=8))
    result = VenueDistributor.distribute(
        store, "evt", groups, [Venue(name=stored.id, capacity=0, id=stored.id)]
    )
    assert result.venues[0].venue.name == "Bistro"
    assert len(store.list_venues("evt")) == 1

    with pytest.raises(UnknownVenueError):
        VenueDistributor.distribute(store, "evt", groups, [Venue(name="x", capacity=0, id="venue-x")])


def test_clear_removes_event_seating():
    store, groups = _setup([6, 4])
    VenueDistributor.distribute(store, "evt", groups, [Venue(name="A", capacity=10)])
    VenueDistributor.clear(store, "evt")
    assert store.list_venues("evt") == []
    assert store.list_assignments("evt") == []
    assert len(store.list_guests("evt")) == 10


def test_reused_venue_counts_its_standing_tables():
    store, groups = _setup([6, 6])
    stored = store.create_venue("evt", Venue(name="Bistro", capacity=8))
    store.create_table(stored.id, 1, 6)
    fresh = Venue(name="Annex", capacity=6)

    with pytest.raises(CapacityShortfallError) as excinfo:
        VenueDistributor.distribute(
            store, "evt", groups, [Venue(name="Bistro", capacity=0, id=stored.id)]
        )
    assert excinfo.value.available == 2
    assert store.list_assignments("evt") == []

    result = VenueDistributor.distribute(
        store, "evt", groups[:1], [Venue(name="Bistro", capacity=0, id=stored.id), fresh]
    )
    placement = result.venues[1]
    assert placement.venue.name == "Annex"
    assert placement.total_guests == 6
    assert result.venues[0].tables == []
    assert len(store.list_tables(stored.id)) == 1


def test_second_run_without_clearing_is_rejected():
    store, groups = _setup([6])
    first = VenueDistributor.distribute(store, "evt", groups, [Venue(name="A", capacity=8)])
    venue_id = first.venues[0].venue.id

    with pytest.raises(DistributionError, match="clear them"):
        VenueDistributor.distribute(store, "evt", groups, [Venue(name="A", capacity=0, id=venue_id)])
    assert len(store.list_assignments("evt")) == 6

    VenueDistributor.clear(store, "evt")
    again = VenueDistributor.distribute(store, "evt", groups, [Venue(name="B", capacity=8)])
    assert again.summary["total_guests"] == 6


def test_booking_roster_is_seated():
    store = InMemoryPairingStore()
    for i in range(12):
        store.add_booking(
            BookingRecord(
                user_id=f"u{i:02d}",
                event_id="evt",
                profile={"gender": "male" if i % 2 == 0 else "female", "age": 30},
            )
        )
    store.add_booking(BookingRecord(user_id="u99", event_id="evt", status="cancelled"))

    groups = generate_groups(build_roster(store, "evt"), target_size=6).groups
    result = VenueDistributor.distribute(store, "evt", groups, [Venue(name="Hall", capacity=12)])

    assert result.skipped_participants == []
    assert result.summary["total_guests"] == 12
    assert sorted(a.participant_id for a in store.list_assignments("evt")) == [
        f"u{i:02d}" for i in range(12)
    ]


def test_guest_linked_user_id_is_seated():
    store = InMemoryPairingStore()
    members = [person(f"u{i}") for i in range(4)]
    for member in members:
        store.add_guest(guest(f"guest-{member.id}", user_id=member.id))
    result = VenueDistributor.distribute(store, "evt", [Group(members)], [Venue(name="A", capacity=4)])
    assert result.skipped_participants == []
    assert len(result.assignments) == 4
