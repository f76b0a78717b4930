from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from dinner_groups.store import InMemoryPairingStore
from dinner_groups.web import create_app
from tests.utils import guest


def _client(count=12, event_id="evt"):
    store = InMemoryPairingStore()
    for i in range(count):
        store.add_guest(
            guest(
                f"g{i:02d}",
                event_id=event_id,
                gender="male" if i % 2 == 0 else "female",
                age=30,
                personality={"dinnerVibe": "adapting"},
            )
        )
    app = create_app(store)
    return app.test_client(), store


def test_roster_endpoint():
    client, _ = _client(4)
    resp = client.get("/events/evt/roster")
    assert resp.status_code == 200
    body = resp.get_json()
    assert [p["id"] for p in body["participants"]] == ["g00", "g01", "g02", "g03"]
    assert body["participants"][0]["category"] == "Free Spirits"


def test_generate_and_distribute():
    client, store = _client(12)

    resp = client.post("/events/evt/groups", json={"target_size": 6})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "strict"
    assert [g["size"] for g in body["groups"]] == [6, 6]
    assert body["rationales"]["Group 1"]["g00"] == "Seed participant"

    resp = client.post(
        "/events/evt/distribute",
        json={"groups": body["groups"], "venues": [{"name": "Bistro", "capacity": 12}]},
    )
    assert resp.status_code == 200
    summary = resp.get_json()["summary"]
    assert summary["total_tables"] == 2
    assert summary["total_guests"] == 12

    resp = client.get("/events/evt/assignments")
    assignments = resp.get_json()["assignments"]
    assert len(assignments) == 12
    assert {a["seat_number"] for a in assignments} == {1, 2, 3, 4, 5, 6}

    resp = client.delete("/events/evt/assignments")
    assert resp.status_code == 200
    assert store.list_assignments("evt") == []
    assert store.list_venues("evt") == []


def test_generate_with_too_few_participants():
    client, _ = _client(2)
    resp = client.post("/events/evt/groups")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "insufficient_participants"
    assert body["groups"] == []


def test_distribute_errors():
    client, _ = _client(6)
    groups = client.post("/events/evt/groups").get_json()["groups"]

    resp = client.post(
        "/events/evt/distribute",
        json={"groups": groups, "venues": [{"name": "Nook", "capacity": 4}]},
    )
    assert resp.status_code == 422
    assert resp.get_json()["type"] == "CapacityShortfallError"

    resp = client.post("/events/evt/distribute", json={"groups": groups, "venues": []})
    assert resp.status_code == 422

    resp = client.post("/events/evt/distribute", json={"groups": [], "venues": [{"name": "A", "capacity": 9}]})
    assert resp.status_code == 400

    resp = client.post("/events/evt/distribute", json={"groups": groups, "venues": "nope"})
    assert resp.status_code == 400


def test_bad_target_size_is_client_error():
    client, _ = _client(12)
    resp = client.post("/events/evt/groups", json={"target_size": 8})
    assert resp.status_code == 400
    assert resp.get_json()["type"] == "RosterError"


def test_recompute_endpoint():
    client, _ = _client(0)
    payload = {
        "groups": [
            {
                "name": "Group 1",
                "participants": [
                    {"id": "a", "gender": "male", "age": 25},
                    {"id": "b", "gender": "male", "age": 40},
                    {"id": "c", "gender": "female"},
                    {"id": "d", "gender": "male"},
                ],
            }
        ],
        "constraints": [["a", "b"]],
    }
    resp = client.post("/groups/recompute", json=payload)
    assert resp.status_code == 200
    group = resp.get_json()["groups"][0]
    assert group["size"] == 4
    assert group["average_age"] == 33
    assert "Avoid pair a/b shares this group" in group["warnings"]
    assert "Gender balance violated (3M/1F)" in group["warnings"]


def test_unknown_route_is_404():
    client, _ = _client(0)
    assert client.get("/nowhere").status_code == 404
