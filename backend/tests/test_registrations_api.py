"""Registration endpoints: status codes and payloads around the ledger."""
from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def full_event(client: TestClient, seed):
    """Two-slot individual event with two confirmed players and one waitlisted."""
    event = seed.event(max_participants=2)
    players = seed.players(3)
    reg_ids = []
    for p in players:
        resp = client.post("/api/registrations/player", json={"event_id": event.id, "player_id": p.id})
        assert resp.status_code == 201
        reg_ids.append(resp.json()["registration"]["id"])
    return {"event_id": event.id, "registration_ids": reg_ids, "player_ids": [p.id for p in players]}


def test_register_player_confirmed_then_waitlisted(client: TestClient, seed):
    event = seed.event(max_participants=2)
    p1, p2, p3 = seed.players(3)

    r1 = client.post("/api/registrations/player", json={"event_id": event.id, "player_id": p1.id})
    client.post("/api/registrations/player", json={"event_id": event.id, "player_id": p2.id})
    r3 = client.post("/api/registrations/player", json={"event_id": event.id, "player_id": p3.id})

    assert r1.status_code == 201
    assert r1.json()["registration"]["status"] == "Confirmed"
    assert r1.json()["message"] == "Player registered successfully"
    assert r3.status_code == 201
    assert r3.json()["registration"]["status"] == "Waitlisted"
    assert r3.json()["message"] == "Player added to waitlist"


def test_register_team(client: TestClient, seed):
    event = seed.event(is_team_based=True)
    team = seed.team("Falcons")

    resp = client.post("/api/registrations/team", json={"event_id": event.id, "team_id": team.id})

    assert resp.status_code == 201
    assert resp.json()["registration"]["team_id"] == team.id


def test_register_unknown_event_404(client: TestClient, seed):
    player = seed.player()
    resp = client.post("/api/registrations/player", json={"event_id": 9999, "player_id": player.id})
    assert resp.status_code == 404


def test_register_unknown_player_404(client: TestClient, seed):
    event = seed.event()

    resp = client.post("/api/registrations/player", json={"event_id": event.id, "player_id": 4242})

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Player 4242 not found"


def test_register_unknown_team_404(client: TestClient, seed):
    event = seed.event(is_team_based=True)

    resp = client.post("/api/registrations/team", json={"event_id": event.id, "team_id": 4242})

    assert resp.status_code == 404
    assert resp.json()["detail"] == "Team 4242 not found"


def test_register_duplicate_409(client: TestClient, full_event):
    resp = client.post(
        "/api/registrations/player",
        json={"event_id": full_event["event_id"], "player_id": full_event["player_ids"][0]},
    )
    assert resp.status_code == 409
    assert "already registered" in resp.json()["detail"]


def test_register_wrong_kind_400(client: TestClient, seed):
    event = seed.event(is_team_based=False)
    team = seed.team()
    resp = client.post("/api/registrations/team", json={"event_id": event.id, "team_id": team.id})
    assert resp.status_code == 400


def test_register_after_deadline_400(client: TestClient, seed):
    event = seed.event(registration_deadline=datetime.utcnow() - timedelta(days=1))
    player = seed.player()

    resp = client.post("/api/registrations/player", json={"event_id": event.id, "player_id": player.id})

    assert resp.status_code == 400
    assert "deadline" in resp.json()["detail"].lower()
    assert client.get("/api/registrations", params={"event_id": event.id}).json() == []


def test_cancel_promotes_waitlisted(client: TestClient, full_event):
    first, _, waitlisted = full_event["registration_ids"]

    resp = client.put(f"/api/registrations/{first}/cancel")

    assert resp.status_code == 200
    data = resp.json()
    assert data["cancelled"]["status"] == "Cancelled"
    assert data["promoted"]["id"] == waitlisted
    assert data["promoted"]["status"] == "Confirmed"
    assert client.get(f"/api/registrations/{waitlisted}").json()["status"] == "Confirmed"


def test_cancel_twice_409(client: TestClient, full_event):
    reg_id = full_event["registration_ids"][0]
    client.put(f"/api/registrations/{reg_id}/cancel")

    resp = client.put(f"/api/registrations/{reg_id}/cancel")

    assert resp.status_code == 409


def test_cancel_unknown_404(client: TestClient):
    assert client.put("/api/registrations/4242/cancel").status_code == 404


def test_update_payment_status(client: TestClient, full_event):
    reg_id = full_event["registration_ids"][0]

    resp = client.put(f"/api/registrations/{reg_id}", json={"payment_status": "Paid"})

    assert resp.status_code == 200
    assert resp.json()["payment_status"] == "Paid"
    assert resp.json()["status"] == "Confirmed"


def test_status_is_not_writable_through_update(client: TestClient, full_event):
    reg_id = full_event["registration_ids"][2]

    resp = client.put(f"/api/registrations/{reg_id}", json={"status": "Confirmed"})

    assert resp.status_code == 400
    assert client.get(f"/api/registrations/{reg_id}").json()["status"] == "Waitlisted"


def test_update_with_empty_body_400(client: TestClient, full_event):
    reg_id = full_event["registration_ids"][0]

    resp = client.put(f"/api/registrations/{reg_id}", json={})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "No fields to update"


def test_list_with_status_filter(client: TestClient, full_event):
    resp = client.get("/api/registrations", params={"event_id": full_event["event_id"], "status": "Waitlisted"})

    assert resp.status_code == 200
    assert [r["id"] for r in resp.json()] == [full_event["registration_ids"][2]]


def test_overview(client: TestClient, full_event):
    resp = client.get(f"/api/registrations/event/{full_event['event_id']}/overview")

    assert resp.status_code == 200
    data = resp.json()
    assert data["confirmed"] == 2
    assert data["waitlisted"] == 1
    assert data["cancelled"] == 0
    assert data["available_slots"] == 0
    assert data["max_participants"] == 2
