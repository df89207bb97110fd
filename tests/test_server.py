"""Tests for the JSON API."""

import pytest
from fastapi.testclient import TestClient

from etell.server import create_app
from etell.utils.validate import FloorLayout, Room, Sample, Session


def _samples(n=3):
    names = ["Living Room", "Main Hallway", "Bedroom", "Kitchen"]
    signals = [0.9, 0.35, 0.1, 0.75]
    return [
        Sample(name=names[i], position=(37.7749 + i * 1e-4, -122.4194), signal_strength=signals[i])
        for i in range(n)
    ]


@pytest.fixture()
def client(tmp_path):
    return TestClient(create_app(str(tmp_path / "etell.sqlite")))


def _upload(client, session):
    resp = client.post("/api/sessions", json=session.model_dump(mode="json"))
    assert resp.status_code == 201
    return resp.json()["id"]


def test_status(client):
    assert client.get("/api/status").json() == {"status": "ok"}


def test_session_round_trip(client):
    session = Session(samples=_samples(4))
    session_id = _upload(client, session)
    assert session_id == session.id

    listed = client.get("/api/sessions").json()
    assert [s["id"] for s in listed] == [session.id]
    assert listed[0]["n_samples"] == 4

    stored = client.get(f"/api/sessions/{session_id}").json()
    assert [s["name"] for s in stored["samples"]] == ["Living Room", "Main Hallway", "Bedroom", "Kitchen"]


def test_session_placement(client):
    session_id = _upload(client, Session(samples=_samples(4)))
    body = client.get(f"/api/sessions/{session_id}/placement").json()
    assert body["status"] == "ok"
    assert body["coverage"]["total"] == 4
    recs = body["extender_recommendations"]
    assert [r["location"] for r in recs] == ["Main Hallway", "Bedroom"]
    assert {r["anchor"] for r in recs} <= {"Living Room", "Kitchen"}


def test_session_layout_and_advice(client):
    session_id = _upload(client, Session(samples=_samples(4)))
    layout = client.get(f"/api/sessions/{session_id}/layout").json()
    assert layout["router_recommendations"][0]["floor"] == 1
    assert layout["coverage"]["total"] == 4

    advice = client.get(f"/api/sessions/{session_id}/advice").json()
    assert [a["name"] for a in advice["locations"]][0] == "Living Room"
    assert advice["setup"] == []


def test_unknown_session_is_404(client):
    resp = client.get("/api/sessions/missing/placement")
    assert resp.status_code == 404
    body = resp.json()
    assert body["error"] == "SessionNotFoundError"
    assert body["details"] == {"session_id": "missing"}


def test_post_placement_insufficient(client):
    samples = [s.model_dump(mode="json") for s in _samples(2)]
    body = client.post("/api/placement", json=samples).json()
    assert body["status"] == "insufficient_data"
    assert body["sample_count"] == 2
    assert body["required"] == 3


def test_post_placement_rejects_bad_signal(client):
    sample = _samples(1)[0].model_dump(mode="json")
    sample["signal_strength"] = 1.5
    assert client.post("/api/placement", json=[sample]).status_code == 422


def test_post_layout(client):
    floor = FloorLayout(
        floor=1,
        rooms=[
            Room(id="a", name="Living Room", floor=1, signal_strength=0.8, position=(0, 0), size=(60, 60)),
            Room(id="b", name="Office", floor=1, signal_strength=0.3, position=(65, 0), size=(60, 60)),
        ],
    )
    body = client.post("/api/layout", json=[floor.model_dump(mode="json")]).json()
    assert body["router_recommendations"][0]["room"]["id"] == "a"
    ext = body["extender_recommendations"][0]
    assert ext["target_room"]["id"] == "b"
    assert ext["placement_room"]["id"] == "a"
    assert ext["recommended_position"] == [32.5, 0.0]


def test_uploading_a_session_twice_is_a_conflict(client):
    session = Session(samples=_samples(3))
    _upload(client, session)
    resp = client.post("/api/sessions", json=session.model_dump(mode="json"))
    assert resp.status_code == 409
    body = resp.json()
    assert body["error"] == "SessionExistsError"
    assert body["details"] == {"session_id": session.id}
    assert len(client.get("/api/sessions").json()) == 1


def test_duplicate_sample_ids_are_rejected(client):
    session = Session(samples=_samples(2)).model_dump(mode="json")
    session["samples"].append(dict(session["samples"][0]))
    assert client.post("/api/sessions", json=session).status_code == 422


def test_post_layout_rejects_room_from_another_floor(client):
    floor = FloorLayout(floor=1).model_dump(mode="json")
    room = Room(id="loft", name="Loft", floor=2, signal_strength=0.5, position=(0, 0))
    floor["rooms"] = [room.model_dump(mode="json")]
    assert client.post("/api/layout", json=[floor]).status_code == 422
