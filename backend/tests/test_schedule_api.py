from __future__ import annotations

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from schedule_api import models, services
from schedule_api.schemas import TripListPayload

LEFT = "/api/schedule-tool"
RIGHT = "/api/schedule-tool2"


def test_healthz(client: TestClient):
    resp = client.get("/healthz")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_bare_list_round_trip_keeps_order(client: TestClient, trip):
    payload = [trip("b"), trip("a"), trip("c")]
    resp = client.post(LEFT, json=payload)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Saved"}

    listed = client.get(LEFT).json()
    assert [item["ID"] for item in listed] == ["b", "a", "c"]
    assert listed[0]["Calendar_Name"] == "Shift 08:30 - WD - LONDON (5)"


def test_left_and_right_are_independent(client: TestClient, trip):
    client.post(LEFT, json=[trip("l1")])
    client.post(RIGHT, json=[trip("r1"), trip("r2")])

    assert [item["ID"] for item in client.get(LEFT).json()] == ["l1"]
    assert [item["ID"] for item in client.get(RIGHT).json()] == ["r1", "r2"]


def test_legacy_wrapper_keys_are_accepted(client: TestClient, trip):
    for key in ("trips", "Schedule_Trips", "schedule_trips", "scheduleTrips"):
        resp = client.post(RIGHT, json={key: [trip(f"{key}-1")]})
        assert resp.status_code == 200
        assert [item["ID"] for item in client.get(RIGHT).json()] == [f"{key}-1"]


def test_missing_list_is_rejected(client: TestClient, trip):
    client.post(LEFT, json=[trip("kept")])

    resp = client.post(LEFT, json={"unexpected": []})
    assert resp.status_code == 400
    assert resp.json() == {"message": "No schedule trips found"}
    assert [item["ID"] for item in client.get(LEFT).json()] == ["kept"]


def test_post_overwrites_previous_list(client: TestClient, trip):
    client.post(LEFT, json=[trip("old-1"), trip("old-2")])
    client.post(LEFT, json=[trip("new-1")])

    assert [item["ID"] for item in client.get(LEFT).json()] == ["new-1"]


def test_preserve_drivers_keeps_stored_assignment(client: TestClient, trip):
    client.post(RIGHT, json=[trip("r1", Driver1="Alice", fromLeftIndex=3), trip("r2")])

    resp = client.post(
        RIGHT,
        json={"trips": [trip("r1", Driver1=None), trip("r3")], "preserveDrivers": True},
    )
    assert resp.status_code == 200

    listed = client.get(RIGHT).json()
    assert [item["ID"] for item in listed] == ["r1", "r3"]
    assert listed[0]["Driver1"] == "Alice"
    assert listed[0]["fromLeftIndex"] == 3
    assert listed[1]["Driver1"] is None


def test_without_preserve_drivers_assignment_is_overwritten(client: TestClient, trip):
    client.post(RIGHT, json=[trip("r1", Driver1="Alice")])
    client.post(RIGHT, json={"trips": [trip("r1", Driver1="Bob")]})

    assert client.get(RIGHT).json()[0]["Driver1"] == "Bob"


def test_left_list_does_not_preserve_drivers(client: TestClient, trip):
    client.post(LEFT, json=[trip("l1", Driver1="Alice")])
    client.post(LEFT, json={"trips": [trip("l1", Driver1="Carol")], "preserveDrivers": True})

    assert client.get(LEFT).json()[0]["Driver1"] == "Carol"


def test_ignored_calendars_are_filtered(client: TestClient, trip):
    original = client.app.state.ignored_patterns
    client.app.state.ignored_patterns = ["everyday"]
    try:
        client.post(LEFT, json=[trip("keep"), trip("drop", calendar="Shift 06:00 - EVERYDAY - MA")])
        assert [item["ID"] for item in client.get(LEFT).json()] == ["keep"]
    finally:
        client.app.state.ignored_patterns = original


def test_delete_clears_list(client: TestClient, trip):
    client.post(RIGHT, json=[trip("r1")])

    resp = client.delete(RIGHT)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Cleared"}
    assert client.get(RIGHT).json() == []


def test_unsupported_method(client: TestClient):
    assert client.put(LEFT, json=[]).status_code == 405


def test_replace_trips_skips_missing_ids_and_dedupes(session: Session, trip):
    stored = services.replace_trips(
        session,
        models.LeftScheduleTrip,
        [trip("a", Value="1"), {"Calendar_Name": "no id"}, trip("b"), trip("a", Value="2")],
        ignored_patterns=[],
    )
    assert stored == 2

    listed = services.list_trips(session, models.LeftScheduleTrip, [])
    assert [item["ID"] for item in listed] == ["a", "b"]
    assert listed[0]["Value"] == "2"


def test_payload_unwraps_in_priority_order():
    payload = TripListPayload.model_validate({"scheduleTrips": [{"ID": "x"}], "trips": [{"ID": "y"}]})
    assert payload.trips == [{"ID": "y"}]
    assert payload.preserve_drivers is False

    payload = TripListPayload.model_validate({"Schedule_Trips": "not a list", "schedule_trips": [{"ID": "z"}]})
    assert payload.trips == [{"ID": "z"}]

    assert TripListPayload.model_validate({}).trips is None
