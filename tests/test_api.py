"""Tests for the HTTP surface over the scheduling service."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from timetable.main import app, session_store
from timetable.domain.models import Weekday


@pytest.fixture()
def api_client():
    session_store.clear()
    client = TestClient(app)
    yield client
    session_store.clear()


def _payload(**overrides) -> dict:
    body = {
        "subject": "Physics",
        "start_time": "09:00",
        "end_time": "10:00",
        "room": "Lab 3",
        "instructor": "Ms. Sara",
        "grade": "9th",
        "lecture_number": "2",
    }
    body.update(overrides)
    return body


def test_health(api_client: TestClient):
    resp = api_client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_create_and_read_day(api_client: TestClient):
    resp = api_client.post("/timetable/Monday", json=_payload())
    assert resp.status_code == 201
    body = resp.json()
    assert body["admitted_count"] == 1
    session_id = body["outcomes"][0]["session"]["id"]

    day = api_client.get("/timetable/monday").json()
    assert day["day"] == "Monday"
    assert [s["id"] for s in day["sessions"]] == [session_id]
    assert day["sessions"][0]["start_time"] == "09:00:00"


def test_conflicting_create_returns_409(api_client: TestClient):
    api_client.post("/timetable/Monday", json=_payload())

    resp = api_client.post(
        "/timetable/Monday",
        json=_payload(grade="10th", start_time="09:30", end_time="10:30"),
    )

    assert resp.status_code == 409
    detail = resp.json()["detail"]
    assert detail["conflict"]["kind"] == "instructor_conflict"
    assert detail["message"].startswith("In Monday: Instructor Ms. Sara")
    assert len(session_store.load_day(Weekday.MONDAY)) == 1


def test_all_days_reports_per_day_outcomes(api_client: TestClient):
    api_client.post("/timetable/Tuesday", json=_payload())

    resp = api_client.post("/timetable/All", json=_payload(grade="2nd Year"))

    assert resp.status_code == 201
    body = resp.json()
    assert body["admitted_count"] == 5
    assert body["rejected_count"] == 1
    rejected = [o for o in body["outcomes"] if not o["admitted"]]
    assert rejected[0]["day"] == "Tuesday"

    week = api_client.get("/timetable").json()
    assert [d["day"] for d in week] == [d.value for d in Weekday]


def test_invalid_session_returns_422(api_client: TestClient):
    resp = api_client.post(
        "/timetable/Monday", json=_payload(start_time="11:00", end_time="10:00")
    )
    assert resp.status_code == 422
    assert "end_time must be after start_time" in resp.json()["errors"]


def test_timezone_aware_times_return_422(api_client: TestClient):
    api_client.post("/timetable/Monday", json=_payload())

    offset = api_client.post(
        "/timetable/Monday",
        json=_payload(grade="10th", start_time="09:30+05:00", end_time="10:30+05:00"),
    )
    utc = api_client.post(
        "/timetable/Tuesday", json=_payload(start_time="09:30Z", end_time="10:30")
    )

    assert offset.status_code == 422
    assert utc.status_code == 422
    assert len(session_store.load_day(Weekday.MONDAY)) == 1
    assert session_store.load_day(Weekday.TUESDAY) == []


def test_day_lists_unreadable_records(api_client: TestClient):
    session_store._write_document(
        Weekday.MONDAY, {"day": "Monday", "classes": [{"id": "1", "time": 930}]}
    )

    day = api_client.get("/timetable/Monday").json()
    assert day["sessions"] == []
    assert [u["id"] for u in day["unreadable"]] == ["1"]

    assert api_client.delete("/timetable/Monday/sessions/1").status_code == 204
    assert api_client.get("/timetable/Monday").json()["unreadable"] == []


def test_unknown_day_returns_404(api_client: TestClient):
    assert api_client.post("/timetable/Sunday", json=_payload()).status_code == 404
    assert api_client.get("/timetable/Funday").status_code == 404


def test_edit_and_delete(api_client: TestClient):
    created = api_client.post("/timetable/Monday", json=_payload()).json()
    session_id = created["outcomes"][0]["session"]["id"]

    resp = api_client.put(
        f"/timetable/Thursday/sessions/{session_id}",
        params={"original_day": "Monday", "move_across_days": "true"},
        json=_payload(room="Room 9"),
    )
    assert resp.status_code == 200
    assert resp.json()["id"] == session_id
    assert resp.json()["room"] == "Room 9"
    assert session_store.load_day(Weekday.MONDAY) == []

    resp = api_client.delete(f"/timetable/Thursday/sessions/{session_id}")
    assert resp.status_code == 204
    assert session_store.load_day(Weekday.THURSDAY) == []

    # Deleting again is a no-op.
    assert api_client.delete(f"/timetable/Thursday/sessions/{session_id}").status_code == 204


def test_edit_into_conflict_returns_409(api_client: TestClient):
    api_client.post("/timetable/Monday", json=_payload())
    other = api_client.post(
        "/timetable/Monday",
        json=_payload(instructor="Mr. Khan", start_time="10:00", end_time="11:00"),
    ).json()["outcomes"][0]["session"]

    resp = api_client.put(
        f"/timetable/Monday/sessions/{other['id']}",
        json=_payload(instructor="Mr. Khan", start_time="09:30", end_time="10:30"),
    )

    assert resp.status_code == 409
    assert resp.json()["detail"]["conflict"]["kind"] == "grade_conflict"


def test_grade_view_and_instructors(api_client: TestClient):
    api_client.post("/timetable/Friday", json=_payload())
    api_client.post(
        "/timetable/Monday",
        json=_payload(instructor="Mr. Khan", subject="Urdu", start_time="12:00", end_time="13:00"),
    )
    api_client.post("/timetable/Monday", json=_payload(grade="10th", instructor="Dr. Ali"))

    resp = api_client.get("/grades/9th/timetable")
    assert resp.status_code == 200
    assert [(e["day"], e["session"]["subject"]) for e in resp.json()] == [
        ("Monday", "Urdu"),
        ("Friday", "Physics"),
    ]

    resp = api_client.get("/grades/9th/timetable", params={"instructor": "Ms. Sara"})
    assert [e["day"] for e in resp.json()] == ["Friday"]

    assert api_client.get("/instructors").json() == ["Dr. Ali", "Mr. Khan", "Ms. Sara"]
