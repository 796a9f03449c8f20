from __future__ import annotations

from datetime import datetime

import pytest

from punch_log.config import testing as testing_settings
from punch_log.container import build_container
from punch_log.main import create_app

SETTINGS = "punch_log.config.testing"


@pytest.fixture
def app(clock):
    container = build_container(testing_settings, clock=clock)
    app = create_app(SETTINGS, container=container)
    yield app
    app.extensions["punch_log"]["runner"].stop()


@pytest.fixture
def client(app):
    return app.test_client()


def _add(client, day="2026-01-12", start="09:00:00", end="17:00:00", **extra):
    body = {"date": day, "punchIn": f"{day}T{start}", "punchOut": f"{day}T{end}", **extra}
    return client.post("/api/records", json=body)


def test_today_starts_idle(client):
    resp = client.get("/api/today")
    assert resp.status_code == 200
    today = resp.get_json()["today"]
    assert today["date"] == "2026-01-14"
    assert today["state"] == "idle"
    assert today["isWorking"] is False
    assert today["records"] == []


def test_punch_in_then_out(client, clock):
    resp = client.post("/api/punch-in", json={"notes": "morning"})
    assert resp.status_code == 200
    today = resp.get_json()["today"]
    assert today["isWorking"] is True
    assert today["currentPunchInTime"] == "2026-01-14T09:00:00"

    assert client.post("/api/punch-in").status_code == 409

    clock.set(datetime(2026, 1, 14, 17, 30))
    resp = client.post("/api/punch-out")
    today = resp.get_json()["today"]
    assert resp.status_code == 200
    assert today["isWorking"] is False
    assert today["totalHours"] == 8.5
    assert today["records"][0]["notes"] == "morning"


def test_punch_out_while_idle_is_a_conflict(client):
    resp = client.post("/api/punch-out")
    assert resp.status_code == 409
    body = resp.get_json()
    assert body["success"] is False
    assert body["error"] == "InvalidTransition"


def test_add_update_delete_record(client):
    resp = _add(client, notes="office")
    assert resp.status_code == 201
    record = resp.get_json()["record"]
    assert record["totalHours"] == 8.0

    resp = client.patch(f"/api/records/{record['id']}", json={"punchOut": "2026-01-12T13:00:00"})
    assert resp.status_code == 200
    assert resp.get_json()["record"]["totalHours"] == 4.0

    resp = client.patch(f"/api/records/{record['id']}", json={"punchOut": "2026-01-12T08:00:00"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "InvalidTimeRange"

    assert client.delete(f"/api/records/{record['id']}").status_code == 200
    assert client.get("/api/records").get_json()["records"] == []


def test_record_errors(client):
    assert client.delete("/api/records/nonexistent").status_code == 404
    assert client.patch("/api/records/nonexistent", json={"notes": "x"}).status_code == 404
    assert client.patch("/api/records/any", json={"colour": "red"}).status_code == 400
    assert client.post("/api/records", json={"date": "12/01/2026"}).status_code == 400
    assert _add(client, start="10:00:00", end="09:00:00").status_code == 400


def test_list_records_filters(client):
    _add(client, day="2026-01-12")
    _add(client, day="2026-01-13")
    _add(client, day="2026-01-05")

    by_day = client.get("/api/records?date=2026-01-13").get_json()["records"]
    assert [r["date"] for r in by_day] == ["2026-01-13"]

    by_range = client.get("/api/records?start=2026-01-12&end=2026-01-18").get_json()["records"]
    assert [r["date"] for r in by_range] == ["2026-01-12", "2026-01-13"]

    everything = client.get("/api/records").get_json()["records"]
    assert [r["date"] for r in everything] == ["2026-01-13", "2026-01-12", "2026-01-05"]

    assert client.get("/api/records?start=2026-01-18&end=2026-01-12").status_code == 400


def test_stats_and_chart(client):
    _add(client, day="2026-01-12", end="14:00:00")
    _add(client, day="2026-01-13", end="12:00:00")

    body = client.get("/api/stats?range=this_week").get_json()
    assert body["range"] == {"start": "2026-01-12", "end": "2026-01-18"}
    assert body["stats"] == {"totalHours": 8, "daysWorked": 2, "averageHoursPerDay": 4}

    custom = client.get("/api/stats?start=2026-02-01&end=2026-02-28").get_json()["stats"]
    assert custom["totalHours"] == 0
    assert client.get("/api/stats?range=fortnight").status_code == 400

    presets = client.get("/api/stats/presets").get_json()["stats"]
    assert set(presets) == {"this_week", "last_two_weeks", "this_month", "this_year"}

    week = client.get("/api/chart?granularity=week").get_json()["series"]
    assert [p["label"] for p in week] == ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    assert [p["hours"] for p in week][:2] == [5, 3]

    year = client.get("/api/chart?granularity=year&year=2026").get_json()["series"]
    assert len(year) == 12
    assert year[0] == {"label": "Jan", "hours": 8}

    assert client.get("/api/chart?granularity=decade").status_code == 400
    assert client.get("/api/chart?granularity=year&year=soon").status_code == 400


def test_export_import_and_clear(client):
    _add(client, day="2026-01-12", notes="office")
    resp = client.get("/api/export")
    assert resp.status_code == 200
    assert "attachment" in resp.headers["Content-Disposition"]
    payload = resp.get_data(as_text=True)

    assert client.delete("/api/records").status_code == 200
    assert client.get("/api/records").get_json()["records"] == []

    resp = client.post("/api/import", data=payload, content_type="application/json")
    assert resp.get_json() == {"success": True, "imported": 1}
    assert client.get("/api/records").get_json()["records"][0]["notes"] == "office"

    assert client.post("/api/import", data="not json", content_type="application/json").status_code == 400


def test_session_reset(client):
    client.post("/api/punch-in")
    assert client.post("/api/session/reset").status_code == 200
    today = client.get("/api/today").get_json()["today"]
    assert today["isWorking"] is False
    assert len(today["records"]) == 1
