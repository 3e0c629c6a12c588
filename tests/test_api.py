from __future__ import annotations

from datetime import datetime

import httpx
import pytest

from event_checkin.config import testing as testing_settings
from event_checkin.container import build_container
from event_checkin.main import create_app

NOW = datetime(2025, 1, 1, 6, 30)


def _chat_reply(request: httpx.Request) -> httpx.Response:
    content = '{"matches": [{"name": "Alice", "reason": "both in finance", "score": 0.8}]}'
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


@pytest.fixture
def container(roster):
    return build_container(settings=testing_settings, roster=roster, clock=lambda: NOW)


@pytest.fixture
def client(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    app = create_app(container=container)
    return app.test_client()


@pytest.fixture
def invited_client(monkeypatch, invited_roster):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_container(settings=testing_settings, roster=invited_roster, clock=lambda: NOW)
    return create_app(container=container).test_client()


def _create_event(client):
    return client.post("/api/events", json={"name": "Weekly", "date": "2025-01-01", "onTimeCutoff": "07:01"})


def test_full_meeting_flow(client):
    created = _create_event(client)
    assert created.status_code == 200
    assert created.get_json()["event"]["id"] == 1

    r1 = client.post("/api/checkin", json={"name": "Alice", "type": "member", "currentTime": "2025-01-01T06:55:00"})
    r2 = client.post("/api/checkin", json={"name": "Bob", "type": "member", "currentTime": "2025-01-01T07:10:00"})
    assert r1.get_json() == {"status": "success", "message": "Check-in successful"}
    assert r2.status_code == 200

    stats = client.get("/api/report").get_json()["stats"]
    assert (stats["onTimeCount"], stats["lateCount"], stats["absentCount"]) == (1, 1, 0)
    assert len(client.get("/api/records").get_json()["records"]) == 2


def test_duplicate_and_invalid_type_are_bad_requests(client):
    body = {"name": "Alice", "type": "member", "currentTime": "2025-01-01T06:55:00"}
    client.post("/api/checkin", json=body)

    dup = client.post("/api/checkin", json=body)
    bad = client.post("/api/checkin", json={"name": "Zed", "type": "robot"})

    assert dup.status_code == 400
    assert dup.get_json()["status"] == "error"
    assert bad.status_code == 400
    assert bad.get_json()["message"] == "Invalid user type"


def test_non_json_body_is_bad_request(client):
    resp = client.post("/api/checkin", data="nope", content_type="text/plain")

    assert resp.status_code == 400


def test_report_and_current_event_without_event_are_404(client):
    assert client.get("/api/report").status_code == 404
    assert client.get("/api/events/current").status_code == 404


def test_invalid_event_date_is_bad_request(client):
    resp = client.post("/api/events", json={"name": "Weekly", "date": "01/01/2025"})

    assert resp.status_code == 400


def test_delete_record_out_of_range_is_404(client):
    client.post("/api/checkin", json={"name": "Alice", "type": "member", "currentTime": "2025-01-01T06:55:00"})

    assert client.delete("/api/records/3").status_code == 404
    assert client.delete("/api/records/-1").status_code == 404
    assert client.delete("/api/records/0").status_code == 200
    assert client.get("/api/records").get_json()["records"] == []


def test_clear_all_then_report_is_404_and_ids_keep_growing(client):
    _create_event(client)

    assert client.delete("/api/events/clear-all").status_code == 200
    assert client.get("/api/report").status_code == 404
    assert _create_event(client).get_json()["event"]["id"] == 2


def test_export_is_csv_with_bom(client):
    _create_event(client)
    client.post("/api/checkin", json={"name": "Alice", "type": "member", "currentTime": "2025-01-01T06:55:00"})
    client.post(
        "/api/checkin",
        json={"name": "Vera", "type": "guest", "role": "VIP", "currentTime": "2025-01-01T07:05:00"},
    )

    resp = client.get("/api/export")

    assert resp.mimetype == "text/csv"
    assert "attachment" in resp.headers["Content-Disposition"]
    assert resp.data.startswith(b"\xef\xbb\xbf")
    text = resp.data.decode("utf-8-sig")
    assert text.splitlines()[0] == "name,domain,category,status,check-in-time"
    assert "Alice,Accounting" in text
    assert "Vera" in text and "late" in text


def test_members_and_qr(client):
    members = client.get("/api/members").get_json()["members"]

    assert members == [
        {"name": "Alice", "domain": "Accounting"},
        {"name": "Bob", "domain": "Architecture, Interior"},
    ]
    png = client.get("/api/members/Alice/qr")
    assert png.mimetype == "image/png"
    assert client.get("/api/members/Nobody/qr").status_code == 404


def test_qr_scan_and_history_endpoints(client):
    payload = '{"type": "member", "name": "Bob", "time": "2025-01-01T06:40:00", "membershipId": "M002"}'

    resp = client.post("/api/attendance/scan", json={"qrPayload": payload})

    assert resp.status_code == 200
    assert client.get("/api/attendance/member?name=bo").get_json()[0]["status"] == "Present"
    assert client.get("/api/attendance/event?date=2025-01-01").get_json()[0]["memberName"] == "Bob"
    assert client.post("/api/attendance/scan", json={"qrPayload": "{garbage"}).status_code == 400


def test_insights_endpoints(client):
    _create_event(client)

    generated = client.post("/api/insights/generate", json={"eventId": 1, "analysisType": "interest"})
    assert generated.status_code == 200
    assert generated.get_json()["analysisType"] == "interest"
    assert len(client.get("/api/insights/1").get_json()) == 1

    assert client.post("/api/insights/generate", json={"eventId": 1, "analysisType": "nope"}).status_code == 400
    assert client.post("/api/insights/generate", json={"eventId": 9, "analysisType": "interest"}).status_code == 404

    exported = client.get("/api/insights/data-export/1").get_json()
    assert exported["summary"]["absent"] == 2
    missing = client.get("/api/insights/data-export/9")
    assert missing.status_code == 404
    assert missing.get_json() == {"error": "Event not found"}


def test_matching_without_api_key_reports_error_provider(client):
    resp = client.post("/api/matching/members", json={"name": "Zed", "profile": "Lawyer"})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["provider"] == "error"
    assert "error" in body["matches"]


def test_matching_with_configured_delegate(monkeypatch, roster):
    monkeypatch.setenv("APP_ENV", "testing")
    monkeypatch.setattr(testing_settings, "INSIGHT_API_KEY", "secret")
    container = build_container(
        settings=testing_settings,
        roster=roster,
        http_client=httpx.Client(transport=httpx.MockTransport(_chat_reply)),
        clock=lambda: NOW,
    )
    client = create_app(container=container).test_client()

    body = client.post("/api/matching/members", json={"name": "Zed", "profile": "Banker"}).get_json()

    assert body["provider"] == "test-model"
    assert body["matches"]["matches"][0]["name"] == "Alice"


def test_matching_health(client):
    body = client.get("/api/matching/health").get_json()

    assert body["status"] == "ok"
    assert body["service"] == "matching"


def test_member_without_membership_id_qr_is_404(invited_client):
    resp = invited_client.get("/api/members/Dave/qr")

    assert resp.status_code == 404
    assert resp.get_json()["status"] == "error"


def test_guest_list_and_event_listing(invited_client):
    _create_event(invited_client)
    _create_event(invited_client)

    listing = invited_client.get("/api/guests").get_json()
    events = invited_client.get("/api/events").get_json()["events"]

    assert [g["name"] for g in listing["guests"]] == ["Yan"]
    assert listing["files"] == []
    assert [e["id"] for e in events] == [1, 2]


def test_guest_analysis_route(invited_client):
    known = invited_client.post("/api/matching/guest-analysis", json={"guestName": "Yan"})
    unknown = invited_client.post("/api/matching/guest-analysis", json={"guestName": "Stranger"})
    missing = invited_client.post("/api/matching/guest-analysis", json={})

    assert known.status_code == 200
    assert known.get_json()["profession"] == "Insurance"
    assert "not configured" in known.get_json()["analysis"]
    assert unknown.status_code == 404
    assert missing.status_code == 400


def test_retention_strategy_route(client):
    _create_event(client)

    ok = client.get("/api/insights/1/retention-strategy")

    assert ok.status_code == 200
    assert ok.get_json()["eventId"] == 1
    assert "not configured" in ok.get_json()["strategy"]
    assert client.get("/api/insights/9/retention-strategy").status_code == 404
