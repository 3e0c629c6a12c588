from __future__ import annotations

import json
from datetime import datetime

import httpx
import pytest

from event_checkin.core.enums import Role
from event_checkin.core.exceptions import NotFoundError, ValidationError
from event_checkin.events.model import NewEvent
from event_checkin.insights.client import InsightClient
from event_checkin.insights.service import InsightService
from event_checkin.ledger.model import guest_key

NOW = datetime(2025, 1, 1, 8, 0)


@pytest.fixture
def seeded(events, ledger):
    event = events.create(NewEvent(name="M", date="2025-01-01", on_time_cutoff="07:01"), now=NOW)
    ledger.seed_event(event.id, ["Alice", "Bob"])
    ledger.update_attendance("Alice", datetime(2025, 1, 1, 6, 50))
    ledger.update_attendance(guest_key("Vera", Role.VIP), datetime(2025, 1, 1, 7, 10), Role.VIP, name="Vera")
    return event


def test_interest_insights_and_cache(events, ledger, seeded):
    svc = InsightService(events, ledger)

    response = svc.generate(seeded.id, "interest", now=NOW)

    assert response.insights[0].data_points["attended"] == 2
    assert response.insights[0].data_points["total_registered"] == 3
    assert response.insights[1].data_points["vip_count"] == 1
    assert svc.insights_for(seeded.id) == [response]


def test_target_audience_lists_on_time_names(events, ledger, seeded):
    response = InsightService(events, ledger).generate(seeded.id, "target_audience", now=NOW)

    assert response.insights[0].data_points["target_names"] == ["Alice"]


def test_unknown_analysis_type_is_rejected(events, ledger, seeded):
    with pytest.raises(ValidationError):
        InsightService(events, ledger).generate(seeded.id, "astrology", now=NOW)


def test_unknown_event_is_not_found(events, ledger):
    with pytest.raises(NotFoundError):
        InsightService(events, ledger).generate(42, "retention", now=NOW)


def test_export_ai_ready_data(events, ledger, seeded):
    data = InsightService(events, ledger).export_ai_ready_data(seeded.id, now=NOW)

    assert data["eventName"] == "M"
    assert data["summary"] == {"total": 3, "attended": 2, "onTime": 1, "late": 1, "absent": 1, "vip": 1, "guests": 0}


def test_export_unknown_event_is_none(events, ledger):
    assert InsightService(events, ledger).export_ai_ready_data(7, now=NOW) is None


def test_clear_drops_cache(events, ledger, seeded):
    svc = InsightService(events, ledger)
    svc.generate(seeded.id, "retention", now=NOW)

    svc.clear()

    assert svc.insights_for(seeded.id) == []


def _delegate(captured: dict) -> InsightClient:
    def handler(request: httpx.Request) -> httpx.Response:
        captured["prompt"] = json.loads(request.content)["messages"][-1]["content"]
        return httpx.Response(200, json={"choices": [{"message": {"content": "Call them."}}]})

    return InsightClient(
        api_key="secret",
        api_url="http://insight.test/v1/chat/completions",
        http_client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_retention_strategy_uses_ledger_rates(events, ledger, seeded):
    captured: dict = {}
    svc = InsightService(events, ledger, client=_delegate(captured))

    assert svc.retention_strategy(seeded.id) == "Call them."
    assert "Overall Attendance Rate: 66.7%" in captured["prompt"]
    assert "Late Arrival Rate: 50.0%" in captured["prompt"]
    assert "Frequently Absent Members: Bob" in captured["prompt"]


def test_retention_strategy_for_unknown_event(events, ledger):
    with pytest.raises(NotFoundError):
        InsightService(events, ledger).retention_strategy(9)


def test_guest_match_analysis_uses_guest_list(events, ledger, invited_roster):
    captured: dict = {}
    svc = InsightService(events, ledger, client=_delegate(captured), roster=invited_roster)

    result = svc.guest_match_analysis("yan")

    assert result == {"guestName": "Yan", "profession": "Insurance", "referrer": "Bob", "analysis": "Call them."}
    assert "- Profession: Insurance" in captured["prompt"]
    assert "- Accounting" in captured["prompt"]
    assert "- Design" in captured["prompt"]


def test_guest_match_analysis_needs_a_profession(events, ledger, invited_roster):
    svc = InsightService(events, ledger, roster=invited_roster)

    with pytest.raises(NotFoundError):
        svc.guest_match_analysis("Stranger")
    assert svc.guest_match_analysis("Stranger", "Law")["analysis"] == "Insight delegate not available"
