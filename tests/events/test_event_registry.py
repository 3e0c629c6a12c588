from __future__ import annotations

import threading
from datetime import datetime

import pytest

from event_checkin.core.exceptions import ValidationError
from event_checkin.events.model import NewEvent
from event_checkin.events.registry import EventRegistry

NOW = datetime(2025, 1, 1, 6, 0)


def test_ids_start_at_one_and_latest_is_current(events):
    first = events.create(NewEvent(name="A", date="2025-01-01"), now=NOW)
    second = events.create(NewEvent(name="B", date="2025-01-08"), now=NOW)

    assert (first.id, second.id) == (1, 2)
    assert events.current() == second
    assert events.get(1) == first
    assert [e.id for e in events.list_all()] == [1, 2]


def test_no_current_event_when_empty(events):
    assert events.current() is None


def test_clear_all_forgets_events_but_never_reuses_ids(events):
    events.create(NewEvent(name="A", date="2025-01-01"), now=NOW)
    events.clear_all()

    assert events.current() is None
    assert events.get(1) is None
    assert events.create(NewEvent(name="B", date="2025-01-08"), now=NOW).id == 2


def test_concurrent_creates_get_distinct_ids():
    registry = EventRegistry()
    barrier = threading.Barrier(10)

    def worker():
        barrier.wait()
        registry.create(NewEvent(name="E", date="2025-01-01"), now=NOW)

    threads = [threading.Thread(target=worker) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    ids = [e.id for e in registry.list_all()]
    assert sorted(ids) == list(range(1, 11))
    assert ids == sorted(ids)


def test_new_event_from_dict_applies_defaults():
    new_event = NewEvent.from_dict({"name": "Meeting", "date": "2025-01-01", "onTimeCutoff": "07:01"})

    assert new_event.on_time_cutoff == "07:01"
    assert new_event.start_time == "07:00"


@pytest.mark.parametrize(
    "data",
    [
        {"name": "M", "date": "01/01/2025"},
        {"name": "M", "date": "2025-01-01", "onTimeCutoff": "7am"},
        {"name": "M"},
    ],
)
def test_new_event_from_dict_rejects_bad_input(data):
    with pytest.raises(ValidationError):
        NewEvent.from_dict(data)


def test_event_to_dict_uses_api_field_names(events):
    event = events.create(NewEvent(name="A", date="2025-01-01", on_time_cutoff="07:01"), now=NOW)

    d = event.to_dict()
    assert d["onTimeCutoff"] == "07:01"
    assert d["createdAt"] == "2025-01-01T06:00:00"
