from __future__ import annotations

import threading
from datetime import datetime

import pytest

from event_checkin.checkins.model import CheckInEntry
from event_checkin.checkins.repository import CheckInLog
from event_checkin.core.enums import ParticipantType, Role
from event_checkin.core.exceptions import DuplicateCheckInError, NotFoundError, RecordNotFoundError


def _entry(name: str, ptype: ParticipantType = ParticipantType.MEMBER) -> CheckInEntry:
    return CheckInEntry(
        name=name,
        participant_type=ptype,
        domain="",
        role=Role.MEMBER if ptype == ParticipantType.MEMBER else Role.GUEST,
        declared_timestamp="2025-01-01T06:55:00",
        received_at=datetime(2025, 1, 1, 6, 55, 1),
    )


def test_duplicate_name_and_type_is_rejected_case_insensitively(checkin_log):
    checkin_log.append(_entry("Alice"))

    with pytest.raises(DuplicateCheckInError):
        checkin_log.append(_entry("ALICE"))

    assert len(checkin_log) == 1


def test_same_name_with_other_type_is_accepted(checkin_log):
    checkin_log.append(_entry("Alice"))
    checkin_log.append(_entry("alice", ParticipantType.GUEST))

    assert [e.participant_type for e in checkin_log.list()] == [ParticipantType.MEMBER, ParticipantType.GUEST]


def test_list_keeps_insertion_order_and_is_a_copy(checkin_log):
    for name in ("C", "A", "B"):
        checkin_log.append(_entry(name))

    snapshot = checkin_log.list()
    snapshot.clear()

    assert [e.name for e in checkin_log.list()] == ["C", "A", "B"]


def test_remove_at_returns_removed_entry(checkin_log):
    checkin_log.append(_entry("A"))
    checkin_log.append(_entry("B"))

    removed = checkin_log.remove_at(0)

    assert removed.name == "A"
    assert [e.name for e in checkin_log.list()] == ["B"]


@pytest.mark.parametrize("index", [-1, 2, 99])
def test_remove_out_of_range_leaves_log_unchanged(checkin_log, index):
    checkin_log.append(_entry("A"))
    checkin_log.append(_entry("B"))
    before = checkin_log.list()

    with pytest.raises(RecordNotFoundError) as exc:
        checkin_log.remove_at(index)

    assert isinstance(exc.value, IndexError)
    assert isinstance(exc.value, NotFoundError)
    assert checkin_log.list() == before


def test_clear_empties_the_log(checkin_log):
    checkin_log.append(_entry("A"))
    checkin_log.clear()

    assert checkin_log.list() == []


def test_concurrent_duplicates_only_one_wins():
    log = CheckInLog()
    errors: list[Exception] = []
    barrier = threading.Barrier(8)

    def worker(i: int):
        barrier.wait()
        try:
            log.append(_entry("Alice" if i % 2 else "alice"))
        except DuplicateCheckInError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(log) == 1
    assert len(errors) == 7
