from __future__ import annotations

from datetime import datetime

import pytest

from event_checkin.checkins.repository import CheckInLog
from event_checkin.events.registry import EventRegistry
from event_checkin.ledger.ledger import AttendanceLedger
from event_checkin.roster.file_roster_repository import FileRosterRepository
from event_checkin.roster.model import GuestProfile, RosterProfile


class RecordingObserver:
    """Observer that keeps every frame it was sent."""

    def __init__(self, *, is_open: bool = True, fail: bool = False):
        self.messages: list[str] = []
        self._open = is_open
        self._fail = fail

    @property
    def is_open(self) -> bool:
        return self._open

    def send_text(self, text: str) -> None:
        if self._fail:
            raise ConnectionError("client went away")
        self.messages.append(text)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2025, 1, 1, 6, 30, 0)


@pytest.fixture
def roster() -> FileRosterRepository:
    return FileRosterRepository(
        profiles=[
            RosterProfile(name="Alice", domain="Accounting", membership_id="M001"),
            RosterProfile(name="Bob", domain="Architecture, Interior", membership_id="M002"),
        ]
    )


@pytest.fixture
def invited_roster() -> FileRosterRepository:
    return FileRosterRepository(
        profiles=[
            RosterProfile(name="Alice", domain="Accounting", membership_id="M001"),
            RosterProfile(name="Bob", domain="Architecture, Interior", membership_id="M002"),
            RosterProfile(name="Dave", domain="Design", participant_type="Guest", referrer="Alice"),
        ],
        guests=[GuestProfile(name="Yan", profession="Insurance", referrer="Bob", source="guests.csv")],
    )


@pytest.fixture
def events() -> EventRegistry:
    return EventRegistry()


@pytest.fixture
def ledger(events) -> AttendanceLedger:
    return AttendanceLedger(events, shards=4)


@pytest.fixture
def checkin_log() -> CheckInLog:
    return CheckInLog()


@pytest.fixture
def make_observer():
    return RecordingObserver
