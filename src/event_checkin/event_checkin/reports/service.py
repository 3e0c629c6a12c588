from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus, Role
from ..events.model import Event
from ..events.registry import EventRegistry
from ..ledger.ledger import AttendanceLedger
from ..ledger.model import AttendanceRecord


@dataclass(frozen=True)
class ReportStats:
    total_attendees: int
    on_time_count: int
    late_count: int
    absent_count: int
    guest_count: int
    vip_count: int
    vip_arrived_count: int
    speaker_count: int

    def to_dict(self) -> dict:
        return {
            "totalAttendees": self.total_attendees,
            "onTimeCount": self.on_time_count,
            "lateCount": self.late_count,
            "absentCount": self.absent_count,
            "guestCount": self.guest_count,
            "vipCount": self.vip_count,
            "vipArrivedCount": self.vip_arrived_count,
            "speakerCount": self.speaker_count,
        }


@dataclass(frozen=True)
class ReportData:
    event: Event
    attendees: list[AttendanceRecord]
    absentees: list[AttendanceRecord]
    stats: ReportStats

    def to_dict(self) -> dict:
        return {
            "eventId": self.event.id,
            "eventName": self.event.name,
            "eventDate": self.event.date,
            "onTimeCutoff": self.event.on_time_cutoff,
            "attendees": [r.to_dict() for r in self.attendees],
            "absentees": [r.to_dict() for r in self.absentees],
            "stats": self.stats.to_dict(),
        }


class ReportService:
    """Read-only view over the current event's ledger; nothing is cached."""

    def __init__(self, events: EventRegistry, ledger: AttendanceLedger):
        self._events = events
        self._ledger = ledger

    def build_report(self) -> Optional[ReportData]:
        event = self._events.current()
        if event is None:
            return None
        records = self._ledger.snapshot(event.id)
        if records is None:
            return None
        return self.aggregate(event, records)

    @staticmethod
    def aggregate(event: Event, records: list[AttendanceRecord]) -> ReportData:
        attendees = [r for r in records if r.attended]
        attendees.sort(key=lambda r: r.check_in_time or "", reverse=True)

        absentees = [r for r in records if r.status == AttendanceStatus.ABSENT]
        absentees.sort(key=lambda r: r.participant_key)

        stats = ReportStats(
            total_attendees=len(attendees),
            on_time_count=sum(1 for r in attendees if r.status == AttendanceStatus.ON_TIME),
            late_count=sum(1 for r in attendees if r.status == AttendanceStatus.LATE),
            absent_count=len(absentees),
            guest_count=sum(1 for r in records if r.role == Role.GUEST),
            vip_count=sum(1 for r in records if r.role == Role.VIP),
            vip_arrived_count=sum(1 for r in attendees if r.role == Role.VIP),
            speaker_count=sum(1 for r in records if r.role == Role.SPEAKER),
        )
        return ReportData(event=event, attendees=attendees, absentees=absentees, stats=stats)
