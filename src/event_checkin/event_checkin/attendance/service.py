from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..checkins.model import CheckInEntry, CheckInRequest, GuestCheckIn, MemberQRData
from ..checkins.qr import build_member_qr_payload, parse_qr_payload, render_qr_png
from ..checkins.repository import CheckInLog
from ..common.datetime_utils import now_local, parse_client_timestamp
from ..core.constants import SCAN_EVENT_NAME, SCAN_STATUS_PRESENT
from ..core.enums import ChangeType, ParticipantType, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..events.model import Event, NewEvent
from ..events.registry import EventRegistry
from ..history.model import EventAttendance, MemberAttendance
from ..history.repository import ScanHistory
from ..insights.service import InsightService
from ..ledger.ledger import AttendanceLedger
from ..ledger.model import guest_key
from ..notifications.notifier import ChangeNotifier
from ..reports.export import CsvExportService
from ..reports.service import ReportData, ReportService
from ..roster.repository import RosterRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Check-in workflow over the log, the registry, the ledger and the notifier.

    A check-in runs strictly as: duplicate check + log append, ledger
    update, broadcast. Anyone who sees the broadcast can already read the
    new log entry and ledger record.
    """

    def __init__(
        self,
        roster: RosterRepository,
        log: CheckInLog,
        events: EventRegistry,
        ledger: AttendanceLedger,
        notifier: ChangeNotifier,
        *,
        history: ScanHistory | None = None,
        insights: InsightService | None = None,
        reports: ReportService | None = None,
        exporter: CsvExportService | None = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._roster = roster
        self._log = log
        self._events = events
        self._ledger = ledger
        self._notifier = notifier
        self._history = history or ScanHistory()
        self._insights = insights
        self._reports = reports or ReportService(events, ledger)
        self._exporter = exporter or CsvExportService(roster)
        self._clock = clock

    def record_check_in(self, request: CheckInRequest, *, now: datetime | None = None) -> str:
        now = now or self._clock()

        profile = self._roster.lookup(request.name) if request.type == ParticipantType.MEMBER else None
        guest = self._roster.lookup_guest(request.name) if request.type == ParticipantType.GUEST else None
        domain = request.domain
        if not domain and profile:
            domain = profile.domain
        elif not domain and guest:
            domain = guest.profession

        if isinstance(request, GuestCheckIn):
            role = request.resolved_role
            # Invited guests inherit the referrer from the guest list
            referrer = request.referrer or (guest.referrer if guest else None) or None
        else:
            role = Role.MEMBER
            referrer = None

        entry = CheckInEntry(
            name=request.name,
            participant_type=request.type,
            domain=domain,
            role=role,
            declared_timestamp=request.current_time,
            received_at=now,
            tags=frozenset(request.tags),
            referrer=referrer,
        )
        self._log.append(entry)

        client_time = parse_client_timestamp(request.current_time, fallback=now)
        if request.type == ParticipantType.MEMBER:
            # Members are keyed by their roster spelling so "alice" hits "Alice"
            key = profile.name if profile else request.name
            record = self._ledger.update_attendance(key, client_time, Role.MEMBER, request.tags, name=key)
        else:
            record = self._ledger.update_attendance(
                guest_key(request.name, role), client_time, role, request.tags, name=request.name
            )

        if record is not None:
            self._notifier.broadcast(ChangeType.ATTENDANCE_UPDATED, record.to_dict())
        self._notifier.broadcast(ChangeType.NEW_CHECKIN, entry.to_dict())

        logger.info("Check-in %s (%s) at %s", entry.name, role.value, client_time.strftime("%H:%M:%S"))
        return "Check-in successful"

    def records(self) -> list[CheckInEntry]:
        return self._log.list()

    def delete_record(self, index: int) -> CheckInEntry:
        removed = self._log.remove_at(index)
        self._notifier.broadcast(ChangeType.RECORD_DELETED, removed.to_dict())
        return removed

    def clear_records(self) -> None:
        self._log.clear()
        self._notifier.broadcast(ChangeType.RECORDS_CLEARED)

    def create_event(self, new_event: NewEvent, *, now: datetime | None = None) -> Event:
        event = self._events.create(new_event, now=now or self._clock())
        self._ledger.seed_event(event.id, self._roster.all_names())
        self._notifier.broadcast(ChangeType.EVENT_CREATED, event.to_dict())
        logger.info("Event %s created: %s on %s, cutoff %s", event.id, event.name, event.date, event.on_time_cutoff)
        return event

    def current_event(self) -> Optional[Event]:
        return self._events.current()

    def events(self) -> list[Event]:
        return self._events.list_all()

    def report(self) -> Optional[ReportData]:
        return self._reports.build_report()

    def export_csv(self) -> bytes:
        return self._exporter.export_csv(self._reports.build_report(), self._log.list())

    def clear_all(self) -> None:
        self._events.clear_all()
        self._ledger.clear_all()
        self._log.clear()
        self._history.clear()
        if self._insights is not None:
            self._insights.clear()
        self._notifier.broadcast(ChangeType.ALL_CLEARED)
        logger.info("All events and attendance cleared")

    def members(self) -> list[dict]:
        return list(self._roster.all_profiles())

    def guests(self) -> list[dict]:
        return [
            {"name": g.name, "profession": g.profession, "referrer": g.referrer, "type": ParticipantType.GUEST.value}
            for g in self._roster.all_guests()
        ]

    def guest_files(self) -> list[str]:
        return list(self._roster.loaded_files())

    def member_qr_png(self, name: str, *, now: datetime | None = None) -> bytes:
        profile = self._roster.lookup(name)
        if profile is None:
            raise NotFoundError(f"Unknown member: {name}")
        return render_qr_png(build_member_qr_payload(profile, now=now or self._clock()))

    def record_qr_scan(self, payload: str, *, now: datetime | None = None) -> str:
        now = now or self._clock()
        data = parse_qr_payload(payload)

        if isinstance(data, MemberQRData):
            profile = self._roster.lookup(data.name)
            if profile is None or profile.membership_id != data.membership_id:
                raise ValidationError("Invalid member or membership ID.")
            membership_id = data.membership_id
        else:
            if self._roster.lookup(data.referrer) is None:
                raise ValidationError("Invalid referrer for guest.")
            membership_id = None

        event = self._events.current()
        self._history.record(
            name=data.name,
            membership_id=membership_id,
            event_name=event.name if event else SCAN_EVENT_NAME,
            event_date=now.date().isoformat(),
            status=SCAN_STATUS_PRESENT,
        )
        return f"Attendance recorded successfully for {data.name} ({data.type.value.capitalize()})."

    def search_member_attendance(self, name: str) -> list[MemberAttendance]:
        return self._history.search_member(name)

    def search_event_attendance(self, event_date: str) -> list[EventAttendance]:
        return self._history.for_date(event_date)
