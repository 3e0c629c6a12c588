from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

import httpx

from .attendance.service import AttendanceService
from .checkins.repository import CheckInLog
from .common.datetime_utils import now_local
from .core import constants
from .events.registry import EventRegistry
from .history.repository import ScanHistory
from .insights.client import InsightClient
from .insights.service import InsightService
from .ledger.factory import AttendanceStrategyFactory
from .ledger.ledger import AttendanceLedger
from .notifications.notifier import ChangeNotifier
from .reports.export import CsvExportService
from .reports.service import ReportService
from .roster.file_roster_repository import FileRosterRepository
from .roster.repository import RosterRepository


@dataclass(frozen=True)
class Container:
    roster: RosterRepository
    checkin_log: CheckInLog
    events: EventRegistry
    ledger: AttendanceLedger
    notifier: ChangeNotifier
    history: ScanHistory

    report_service: ReportService
    export_service: CsvExportService
    insight_service: InsightService
    insight_client: InsightClient
    attendance_service: AttendanceService

    clock: Callable[[], datetime]


def build_container(
    *,
    settings: Any,
    roster: RosterRepository | None = None,
    http_client: httpx.Client | None = None,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Construct every component once and wire them by reference."""

    if roster is None:
        roster = FileRosterRepository.load(
            getattr(settings, "ROSTER_FILE", None),
            getattr(settings, "GUEST_FILES", []),
        )

    checkin_log = CheckInLog()
    events = EventRegistry()
    ledger = AttendanceLedger(
        events,
        shards=int(getattr(settings, "LEDGER_SHARDS", constants.DEFAULT_LEDGER_SHARDS)),
        strategy_factory=AttendanceStrategyFactory(),
    )
    notifier = ChangeNotifier()
    history = ScanHistory()

    report_service = ReportService(events, ledger)
    export_service = CsvExportService(roster)
    insight_client = InsightClient(
        api_key=str(getattr(settings, "INSIGHT_API_KEY", "")),
        api_url=str(getattr(settings, "INSIGHT_API_URL", constants.DEFAULT_INSIGHT_API_URL)),
        model=str(getattr(settings, "INSIGHT_MODEL", constants.DEFAULT_INSIGHT_MODEL)),
        timeout=float(getattr(settings, "INSIGHT_TIMEOUT", constants.DEFAULT_INSIGHT_TIMEOUT)),
        http_client=http_client,
    )
    insight_service = InsightService(events, ledger, client=insight_client, roster=roster)
    attendance_service = AttendanceService(
        roster,
        checkin_log,
        events,
        ledger,
        notifier,
        history=history,
        insights=insight_service,
        reports=report_service,
        exporter=export_service,
        clock=clock,
    )

    return Container(
        roster=roster,
        checkin_log=checkin_log,
        events=events,
        ledger=ledger,
        notifier=notifier,
        history=history,
        report_service=report_service,
        export_service=export_service,
        insight_service=insight_service,
        insight_client=insight_client,
        attendance_service=attendance_service,
        clock=clock,
    )
