from __future__ import annotations

import csv
import io
from datetime import time
from typing import Optional, Sequence

from ..checkins.model import CheckInEntry
from ..common.datetime_utils import extract_time_of_day
from ..core.enums import AttendanceStatus, ParticipantType
from ..roster.repository import RosterRepository
from .service import ReportData

EXPORT_FIELDS = ["name", "domain", "category", "status", "check-in-time"]

CHECKED_IN = "checked-in"

DEFAULT_STATUS_LABELS = {
    AttendanceStatus.ON_TIME: "on-time",
    AttendanceStatus.LATE: "late",
    AttendanceStatus.ABSENT: "absent",
}


def guest_status_from_timestamp(timestamp: str, cutoff: time) -> Optional[AttendanceStatus]:
    """Re-derive on-time/late from a raw timestamp string.

    Uses the same strict ``<`` rule as the ledger; ``None`` when no
    HH:MM:SS can be found in the string.
    """
    check_in = extract_time_of_day(timestamp)
    if check_in is None:
        return None
    return AttendanceStatus.ON_TIME if check_in < cutoff else AttendanceStatus.LATE


class CsvExportService:
    """Spreadsheet export of the current event (UTF-8 with BOM)."""

    def __init__(
        self,
        roster: RosterRepository,
        *,
        status_labels: dict[AttendanceStatus, str] | None = None,
        checked_in_label: str = CHECKED_IN,
    ):
        self._roster = roster
        self._labels = {**DEFAULT_STATUS_LABELS, **(status_labels or {})}
        self._checked_in_label = checked_in_label

    def _label(self, status: Optional[AttendanceStatus]) -> str:
        if status is None:
            return self._checked_in_label
        return self._labels.get(status, status.value)

    def _domain_of(self, name: str) -> str:
        profile = self._roster.lookup(name)
        return profile.domain if profile else ""

    def build_rows(self, report: Optional[ReportData], entries: Sequence[CheckInEntry]) -> list[dict]:
        rows: list[dict] = []

        if report is None:
            # No event: dump the raw log
            for e in entries:
                rows.append(
                    {
                        "name": e.name,
                        "domain": e.domain,
                        "category": e.participant_type.value,
                        "status": self._checked_in_label,
                        "check-in-time": e.declared_timestamp,
                    }
                )
            return rows

        for r in report.attendees:
            if r.participant_key.startswith("guest_"):
                continue
            rows.append(
                {
                    "name": r.name,
                    "domain": self._domain_of(r.name),
                    "category": ParticipantType.MEMBER.value,
                    "status": self._label(r.status),
                    "check-in-time": r.check_in_time or "",
                }
            )

        for r in report.absentees:
            rows.append(
                {
                    "name": r.name,
                    "domain": self._domain_of(r.name),
                    "category": ParticipantType.MEMBER.value,
                    "status": self._label(r.status),
                    "check-in-time": "",
                }
            )

        cutoff = report.event.cutoff
        for e in entries:
            if e.participant_type != ParticipantType.GUEST:
                continue
            rows.append(
                {
                    "name": e.name,
                    "domain": e.domain,
                    "category": ParticipantType.GUEST.value,
                    "status": self._label(guest_status_from_timestamp(e.declared_timestamp, cutoff)),
                    "check-in-time": e.declared_timestamp,
                }
            )
        return rows

    def export_csv(self, report: Optional[ReportData], entries: Sequence[CheckInEntry]) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in self.build_rows(report, entries):
            writer.writerow(row)

        return out.getvalue().encode("utf-8-sig")
