from __future__ import annotations

import threading
from collections import defaultdict
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus, Role
from ..core.exceptions import NotFoundError, ValidationError
from ..events.registry import EventRegistry
from ..ledger.ledger import AttendanceLedger
from ..ledger.model import AttendanceRecord
from ..roster.repository import RosterRepository
from .client import InsightClient
from .model import DelegateFailure, InsightItem, InsightResponse

ANALYSIS_TYPES = ("interest", "retention", "target_audience")

_NO_DELEGATE = DelegateFailure("Insight delegate not available")

_RECOMMENDATIONS = {
    "interest": [
        "Focus the next meeting's topic on the most interactive sessions",
        "VIP guests lean towards professional and technical talks",
    ],
    "retention": [
        "Members attending over 80% of meetings are good ambassadors",
        "Follow up personally with members absent several meetings in a row",
    ],
    "target_audience": [
        "High-potential returning guests are flagged; invite them first",
        "Guest conversion is strongest after profession-focused presentations",
    ],
}


class InsightService:
    """Rule-based insight reports over a ledger snapshot, cached per event.

    Free-text advice (retention strategy, guest match) is delegated to
    ``client`` when one is given.
    """

    def __init__(
        self,
        events: EventRegistry,
        ledger: AttendanceLedger,
        *,
        client: InsightClient | None = None,
        roster: RosterRepository | None = None,
    ):
        self._events = events
        self._ledger = ledger
        self._client = client
        self._roster = roster
        self._cache: dict[int, list[InsightResponse]] = defaultdict(list)
        self._lock = threading.Lock()

    def generate(self, event_id: int, analysis_type: str, *, now: datetime) -> InsightResponse:
        if analysis_type not in ANALYSIS_TYPES:
            raise ValidationError(f"Unknown analysis type: {analysis_type}")
        records = self._ledger.snapshot(event_id)
        if records is None:
            raise NotFoundError("Event not found")

        if analysis_type == "interest":
            insights = _interest(records)
        elif analysis_type == "retention":
            insights = _retention(records)
        else:
            insights = _target_audience(records)

        response = InsightResponse(
            event_id=event_id,
            analysis_type=analysis_type,
            generated_at=now,
            insights=insights,
            recommendations=list(_RECOMMENDATIONS[analysis_type]),
        )
        with self._lock:
            self._cache[event_id].append(response)
        return response

    def insights_for(self, event_id: int) -> list[InsightResponse]:
        with self._lock:
            return list(self._cache.get(event_id, []))

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def retention_strategy(self, event_id: int) -> str:
        records = self._ledger.snapshot(event_id)
        if records is None:
            raise NotFoundError("Event not found")
        if self._client is None:
            return _NO_DELEGATE.message

        attended = [r for r in records if r.attended]
        late = sum(1 for r in attended if r.status == AttendanceStatus.LATE)
        absent = sorted(r.name for r in records if r.status == AttendanceStatus.ABSENT)
        return self._client.generate_retention_strategy(
            len(attended) / max(len(records), 1),
            late / max(len(attended), 1),
            absent,
        )

    def guest_match_analysis(self, guest_name: str, profession: str = "") -> dict:
        """Ask the delegate which member professions suit a guest.

        ``profession`` defaults to the one on the guest list; a guest with
        neither is unknown.
        """
        guest = self._roster.lookup_guest(guest_name) if self._roster is not None else None
        profession = profession or (guest.profession if guest else "")
        if not profession:
            raise NotFoundError(f"Unknown guest: {guest_name}")

        members = self._roster.all_profiles() if self._roster is not None else []
        professions = sorted({p["domain"] for p in members if p["domain"]})
        if self._client is None:
            analysis = _NO_DELEGATE.message
        else:
            analysis = self._client.analyze_guest_match(guest_name, profession, professions)
        return {
            "guestName": guest.name if guest else guest_name,
            "profession": profession,
            "referrer": guest.referrer if guest else None,
            "analysis": analysis,
        }

    def export_ai_ready_data(self, event_id: int, *, now: datetime) -> Optional[dict]:
        event = self._events.get(event_id)
        records = self._ledger.snapshot(event_id)
        if event is None or records is None:
            return None

        rows = [
            {
                "name": r.name,
                "status": r.status.value,
                "checkInTime": r.check_in_time or "",
                "role": r.role.value,
                "tags": list(r.tags),
            }
            for r in records
        ]
        return {
            "eventId": event.id,
            "eventName": event.name,
            "eventDate": event.date,
            "exportedAt": now.isoformat(),
            "attendanceRecords": rows,
            "summary": {
                "total": len(records),
                "attended": sum(1 for r in records if r.attended),
                "onTime": sum(1 for r in records if r.status == AttendanceStatus.ON_TIME),
                "late": sum(1 for r in records if r.status == AttendanceStatus.LATE),
                "absent": sum(1 for r in records if r.status == AttendanceStatus.ABSENT),
                "vip": sum(1 for r in records if r.role == Role.VIP),
                "guests": sum(1 for r in records if r.role == Role.GUEST),
            },
        }


def _interest(records: list[AttendanceRecord]) -> list[InsightItem]:
    total = len(records)
    attended = sum(1 for r in records if r.attended)
    return [
        InsightItem(
            title="Guest interest",
            description=f"{attended * 100 // max(total, 1)}% of participants checked in",
            confidence=0.85,
            data_points={
                "total_registered": total,
                "attended": attended,
                "attendance_rate": attended / max(total, 1),
            },
        ),
        InsightItem(
            title="Guest engagement",
            description="Participation of VIPs and guests",
            confidence=0.78,
            data_points={
                "vip_count": sum(1 for r in records if r.role == Role.VIP),
                "guest_count": sum(1 for r in records if r.role == Role.GUEST),
                "speaker_count": sum(1 for r in records if r.role == Role.SPEAKER),
            },
        ),
    ]


def _retention(records: list[AttendanceRecord]) -> list[InsightItem]:
    on_time_rate = sum(1 for r in records if r.status == AttendanceStatus.ON_TIME) / max(len(records), 1)
    return [
        InsightItem(
            title="Retention",
            description="Arrival times suggest adjusting the meeting schedule",
            confidence=0.82,
            data_points={
                "on_time_rate": on_time_rate,
                "suggested_start_time": "07:00",
                "optimal_duration_minutes": 120,
            },
        )
    ]


def _target_audience(records: list[AttendanceRecord]) -> list[InsightItem]:
    engaged = [r for r in records if r.status == AttendanceStatus.ON_TIME]
    return [
        InsightItem(
            title="Outreach list",
            description=f"Identified {len(engaged)} highly engaged participants",
            confidence=0.90,
            data_points={
                "high_engagement_count": len(engaged),
                "target_names": [r.name for r in engaged[:10]],
            },
        )
    ]
