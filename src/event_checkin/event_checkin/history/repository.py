from __future__ import annotations

import threading
from collections import defaultdict
from typing import Optional

from .model import EventAttendance, MemberAttendance


class ScanHistory:
    """QR scan history indexed by event date and by lower-cased member name."""

    def __init__(self):
        self._by_date: dict[str, list[EventAttendance]] = defaultdict(list)
        self._by_member: dict[str, list[MemberAttendance]] = defaultdict(list)
        self._lock = threading.Lock()

    def record(
        self,
        *,
        name: str,
        membership_id: Optional[str],
        event_name: str,
        event_date: str,
        status: str,
    ) -> None:
        with self._lock:
            self._by_date[event_date].append(
                EventAttendance(member_name=name, membership_id=membership_id, status=status)
            )
            self._by_member[name.lower()].append(
                MemberAttendance(event_name=event_name, event_date=event_date, status=status)
            )

    def search_member(self, partial_name: str) -> list[MemberAttendance]:
        """Case-insensitive substring match over member names."""
        term = (partial_name or "").strip().lower()
        with self._lock:
            return [m for key, items in self._by_member.items() if term in key for m in items]

    def for_date(self, event_date: str) -> list[EventAttendance]:
        with self._lock:
            return list(self._by_date.get(event_date, []))

    def clear(self) -> None:
        with self._lock:
            self._by_date.clear()
            self._by_member.clear()
