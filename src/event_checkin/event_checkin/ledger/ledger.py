from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Iterable, Optional

from ..common.concurrency import ShardedDict
from ..common.datetime_utils import format_time_of_day
from ..core.constants import DEFAULT_LEDGER_SHARDS
from ..core.enums import AttendanceStatus, Role
from ..events.registry import EventRegistry
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Per-event attendance state: ``event_id -> (participant_key -> record)``.

    Every participant starts absent when the event is seeded and moves to
    on-time or late on check-in. A later check-in for the same key replaces
    the record; nothing moves back to absent.

    Each event's map is a :class:`ShardedDict`, so check-ins for different
    participants only contend when their keys share a shard.

    Known limit: classification compares time of day only. A check-in
    timestamp from another day compares as if it were on the event day.
    """

    def __init__(
        self,
        events: EventRegistry,
        *,
        shards: int = DEFAULT_LEDGER_SHARDS,
        strategy_factory: AttendanceStrategyFactory | None = None,
    ):
        self._events = events
        self._shards = int(shards)
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._by_event: dict[int, ShardedDict[str, AttendanceRecord]] = {}
        self._lock = threading.Lock()

    def seed_event(self, event_id: int, roster_names: Iterable[str]) -> int:
        """Create the event's map with one absent record per roster name."""
        records: ShardedDict[str, AttendanceRecord] = ShardedDict(self._shards)
        for name in roster_names:
            records.put(name, AttendanceRecord(participant_key=name, name=name, status=AttendanceStatus.ABSENT))

        # Built fully before publishing, so readers never see a half-seeded event
        with self._lock:
            self._by_event[event_id] = records

        logger.info("Seeded event %s with %d absent records", event_id, len(records))
        return len(records)

    def _records_for(self, event_id: int) -> Optional[ShardedDict[str, AttendanceRecord]]:
        with self._lock:
            return self._by_event.get(event_id)

    def update_attendance(
        self,
        key: str,
        check_in_time: datetime,
        role: Role = Role.MEMBER,
        tags: Iterable[str] = (),
        *,
        name: str | None = None,
    ) -> Optional[AttendanceRecord]:
        """Classify and upsert against the current event; ``None`` if there is none."""
        event = self._events.current()
        if event is None:
            return None
        records = self._records_for(event.id)
        if records is None:
            logger.warning("Event %s has no seeded ledger, attendance for %s ignored", event.id, key)
            return None

        strategy = self._factory.for_checkin(check_in=check_in_time, cutoff=event.cutoff)
        decision = strategy.decide_checkin(check_in=check_in_time.time(), cutoff=event.cutoff)

        record = AttendanceRecord(
            participant_key=key,
            name=name or key,
            status=decision.status,
            check_in_time=format_time_of_day(check_in_time),
            role=role,
            tags=tuple(tags),
        )
        records.put(key, record)
        return record

    def get(self, event_id: int, key: str) -> Optional[AttendanceRecord]:
        records = self._records_for(event_id)
        return records.get(key) if records is not None else None

    def snapshot(self, event_id: int) -> Optional[list[AttendanceRecord]]:
        records = self._records_for(event_id)
        if records is None:
            return None
        return records.values()

    def clear_all(self) -> None:
        with self._lock:
            self._by_event.clear()
