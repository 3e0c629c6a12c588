from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.on_time_strategy import OnTimeStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, check_in: datetime | time, cutoff: time) -> AttendanceStrategy:
        # Only the time of day is compared; the date part is dropped.
        # Equal to the cutoff counts as late.
        if isinstance(check_in, datetime):
            check_in = check_in.time()
        if check_in < cutoff:
            return OnTimeStrategy()
        return LateStrategy()
