from __future__ import annotations

from datetime import time

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class OnTimeStrategy(AttendanceStrategy):
    """Arrived strictly before the cutoff."""

    def decide_checkin(self, *, check_in: time, cutoff: time) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.ON_TIME)
