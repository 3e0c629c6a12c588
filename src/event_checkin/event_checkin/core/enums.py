from __future__ import annotations

from enum import Enum


class ParticipantType(str, Enum):
    """Kind of participant submitting a check-in."""

    MEMBER = "member"
    GUEST = "guest"

    @classmethod
    def parse(cls, value: str) -> "ParticipantType | None":
        v = (value or "").strip().lower()
        for item in cls:
            if item.value == v:
                return item
        return None


class Role(str, Enum):
    """Role shown on the report; guests may be promoted to VIP/SPEAKER."""

    MEMBER = "MEMBER"
    GUEST = "GUEST"
    VIP = "VIP"
    SPEAKER = "SPEAKER"


class AttendanceStatus(str, Enum):
    """Attendance status of one participant within one event."""

    ABSENT = "absent"
    ON_TIME = "on-time"
    LATE = "late"


class ChangeType(str, Enum):
    """Discriminator of change events pushed to observers."""

    NEW_CHECKIN = "new_checkin"
    RECORD_DELETED = "record_deleted"
    RECORDS_CLEARED = "records_cleared"
    EVENT_CREATED = "event_created"
    ATTENDANCE_UPDATED = "attendance_updated"
    ALL_CLEARED = "all_cleared"
