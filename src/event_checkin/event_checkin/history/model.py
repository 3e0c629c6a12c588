from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MemberAttendance:
    """One scan as seen from a member's history."""

    event_name: str
    event_date: str
    status: str

    def to_dict(self) -> dict:
        return {"eventName": self.event_name, "eventDate": self.event_date, "status": self.status}


@dataclass(frozen=True)
class EventAttendance:
    """One scan as seen from an event date's roster."""

    member_name: str
    membership_id: Optional[str]
    status: str

    def to_dict(self) -> dict:
        return {"memberName": self.member_name, "membershipId": self.membership_id, "status": self.status}
