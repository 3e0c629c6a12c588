from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus, Role


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one participant's status within one event."""

    participant_key: str
    name: str
    status: AttendanceStatus
    check_in_time: Optional[str] = None
    role: Role = Role.MEMBER
    tags: tuple[str, ...] = ()

    @property
    def attended(self) -> bool:
        return self.status in (AttendanceStatus.ON_TIME, AttendanceStatus.LATE)

    def to_dict(self) -> dict:
        return {
            "key": self.participant_key,
            "memberName": self.name,
            "status": self.status.value,
            "checkInTime": self.check_in_time,
            "role": self.role.value,
            "tags": list(self.tags),
        }


def guest_key(name: str, role: Role) -> str:
    """Ledger key for non-member participants, distinct from member keys."""
    return f"guest_{name}_{role.value}"
