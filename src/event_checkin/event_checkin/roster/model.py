from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RosterProfile:
    """Domain entity: a known member (or pre-registered guest) of the chapter."""

    name: str
    domain: str
    participant_type: str = "Member"
    membership_id: Optional[str] = None
    referrer: Optional[str] = None

    @property
    def is_member(self) -> bool:
        return self.participant_type.lower() == "member"


@dataclass(frozen=True)
class GuestProfile:
    """Guest from an invitation list file."""

    name: str
    profession: str
    referrer: str
    source: str = "guest"
