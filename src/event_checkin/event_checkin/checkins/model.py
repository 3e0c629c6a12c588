from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Optional, Union

from ..common.validators import require_non_empty
from ..core.enums import ParticipantType, Role
from ..core.exceptions import InvalidTypeError, MalformedInputError


@dataclass(frozen=True)
class CheckInEntry:
    """Domain entity: one accepted raw check-in, immutable once logged."""

    name: str
    participant_type: ParticipantType
    domain: str
    role: Role
    declared_timestamp: str
    received_at: datetime
    tags: frozenset[str] = frozenset()
    referrer: Optional[str] = None

    def same_participant(self, name: str, participant_type: ParticipantType) -> bool:
        return self.participant_type == participant_type and self.name.lower() == name.strip().lower()

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "type": self.participant_type.value,
            "domain": self.domain,
            "role": self.role.value,
            "timestamp": self.declared_timestamp,
            "receivedAt": self.received_at.isoformat(),
            "tags": sorted(self.tags),
            "referrer": self.referrer,
        }


@dataclass(frozen=True)
class MemberCheckIn:
    name: str
    current_time: str
    domain: str = ""
    tags: tuple[str, ...] = ()
    type: ParticipantType = field(default=ParticipantType.MEMBER, init=False)


@dataclass(frozen=True)
class GuestCheckIn:
    name: str
    current_time: str
    domain: str = ""
    role: str = "GUEST"
    tags: tuple[str, ...] = ()
    referrer: Optional[str] = None
    type: ParticipantType = field(default=ParticipantType.GUEST, init=False)

    @property
    def resolved_role(self) -> Role:
        r = (self.role or "").strip().upper()
        if r in (Role.VIP.value, Role.SPEAKER.value):
            return Role(r)
        return Role.GUEST


CheckInRequest = Union[MemberCheckIn, GuestCheckIn]


def parse_check_in_request(data: dict) -> CheckInRequest:
    """Build a check-in request from a JSON body, dispatching on ``type``."""
    if not isinstance(data, dict):
        raise MalformedInputError("Check-in body must be a JSON object")

    ptype = ParticipantType.parse(str(data.get("type") or ""))
    if ptype is None:
        raise InvalidTypeError("Invalid user type")

    name = require_non_empty(str(data.get("name") or ""), "name")
    current_time = str(data.get("currentTime") or "")
    domain = str(data.get("domain") or "")
    tags = data.get("tags") or []
    if not isinstance(tags, list):
        raise MalformedInputError("tags must be a list")
    tags = tuple(str(t) for t in tags)

    if ptype == ParticipantType.MEMBER:
        return MemberCheckIn(name=name, current_time=current_time, domain=domain, tags=tags)

    return GuestCheckIn(
        name=name,
        current_time=current_time,
        domain=domain,
        role=str(data.get("role") or "GUEST"),
        tags=tags,
        referrer=data.get("referrer") or None,
    )


@dataclass(frozen=True)
class MemberQRData:
    name: str
    time: datetime
    membership_id: str
    type: ParticipantType = field(default=ParticipantType.MEMBER, init=False)


@dataclass(frozen=True)
class GuestQRData:
    name: str
    domain: str
    time: datetime
    referrer: str
    type: ParticipantType = field(default=ParticipantType.GUEST, init=False)


QRData = Union[MemberQRData, GuestQRData]


def qr_data_to_dict(data: QRData) -> dict:
    out = asdict(data)
    out["type"] = data.type.value
    out["time"] = data.time.isoformat()
    if isinstance(data, MemberQRData):
        out["membershipId"] = out.pop("membership_id")
    return out
