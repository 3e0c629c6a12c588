from __future__ import annotations

import io
import json
from datetime import datetime

import qrcode

from ..common.datetime_utils import parse_client_timestamp
from ..core.enums import ParticipantType
from ..core.exceptions import MalformedInputError, NotFoundError
from ..roster.model import RosterProfile
from .model import GuestQRData, MemberQRData, QRData, qr_data_to_dict


def parse_qr_payload(payload: str) -> QRData:
    """Decode a scanned QR payload, dispatching on its ``type`` field."""
    try:
        data = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise MalformedInputError(f"Invalid QR Payload: {e}")
    if not isinstance(data, dict):
        raise MalformedInputError("Invalid QR Payload: expected an object")

    ptype = ParticipantType.parse(str(data.get("type") or ""))
    try:
        name = str(data["name"]).strip()
        raw_time = str(data["time"])
    except KeyError as e:
        raise MalformedInputError(f"Invalid QR Payload: missing {e.args[0]}")

    sentinel = datetime.min
    scanned_at = parse_client_timestamp(raw_time, fallback=sentinel)
    if not name or scanned_at is sentinel:
        raise MalformedInputError("Invalid QR Payload: bad name or time")

    if ptype == ParticipantType.MEMBER:
        membership_id = data.get("membershipId")
        if not membership_id:
            raise MalformedInputError("Invalid QR Payload: missing membershipId")
        return MemberQRData(name=name, time=scanned_at, membership_id=str(membership_id))

    if ptype == ParticipantType.GUEST:
        referrer = data.get("referrer")
        if not referrer:
            raise MalformedInputError("Invalid QR Payload: missing referrer")
        return GuestQRData(name=name, domain=str(data.get("domain") or ""), time=scanned_at, referrer=str(referrer))

    raise MalformedInputError("Invalid QR Payload: unknown type")


def build_member_qr_payload(profile: RosterProfile, *, now: datetime) -> str:
    if not profile.membership_id:
        raise NotFoundError(f"{profile.name} has no membership id")
    data = MemberQRData(name=profile.name, time=now, membership_id=profile.membership_id)
    return json.dumps(qr_data_to_dict(data), ensure_ascii=False)


def render_qr_png(payload: str) -> bytes:
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=10,
        border=2,
    )
    qr.add_data(payload)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()
