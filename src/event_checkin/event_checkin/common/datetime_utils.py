from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Optional

from ..core.constants import TIME_OF_DAY_FORMAT

_TIME_OF_DAY_RE = re.compile(r"T?(\d{2}:\d{2}:\d{2})")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_time_of_day(value: str) -> time:
    """Parse HH:MM or HH:MM:SS into a time."""
    return time.fromisoformat(value.strip())


def format_time_of_day(value: datetime | time) -> str:
    return value.strftime(TIME_OF_DAY_FORMAT)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def parse_client_timestamp(value: str, *, fallback: datetime) -> datetime:
    """Turn a client-supplied ISO-8601 timestamp into a naive datetime.

    Zoned values ("...Z", "+08:00") keep the wall time as written; only the
    zone is dropped, so "06:55:00Z" is 06:55:00 on any server.
    Values that cannot be parsed at all fall back to ``fallback``.
    """
    raw = (value or "").strip()
    if not raw:
        return fallback

    try:
        parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        try:
            return datetime.fromisoformat(raw.replace("Z", ""))
        except ValueError:
            return fallback

    if parsed.tzinfo is not None:
        return parsed.replace(tzinfo=None)
    return parsed


def extract_time_of_day(value: str) -> Optional[time]:
    """Best-effort pick of the first HH:MM:SS substring of a raw timestamp."""
    match = _TIME_OF_DAY_RE.search(value or "")
    if not match:
        return None
    try:
        return time.fromisoformat(match.group(1))
    except ValueError:
        return None
