from __future__ import annotations

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date, parse_time_of_day


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_time_of_day(value: str, field_name: str) -> str:
    """Validate HH:MM[:SS] and return it unchanged (trimmed)."""
    v = require_non_empty(value, field_name)
    try:
        parse_time_of_day(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM or HH:MM:SS")
    return v


def require_iso_date(value: str, field_name: str) -> str:
    v = require_non_empty(value, field_name)
    try:
        parse_iso_date(v)
    except ValueError:
        raise ValidationError(f"{field_name} must be YYYY-MM-DD")
    return v
