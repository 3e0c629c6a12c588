from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, time

from ..common.datetime_utils import parse_time_of_day
from ..common.validators import require_iso_date, require_non_empty, require_time_of_day
from ..core import constants


@dataclass(frozen=True)
class NewEvent:
    """Input for creating an event; times are HH:MM[:SS] strings."""

    name: str
    date: str
    start_time: str = constants.DEFAULT_START_TIME
    end_time: str = constants.DEFAULT_END_TIME
    registration_start_time: str = constants.DEFAULT_REGISTRATION_START_TIME
    on_time_cutoff: str = constants.DEFAULT_ON_TIME_CUTOFF

    @classmethod
    def from_dict(cls, data: dict) -> "NewEvent":
        return cls(
            name=require_non_empty(str(data.get("name") or constants.DEFAULT_EVENT_NAME), "name"),
            date=require_iso_date(str(data.get("date") or ""), "date"),
            start_time=require_time_of_day(str(data.get("startTime") or constants.DEFAULT_START_TIME), "startTime"),
            end_time=require_time_of_day(str(data.get("endTime") or constants.DEFAULT_END_TIME), "endTime"),
            registration_start_time=require_time_of_day(
                str(data.get("registrationStartTime") or constants.DEFAULT_REGISTRATION_START_TIME),
                "registrationStartTime",
            ),
            on_time_cutoff=require_time_of_day(
                str(data.get("onTimeCutoff") or constants.DEFAULT_ON_TIME_CUTOFF), "onTimeCutoff"
            ),
        )


@dataclass(frozen=True)
class Event:
    """Domain entity: one meeting; never mutated after creation."""

    id: int
    name: str
    date: str
    start_time: str
    end_time: str
    registration_start_time: str
    on_time_cutoff: str
    created_at: datetime

    @property
    def cutoff(self) -> time:
        return parse_time_of_day(self.on_time_cutoff)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "registrationStartTime": self.registration_start_time,
            "onTimeCutoff": self.on_time_cutoff,
            "createdAt": self.created_at.isoformat(),
        }
