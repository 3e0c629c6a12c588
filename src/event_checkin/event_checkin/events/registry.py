from __future__ import annotations

import itertools
import threading
from datetime import datetime
from typing import Optional

from .model import Event, NewEvent


class EventRegistry:
    """Keeps every created event; the most recent one is current.

    Ids come from a counter read under the same lock as the append, so they
    are strictly increasing and never reused, even across ``clear_all``.
    """

    def __init__(self):
        self._events: list[Event] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create(self, new_event: NewEvent, *, now: datetime) -> Event:
        with self._lock:
            event = Event(
                id=next(self._ids),
                name=new_event.name,
                date=new_event.date,
                start_time=new_event.start_time,
                end_time=new_event.end_time,
                registration_start_time=new_event.registration_start_time,
                on_time_cutoff=new_event.on_time_cutoff,
                created_at=now,
            )
            self._events.append(event)
            return event

    def current(self) -> Optional[Event]:
        with self._lock:
            return self._events[-1] if self._events else None

    def get(self, event_id: int) -> Optional[Event]:
        with self._lock:
            for e in self._events:
                if e.id == event_id:
                    return e
        return None

    def list_all(self) -> list[Event]:
        with self._lock:
            return list(self._events)

    def clear_all(self) -> None:
        with self._lock:
            self._events.clear()
