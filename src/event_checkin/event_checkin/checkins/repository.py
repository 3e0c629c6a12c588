from __future__ import annotations

import threading

from ..core.exceptions import DuplicateCheckInError, RecordNotFoundError
from .model import CheckInEntry


class CheckInLog:
    """Append-only, duplicate-checked list of raw check-ins.

    One lock guards the list so the duplicate check and the append happen
    as a unit, and removals by index see a stable length. ``list()`` hands
    out a copy.

    Note: ``remove_at`` removes whatever sits at ``index`` when the call
    runs. Two callers deleting with stale indices may remove a different
    entry than they saw; keeping indices fresh is the caller's job.
    """

    def __init__(self):
        self._entries: list[CheckInEntry] = []
        self._lock = threading.Lock()

    def append(self, entry: CheckInEntry) -> None:
        with self._lock:
            if any(e.same_participant(entry.name, entry.participant_type) for e in self._entries):
                raise DuplicateCheckInError(f"{entry.name} already checked in")
            self._entries.append(entry)

    def list(self) -> list[CheckInEntry]:
        with self._lock:
            return list(self._entries)

    def remove_at(self, index: int) -> CheckInEntry:
        with self._lock:
            if index < 0 or index >= len(self._entries):
                raise RecordNotFoundError("Record not found")
            return self._entries.pop(index)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
