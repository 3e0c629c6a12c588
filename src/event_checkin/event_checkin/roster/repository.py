from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import GuestProfile, RosterProfile


class RosterRepository(Protocol):
    """Read-only roster lookup.

    Note (DIP): services depend on this interface, not on the file loader.
    """

    def lookup(self, name: str) -> Optional[RosterProfile]:
        raise NotImplementedError

    def all_names(self) -> Sequence[str]:
        """Sorted names of every loaded profile; these seed each event's absentee baseline."""
        raise NotImplementedError

    def all_profiles(self) -> Sequence[dict]:
        """Sorted ``{"name", "domain"}`` dicts for every loaded profile."""
        raise NotImplementedError

    def lookup_guest(self, name: str) -> Optional[GuestProfile]:
        raise NotImplementedError

    def all_guests(self) -> Sequence[GuestProfile]:
        raise NotImplementedError

    def loaded_files(self) -> Sequence[str]:
        """Names of the guest list files that were read."""
        raise NotImplementedError
