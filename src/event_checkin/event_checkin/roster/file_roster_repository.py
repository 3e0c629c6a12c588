from __future__ import annotations

import csv
import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .model import GuestProfile, RosterProfile

logger = logging.getLogger(__name__)


class FileRosterRepository:
    """Roster loaded once at startup from delimited text files.

    Members file is pipe-delimited with a header row::

        name|domain|type|membershipId|referrer

    Guest list files are comma-delimited ``Name,Profession,Referrer``.
    Nothing is mutated after loading, so lookups need no locking.
    """

    def __init__(self, profiles: Iterable[RosterProfile] = (), guests: Iterable[GuestProfile] = ()):
        self._profiles: dict[str, RosterProfile] = {p.name.lower(): p for p in profiles}
        self._guests: dict[str, GuestProfile] = {g.name.lower(): g for g in guests}
        self._guest_files: list[str] = []

    @classmethod
    def load(cls, roster_file: str | Path | None, guest_files: Sequence[str | Path] = ()) -> "FileRosterRepository":
        repo = cls()
        if roster_file:
            repo._load_members(Path(roster_file))
        for path in guest_files:
            repo._load_guests(Path(path))
        return repo

    @staticmethod
    def parse_member_lines(lines: Iterable[str]) -> list[RosterProfile]:
        """Parse member rows; the first line is a header and is skipped."""
        profiles: list[RosterProfile] = []
        rows = iter(lines)
        next(rows, None)
        for line in rows:
            parts = [p.strip() for p in line.rstrip("\r\n").split("|")]
            if len(parts) < 3 or not parts[0]:
                continue
            ptype = parts[2] or "Member"
            membership_id = parts[3] if len(parts) > 3 and ptype.lower() == "member" and parts[3] else None
            referrer = parts[4] if len(parts) > 4 and ptype.lower() == "guest" and parts[4] else None
            profiles.append(
                RosterProfile(
                    name=parts[0],
                    domain=parts[1],
                    participant_type=ptype,
                    membership_id=membership_id,
                    referrer=referrer,
                )
            )
        return profiles

    def _load_members(self, path: Path) -> None:
        try:
            with path.open(encoding="utf-8-sig") as fh:
                profiles = self.parse_member_lines(fh)
        except OSError as e:
            logger.error("Error loading roster file %s: %s", path, e)
            return

        for p in profiles:
            self._profiles[p.name.lower()] = p
            logger.debug("Loaded member: %s", p.name)
        logger.info("Total members loaded: %d", len(self._profiles))

    def _load_guests(self, path: Path) -> None:
        if not path.exists():
            logger.info("Guest file %s not found, skipping", path)
            return

        try:
            with path.open(encoding="utf-8-sig", newline="") as fh:
                reader = csv.reader(fh)
                next(reader, None)
                loaded = 0
                for row in reader:
                    parts = [c.strip() for c in row]
                    if len(parts) < 2 or not parts[0]:
                        continue
                    guest = GuestProfile(
                        name=parts[0],
                        profession=parts[1],
                        referrer=parts[2] if len(parts) > 2 else "",
                        source=path.name,
                    )
                    self._guests[guest.name.lower()] = guest
                    loaded += 1
        except (OSError, csv.Error) as e:
            logger.error("Error loading guest file %s: %s", path, e)
            return

        self._guest_files.append(path.name)
        logger.info("Loaded %d guests from %s", loaded, path.name)

    def lookup(self, name: str) -> Optional[RosterProfile]:
        return self._profiles.get((name or "").strip().lower())

    def all_names(self) -> list[str]:
        return sorted(p.name for p in self._profiles.values())

    def all_profiles(self) -> list[dict]:
        return [
            {"name": p.name, "domain": p.domain}
            for p in sorted(self._profiles.values(), key=lambda p: p.name)
        ]

    def lookup_guest(self, name: str) -> Optional[GuestProfile]:
        return self._guests.get((name or "").strip().lower())

    def all_guests(self) -> list[GuestProfile]:
        return sorted(self._guests.values(), key=lambda g: g.name)

    def loaded_files(self) -> list[str]:
        return list(self._guest_files)
