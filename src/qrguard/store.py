"""Member storage.

The gateway only needs equality lookup by id_number. MemberStore is the
seam; InMemoryMemberStore backs tests and small single-process
deployments, optionally seeded from a JSON file.
"""

from __future__ import annotations

import json
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from qrguard.errors import NotFoundError
from qrguard.models import Member

logger = logging.getLogger("qrguard.store")


class MemberStore(ABC):
    """Key-value member storage keyed by id_number."""

    @abstractmethod
    def store_member(self, member: Member) -> None:
        """Insert, or replace the member with the same id_number.

        A replaced member keeps its original created_at.
        """

    @abstractmethod
    def get_member(self, id_number: str) -> Member:
        """Return the member or raise NotFoundError."""

    @abstractmethod
    def delete_member(self, id_number: str) -> None:
        """Remove the member or raise NotFoundError."""

    @abstractmethod
    def list_members(self) -> list[Member]:
        """All members, newest first."""

    @abstractmethod
    def count_members(self) -> int: ...


class InMemoryMemberStore(MemberStore):
    """Thread-safe dict of members. Replacing a member keeps its created_at."""

    def __init__(self) -> None:
        self._members: dict[str, Member] = {}
        self._lock = threading.Lock()

    def store_member(self, member: Member) -> None:
        with self._lock:
            existing = self._members.get(member.id_number)
            if existing is not None:
                member = member.model_copy(update={"created_at": existing.created_at})
            self._members[member.id_number] = member

    def get_member(self, id_number: str) -> Member:
        with self._lock:
            try:
                return self._members[id_number]
            except KeyError:
                raise NotFoundError(id_number) from None

    def delete_member(self, id_number: str) -> None:
        with self._lock:
            if self._members.pop(id_number, None) is None:
                raise NotFoundError(id_number)

    def list_members(self) -> list[Member]:
        with self._lock:
            members = list(self._members.values())
        return sorted(reversed(members), key=lambda m: m.created_at, reverse=True)

    def count_members(self) -> int:
        with self._lock:
            return len(self._members)


def load_members(store: MemberStore, path: Path) -> int:
    """Seed a store from a JSON array of member objects. Returns the count."""
    records = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(records, list):
        raise ValueError(f"{path}: expected a JSON array of members")
    for record in records:
        store.store_member(Member.model_validate(record))
    logger.info("Loaded %d members from %s", len(records), path)
    return len(records)
