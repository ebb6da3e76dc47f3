"""In-memory room membership for the whiteboard relay."""

from __future__ import annotations

import threading
from typing import Dict, List, Set


class RoomRegistry:
    """Maps room keys to the set of connection sids joined to them.

    A room exists only while it has members: the entry is created on the
    first join and dropped when the last member leaves or disconnects.
    """

    def __init__(self) -> None:
        self._rooms: Dict[str, Set[str]] = {}
        self._memberships: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def join(self, sid: str, room: str) -> bool:
        """Add ``sid`` to ``room``. Returns False if it was already a member."""
        with self._lock:
            members = self._rooms.setdefault(room, set())
            if sid in members:
                return False
            members.add(sid)
            self._memberships.setdefault(sid, set()).add(room)
            return True

    def leave(self, sid: str, room: str) -> bool:
        with self._lock:
            return self._discard(sid, room)

    def disconnect(self, sid: str) -> List[str]:
        """Drop every membership of ``sid`` and return the rooms it was in."""
        with self._lock:
            rooms = sorted(self._memberships.get(sid, ()))
            for room in rooms:
                self._discard(sid, room)
            return rooms

    def recipients(self, room: str, exclude: str = None) -> List[str]:
        """Members of ``room`` other than ``exclude``, snapshotted."""
        with self._lock:
            return [sid for sid in self._rooms.get(room, ()) if sid != exclude]

    def rooms_of(self, sid: str) -> Set[str]:
        with self._lock:
            return set(self._memberships.get(sid, ()))

    def members(self, room: str) -> Set[str]:
        with self._lock:
            return set(self._rooms.get(room, ()))

    def __contains__(self, room: str) -> bool:
        with self._lock:
            return room in self._rooms

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def _discard(self, sid: str, room: str) -> bool:
        members = self._rooms.get(room)
        if not members or sid not in members:
            return False
        members.discard(sid)
        if not members:
            del self._rooms[room]
        rooms = self._memberships.get(sid)
        if rooms is not None:
            rooms.discard(room)
            if not rooms:
                del self._memberships[sid]
        return True
