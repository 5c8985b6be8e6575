# chatrelay/services/room_registry.py

from __future__ import annotations

from typing import Dict, List
import logging

from chatrelay.services.history_store import HistoryStore

logger = logging.getLogger(__name__)

# ============================================================================
# ROOM REGISTRY
# ============================================================================

class RoomRegistry:
    """
    Tracks which usernames are currently in which room.

    Rooms are created implicitly by the first member and destroyed by
    delete_if_empty() once the last member leaves. Destroying a room also
    clears its history, so an absent room always means "no members and no
    history".

    Attributes:
        rooms: Maps room_id -> usernames, kept as an insertion-ordered dict
               used as a set so the roster shows people in join order.
               Example: {"1111...": {"alice": None, "bob": None}}
        history: HistoryStore cleared alongside each deleted room
    """

    def __init__(self, history: HistoryStore) -> None:
        self.rooms: Dict[str, Dict[str, None]] = {}
        self.history = history

    def ensure_room(self, room_id: str) -> None:
        if room_id not in self.rooms:
            self.rooms[room_id] = {}
            logger.info("✓ Room %s created", room_id)

    def add_member(self, room_id: str, username: str) -> None:
        self.ensure_room(room_id)
        self.rooms[room_id][username] = None

    def remove_member(self, room_id: str, username: str) -> None:
        members = self.rooms.get(room_id)
        if members is not None:
            members.pop(username, None)

    def has_member(self, room_id: str, username: str) -> bool:
        return username in self.rooms.get(room_id, {})

    def member_count(self, room_id: str) -> int:
        return len(self.rooms.get(room_id, {}))

    def members(self, room_id: str) -> List[str]:
        """Snapshot of a room's usernames in join order (empty if absent)."""
        return list(self.rooms.get(room_id, {}))

    def delete_if_empty(self, room_id: str) -> bool:
        """
        Remove a room that has no members left.

        This is the only way a room is destroyed. The room's history is
        cleared at the same time.

        Returns:
            True if the room was deleted, False if it is absent or occupied
        """
        if room_id in self.rooms and not self.rooms[room_id]:
            del self.rooms[room_id]
            self.history.clear(room_id)
            logger.info("✗ Room %s deleted (empty)", room_id)
            return True
        return False

    def room_ids(self) -> List[str]:
        return list(self.rooms)

    def __contains__(self, room_id: str) -> bool:
        return room_id in self.rooms

    def __len__(self) -> int:
        return len(self.rooms)
