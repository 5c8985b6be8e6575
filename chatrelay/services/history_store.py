# chatrelay/services/history_store.py

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, List
import logging

from chatrelay.models.models import ChatMessage

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100

# ============================================================================
# ROOM HISTORY STORE
# ============================================================================

class HistoryStore:
    """
    Bounded, in-memory message history per room.

    Each room keeps its most recent messages in arrival order. When a room
    is full, appending drops the oldest message (sliding window) instead of
    rejecting the new one.

    Attributes:
        limit: Maximum number of messages kept per room
        histories: Maps room_id -> deque of ChatMessage

    Lifecycle:
        Entries are created by the first append and removed only by clear(),
        which the RoomRegistry calls when a room loses its last member.
    """

    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError(f"History limit must be positive, got {limit}")
        self.limit = limit
        self.histories: Dict[str, Deque[ChatMessage]] = {}

    def append(self, room_id: str, message: ChatMessage) -> None:
        if room_id not in self.histories:
            self.histories[room_id] = deque(maxlen=self.limit)
        self.histories[room_id].append(message)

    def snapshot(self, room_id: str) -> List[ChatMessage]:
        """
        Copy of a room's history, oldest first.

        Returns an empty list for unknown rooms. Mutating the returned list
        does not touch the stored history.
        """
        return list(self.histories.get(room_id, ()))

    def clear(self, room_id: str) -> None:
        dropped = self.histories.pop(room_id, None)
        if dropped is not None:
            logger.debug("History cleared for room %s (%d messages)", room_id, len(dropped))

    def size(self, room_id: str) -> int:
        return len(self.histories.get(room_id, ()))

    def __contains__(self, room_id: str) -> bool:
        return room_id in self.histories
