# chatrelay/services/event_router.py

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, List, Optional
import logging
import threading

from chatrelay.models.models import (
    CHAT_HISTORY,
    RECEIVE_MESSAGE,
    ROOM_ERROR,
    UPDATE_USERS,
    ChatMessage,
    Notification,
    RoomInfo,
    Session,
)
from chatrelay.services.history_store import HistoryStore
from chatrelay.services.room_registry import RoomRegistry
from chatrelay.services.session_table import SessionTable
from chatrelay.services.validator import is_non_empty_text, is_valid_room_id

logger = logging.getLogger(__name__)

INVALID_ROOM_ID = "Invalid room id"
USERNAME_REQUIRED = "Username is required"
USERNAME_TAKEN = "Username already taken in this room"
NOT_JOINED = "Not joined to this room"


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


# ============================================================================
# EVENT ROUTER
# ============================================================================

class EventRouter:
    """
    State machine behind the chat relay.

    Owns no storage of its own: the SessionTable, RoomRegistry and
    HistoryStore are built once at startup and handed in. Every inbound
    event (join, send, disconnect) is one transition that runs to
    completion under a single lock and returns the notifications the
    transport has to deliver. Nothing here awaits or touches a socket.

    Connection states:
        Unjoined (no session) -> Joined (session in exactly one room)
        Joined -> Unjoined on disconnect
        Joined -> Joined elsewhere on rejoin, vacating the old room first

    Client mistakes never raise. They come back as a "room-error"
    notification addressed to the originating connection only, and leave
    every store untouched. Empty message text is dropped silently.

    Usage:
        history = HistoryStore()
        router = EventRouter(SessionTable(), RoomRegistry(history), history)
        for note in router.join("conn-1", room_id, "alice"):
            deliver(note)
    """

    def __init__(
        self,
        sessions: SessionTable,
        rooms: RoomRegistry,
        history: HistoryStore,
        clock: Optional[Callable[[], str]] = None,
    ) -> None:
        self.sessions = sessions
        self.rooms = rooms
        self.history = history
        self.clock = clock or utc_timestamp
        self.messages_relayed = 0
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def join(self, conn_id: str, room_id: str, raw_username: str) -> List[Notification]:
        """
        Join (or move) a connection into a room.

        Args:
            conn_id: Transport connection id
            room_id: Target room, must be a UUID-shaped identifier
            raw_username: Self-declared display name, trimmed before use

        Returns:
            On success: "chat-history" for the requester, then
            "update-users" for everyone now in the room. A move from
            another room is preceded by "update-users" for whoever is
            left behind there.
        """
        if not is_valid_room_id(room_id):
            return [self.reject(conn_id, INVALID_ROOM_ID)]
        if not is_non_empty_text(raw_username):
            return [self.reject(conn_id, USERNAME_REQUIRED)]
        username = raw_username.strip()

        with self._lock:
            current = self.sessions.get(conn_id)
            already_here = (
                current is not None
                and current.room_id == room_id
                and current.username == username
            )
            if self.rooms.has_member(room_id, username) and not already_here:
                return [self.reject(conn_id, USERNAME_TAKEN)]

            notifications: List[Notification] = []
            if not already_here:
                if current is not None and current.room_id == room_id:
                    # Rename in place; the room keeps at least this member
                    self.rooms.remove_member(room_id, current.username)
                elif current is not None:
                    notifications.extend(self._vacate(conn_id, current))

                self.sessions.set(conn_id, username, room_id)
                self.rooms.add_member(room_id, username)
                logger.info(
                    "→ %s joined room %s (%d members)",
                    username, room_id, self.rooms.member_count(room_id),
                )

            backfill = [m.model_dump() for m in self.history.snapshot(room_id)]
            notifications.append(
                Notification(event=CHAT_HISTORY, recipients=(conn_id,), data=backfill)
            )
            notifications.append(self._roster(room_id))
            return notifications

    def send(
        self,
        conn_id: str,
        room_id: str,
        text: str,
        username: str,
        timestamp: Optional[str] = None,
    ) -> List[Notification]:
        """
        Relay a chat message to the other occupants of a room.

        The connection must currently be joined to room_id under exactly
        the claimed username; anything else is answered with "room-error"
        so one client cannot post as another user or into another room.
        A missing timestamp is filled in from the server clock.
        """
        if not is_non_empty_text(text):
            return []
        if not is_valid_room_id(room_id):
            return [self.reject(conn_id, INVALID_ROOM_ID)]
        claimed = username.strip() if isinstance(username, str) else None

        with self._lock:
            session = self.sessions.get(conn_id)
            if session is None or session.room_id != room_id or session.username != claimed:
                logger.info("Rejected message from %s for room %s: not joined", conn_id, room_id)
                return [self.reject(conn_id, NOT_JOINED)]

            message = ChatMessage(
                message=text.strip(),
                username=session.username,
                timestamp=timestamp if is_non_empty_text(timestamp) else self.clock(),
                room_id=room_id,
            )
            self.history.append(room_id, message)
            self.messages_relayed += 1

            others = tuple(c for c in self.sessions.connections_in(room_id) if c != conn_id)
            if not others:
                return []
            return [
                Notification(event=RECEIVE_MESSAGE, recipients=others, data=message.model_dump())
            ]

    def disconnect(self, conn_id: str) -> List[Notification]:
        """Tear down a connection's session. No-op for unjoined connections."""
        with self._lock:
            session = self.sessions.get(conn_id)
            if session is None:
                return []
            return self._vacate(conn_id, session)

    def reject(self, conn_id: str, reason: str) -> Notification:
        """Build a "room-error" addressed to one connection."""
        return Notification(event=ROOM_ERROR, recipients=(conn_id,), data={"message": reason})

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def rooms_overview(self) -> List[RoomInfo]:
        with self._lock:
            return [self._room_info(room_id) for room_id in self.rooms.room_ids()]

    def room_info(self, room_id: str) -> Optional[RoomInfo]:
        with self._lock:
            if room_id not in self.rooms:
                return None
            return self._room_info(room_id)

    def connection_count(self) -> int:
        with self._lock:
            return len(self.sessions)

    # ------------------------------------------------------------------
    # Internals (caller holds the lock)
    # ------------------------------------------------------------------

    def _vacate(self, conn_id: str, session: Session) -> List[Notification]:
        self.sessions.remove(conn_id)
        self.rooms.remove_member(session.room_id, session.username)
        logger.info(
            "← %s left room %s (%d members)",
            session.username, session.room_id, self.rooms.member_count(session.room_id),
        )

        notifications: List[Notification] = []
        roster = self._roster(session.room_id)
        if roster.recipients:
            notifications.append(roster)
        self.rooms.delete_if_empty(session.room_id)
        return notifications

    def _roster(self, room_id: str) -> Notification:
        return Notification(
            event=UPDATE_USERS,
            recipients=tuple(self.sessions.connections_in(room_id)),
            data=self.rooms.members(room_id),
        )

    def _room_info(self, room_id: str) -> RoomInfo:
        members = self.rooms.members(room_id)
        return RoomInfo(
            room_id=room_id,
            members=members,
            member_count=len(members),
            history_size=self.history.size(room_id),
        )
