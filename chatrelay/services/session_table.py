# chatrelay/services/session_table.py

from __future__ import annotations

from typing import Dict, List, Optional

from chatrelay.models.models import Session


class SessionTable:
    """
    Maps each live connection to the (username, room) it is joined as.

    This is the source of truth for who a connection is. Room membership
    and broadcast recipients are derived from it. No validation happens
    here; callers check usernames and room ids before calling set().
    """

    def __init__(self) -> None:
        # Map: connection id -> Session
        self.sessions: Dict[str, Session] = {}

    def get(self, conn_id: str) -> Optional[Session]:
        return self.sessions.get(conn_id)

    def set(self, conn_id: str, username: str, room_id: str) -> Session:
        session = Session(username=username, room_id=room_id)
        # Drop first so a moved connection goes to the end of the fan-out order
        self.sessions.pop(conn_id, None)
        self.sessions[conn_id] = session
        return session

    def remove(self, conn_id: str) -> Optional[Session]:
        return self.sessions.pop(conn_id, None)

    def connections_in(self, room_id: str) -> List[str]:
        """Connection ids whose session is in room_id, oldest session first."""
        return [
            conn_id
            for conn_id, session in self.sessions.items()
            if session.room_id == room_id
        ]

    def __contains__(self, conn_id: str) -> bool:
        return conn_id in self.sessions

    def __len__(self) -> int:
        return len(self.sessions)
