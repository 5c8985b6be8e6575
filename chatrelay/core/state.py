# chatrelay/core/state.py
from __future__ import annotations

from datetime import datetime, timezone

from chatrelay.core.config import settings
from chatrelay.services.connection_manager import ConnectionManager
from chatrelay.services.event_router import EventRouter
from chatrelay.services.history_store import HistoryStore
from chatrelay.services.room_registry import RoomRegistry
from chatrelay.services.session_table import SessionTable


def build_router(history_limit: int = settings.HISTORY_LIMIT) -> EventRouter:
    """Wire a fresh set of stores into an EventRouter."""
    history = HistoryStore(limit=history_limit)
    return EventRouter(
        sessions=SessionTable(),
        rooms=RoomRegistry(history),
        history=history,
    )


# Process-wide app state, built once at startup
event_router = build_router()
connection_manager = ConnectionManager(router=event_router)

app_start_time: datetime = datetime.now(timezone.utc)
