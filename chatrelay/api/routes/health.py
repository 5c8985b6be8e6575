# chatrelay/api/routes/health.py

from datetime import datetime, timezone

from fastapi import APIRouter

from chatrelay.core import state

router = APIRouter()

@router.get("/health")
async def health():
    """
    Health check endpoint.

    Returns current system status, connection counts and room counts.
    Used by container health probes and monitoring.

    Returns:
        dict: Status, open sockets, joined connections, active rooms,
              messages relayed and uptime
    """
    uptime_seconds = (datetime.now(timezone.utc) - state.app_start_time).total_seconds()
    return {
        "status": "healthy",
        "connections": len(state.connection_manager.connections),
        "joined_connections": state.event_router.connection_count(),
        "active_rooms": len(state.event_router.rooms_overview()),
        "total_messages": state.event_router.messages_relayed,
        "uptime_seconds": round(uptime_seconds, 1),
    }
