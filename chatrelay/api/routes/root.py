# chatrelay/api/routes/root.py

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root():
    """
    Root endpoint - API information.

    Returns basic info about the relay and where to connect.
    """
    return {
        "message": "Chatrelay - room-scoped real-time chat",
        "version": "1.0",
        "features": ["rooms", "history_backfill", "user_lists"],
        "endpoints": {
            "websocket": "/ws",
            "rooms": "/rooms",
            "health": "/health",
        },
    }
