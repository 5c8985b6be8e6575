# chatrelay/api/routes/rooms.py

from typing import List

from fastapi import APIRouter, HTTPException

from chatrelay.core import state
from chatrelay.models.models import RoomInfo

router = APIRouter()

# ============================================================================
# ROOM READ ENDPOINTS
# ============================================================================

@router.get("/rooms", response_model=List[RoomInfo])
async def list_rooms():
    """
    List all active rooms.

    Rooms only exist while someone is in them, so every entry has at
    least one member.

    Returns:
        List[RoomInfo]: room id, members, member count and history size
    """
    return state.event_router.rooms_overview()


@router.get("/rooms/{room_id}", response_model=RoomInfo)
async def get_room(room_id: str):
    """
    Get details of a specific room.

    Args:
        room_id: UUID of room

    Raises:
        HTTPException: 404 if nobody is in the room
    """
    room = state.event_router.room_info(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room
