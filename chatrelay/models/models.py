# chatrelay/models/models.py
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

# Outbound event names
ROOM_ERROR = "room-error"
CHAT_HISTORY = "chat-history"
UPDATE_USERS = "update-users"
RECEIVE_MESSAGE = "receive-message"

# Inbound actions
JOIN_ROOM = "join-room"
SEND_MESSAGE = "send-message"


class ChatMessage(BaseModel):
    """A relayed chat message. room_id is kept server-side only."""
    model_config = ConfigDict(frozen=True)

    message: str
    username: str
    timestamp: str
    room_id: str = Field(exclude=True)


class Session(BaseModel):
    model_config = ConfigDict(frozen=True)

    username: str
    room_id: str


class Notification(BaseModel):
    """One outbound event and the connections it must be delivered to."""
    model_config = ConfigDict(frozen=True)

    event: str
    recipients: Tuple[str, ...]
    data: Any = None

    def frame(self) -> dict:
        return {"type": self.event, "data": self.data}


class JoinRoomRequest(BaseModel):
    roomId: str
    username: str


class SendMessageRequest(BaseModel):
    roomId: str
    message: str
    username: str
    timestamp: Optional[str] = None


class RoomInfo(BaseModel):
    room_id: str
    members: List[str]
    member_count: int = 0
    history_size: int = 0
