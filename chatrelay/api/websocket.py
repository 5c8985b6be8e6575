# chatrelay/api/websocket.py

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from chatrelay.core import state
from chatrelay.models.models import (
    JOIN_ROOM,
    SEND_MESSAGE,
    JoinRoomRequest,
    SendMessageRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()

INVALID_JSON = "Invalid JSON"
INVALID_PAYLOAD = "Invalid payload"

# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for the chat relay.

    Protocol:
    =========

    Client -> Server Actions:
    -------------------------
    Join Room:
        {"action": "join-room", "data": {"roomId": "<uuid>", "username": "alice"}}
        Response: {"type": "chat-history", "data": [{message, username, timestamp}, ...]}
        Room:     {"type": "update-users", "data": ["alice", ...]}

    Send Message:
        {
            "action": "send-message",
            "data": {
                "roomId": "<uuid>",
                "message": "hi",
                "username": "alice",
                "timestamp": "<optional display string>"
            }
        }
        Others in room: {"type": "receive-message", "data": {message, username, timestamp}}

    Server -> Client Errors:
    ------------------------
        {"type": "room-error", "data": {"message": "..."}}

    Lifecycle:
    ==========
    1. Client connects, gets a server-side connection id
    2. Client sends "join-room"; joining another room later moves it
    3. On disconnect the user leaves its room and the roster is re-sent

    Error Handling:
        - Invalid JSON, bad payloads, unknown actions: "room-error" to sender
        - Connection errors: logged, then cleaned up like a disconnect
    """
    manager = state.connection_manager
    conn_id = await manager.connect(websocket)

    try:
        while True:
            data = await websocket.receive_text()

            try:
                frame = json.loads(data)
            except json.JSONDecodeError:
                await manager.reject(conn_id, INVALID_JSON)
                continue

            if not isinstance(frame, dict):
                await manager.reject(conn_id, INVALID_PAYLOAD)
                continue

            action = frame.get("action")
            payload = frame.get("data")
            logger.debug("Websocket input from %s: action=%s", conn_id, action)

            try:
                if action == JOIN_ROOM:
                    request = JoinRoomRequest.model_validate(payload)
                    await manager.join_room(conn_id, request.roomId, request.username)

                elif action == SEND_MESSAGE:
                    request = SendMessageRequest.model_validate(payload)
                    await manager.send_message(
                        conn_id,
                        request.roomId,
                        request.message,
                        request.username,
                        request.timestamp,
                    )

                else:
                    await manager.reject(conn_id, f"Unknown action: {action}")

            except ValidationError:
                await manager.reject(conn_id, INVALID_PAYLOAD)

    except WebSocketDisconnect:
        await manager.disconnect(conn_id)
    except Exception as e:
        logger.error("WebSocket error: %s", e)
        await manager.disconnect(conn_id)
