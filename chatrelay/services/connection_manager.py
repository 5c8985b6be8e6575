# chatrelay/services/connection_manager.py

from __future__ import annotations

from typing import Dict, Iterable, List
import logging
import uuid

from fastapi import WebSocket

from chatrelay.models.models import Notification
from chatrelay.services.event_router import EventRouter

logger = logging.getLogger(__name__)

# ============================================================================
# WEBSOCKET CONNECTION MANAGER
# ============================================================================

class ConnectionManager:
    """
    Binds live WebSockets to connection ids and delivers router output.

    The EventRouter only knows connection ids. This class owns the other
    half of that mapping: it accepts sockets, hands out ids, forwards
    inbound events to the router and writes each resulting Notification
    to the sockets it names.

    Data Structures:
        connections: Maps connection id -> WebSocket
                     Example: {"6f1c...": websocket1}

    Error Handling:
        A failed send marks the connection as gone. After the current
        batch is delivered, each failed connection is disconnected through
        the router so its room roster is updated, and the resulting
        notifications are delivered in turn.
    """

    def __init__(self, router: EventRouter) -> None:
        self.router = router
        self.connections: Dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket) -> str:
        """Accept a WebSocket and return its new connection id."""
        await websocket.accept()
        conn_id = uuid.uuid4().hex
        self.connections[conn_id] = websocket
        logger.info("✓ Connection %s opened. Total: %d", conn_id, len(self.connections))
        return conn_id

    async def join_room(self, conn_id: str, room_id: str, username: str) -> None:
        if conn_id not in self.connections:
            return  # Dropped after a failed send
        await self.deliver(self.router.join(conn_id, room_id, username))

    async def send_message(
        self,
        conn_id: str,
        room_id: str,
        message: str,
        username: str,
        timestamp: str | None = None,
    ) -> None:
        if conn_id not in self.connections:
            return
        await self.deliver(self.router.send(conn_id, room_id, message, username, timestamp))

    async def reject(self, conn_id: str, reason: str) -> None:
        await self.deliver([self.router.reject(conn_id, reason)])

    async def disconnect(self, conn_id: str) -> None:
        """
        Forget a closed connection and tell its room.

        Safe to call more than once for the same id. The router is always
        told, so a session can never outlive its socket entry.
        """
        if self.connections.pop(conn_id, None) is not None:
            logger.info("✗ Connection %s closed. Total: %d", conn_id, len(self.connections))
        await self.deliver(self.router.disconnect(conn_id))

    async def deliver(self, notifications: Iterable[Notification]) -> None:
        """
        Send each notification to every connection it names, in order.

        Recipients that are no longer connected are skipped.
        """
        failed: List[str] = []
        for notification in notifications:
            frame = notification.frame()
            for conn_id in notification.recipients:
                websocket = self.connections.get(conn_id)
                if websocket is None or conn_id in failed:
                    continue
                try:
                    await websocket.send_json(frame)
                except Exception as e:
                    logger.error("Send error to %s: %s", conn_id, e)
                    failed.append(conn_id)

        for conn_id in failed:
            await self.disconnect(conn_id)
