"""
Notification Hub

Live-connection registry and pusher for notifications:
- account id -> list of open connection ids (one per browser tab)
- shared "admins" group for admin/super_admin connections
- persist-then-push delivery to one account or to every admin

Constructed at application startup, stored on ``app.state`` and closed at
shutdown. Delivery is best-effort: persistence and push failures are
logged and swallowed.
"""

import asyncio
import uuid
from typing import Any, Callable, Dict, List, Optional, Set
from datetime import datetime
from dataclasses import dataclass, field
from enum import Enum
from fastapi import WebSocket
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database import get_session_local
from app.core.logging_config import logger
from app.core.types import utcnow
from app.models.notification import Notification, NotificationType
from app.models.user import UserRole
from app.services import notification_service

ADMIN_GROUP_ROLES = {UserRole.ADMIN.value, UserRole.SUPER_ADMIN.value}


class EventType(str, Enum):
    """WebSocket event types"""
    CONNECTED = "connected"
    NOTIFICATION = "notification"
    ERROR = "error"
    PING = "ping"
    PONG = "pong"


@dataclass
class LiveConnection:
    """One open WebSocket owned by exactly one account"""
    connection_id: str
    websocket: WebSocket
    user_id: str
    role: str
    connected_at: datetime = field(default_factory=utcnow)
    last_activity: datetime = field(default_factory=utcnow)

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_GROUP_ROLES


class NotificationHub:
    """
    Manages live notification connections.

    Handles multiple accounts with multiple connections per account.
    All registry mutations happen under one asyncio lock.
    """

    def __init__(self, session_factory: Optional[Callable[[], async_sessionmaker[AsyncSession]]] = None):
        # connection_id -> connection
        self._connections: Dict[str, LiveConnection] = {}
        # user_id -> [connection_id, ...]
        self._user_connections: Dict[str, List[str]] = {}
        # connection ids in the admins group
        self._admin_connections: Set[str] = set()
        self._lock = asyncio.Lock()
        self._session_factory = session_factory or get_session_local

    # ==================== Registry ====================

    async def connect(self, websocket: WebSocket, user_id: str, role: str) -> LiveConnection:
        """
        Accept an authenticated WebSocket and register it.

        Token validation happens before this call; a rejected handshake
        never reaches the registry.
        """
        await websocket.accept()

        role = role.value if isinstance(role, Enum) else str(role)
        connection = LiveConnection(
            connection_id=str(uuid.uuid4()),
            websocket=websocket,
            user_id=str(user_id),
            role=role,
        )

        async with self._lock:
            self._connections[connection.connection_id] = connection
            self._user_connections.setdefault(connection.user_id, []).append(connection.connection_id)
            if connection.is_admin:
                self._admin_connections.add(connection.connection_id)

        logger.info(
            f"WebSocket connected: user {connection.user_id} ({connection.connection_id})",
            extra={"event_type": "ws_connect", "connection_count": self.connection_count}
        )

        await self._send(connection, EventType.CONNECTED, {
            "connection_id": connection.connection_id,
            "user_id": connection.user_id,
        })

        return connection

    async def disconnect(self, connection_id: str) -> None:
        """Remove a connection; an account with no connections left is dropped entirely"""
        async with self._lock:
            connection = self._connections.pop(connection_id, None)
            if connection is None:
                return

            self._admin_connections.discard(connection_id)

            remaining = [
                cid for cid in self._user_connections.get(connection.user_id, [])
                if cid != connection_id
            ]
            if remaining:
                self._user_connections[connection.user_id] = remaining
            else:
                self._user_connections.pop(connection.user_id, None)

        logger.info(
            f"WebSocket disconnected: user {connection.user_id} ({connection_id})",
            extra={"event_type": "ws_disconnect", "connection_count": self.connection_count}
        )

    def connection_ids_for(self, user_id: str) -> List[str]:
        return list(self._user_connections.get(str(user_id), []))

    def is_online(self, user_id: str) -> bool:
        return str(user_id) in self._user_connections

    @property
    def online_user_ids(self) -> List[str]:
        return list(self._user_connections.keys())

    @property
    def admin_connection_ids(self) -> Set[str]:
        return set(self._admin_connections)

    @property
    def connection_count(self) -> int:
        return len(self._connections)

    # ==================== Push ====================

    async def _send(self, connection: LiveConnection, event_type: EventType, data: Dict[str, Any]) -> bool:
        message = {
            "type": event_type.value,
            "data": data,
            "timestamp": utcnow().isoformat()
        }
        try:
            await connection.websocket.send_json(message)
            connection.last_activity = utcnow()
            return True
        except Exception as e:
            logger.error(f"Error sending to connection {connection.connection_id}: {e}")
            return False

    async def _push(self, connection_ids: List[str], event_type: EventType, data: Dict[str, Any]) -> int:
        """Send to the given connections, dropping any that fail. Returns deliveries."""
        delivered = 0
        dead_connections = []

        for connection_id in connection_ids:
            connection = self._connections.get(connection_id)
            if connection is None:
                continue
            if await self._send(connection, event_type, data):
                delivered += 1
            else:
                dead_connections.append(connection_id)

        for connection_id in dead_connections:
            await self.disconnect(connection_id)

        return delivered

    async def push_to_user(self, user_id: str, data: Dict[str, Any],
                           event_type: EventType = EventType.NOTIFICATION) -> int:
        return await self._push(self.connection_ids_for(user_id), event_type, data)

    async def push_to_admins(self, data: Dict[str, Any],
                             event_type: EventType = EventType.NOTIFICATION) -> int:
        return await self._push(list(self._admin_connections), event_type, data)

    async def handle_ping(self, connection_id: str) -> None:
        connection = self._connections.get(connection_id)
        if connection:
            await self._send(connection, EventType.PONG, {"server_time": utcnow().isoformat()})

    # ==================== Persist + push ====================

    async def notify_user(
        self,
        user_id: str,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO
    ) -> Optional[Notification]:
        """
        Persist a notification for one account, then push it to that
        account's open connections. Offline accounts still get the row.
        """
        try:
            async with self._session_factory()() as db:
                notification = await notification_service.create_notification(
                    db, user_id, title, message, type
                )
                await db.commit()
        except Exception as e:
            logger.log_error_with_context(e, context="notify_user", target_user_id=str(user_id))
            return None

        await self.push_to_user(user_id, notification.to_push_payload())
        return notification

    async def notify_admins(
        self,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO
    ) -> int:
        """
        Persist one notification per admin account, then broadcast a single
        synthesized payload (no row id) to the admins group.
        Returns the number of rows written.
        """
        try:
            async with self._session_factory()() as db:
                admin_ids = await notification_service.create_admin_notifications(
                    db, title, message, type
                )
                await db.commit()
        except Exception as e:
            logger.log_error_with_context(e, context="notify_admins")
            return 0

        await self.push_to_admins({
            "title": title,
            "message": message,
            "type": type.value if isinstance(type, Enum) else type,
            "created_at": utcnow().isoformat(),
            "read": False,
        })
        return len(admin_ids)

    # ==================== Lifecycle ====================

    async def close_all(self, code: int = 1001) -> None:
        """Close every open connection (application shutdown)"""
        for connection_id in list(self._connections.keys()):
            connection = self._connections.get(connection_id)
            if connection is None:
                continue
            try:
                await connection.websocket.close(code=code)
            except Exception as e:
                logger.debug(f"Error closing connection {connection_id}: {e}")
            await self.disconnect(connection_id)
