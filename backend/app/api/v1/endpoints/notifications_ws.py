"""
Notification WebSocket Endpoint

Connection URL: WS /api/v1/ws/notifications?token=<jwt>
(an ``Authorization: Bearer <jwt>`` header is accepted as well)

Server events:
- connected: handshake accepted
- notification: a new notification (persisted row, or a synthesized
  payload without id for admin broadcasts)
- pong: reply to a client ``{"type": "ping"}``
"""

from typing import Optional

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect

from app.core.database import get_session_local
from app.core.exceptions import AdminPanelError
from app.core.logging_config import logger
from app.modules.auth.dependencies import resolve_user_from_token
from app.services.notification_hub import EventType, NotificationHub

router = APIRouter()

WS_CLOSE_UNAUTHORIZED = 4001


def extract_ws_token(websocket: WebSocket, token: Optional[str]) -> Optional[str]:
    if token:
        return token
    authorization = websocket.headers.get("authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


@router.websocket("/ws/notifications")
async def notifications_websocket(websocket: WebSocket, token: Optional[str] = Query(None)):
    # Authenticate before accepting; a bad token never reaches the registry
    async with get_session_local()() as db:
        try:
            user = await resolve_user_from_token(db, extract_ws_token(websocket, token))
        except AdminPanelError as e:
            logger.info(f"WebSocket rejected: {e.message}")
            await websocket.close(code=WS_CLOSE_UNAUTHORIZED, reason=e.message)
            return
        user_id, role = user.id, user.role

    hub: NotificationHub = websocket.app.state.notification_hub
    connection = await hub.connect(websocket, user_id=user_id, role=role)

    try:
        while True:
            data = await websocket.receive_json()
            if isinstance(data, dict) and data.get("type") == EventType.PING.value:
                await hub.handle_ping(connection.connection_id)
    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error(f"WebSocket error for user {user_id}: {e}")
    finally:
        await hub.disconnect(connection.connection_id)
