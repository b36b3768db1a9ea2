"""
WebSocket push channel for admin dashboards.

    WS /ws/admin?token=<jwt>

The first message acknowledges the join; afterwards every relay event for
the ``admin`` group is forwarded as JSON. A client may send ``ping`` and
receives ``{"event": "pong"}``.
"""

import asyncio

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from starlette.concurrency import run_in_threadpool

from app.api.deps import get_auth_service
from app.core.exceptions import BaseAppException
from app.core.logging import get_logger
from app.core.notifications import ADMIN_GROUP, NotificationRelay, RelaySession, build_event, get_relay
from app.services.admin import AdminAuthenticationService

logger = get_logger(__name__)

router = APIRouter()


async def _forward_events(websocket: WebSocket, session: RelaySession) -> None:
    while True:
        event = await session.queue.get()
        await websocket.send_json(event)


async def _collect(forwarder: asyncio.Task) -> None:
    """Await a cancelled forwarder, logging any send failure it hit."""
    try:
        await forwarder
    except asyncio.CancelledError:
        pass
    except (OSError, RuntimeError, WebSocketDisconnect) as e:
        logger.warning("Admin channel forwarder stopped", extra={"error": str(e)})


@router.websocket("/ws/admin")
async def admin_channel(
    websocket: WebSocket,
    token: str = Query(""),
    auth_service: AdminAuthenticationService = Depends(get_auth_service),
    relay: NotificationRelay = Depends(get_relay),
):
    try:
        admin = await run_in_threadpool(auth_service.resolve_token, token)
    except BaseAppException as e:
        logger.warning("Rejected admin channel connection", extra={"reason": e.message})
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await websocket.accept()
    session = relay.connect(ADMIN_GROUP, admin_id=admin.id)
    await websocket.send_json(
        build_event("connected", {"session_id": session.session_id, "group": ADMIN_GROUP}, "Joined admin channel")
    )

    forwarder = asyncio.create_task(_forward_events(websocket, session))
    try:
        while True:
            message = await websocket.receive_text()
            if message == "ping":
                await websocket.send_json({"event": "pong"})
    except WebSocketDisconnect:
        pass
    finally:
        relay.disconnect(session)
        forwarder.cancel()
        await _collect(forwarder)
