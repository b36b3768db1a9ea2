"""
Real-time notification relay.

Admin dashboards connect over a WebSocket and join a broadcast group.
Services publish events (``new-booking``, ``booking-updated``) through the
relay; each connected session has its own queue drained by the WebSocket
handler. Publishing never raises: a dead or slow session must not fail the
request that triggered the event.
"""

from __future__ import annotations

import asyncio
import threading
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from app.core.logging import get_logger

logger = get_logger(__name__)

ADMIN_GROUP = "admin"

EVENT_NEW_BOOKING = "new-booking"
EVENT_BOOKING_UPDATED = "booking-updated"


@dataclass
class RelaySession:
    """One connected dashboard."""

    group: str
    loop: asyncio.AbstractEventLoop
    queue: asyncio.Queue
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    admin_id: Optional[str] = None


def build_event(event: str, data: Dict[str, Any], message: str) -> Dict[str, Any]:
    return {
        "event": event,
        "data": data,
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


class NotificationRelay:
    """
    Fan-out of dashboard events to connected sessions.

    ``publish`` is synchronous and may be called from worker threads (sync
    route handlers run in a threadpool); delivery is handed to each
    session's event loop with ``call_soon_threadsafe``.
    """

    def __init__(self) -> None:
        self._sessions: Dict[str, RelaySession] = {}
        self._lock = threading.Lock()

    def connect(self, group: str = ADMIN_GROUP, admin_id: Optional[str] = None) -> RelaySession:
        """Register a session; must be called from inside the session's event loop."""
        session = RelaySession(
            group=group,
            loop=asyncio.get_running_loop(),
            queue=asyncio.Queue(),
            admin_id=admin_id,
        )
        with self._lock:
            self._sessions[session.session_id] = session
        logger.info(
            "Relay session connected",
            extra={"session_id": session.session_id, "group": group, "admin_id": admin_id}
        )
        return session

    def disconnect(self, session: RelaySession) -> None:
        with self._lock:
            self._sessions.pop(session.session_id, None)
        logger.info("Relay session disconnected", extra={"session_id": session.session_id})

    def session_count(self, group: Optional[str] = None) -> int:
        with self._lock:
            return sum(1 for s in self._sessions.values() if group is None or s.group == group)

    def publish(self, group: str, event: str, data: Dict[str, Any], message: str = "") -> int:
        """
        Broadcast an event to every session of ``group``.

        Returns:
            Number of sessions the event was handed to
        """
        payload = build_event(event, data, message)
        with self._lock:
            targets = [s for s in self._sessions.values() if s.group == group]

        delivered = 0
        for session in targets:
            try:
                session.loop.call_soon_threadsafe(session.queue.put_nowait, payload)
                delivered += 1
            except RuntimeError as exc:
                # Loop already closed; the session will never drain again
                logger.warning(
                    "Dropping relay session",
                    extra={"session_id": session.session_id, "error": str(exc)}
                )
                self.disconnect(session)

        logger.debug(
            "Relay event published",
            extra={"group": group, "relay_event": event, "delivered": delivered}
        )
        return delivered


class RecordingRelay(NotificationRelay):
    """Relay that also keeps every published event; used by tests and local tooling."""

    def __init__(self) -> None:
        super().__init__()
        self.events: List[Dict[str, Any]] = []

    def publish(self, group: str, event: str, data: Dict[str, Any], message: str = "") -> int:
        self.events.append({"group": group, "event": event, "data": data, "message": message})
        return super().publish(group, event, data, message)


_relay = NotificationRelay()


def get_relay() -> NotificationRelay:
    """FastAPI dependency returning the process-wide relay."""
    return _relay
