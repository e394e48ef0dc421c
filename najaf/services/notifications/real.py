"""
Real Notification Service

Queues chime events per staff session. The staff client collects them from
GET /api/session/notifications and plays the tone described in each event.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
import time
import uuid
from collections import defaultdict, deque

from najaf.models import UserRole
from najaf.schemas import ChimeEvent
from najaf.services.notifications.base import (
    BaseNotificationService,
    ChimeTone,
    NEW_ORDER_CHIME,
    NotificationResult,
)

logger = logging.getLogger(__name__)


class RealNotificationService(BaseNotificationService):
    """Per-session chime queues for the staff client."""

    def __init__(self, tone: ChimeTone = NEW_ORDER_CHIME, max_queued: int = 50):
        self.tone = tone
        self._queues: dict[str, deque[ChimeEvent]] = defaultdict(
            lambda: deque(maxlen=max_queued)
        )
        logger.info("RealNotificationService initialized")

    @property
    def provider_name(self) -> str:
        return "queue"

    async def play_new_order_chime(
        self,
        session_id: str,
        role: UserRole,
        order_count: int,
    ) -> NotificationResult:
        """Queue a chime for the session's client."""
        if not role.is_staff:
            return NotificationResult(
                success=False,
                error_message="Chimes are only delivered to staff sessions",
                provider=self.provider_name
            )

        event = ChimeEvent(
            session_id=session_id,
            order_count=order_count,
            created_at=int(time.time() * 1000),
            wave=self.tone.wave,
            start_hz=self.tone.start_hz,
            end_hz=self.tone.end_hz,
            ramp_seconds=self.tone.ramp_seconds,
            start_gain=self.tone.start_gain,
            end_gain=self.tone.end_gain,
            duration_seconds=self.tone.duration_seconds,
        )
        self._queues[session_id].append(event)
        message_id = f"chime_{uuid.uuid4().hex[:12]}"
        logger.info(f"🔔 Chime queued for {role.value} session {session_id[:8]} (ID: {message_id})")

        return NotificationResult(
            success=True,
            message_id=message_id,
            provider=self.provider_name
        )

    def drain(self, session_id: str) -> list[ChimeEvent]:
        queue = self._queues.pop(session_id, None)
        return list(queue) if queue else []

    async def health_check(self) -> bool:
        return True
