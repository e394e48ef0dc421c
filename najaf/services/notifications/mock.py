"""
Mock Notification Service

Records chimes for development and tests.
Nothing is delivered to a client - each chime is just logged and kept in
history.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
import uuid
from collections import defaultdict, deque

from najaf.models import UserRole
from najaf.schemas import ChimeEvent
from najaf.services.notifications.base import (
    BaseNotificationService,
    NotificationResult,
)

logger = logging.getLogger(__name__)


class MockNotificationService(BaseNotificationService):
    """Mock notification service for development."""

    def __init__(self, max_recorded: int = 50):
        self._history: dict[str, deque[tuple[UserRole, int]]] = defaultdict(
            lambda: deque(maxlen=max_recorded)
        )
        logger.info("MockNotificationService initialized")

    @property
    def provider_name(self) -> str:
        return "mock"

    async def play_new_order_chime(
        self,
        session_id: str,
        role: UserRole,
        order_count: int,
    ) -> NotificationResult:
        """Log the chime instead of playing it."""
        message_id = f"chime_mock_{uuid.uuid4().hex[:12]}"
        self._history[session_id].append((role, order_count))
        logger.info(
            f"🔔 Mock chime for {role.value} session {session_id[:8]} "
            f"({order_count} orders, ID: {message_id})"
        )
        return NotificationResult(
            success=True,
            message_id=message_id,
            provider="mock"
        )

    @property
    def history(self) -> list[tuple[str, UserRole, int]]:
        """Recorded chimes of sessions still known, as (session_id, role, order_count)."""
        return [
            (session_id, role, count)
            for session_id, entries in self._history.items()
            for role, count in entries
        ]

    def drain(self, session_id: str) -> list[ChimeEvent]:
        """Nothing is delivered in development; the session's record is dropped."""
        self._history.pop(session_id, None)
        return []

    def count_for(self, session_id: str) -> int:
        entries = self._history.get(session_id)
        return len(entries) if entries else 0

    async def health_check(self) -> bool:
        """Mock always returns healthy."""
        return True
