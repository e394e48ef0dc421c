"""
Notification Service Abstract Base Class

Defines the interface for the staff new-order chime.
Supports both Mock (development) and Real (staging/production) implementations.

Author: Khalil_Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from najaf.models import UserRole
from najaf.schemas import ChimeEvent


@dataclass(frozen=True)
class ChimeTone:
    """
    Shape of the new-order chime.

    A sine wave sweeping from start_hz to end_hz over ramp_seconds while the
    gain decays from start_gain to end_gain over duration_seconds.
    """
    wave: str = "sine"
    start_hz: float = 500.0
    end_hz: float = 1000.0
    ramp_seconds: float = 0.1
    start_gain: float = 0.5
    end_gain: float = 0.01
    duration_seconds: float = 0.5


NEW_ORDER_CHIME = ChimeTone()


@dataclass
class NotificationResult:
    """Result from delivering a chime."""
    success: bool
    message_id: Optional[str] = None
    error_message: Optional[str] = None
    provider: str = "unknown"


class BaseNotificationService(ABC):
    """Abstract base class for notification services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def play_new_order_chime(
        self,
        session_id: str,
        role: UserRole,
        order_count: int,
    ) -> NotificationResult:
        """Deliver the new-order chime to a staff session."""
        pass

    @abstractmethod
    def drain(self, session_id: str) -> list[ChimeEvent]:
        """Return and forget the chimes waiting for a session."""
        pass

    def forget(self, session_id: str) -> None:
        """Drop anything held for a session that has ended."""
        self.drain(session_id)

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service readiness."""
        pass
