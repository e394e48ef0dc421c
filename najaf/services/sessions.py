"""
Session Manager

Keeps one AppState (and one order poller) per client session. A session is
the server-side counterpart of one open screen: the role picked on the login
screen, a private cart, and the session's copies of the shared lists.

Sessions live in process memory only; role choice is never persisted and a
restart logs everyone out.

Usage:
    manager = SessionManager()
    session = await manager.create(UserRole.KITCHEN)
    ...
    await manager.end(session.id)

Author: Khalil_Bannouri
Version: 1.0.0
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Optional

from najaf.core.config import get_settings
from najaf.core.exceptions import SessionNotFoundError
from najaf.models import UserRole
from najaf.services.notifications import BaseNotificationService, get_notification_service
from najaf.services.ordering import AppState, OrderSyncPoller, StateRepository
from najaf.services.ordering.catalog import generate_id
from najaf.services.storage import BaseKeyValueStore, get_storage

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """One client session."""
    id: str
    state: AppState
    poller: OrderSyncPoller
    created_at: float = field(default_factory=time.time)
    last_seen: float = field(default_factory=time.monotonic)

    @property
    def role(self) -> UserRole:
        return self.state.role


class SessionManager:
    """
    Registry of active sessions.

    Attributes:
        store: Shared key-value store every session reads and writes
        notifier: Service receiving the staff new-order chimes
        poll_interval: Seconds between order polls
        autostart_pollers: Start each session's poller on creation
        idle_timeout: Seconds without a request after which a session is ended
    """

    def __init__(
        self,
        store: Optional[BaseKeyValueStore] = None,
        notifier: Optional[BaseNotificationService] = None,
        poll_interval: Optional[float] = None,
        autostart_pollers: bool = True,
        idle_timeout: Optional[float] = None,
    ):
        settings = get_settings()
        self.store = store if store is not None else get_storage()
        self.notifier = notifier if notifier is not None else get_notification_service()
        self.poll_interval = poll_interval if poll_interval is not None else settings.poll_interval_seconds
        self.autostart_pollers = autostart_pollers
        self.idle_timeout = idle_timeout if idle_timeout is not None else settings.session_idle_timeout_seconds
        self._sessions: dict[str, Session] = {}
        self._sweeper: Optional[asyncio.Task] = None

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    async def create(self, role: UserRole) -> Session:
        """Open a session for role with state freshly loaded from the store."""
        session_id = generate_id()
        state = await AppState(StateRepository(self.store), role).load()
        poller = OrderSyncPoller(session_id, state, self.notifier, interval=self.poll_interval)

        session = Session(id=session_id, state=state, poller=poller)
        self._sessions[session_id] = session

        if self.autostart_pollers:
            poller.start()

        logger.info(f"🔑 Session {session_id[:8]} opened as {role.value} ({len(self)} active)")
        return session

    def get(self, session_id: Optional[str]) -> Session:
        """
        Raises:
            SessionNotFoundError: If the id is missing or unknown
        """
        session = self._sessions.get(session_id) if session_id else None
        if session is None:
            raise SessionNotFoundError(session_id or "")
        session.last_seen = time.monotonic()
        return session

    def switch_role(self, session_id: str, role: UserRole) -> Session:
        """Change the session's role; the cart is discarded."""
        session = self.get(session_id)
        session.state.set_role(role)
        return session

    async def end(self, session_id: str) -> None:
        """Log out: stop the poller and forget the session."""
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)

        await session.poller.stop()
        self.notifier.forget(session_id)
        logger.info(f"Session {session_id[:8]} ended ({len(self)} active)")

    async def evict_idle(self, now: Optional[float] = None) -> int:
        """
        End sessions whose last request is older than idle_timeout.

        Returns:
            Number of sessions ended
        """
        now = now if now is not None else time.monotonic()
        expired = [
            s.id for s in self._sessions.values()
            if now - s.last_seen > self.idle_timeout
        ]
        for session_id in expired:
            if session_id in self._sessions:
                await self.end(session_id)
        if expired:
            logger.info(f"⏱️ Evicted {len(expired)} idle session(s)")
        return len(expired)

    async def _sweep(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.evict_idle()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Idle session sweep failed")

    def start_sweeper(self, interval: Optional[float] = None) -> None:
        """Schedule the idle-session sweep on the running event loop."""
        if self._sweeper is not None and not self._sweeper.done():
            return
        interval = interval if interval is not None else get_settings().session_sweep_interval_seconds
        self._sweeper = asyncio.create_task(self._sweep(interval), name="session-sweeper")

    async def shutdown(self) -> None:
        """Stop the sweep and every poller, then drop all sessions."""
        if self._sweeper is not None:
            sweeper, self._sweeper = self._sweeper, None
            sweeper.cancel()
            try:
                await sweeper
            except asyncio.CancelledError:
                pass

        sessions = list(self._sessions.values())
        self._sessions.clear()
        await asyncio.gather(*(s.poller.stop() for s in sessions))
        for session in sessions:
            self.notifier.forget(session.id)
        if sessions:
            logger.info(f"Closed {len(sessions)} session(s)")
