"""
Order Sync Poller

Simulates push notification of new orders between sessions that share one
store. Every interval the persisted order list is read; if it holds more
orders than the session's in-memory list, the in-memory list is replaced
wholesale and, for staff sessions, the new-order chime is played once.

This is a length heuristic, not a diff: status changes made by other
sessions and removals are not picked up.

Author: Khalil_Bannouri
Version: 1.0.0
"""

import asyncio
import logging
from typing import Optional

from najaf.services.notifications.base import BaseNotificationService
from najaf.services.ordering.state import AppState

logger = logging.getLogger(__name__)


class OrderSyncPoller:
    """
    Fixed-interval reconciliation of one session's orders.

    Attributes:
        session_id: Session the poller belongs to (used for chimes)
        state: The session's state container
        notifier: Service used to play the staff chime
        interval: Seconds between polls
    """

    def __init__(
        self,
        session_id: str,
        state: AppState,
        notifier: BaseNotificationService,
        interval: float = 2.0,
    ):
        self.session_id = session_id
        self.state = state
        self.notifier = notifier
        self.interval = interval
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def poll_once(self) -> bool:
        """
        Run one reconciliation tick.

        Returns:
            True if the in-memory order list was replaced
        """
        persisted = await self.state.repository.read_orders()
        if persisted is None:
            return False
        if len(persisted) <= len(self.state.orders):
            return False

        grown_by = len(persisted) - len(self.state.orders)
        self.state.orders = persisted
        logger.info(
            f"Session {self.session_id[:8]}: picked up {grown_by} new order(s) "
            f"({len(persisted)} total)"
        )

        if self.state.is_staff:
            await self.notifier.play_new_order_chime(
                self.session_id, self.state.role, len(persisted)
            )
        return True

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.poll_once()
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception(f"Order poll failed for session {self.session_id[:8]}")

    def start(self) -> None:
        """Schedule the polling loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(
            self._run(), name=f"order-poller-{self.session_id[:8]}"
        )
        logger.debug(f"Poller started for session {self.session_id[:8]} (every {self.interval}s)")

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug(f"Poller stopped for session {self.session_id[:8]}")
