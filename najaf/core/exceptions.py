"""
Domain Exceptions

Raised by the ordering services and translated to HTTP responses in
najaf.main. Failures of optional enrichments (text generation, chimes)
and unreadable persisted state are NOT represented here: those degrade
silently with a log entry.
"""

from typing import Optional


class NajafError(Exception):
    """Base class for all domain errors."""


class InvalidStatusTransitionError(NajafError):
    """An order status change that is not a forward step of the lifecycle."""

    def __init__(self, order_id: str, current: str, requested: str):
        self.order_id = order_id
        self.current = current
        self.requested = requested
        super().__init__(
            f"Order {order_id} cannot move from {current} to {requested}"
        )


class SessionNotFoundError(NajafError):
    """No session with the given id (never created, or logged out)."""

    def __init__(self, session_id: Optional[str]):
        self.session_id = session_id
        super().__init__(f"Unknown session: {session_id}")


class ProductNotFoundError(NajafError):
    """Product id not present in the session's catalog."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class ViewNotAvailableError(NajafError):
    """The active role does not have access to the requested view."""

    def __init__(self, role: str, view: str):
        self.role = role
        self.view = view
        super().__init__(f"View {view} is not available for role {role}")


class EmptyCartError(NajafError):
    """Checkout attempted with nothing in the cart."""


class StorageError(NajafError):
    """The persisted key-value store could not complete a write."""
