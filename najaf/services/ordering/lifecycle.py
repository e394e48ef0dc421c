"""
Order Lifecycle

Forward-only status machine:

    PENDING → PREPARING → READY → DELIVERED
       └──→ CANCELLED

DELIVERED and CANCELLED are terminal. Re-writing the current status, skipping
a stage and moving backwards are all rejected.
"""

import logging

from najaf.core.exceptions import InvalidStatusTransitionError
from najaf.models import ORDER_TRANSITIONS, OrderStatus
from najaf.schemas import Order

logger = logging.getLogger(__name__)


def allowed_next_statuses(status: OrderStatus) -> list[OrderStatus]:
    """Statuses staff may move an order to from the given one."""
    return list(ORDER_TRANSITIONS[status])


def can_transition(current: OrderStatus, requested: OrderStatus) -> bool:
    return requested in ORDER_TRANSITIONS[current]


def apply_transition(order: Order, requested: OrderStatus) -> Order:
    """
    Return a copy of order with the requested status.

    Raises:
        InvalidStatusTransitionError: If requested is not a forward step
    """
    if not can_transition(order.status, requested):
        logger.warning(
            f"Rejected status change for order #{order.short_number}: "
            f"{order.status.value} → {requested.value}"
        )
        raise InvalidStatusTransitionError(order.id, order.status.value, requested.value)
    return order.model_copy(update={"status": requested})
