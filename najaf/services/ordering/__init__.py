"""
Ordering Module

Cart, order lifecycle, catalog, the per-session state container and the
order sync poller.
"""

from najaf.services.ordering.cart import Cart
from najaf.services.ordering.catalog import DEFAULT_PRODUCTS, build_product
from najaf.services.ordering.lifecycle import allowed_next_statuses, apply_transition
from najaf.services.ordering.poller import OrderSyncPoller
from najaf.services.ordering.repository import StateRepository
from najaf.services.ordering.state import AppState, CustomerDetails

__all__ = [
    "AppState",
    "Cart",
    "CustomerDetails",
    "DEFAULT_PRODUCTS",
    "OrderSyncPoller",
    "StateRepository",
    "allowed_next_statuses",
    "apply_transition",
    "build_product",
]
