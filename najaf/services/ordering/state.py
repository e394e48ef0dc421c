"""
Session State Container

One AppState per session: the active role, the private cart, and the
session's in-memory copies of the shared product and order lists.

Every mutation of products or orders replaces the in-memory list and then
rewrites the full list in the shared store. There is no merge with what
other sessions may have written in the meantime; the order poller only
picks up net growth of the persisted order list.

Usage:
    state = AppState(StateRepository(get_storage()), UserRole.CUSTOMER)
    await state.load()
    state.add_to_cart(state.get_product("1"))
    order = await state.place_order(details)

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
from dataclasses import dataclass
from typing import Optional

from najaf.core.exceptions import ProductNotFoundError
from najaf.models import OrderStatus, PaymentMethod, UserRole
from najaf.schemas import CartItem, Order, Product
from najaf.services.ordering.cart import Cart
from najaf.services.ordering.catalog import generate_id, now_millis
from najaf.services.ordering.lifecycle import apply_transition
from najaf.services.ordering.repository import StateRepository

logger = logging.getLogger(__name__)


@dataclass
class CustomerDetails:
    """Checkout form contents."""
    name: str
    phone: str
    address: str
    payment: PaymentMethod = PaymentMethod.CASH


class AppState:
    """
    Per-session state container.

    Attributes:
        role: Active session role
        cart: Private cart of this session
        products: Session copy of the shared catalog
        orders: Session copy of the shared order list, newest first
    """

    def __init__(self, repository: StateRepository, role: UserRole):
        self.repository = repository
        self.role = role
        self.cart = Cart()
        self.products: list[Product] = []
        self.orders: list[Order] = []

    async def load(self) -> "AppState":
        """Read products and orders from the shared store (with fallbacks)."""
        self.products = await self.repository.load_products()
        self.orders = await self.repository.load_orders()
        logger.debug(
            f"State loaded: {len(self.products)} products, {len(self.orders)} orders"
        )
        return self

    @property
    def is_staff(self) -> bool:
        return self.role.is_staff

    def set_role(self, role: UserRole) -> None:
        """Switch role; the cart belongs to the previous role and is dropped."""
        if role != self.role:
            logger.info(f"Role switch {self.role.value} → {role.value}")
        self.role = role
        self.cart.clear()

    # =========================================================================
    # CATALOG
    # =========================================================================

    def get_product(self, product_id: str) -> Product:
        for product in self.products:
            if product.id == product_id:
                return product
        raise ProductNotFoundError(product_id)

    async def add_product(self, product: Product) -> None:
        """Append to the catalog; the caller's id is taken as-is."""
        products = [*self.products, product]
        await self.repository.save_products(products)
        self.products = products
        logger.info(f"Product added: {product.name} ({product.price})")

    # =========================================================================
    # CART
    # =========================================================================

    def add_to_cart(self, product: Product) -> CartItem:
        return self.cart.add(product)

    def remove_from_cart(self, product_id: str) -> None:
        self.cart.remove(product_id)

    def update_cart_item_quantity(self, product_id: str, delta: int) -> Optional[CartItem]:
        return self.cart.set_quantity(product_id, delta)

    def set_cart_item_notes(self, product_id: str, notes: Optional[str]) -> Optional[CartItem]:
        return self.cart.set_notes(product_id, notes)

    def clear_cart(self) -> None:
        self.cart.clear()

    # =========================================================================
    # ORDERS
    # =========================================================================

    def find_order(self, order_id: str) -> Optional[Order]:
        for order in self.orders:
            if order.id == order_id:
                return order
        return None

    async def place_order(self, details: CustomerDetails) -> Order:
        """
        Snapshot the cart into a new PENDING order and clear the cart.

        An empty cart still produces an (empty) order here; rejecting it is
        left to the caller. Nothing changes in memory, and the cart is kept,
        when the store write fails.
        """
        items = self.cart.items
        order = Order(
            id=generate_id(),
            customer_name=details.name,
            customer_phone=details.phone,
            customer_address=details.address,
            items=items,
            total_amount=sum(item.price * item.quantity for item in items),
            status=OrderStatus.PENDING,
            payment_method=details.payment,
            created_at=now_millis(),
            is_new=True,
        )

        orders = [order, *self.orders]
        await self.repository.save_orders(orders)
        self.orders = orders
        self.clear_cart()

        logger.info(
            f"Order #{order.short_number} placed by {order.customer_name}: "
            f"{len(order.items)} items, total {order.total_amount}"
        )
        return order

    async def update_order_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        """
        Move an order forward.

        Returns:
            The updated order, or None for an unknown id

        Raises:
            InvalidStatusTransitionError: If the move is not a forward step
        """
        current = self.find_order(order_id)
        if current is None:
            logger.debug(f"Status update ignored, unknown order {order_id}")
            return None

        updated = apply_transition(current, status)
        await self._replace_order(updated)
        logger.info(f"Order #{updated.short_number}: {current.status.value} → {status.value}")
        return updated

    async def mark_order_as_seen(self, order_id: str) -> Optional[Order]:
        """Clear the new-order highlight; unknown ids are ignored."""
        current = self.find_order(order_id)
        if current is None:
            return None

        updated = current.model_copy(update={"is_new": False})
        await self._replace_order(updated)
        return updated

    async def _replace_order(self, updated: Order) -> None:
        orders = [updated if o.id == updated.id else o for o in self.orders]
        await self.repository.save_orders(orders)
        self.orders = orders
