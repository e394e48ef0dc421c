"""
Typed access to the shared store.

Reads never raise: absent, empty or malformed entries fall back to the
default menu / an empty order list and the problem is logged. Writes always
replace the whole list.
"""

import json
import logging
from typing import Optional

from pydantic import TypeAdapter, ValidationError

from najaf.schemas import Order, Product
from najaf.services.ordering.catalog import default_products
from najaf.services.storage import BaseKeyValueStore, ORDERS_KEY, PRODUCTS_KEY

logger = logging.getLogger(__name__)

_products_adapter = TypeAdapter(list[Product])
_orders_adapter = TypeAdapter(list[Order])


class StateRepository:
    """Loads and saves the product and order lists."""

    def __init__(self, store: BaseKeyValueStore):
        self.store = store

    async def load_products(self) -> list[Product]:
        raw = await self.store.get(PRODUCTS_KEY)
        if raw:
            try:
                products = _products_adapter.validate_json(raw)
                if products:
                    return products
            except ValidationError as e:
                logger.warning(f"Failed to load products from storage: {e.error_count()} errors")
        return default_products()

    async def save_products(self, products: list[Product]) -> None:
        await self.store.set(PRODUCTS_KEY, _dump(products))

    async def load_orders(self) -> list[Order]:
        orders = await self.read_orders()
        return orders if orders is not None else []

    async def read_orders(self) -> Optional[list[Order]]:
        """
        Orders currently persisted.

        Returns:
            The list, or None when nothing usable is stored
        """
        raw = await self.store.get(ORDERS_KEY)
        if not raw:
            return None
        try:
            return _orders_adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Failed to load orders from storage: {e.error_count()} errors")
            return None

    async def save_orders(self, orders: list[Order]) -> None:
        await self.store.set(ORDERS_KEY, _dump(orders))


def _dump(records) -> str:
    return json.dumps([record.to_storage() for record in records], ensure_ascii=False)
