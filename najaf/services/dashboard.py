"""
Admin Dashboard Statistics

Aggregates the order list into the figures shown on the admin dashboard and
builds the one-line summary handed to the sales analysis model.

Usage:
    stats = compute_dashboard_stats(state.orders)
    summary = build_sales_summary(stats)

Author: Khalil_Bannouri
Version: 1.0.0
"""

import logging
from typing import Sequence

import pandas as pd

from najaf.models import OrderStatus
from najaf.schemas import CategorySales, DashboardStats, Order

logger = logging.getLogger(__name__)


def _orders_frame(orders: Sequence[Order]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "id": order.id,
                "status": order.status.value,
                "total_amount": order.total_amount,
                "is_new": order.is_new,
            }
            for order in orders
        ],
        columns=["id", "status", "total_amount", "is_new"],
    )


def _items_frame(orders: Sequence[Order]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"category": item.category, "quantity": item.quantity}
            for order in orders
            for item in order.items
        ],
        columns=["category", "quantity"],
    )


def sales_by_category(orders: Sequence[Order]) -> list[CategorySales]:
    """Item quantities summed per category, in order of first appearance."""
    items = _items_frame(orders)
    if items.empty:
        return []

    grouped = items.groupby("category", sort=False)["quantity"].sum()
    return [CategorySales(name=name, sales=int(qty)) for name, qty in grouped.items()]


def compute_dashboard_stats(orders: Sequence[Order]) -> DashboardStats:
    df = _orders_frame(orders)

    if df.empty:
        return DashboardStats(
            total_orders=0,
            total_revenue=0,
            pending_orders=0,
            preparing_orders=0,
            sales_by_category=[],
        )

    counts = df["status"].value_counts()
    stats = DashboardStats(
        total_orders=len(df),
        total_revenue=float(df["total_amount"].sum()),
        pending_orders=int(counts.get(OrderStatus.PENDING.value, 0)),
        preparing_orders=int(counts.get(OrderStatus.PREPARING.value, 0)),
        sales_by_category=sales_by_category(orders),
    )
    logger.debug(f"Dashboard stats: {stats.total_orders} orders, revenue {stats.total_revenue}")
    return stats


def _format_amount(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def build_sales_summary(stats: DashboardStats) -> str:
    """
    One-line summary for the sales analysis prompt.

    Example:
        'Total Orders: 3, Revenue: 305, Top Categories: مشويات, مقبلات'
    """
    categories = ", ".join(entry.name for entry in stats.sales_by_category)
    return (
        f"Total Orders: {stats.total_orders}, "
        f"Revenue: {_format_amount(stats.total_revenue)}, "
        f"Top Categories: {categories}"
    )


def unseen_pending_count(orders: Sequence[Order]) -> int:
    """Orders that are still flagged new and have not left PENDING."""
    return sum(1 for o in orders if o.is_new and o.status == OrderStatus.PENDING)
