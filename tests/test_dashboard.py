from najaf.models import OrderStatus
from najaf.schemas import CartItem, Product
from najaf.services.dashboard import (
    build_sales_summary,
    compute_dashboard_stats,
    unseen_pending_count,
)
from tests.conftest import make_order

grill = Product(id="g", name="مشاوي", price=50, category="مشويات")
salad = Product(id="s", name="سلطة", price=10.5, category="مقبلات")


def test_empty_dashboard():
    stats = compute_dashboard_stats([])
    assert stats.total_orders == 0
    assert stats.total_revenue == 0
    assert stats.sales_by_category == []
    assert build_sales_summary(stats) == "Total Orders: 0, Revenue: 0, Top Categories: "


def test_stats_and_category_order():
    orders = [
        make_order("a", items=[CartItem.from_product(salad, 2)], status=OrderStatus.PREPARING),
        make_order("b", items=[CartItem.from_product(grill, 1), CartItem.from_product(salad, 1)]),
        make_order("c", items=[CartItem.from_product(grill, 3)], status=OrderStatus.DELIVERED),
    ]

    stats = compute_dashboard_stats(orders)

    assert stats.total_orders == 3
    assert stats.total_revenue == 21 + 60.5 + 150
    assert stats.pending_orders == 1
    assert stats.preparing_orders == 1
    assert [(c.name, c.sales) for c in stats.sales_by_category] == [("مقبلات", 3), ("مشويات", 4)]
    assert build_sales_summary(stats) == (
        "Total Orders: 3, Revenue: 231.5, Top Categories: مقبلات, مشويات"
    )


def test_unseen_pending_count():
    orders = [
        make_order("a", is_new=True),
        make_order("b", is_new=True, status=OrderStatus.PREPARING),
        make_order("c"),
    ]
    assert unseen_pending_count(orders) == 1
