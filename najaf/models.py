"""
Domain Enums and SQLAlchemy Models

Enums shared by every layer (roles, order statuses, payment methods, views)
plus the single table used by the database storage backend.

The order lifecycle table lives here next to OrderStatus so the allowed
moves are defined in one place:

    PENDING → PREPARING → READY → DELIVERED
       └──→ CANCELLED

Author: Khalil_Bannouri
Version: 1.0.0
"""

from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from najaf.database import Base
import enum


class UserRole(str, enum.Enum):
    """Session roles chosen on the entry screen."""
    CUSTOMER = "CUSTOMER"
    ADMIN = "ADMIN"        # مدير
    MANAGER = "MANAGER"    # مشرف صالة
    KITCHEN = "KITCHEN"    # المطبخ

    @property
    def is_staff(self) -> bool:
        return self is not UserRole.CUSTOMER


class OrderStatus(str, enum.Enum):
    """Order status workflow."""
    PENDING = "PENDING"
    PREPARING = "PREPARING"
    READY = "READY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return not ORDER_TRANSITIONS[self]


class PaymentMethod(str, enum.Enum):
    """How the customer pays on delivery."""
    CASH = "CASH"
    CARD = "CARD"


class View(str, enum.Enum):
    """Screens of the client; each role sees a subset."""
    MENU = "MENU"
    CART = "CART"
    ORDERS = "ORDERS"
    MENU_MANAGEMENT = "MENU_MANAGEMENT"
    DASHBOARD = "DASHBOARD"


# Allowed forward moves; terminal states map to an empty tuple.
ORDER_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.PREPARING, OrderStatus.CANCELLED),
    OrderStatus.PREPARING: (OrderStatus.READY,),
    OrderStatus.READY: (OrderStatus.DELIVERED,),
    OrderStatus.DELIVERED: (),
    OrderStatus.CANCELLED: (),
}

STATUS_LABELS: dict[OrderStatus, str] = {
    OrderStatus.PENDING: "انتظار",
    OrderStatus.PREPARING: "قيد التحضير",
    OrderStatus.READY: "جاهز للتسليم",
    OrderStatus.DELIVERED: "تم التسليم",
    OrderStatus.CANCELLED: "ملغي",
}

PAYMENT_LABELS: dict[PaymentMethod, str] = {
    PaymentMethod.CASH: "كاش",
    PaymentMethod.CARD: "شبكة",
}

ROLE_LABELS: dict[UserRole, str] = {
    UserRole.CUSTOMER: "طلب طعام (عميل)",
    UserRole.KITCHEN: "المطبخ (استلام)",
    UserRole.MANAGER: "مشرف صالة",
    UserRole.ADMIN: "الإدارة العليا",
}

# Order matters: the first entry is the role's landing view.
ROLE_VIEWS: dict[UserRole, tuple[View, ...]] = {
    UserRole.CUSTOMER: (View.MENU, View.CART),
    UserRole.KITCHEN: (View.ORDERS,),
    UserRole.MANAGER: (View.ORDERS, View.MENU_MANAGEMENT),
    UserRole.ADMIN: (View.DASHBOARD, View.ORDERS, View.MENU_MANAGEMENT),
}


class KeyValueEntry(Base):
    """
    One persisted entry of the shared store (database backend).

    Mirrors a browser-storage slot: a key ("products", "orders") and the
    full JSON text of the list, rewritten on every mutation.
    """
    __tablename__ = "kv_entries"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self):
        return f"<KeyValueEntry {self.key} ({len(self.value or '')} chars)>"
