"""
Pydantic Schemas for Records, Requests and Responses

Records (Product, CartItem, Order) are what the shared store holds. They
serialize with camelCase keys (customerName, totalAmount, isNew, ...) so the
persisted lists keep the same shape the browser client writes.

Request/response schemas validate the HTTP edge: required customer fields,
positive prices, non-empty names.

Author: Khalil_Bannouri
Version: 1.0.0
"""

from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from najaf.models import OrderStatus, PaymentMethod, UserRole, View


class RecordModel(BaseModel):
    """Base for persisted records: camelCase on the wire, snake_case in code."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


# =============================================================================
# RECORDS
# =============================================================================

class Product(RecordModel):
    """A sellable menu item."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    price: float
    image: str = ""
    category: str = ""


class CartItem(RecordModel):
    """A product in the cart (or captured in an order) with its quantity."""
    id: str
    name: str
    description: str = ""
    price: float
    image: str = ""
    category: str = ""
    quantity: int = Field(default=1, ge=1)
    notes: Optional[str] = None

    @classmethod
    def from_product(cls, product: Product, quantity: int = 1) -> "CartItem":
        return cls(**product.model_dump(), quantity=quantity)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class Order(RecordModel):
    """A submitted cart. items and total_amount are frozen at creation."""
    id: str
    customer_name: str
    customer_phone: str
    customer_address: str
    items: List[CartItem] = Field(default_factory=list)
    total_amount: float
    status: OrderStatus = OrderStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.CASH
    created_at: int  # epoch milliseconds
    is_new: bool = False

    @property
    def short_number(self) -> str:
        """Display number: the last four characters of the id."""
        return self.id[-4:]


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class SessionCreate(BaseModel):
    """Role picked on the entry screen."""
    role: UserRole = Field(..., examples=["CUSTOMER"])


class ProductCreate(BaseModel):
    """Staff form for a new menu item."""
    name: str = Field(..., min_length=1, max_length=100, examples=["شاورما دجاج"])
    price: float = Field(..., gt=0, examples=[25])
    category: Optional[str] = Field(None, max_length=50, examples=["برجر"])
    description: Optional[str] = Field(None, max_length=500)
    image: Optional[str] = Field(None, max_length=500)


class DescribeDishRequest(BaseModel):
    """Dish name to describe."""
    name: str = Field(..., min_length=1, max_length=100, examples=["برجر"])


class CartItemAdd(BaseModel):
    """Add one unit of a product to the cart."""
    product_id: str = Field(..., min_length=1)


class CartItemUpdate(BaseModel):
    """Quantity delta and/or notes for a cart entry."""
    delta: Optional[int] = Field(None, examples=[1, -1])
    notes: Optional[str] = Field(None, max_length=200)


class CheckoutRequest(BaseModel):
    """Customer details submitted with the checkout form."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Ali"])
    phone: str = Field(..., min_length=1, max_length=20, examples=["0500"])
    address: str = Field(..., min_length=1, max_length=255, examples=["X"])
    payment: PaymentMethod = Field(default=PaymentMethod.CASH, examples=["CASH"])


class StatusUpdateRequest(BaseModel):
    """Requested next status of an order."""
    status: OrderStatus


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class RoleOption(BaseModel):
    role: UserRole
    label: str


class SessionResponse(BaseModel):
    """The caller's session and what it may see."""
    session_id: str
    role: UserRole
    views: List[View]
    default_view: View


class CartResponse(BaseModel):
    items: List[CartItem]
    total: float
    count: int


class OrderView(BaseModel):
    """An order as shown on the staff board."""
    order: Order
    number: str
    status_label: str
    payment_label: str
    next_statuses: List[OrderStatus]


class OrderListResponse(BaseModel):
    total: int
    unseen_pending: int
    orders: List[OrderView]


class OrderActionResponse(BaseModel):
    """Result of a status or seen update; unknown ids yield updated=False."""
    success: bool = True
    order_id: str
    updated: bool
    order: Optional[Order] = None


class CheckoutResponse(BaseModel):
    success: bool
    message: str
    order: Order


class SyncResponse(BaseModel):
    replaced: bool
    total: int


class TextResponse(BaseModel):
    text: str
    provider: str


class CategorySales(BaseModel):
    name: str
    sales: int


class DashboardStats(BaseModel):
    total_orders: int
    total_revenue: float
    pending_orders: int
    preparing_orders: int
    sales_by_category: List[CategorySales]


class ExportQueuedResponse(BaseModel):
    success: bool
    task_id: str
    orders: int


class ChimeEvent(BaseModel):
    """A queued staff chime for the client to play."""
    session_id: str
    order_count: int
    created_at: int
    wave: str
    start_hz: float
    end_hz: float
    ramp_seconds: float
    start_gain: float
    end_gain: float
    duration_seconds: float


class NotificationsResponse(BaseModel):
    events: List[ChimeEvent]


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    storage: str
    redis: str
    text_generation: str
    notification_service: str
    active_sessions: int
    timestamp: datetime
