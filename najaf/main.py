"""
FastAPI Application Entry Point

Najaf Restaurant Ordering - Hybrid Architecture
Supports both Mock services (development) and Real APIs (production).

Every client picks a role on the entry screen (POST /api/session) and sends
the returned id in the X-Session-Id header. The role decides which views
(menu, cart, orders board, menu management, dashboard) the session may use.

Endpoints:
    - POST /api/session: Pick a role, open a session
    - GET /api/menu: Menu
    - /api/cart: Private cart of the session
    - POST /api/checkout: Place an order
    - GET /api/orders: Staff order board
    - POST /api/orders/{order_id}/status: Move an order forward
    - GET /api/dashboard: Admin statistics
    - GET /health: System health check

Author: Khalil_Bannouri
Version: 1.0.0
"""

import asyncio
import sys
import logging
from datetime import datetime
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Depends, Query, Request, Header
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
import redis

# Windows-specific event loop policy
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Internal imports
from najaf.core.config import get_settings, setup_logging
from najaf.core.exceptions import (
    EmptyCartError,
    InvalidStatusTransitionError,
    ProductNotFoundError,
    SessionNotFoundError,
    StorageError,
    ViewNotAvailableError,
)
from najaf.models import (
    OrderStatus,
    PAYMENT_LABELS,
    ROLE_LABELS,
    STATUS_LABELS,
    UserRole,
    View,
)
from najaf.schemas import (
    CartItemAdd,
    CartItemUpdate,
    CartResponse,
    CheckoutRequest,
    CheckoutResponse,
    DashboardStats,
    DescribeDishRequest,
    ErrorResponse,
    ExportQueuedResponse,
    HealthResponse,
    NotificationsResponse,
    Order,
    OrderActionResponse,
    OrderListResponse,
    OrderView,
    Product,
    ProductCreate,
    RoleOption,
    SessionCreate,
    SessionResponse,
    StatusUpdateRequest,
    SyncResponse,
    TextResponse,
)
from najaf.services.ai import get_text_generation_service
from najaf.services.dashboard import (
    build_sales_summary,
    compute_dashboard_stats,
    unseen_pending_count,
)
from najaf.services.notifications import get_notification_service
from najaf.services.ordering import CustomerDetails, allowed_next_statuses, build_product
from najaf.services.ordering.catalog import MENU_CATEGORIES
from najaf.services.ordering.views import default_view, ensure_view, views_for
from najaf.services.sessions import Session, SessionManager
from najaf.services.storage import get_storage
from najaf.tasks import export_orders_ledger

# Initialize configuration and logging
settings = get_settings()
setup_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application startup and shutdown events.
    """
    # Startup
    logger.info("=" * 60)
    logger.info(f"🚀 Starting {settings.app_name}")
    logger.info(f"   Version: {settings.app_version}")
    logger.info(f"   Environment: {settings.env_mode.value}")
    logger.info(f"   Debug: {settings.debug}")
    logger.info("=" * 60)

    store = get_storage()
    notifier = get_notification_service()
    text_service = get_text_generation_service()
    logger.info(f"✅ Storage: {store.provider_name}")
    logger.info(f"✅ Notification Service: {notifier.provider_name}")
    logger.info(f"✅ Text Generation: {text_service.provider_name}")

    app.state.sessions = SessionManager(store=store, notifier=notifier)
    app.state.sessions.start_sweeper()

    # Validate production config
    if settings.use_real_services:
        missing = settings.validate_production_config()
        if missing:
            logger.warning(f"⚠️ Missing production config: {missing}")

    logger.info("=" * 60)
    logger.info("✅ Application ready!")
    logger.info("=" * 60)

    yield  # Application runs

    # Shutdown
    logger.info("Shutting down...")
    await app.state.sessions.shutdown()
    await store.close()
    logger.info("✅ Cleanup complete")


# =============================================================================
# APPLICATION INSTANCE
# =============================================================================

app = FastAPI(
    title=settings.app_name,
    description=(
        "Restaurant ordering with a customer menu and cart, a live staff "
        "order board, menu management and an admin dashboard."
    ),
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# DEPENDENCIES
# =============================================================================

def get_sessions(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_session(
    sessions: SessionManager = Depends(get_sessions),
    x_session_id: Optional[str] = Header(None, alias="X-Session-Id"),
) -> Session:
    """Resolve the caller's session from the X-Session-Id header."""
    return sessions.get(x_session_id)


def require_view(view: View):
    """Dependency factory: the session's role must include view."""

    def dependency(session: Session = Depends(get_session)) -> Session:
        ensure_view(session.role, view)
        return session

    return dependency


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def session_response(session: Session) -> SessionResponse:
    return SessionResponse(
        session_id=session.id,
        role=session.role,
        views=views_for(session.role),
        default_view=default_view(session.role),
    )


def cart_response(session: Session) -> CartResponse:
    cart = session.state.cart
    return CartResponse(items=cart.items, total=cart.total, count=cart.count)


def order_view(order: Order) -> OrderView:
    return OrderView(
        order=order,
        number=order.short_number,
        status_label=STATUS_LABELS[order.status],
        payment_label=PAYMENT_LABELS[order.payment_method],
        next_statuses=allowed_next_statuses(order.status),
    )


# =============================================================================
# ROOT & HEALTH ENDPOINTS
# =============================================================================

@app.get("/", tags=["Root"])
async def root() -> dict[str, str]:
    """API root with navigation links."""
    return {
        "message": f"🍔 Welcome to {settings.app_name}",
        "restaurant": settings.restaurant_name,
        "currency": settings.currency_label,
        "version": settings.app_version,
        "environment": settings.env_mode.value,
        "documentation": "/docs",
        "health": "/health",
    }


def _ping_redis() -> None:
    r = redis.Redis.from_url(settings.redis_url, socket_timeout=2, socket_connect_timeout=2)
    try:
        r.ping()
    finally:
        r.close()


@app.get(
    "/health",
    response_model=HealthResponse,
    tags=["Health"],
    summary="System Health Check",
)
async def health_check(request: Request) -> HealthResponse:
    """Verify all system components are operational."""

    # Check storage
    store = get_storage()
    storage_status = "healthy" if await store.health_check() else "unhealthy"

    # Check Redis (Celery broker)
    redis_status = "healthy"
    try:
        await asyncio.to_thread(_ping_redis)
    except Exception as e:
        redis_status = f"unhealthy: {str(e)}"
        logger.error(f"Redis health check failed: {e}")

    # Check text generation
    text_service = get_text_generation_service()
    text_status = "healthy" if await text_service.health_check() else "unavailable"

    # Check notification service
    notifier = get_notification_service()
    notification_status = "healthy" if await notifier.health_check() else "unhealthy"

    overall = "operational" if all(
        s == "healthy" for s in [storage_status, redis_status, text_status, notification_status]
    ) else "degraded"

    return HealthResponse(
        status=overall,
        storage=storage_status,
        redis=redis_status,
        text_generation=text_status,
        notification_service=notification_status,
        active_sessions=len(request.app.state.sessions),
        timestamp=datetime.now(),
    )


# =============================================================================
# SESSION ENDPOINTS
# =============================================================================

@app.get(
    "/api/roles",
    response_model=list[RoleOption],
    tags=["Session"],
    summary="Roles offered on the entry screen",
)
async def list_roles() -> list[RoleOption]:
    return [RoleOption(role=role, label=ROLE_LABELS[role]) for role in UserRole]


@app.post(
    "/api/session",
    response_model=SessionResponse,
    status_code=201,
    tags=["Session"],
    summary="Pick a role",
)
async def create_session(
    data: SessionCreate,
    sessions: SessionManager = Depends(get_sessions),
) -> SessionResponse:
    """Open a session for the chosen role. No credentials are checked."""
    session = await sessions.create(data.role)
    return session_response(session)


@app.get("/api/session", response_model=SessionResponse, tags=["Session"])
async def read_session(session: Session = Depends(get_session)) -> SessionResponse:
    return session_response(session)


@app.put(
    "/api/session/role",
    response_model=SessionResponse,
    tags=["Session"],
    summary="Switch role",
)
async def switch_role(
    data: SessionCreate,
    session: Session = Depends(get_session),
    sessions: SessionManager = Depends(get_sessions),
) -> SessionResponse:
    """Change the session's role; the cart is emptied."""
    sessions.switch_role(session.id, data.role)
    return session_response(session)


@app.delete("/api/session", status_code=204, tags=["Session"], summary="Log out")
async def end_session(
    session: Session = Depends(get_session),
    sessions: SessionManager = Depends(get_sessions),
) -> None:
    await sessions.end(session.id)


@app.get(
    "/api/session/notifications",
    response_model=NotificationsResponse,
    tags=["Session"],
    summary="Pending new-order chimes",
)
async def drain_notifications(
    session: Session = Depends(require_view(View.ORDERS)),
) -> NotificationsResponse:
    """Chimes queued for this session since the last call."""
    notifier = get_notification_service()
    return NotificationsResponse(events=notifier.drain(session.id))


# =============================================================================
# MENU ENDPOINTS
# =============================================================================

@app.get("/api/menu", response_model=list[Product], tags=["Menu"])
async def list_menu(session: Session = Depends(get_session)) -> list[Product]:
    return session.state.products


@app.get("/api/menu/categories", response_model=list[str], tags=["Menu"])
async def list_categories() -> list[str]:
    """Categories suggested on the add-product form."""
    return list(MENU_CATEGORIES)


@app.post(
    "/api/menu",
    response_model=Product,
    status_code=201,
    tags=["Menu"],
    summary="Add a menu item",
)
async def add_product(
    data: ProductCreate,
    session: Session = Depends(require_view(View.MENU_MANAGEMENT)),
) -> Product:
    product = build_product(data)
    await session.state.add_product(product)
    return product


@app.post(
    "/api/menu/describe",
    response_model=TextResponse,
    tags=["Menu"],
    summary="Generate a dish description",
)
async def describe_dish(
    data: DescribeDishRequest,
    session: Session = Depends(require_view(View.MENU_MANAGEMENT)),
) -> TextResponse:
    """Short Arabic marketing description; falls back to a fixed text on failure."""
    service = get_text_generation_service()
    text = await service.describe_dish(data.name)
    return TextResponse(text=text, provider=service.provider_name)


# =============================================================================
# CART ENDPOINTS
# =============================================================================

@app.get("/api/cart", response_model=CartResponse, tags=["Cart"])
async def read_cart(session: Session = Depends(require_view(View.CART))) -> CartResponse:
    return cart_response(session)


@app.post("/api/cart/items", response_model=CartResponse, tags=["Cart"])
async def add_cart_item(
    data: CartItemAdd,
    session: Session = Depends(require_view(View.CART)),
) -> CartResponse:
    """Add one unit of a menu product."""
    product = session.state.get_product(data.product_id)
    session.state.add_to_cart(product)
    return cart_response(session)


@app.patch("/api/cart/items/{product_id}", response_model=CartResponse, tags=["Cart"])
async def update_cart_item(
    product_id: str,
    data: CartItemUpdate,
    session: Session = Depends(require_view(View.CART)),
) -> CartResponse:
    """Change quantity by delta (never below 1) and/or set notes."""
    if session.state.cart.get(product_id) is None:
        raise ProductNotFoundError(product_id)

    if data.delta is not None:
        session.state.update_cart_item_quantity(product_id, data.delta)
    if "notes" in data.model_fields_set:
        session.state.set_cart_item_notes(product_id, data.notes)
    return cart_response(session)


@app.delete("/api/cart/items/{product_id}", response_model=CartResponse, tags=["Cart"])
async def remove_cart_item(
    product_id: str,
    session: Session = Depends(require_view(View.CART)),
) -> CartResponse:
    session.state.remove_from_cart(product_id)
    return cart_response(session)


@app.delete("/api/cart", response_model=CartResponse, tags=["Cart"])
async def clear_cart(session: Session = Depends(require_view(View.CART))) -> CartResponse:
    session.state.clear_cart()
    return cart_response(session)


@app.post(
    "/api/checkout",
    response_model=CheckoutResponse,
    status_code=201,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
    tags=["Cart"],
    summary="Place Order",
)
async def checkout(
    data: CheckoutRequest,
    session: Session = Depends(require_view(View.CART)),
) -> CheckoutResponse:
    """Turn the cart into a PENDING order. The cart is emptied."""
    if session.state.cart.is_empty:
        raise EmptyCartError()

    logger.info(f"Creating order for: {data.name}")
    order = await session.state.place_order(
        CustomerDetails(
            name=data.name,
            phone=data.phone,
            address=data.address,
            payment=data.payment,
        )
    )

    return CheckoutResponse(
        success=True,
        message="تم استلام طلبك بنجاح!",
        order=order,
    )


# =============================================================================
# ORDER ENDPOINTS
# =============================================================================

@app.get(
    "/api/orders",
    response_model=OrderListResponse,
    tags=["Orders"],
    summary="Order board",
)
async def list_orders(
    status: Optional[str] = Query(None),
    session: Session = Depends(require_view(View.ORDERS)),
) -> OrderListResponse:
    """The session's order list, newest first, optionally filtered by status."""
    orders = session.state.orders

    if status:
        try:
            status_enum = OrderStatus(status.upper())
        except ValueError:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid status. Options: {[s.value for s in OrderStatus]}"
            )
        orders = [o for o in orders if o.status == status_enum]

    return OrderListResponse(
        total=len(orders),
        unseen_pending=unseen_pending_count(session.state.orders),
        orders=[order_view(o) for o in orders],
    )


@app.post(
    "/api/orders/{order_id}/status",
    response_model=OrderActionResponse,
    responses={409: {"model": ErrorResponse}},
    tags=["Orders"],
    summary="Move an order forward",
)
async def update_order_status(
    order_id: str,
    data: StatusUpdateRequest,
    session: Session = Depends(require_view(View.ORDERS)),
) -> OrderActionResponse:
    updated = await session.state.update_order_status(order_id, data.status)
    return OrderActionResponse(order_id=order_id, updated=updated is not None, order=updated)


@app.post(
    "/api/orders/{order_id}/seen",
    response_model=OrderActionResponse,
    tags=["Orders"],
    summary="Clear the new-order highlight",
)
async def mark_order_seen(
    order_id: str,
    session: Session = Depends(require_view(View.ORDERS)),
) -> OrderActionResponse:
    updated = await session.state.mark_order_as_seen(order_id)
    return OrderActionResponse(order_id=order_id, updated=updated is not None, order=updated)


@app.post(
    "/api/orders/sync",
    response_model=SyncResponse,
    tags=["Orders"],
    summary="Poll the shared store now",
)
async def sync_orders(session: Session = Depends(require_view(View.ORDERS))) -> SyncResponse:
    """Run one poll tick immediately instead of waiting for the interval."""
    replaced = await session.poller.poll_once()
    return SyncResponse(replaced=replaced, total=len(session.state.orders))


# =============================================================================
# DASHBOARD ENDPOINTS
# =============================================================================

@app.get("/api/dashboard", response_model=DashboardStats, tags=["Dashboard"])
async def dashboard_stats(
    session: Session = Depends(require_view(View.DASHBOARD)),
) -> DashboardStats:
    """Aggregated order statistics."""
    return compute_dashboard_stats(session.state.orders)


@app.post(
    "/api/dashboard/analysis",
    response_model=TextResponse,
    tags=["Dashboard"],
    summary="AI sales tips",
)
async def sales_analysis(
    session: Session = Depends(require_view(View.DASHBOARD)),
) -> TextResponse:
    stats = compute_dashboard_stats(session.state.orders)
    service = get_text_generation_service()
    text = await service.analyze_sales(build_sales_summary(stats))
    return TextResponse(text=text, provider=service.provider_name)


@app.post(
    "/api/dashboard/export",
    response_model=ExportQueuedResponse,
    status_code=202,
    tags=["Dashboard"],
    summary="Export orders to the Excel ledger",
)
async def export_ledger(
    session: Session = Depends(require_view(View.DASHBOARD)),
) -> ExportQueuedResponse:
    """Queue the ledger export on the Celery worker."""
    orders = session.state.orders
    task = export_orders_ledger.delay([o.to_storage() for o in orders])
    logger.info(f"Ledger export queued: task {task.id} ({len(orders)} orders)")
    return ExportQueuedResponse(success=True, task_id=task.id, orders=len(orders))


# =============================================================================
# ERROR HANDLERS
# =============================================================================

def _error(status_code: int, error: str, detail: Optional[str] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


@app.exception_handler(SessionNotFoundError)
async def session_not_found_handler(request: Request, exc: SessionNotFoundError) -> JSONResponse:
    return _error(401, "Session Required", str(exc))


@app.exception_handler(ViewNotAvailableError)
async def view_not_available_handler(request: Request, exc: ViewNotAvailableError) -> JSONResponse:
    return _error(403, "View Not Available", str(exc))


@app.exception_handler(ProductNotFoundError)
async def product_not_found_handler(request: Request, exc: ProductNotFoundError) -> JSONResponse:
    return _error(404, "Product Not Found", str(exc))


@app.exception_handler(InvalidStatusTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidStatusTransitionError) -> JSONResponse:
    return _error(409, "Invalid Status Transition", str(exc))


@app.exception_handler(EmptyCartError)
async def empty_cart_handler(request: Request, exc: EmptyCartError) -> JSONResponse:
    return _error(400, "Empty Cart", "السلة فارغة")


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error(f"Storage failure: {exc}")
    return _error(503, "Storage Unavailable", str(exc) if settings.debug else None)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler."""
    logger.exception(f"Unhandled exception: {exc}")

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "Internal Server Error",
            "detail": str(exc) if settings.debug else "An unexpected error occurred",
        },
    )


def run() -> None:
    """Console entry point: serve the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "najaf.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )


if __name__ == "__main__":
    run()
