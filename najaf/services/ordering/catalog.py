"""
Menu Catalog

Built-in default menu and the builder used when staff add a product.
The default menu is served whenever the persisted product list is absent,
empty or unreadable.
"""

import time
import uuid
from typing import Optional

from najaf.core.config import get_settings
from najaf.schemas import Product, ProductCreate


# ---------------------------------------------------------
# Default menu: names, prices and images can be edited here
# ---------------------------------------------------------
DEFAULT_PRODUCTS: tuple[Product, ...] = (
    Product(
        id="1",
        name="برجر نجف الخاص",
        description="قطعة لحم بلدي مشوية مع صوص نجف السري والجبنة السويسرية",
        price=85,
        category="برجر",
        image="https://picsum.photos/400/400?random=1",
    ),
    Product(
        id="2",
        name="بيتزا سوبريم",
        description="عجينة رقيقة مقرمشة مع خضروات طازجة وبيبروني",
        price=120,
        category="بيتزا",
        image="https://picsum.photos/400/400?random=2",
    ),
    Product(
        id="3",
        name="باستا ألفريدو",
        description="مكرونة فيتوتشيني مع صوص الكريمة والدجاج",
        price=95,
        category="مكرونة",
        image="https://picsum.photos/400/400?random=3",
    ),
    Product(
        id="4",
        name="كولا باردة",
        description="مشروب غازي منعش مع الثلج",
        price=15,
        category="مشروبات",
        image="https://picsum.photos/400/400?random=4",
    ),
)

MENU_CATEGORIES: tuple[str, ...] = ("برجر", "بيتزا", "مكرونة", "مشروبات", "حلى")


def generate_id() -> str:
    """Collision-resistant record id."""
    return uuid.uuid4().hex


def now_millis() -> int:
    return int(time.time() * 1000)


def default_products() -> list[Product]:
    return list(DEFAULT_PRODUCTS)


def build_product(data: ProductCreate, product_id: Optional[str] = None) -> Product:
    """Fill the optional form fields and assign an id."""
    settings = get_settings()
    product_id = product_id or generate_id()
    return Product(
        id=product_id,
        name=data.name,
        price=float(data.price),
        category=data.category or settings.default_product_category,
        description=data.description or "",
        image=data.image or settings.placeholder_image_url.format(seed=product_id),
    )
