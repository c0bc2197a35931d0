"""Price resolution for cart lines.

The unit price of an order item always comes from the product row read inside the
order transaction. Prices submitted by the client are never consulted.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from catalog.product.product import Product, Variant
from shared.exceptions import ProductNotFound

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class ResolvedPrice:
    unit_price: float
    unit_discounted_price: float | None = None

    @property
    def effective_price(self) -> float:
        if self.unit_discounted_price is not None:
            return self.unit_discounted_price
        return self.unit_price


def _matches(selector: str | None, value: str | None) -> bool:
    if not selector:
        return True
    return (value or "").strip().casefold() == selector.strip().casefold()


def select_variant(product: Product, color: str | None = None, size: str | None = None) -> Variant | None:
    """Find the variant matching a cart line's color/size selector.

    Returns ``None`` when the line carries no selector or nothing matches; such
    lines are priced against the product itself.
    """
    if not color and not size:
        return None
    for variant in product.variants or []:
        if _matches(color, variant.color_name) and _matches(size, variant.size):
            return variant
    logger.warning(
        "No variant matches selector, using product price",
        product_id=product.id,
        color=color,
        size=size,
    )
    return None


def resolve_price(product: Product, variant: Variant | None = None) -> ResolvedPrice:
    price = product.price
    discounted_price = product.discounted_price
    if variant is not None:
        if variant.price is not None:
            price = variant.price
        if variant.discounted_price is not None:
            discounted_price = variant.discounted_price
    return ResolvedPrice(unit_price=price, unit_discounted_price=discounted_price)


def load_products(session: Session, product_ids: Iterable[str]) -> dict[str, Product]:
    """Batch-load live products by id, raising ``ProductNotFound`` for the first gap."""
    wanted = list(dict.fromkeys(product_ids))
    rows = session.scalars(
        select(Product).where(Product.id.in_(wanted), Product.deleted_at.is_(None)),
    ).all()
    products = {product.id: product for product in rows}
    for product_id in wanted:
        if product_id not in products:
            raise ProductNotFound(product_id)
    return products
