"""Product management: create/update commands and handler, SKU search.

Every create and update re-derives the primary SKU, each variant SKU and
``all_skus`` from the product's current root category. SKUs sent by clients are
ignored.
"""

import re
from dataclasses import dataclass, field

import structlog
from sqlalchemy import String, cast, select
from sqlalchemy.orm import Session

from catalog.category.category import Category, root_category_name
from catalog.product.product import Product, StockStatus, parse_variants, stock_status_for
from catalog.product.sku import generate_sku
from shared.database import Database
from shared.exceptions import ProductNotFound, ValidationError

logger = structlog.get_logger(__name__)

_UNSET = object()
_SKU_QUERY = re.compile(r"^[A-Za-z0-9~_%-]+$")


@dataclass(frozen=True)
class CreateProduct:
    title: str
    price: float
    stock: int = 0
    discounted_price: float | None = None
    stock_status: str | None = None
    category_id: str | None = None
    default_color: str | None = None
    default_size: str | None = None
    variants: list = field(default_factory=list)


@dataclass(frozen=True)
class UpdateProduct:
    """Partial update: fields left as ``_UNSET`` are not touched."""

    product_id: str
    title: object = _UNSET
    price: object = _UNSET
    discounted_price: object = _UNSET
    stock: object = _UNSET
    stock_status: object = _UNSET
    category_id: object = _UNSET
    default_color: object = _UNSET
    default_size: object = _UNSET
    variants: object = _UNSET

    def changes(self) -> dict:
        return {
            name: value
            for name, value in self.__dict__.items()
            if name != "product_id" and value is not _UNSET
        }


def _validate(values: dict) -> None:
    errors: dict[str, list[str]] = {}
    if "title" in values and not (values["title"] or "").strip():
        errors["title"] = ["Title is required"]
    if "price" in values and (values["price"] is None or values["price"] < 0):
        errors["price"] = ["Price must be zero or more"]
    if values.get("discounted_price") is not None and values["discounted_price"] < 0:
        errors["discounted_price"] = ["Discounted price must be zero or more"]
    if "stock" in values and (values["stock"] is None or values["stock"] < 0):
        errors["stock"] = ["Stock must be zero or more"]
    if values.get("stock_status") is not None and values["stock_status"] not in {s.value for s in StockStatus}:
        errors["stock_status"] = [f"Unknown stock status {values['stock_status']!r}"]
    if errors:
        raise ValidationError(errors)


def assign_skus(session: Session, product: Product) -> None:
    """Regenerate every SKU of ``product`` from its current root category."""
    category_name = root_category_name(session, product.category_id)
    product.sku = generate_sku(category_name, product.id, product.default_color, product.default_size)
    product.variants = [
        variant.model_copy(update={"sku": generate_sku(category_name, product.id, variant.color_name, variant.size)})
        for variant in (product.variants or [])
    ]
    product.all_skus = [product.sku, *(variant.sku for variant in product.variants)]


def _check_category(session: Session, category_id: str | None) -> None:
    if category_id is not None and session.get(Category, category_id) is None:
        raise ValidationError({"category_id": [f"Unknown category {category_id!r}"]})


def get_product(session: Session, product_id: str) -> Product:
    product = session.get(Product, product_id)
    if product is None or product.is_deleted:
        raise ProductNotFound(product_id)
    return product


def search_by_sku(session: Session, query: str) -> list[Product]:
    """Live products whose ``all_skus`` holds ``query`` (case-insensitive exact match)."""
    query = (query or "").strip()
    if not query or not _SKU_QUERY.match(query):
        return []
    literal = query.replace("%", "\\%").replace("_", "\\_")
    stmt = select(Product).where(
        Product.deleted_at.is_(None),
        cast(Product.all_skus, String).ilike(f'%"{literal}"%', escape="\\"),
    )
    return list(session.scalars(stmt).all())


class ProductManagementHandler:
    def __init__(self, database: Database):
        self.database = database

    def create_product(self, command: CreateProduct) -> Product:
        values = dict(command.__dict__)
        _validate(values)
        variants = parse_variants(command.variants)

        def _create(session: Session) -> Product:
            _check_category(session, command.category_id)
            product = Product(
                title=command.title.strip(),
                price=command.price,
                discounted_price=command.discounted_price,
                stock=command.stock,
                stock_status=stock_status_for(command.stock, command.stock_status),
                category_id=command.category_id,
                default_color=command.default_color,
                default_size=command.default_size,
                variants=variants,
            )
            session.add(product)
            session.flush()
            assign_skus(session, product)
            session.flush()
            return product

        product = self.database.run_in_transaction(_create)
        logger.info("Product created", product_id=product.id, sku=product.sku)
        return product

    def update_product(self, command: UpdateProduct) -> Product:
        changes = command.changes()
        _validate(changes)
        if "variants" in changes:
            changes["variants"] = parse_variants(changes["variants"])

        def _update(session: Session) -> Product:
            product = get_product(session, command.product_id)
            if "category_id" in changes:
                _check_category(session, changes["category_id"])
            for name, value in changes.items():
                if name != "stock_status":
                    setattr(product, name, value)
            if "stock" in changes or "stock_status" in changes:
                requested = changes.get("stock_status", product.stock_status)
                product.stock_status = stock_status_for(product.stock, requested)
            assign_skus(session, product)
            session.flush()
            return product

        product = self.database.run_in_transaction(_update)
        logger.info("Product updated", product_id=product.id, fields=sorted(changes), sku=product.sku)
        return product
