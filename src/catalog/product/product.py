"""Product model and the Variant value object.

Product is the source of truth for price and stock. Stock is only ever decremented
through the inventory ledger's conditional update; orders keep their own frozen
copies of prices.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import JSON, CheckConstraint, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from shared.database import Base
from shared.exceptions import ValidationError


class StockStatus(Enum):
    IN_STOCK = "IN_STOCK"
    OUT_OF_STOCK = "OUT_OF_STOCK"
    PRE_ORDER = "PRE_ORDER"


def stock_status_for(stock: int, current_status: str | None = None) -> str:
    """Status implied by a stock level. PRE_ORDER is sticky until changed explicitly."""
    if current_status == StockStatus.PRE_ORDER.value:
        return StockStatus.PRE_ORDER.value
    if stock <= 0:
        return StockStatus.OUT_OF_STOCK.value
    return StockStatus.IN_STOCK.value


class Variant(BaseModel):
    """A purchasable color/size configuration of a product.

    Price, discounted price, and stock are optional overrides of the product's own
    values. ``sku`` is derived and always regenerated on product edits.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    color_name: str | None = None
    color_hex: str | None = None
    size: str | None = None
    price: float | None = Field(default=None, ge=0)
    discounted_price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    images: list[str] = Field(default_factory=list)
    sku: str | None = None


def parse_variants(raw) -> list[Variant]:
    """Validate incoming variant payloads at the model boundary."""
    variants = []
    for index, item in enumerate(raw or []):
        if isinstance(item, Variant):
            variants.append(item)
            continue
        try:
            variants.append(Variant.model_validate(item))
        except PydanticValidationError as exc:
            raise ValidationError(
                {f"variants.{index}": [error["msg"] for error in exc.errors()]},
            ) from exc
    return variants


class VariantList(TypeDecorator):
    """Stores an ordered list of Variant value objects as JSON."""

    impl = JSON
    cache_ok = True

    def process_bind_param(self, value, dialect):  # noqa: ARG002
        if value is None:
            return []
        return [variant.model_dump() for variant in parse_variants(value)]

    def process_result_value(self, value, dialect):  # noqa: ARG002
        return parse_variants(value or [])


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    discounted_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    stock_status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=StockStatus.IN_STOCK.value,
    )
    sku: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    all_skus: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    variants: Mapped[list[Variant]] = mapped_column(VariantList, nullable=False, default=list)
    default_color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    default_size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    category_id: Mapped[str | None] = mapped_column(ForeignKey("categories.id"), nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        self.deleted_at = datetime.now(UTC)
