"""Order and OrderItem models.

State machine:
    PENDING → PROCESSING → SHIPPED → DELIVERED
    PENDING/PROCESSING → CANCELLED
    PENDING → SHIPPED (operators may skip PROCESSING)

An order's items, their unit prices and the order total are frozen at creation.
"""

from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database import Base
from shared.exceptions import InvalidOperationError, ValidationError


class OrderStatus(Enum):
    PENDING = "PENDING"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# States from which a customer may cancel
_CANCELLABLE_STATES = {OrderStatus.PENDING, OrderStatus.PROCESSING}


class OrderItem(Base):
    """A frozen line of an order. Never mutated after insert."""

    __tablename__ = "order_items"
    __table_args__ = (CheckConstraint("quantity >= 1", name="ck_order_items_quantity_positive"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    order_id: Mapped[str] = mapped_column(ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    product_id: Mapped[str] = mapped_column(String(36), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)
    color: Mapped[str | None] = mapped_column(String(50), nullable=True)
    size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    sku: Mapped[str | None] = mapped_column(Text, nullable=True)
    delivery_method: Mapped[str | None] = mapped_column(String(20), nullable=True)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "title": self.title,
            "quantity": self.quantity,
            "price": self.price,
            "color": self.color,
            "size": self.size,
            "sku": self.sku,
            "delivery_method": self.delivery_method,
        }


class Order(Base):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=OrderStatus.PENDING.value)
    total: Mapped[float] = mapped_column(Float, nullable=False)
    shipping_cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    address_id: Mapped[str | None] = mapped_column(ForeignKey("addresses.id"), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    items: Mapped[list[OrderItem]] = relationship(
        cascade="all, delete-orphan",
        order_by=OrderItem.position,
        lazy="selectin",
    )

    @classmethod
    def create(cls, user_id, address_id, items, shipping_cost=0.0, notes=None):
        """Build a PENDING order whose total is the sum of its frozen line totals."""
        if not items:
            raise ValidationError({"items": ["An order needs at least one item"]})
        for position, item in enumerate(items):
            item.position = position
        return cls(
            user_id=user_id,
            address_id=address_id,
            status=OrderStatus.PENDING.value,
            total=sum(item.line_total for item in items),
            shipping_cost=shipping_cost,
            notes=notes,
            items=list(items),
        )

    @property
    def is_guest(self) -> bool:
        return self.user_id is None

    def _assert_can_transition(self, target_status: OrderStatus) -> None:
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise InvalidOperationError(
                {"status": [f"Cannot transition from {current.value} to {target_status.value}"]},
            )

    def transition_to(self, target_status: OrderStatus) -> None:
        self._assert_can_transition(target_status)
        self.status = target_status.value

    def cancel(self) -> None:
        """Customer-initiated cancellation."""
        current = OrderStatus(self.status)
        if current not in _CANCELLABLE_STATES:
            raise InvalidOperationError(
                {
                    "status": [
                        f"Cannot cancel order in {current.value} state. "
                        f"Cancellation is only allowed from: "
                        f"{', '.join(sorted(s.value for s in _CANCELLABLE_STATES))}"
                    ]
                }
            )
        self.status = OrderStatus.CANCELLED.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "status": self.status,
            "total": self.total,
            "shipping_cost": self.shipping_cost,
            "address_id": self.address_id,
            "notes": self.notes,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "items": [item.to_dict() for item in self.items],
        }
