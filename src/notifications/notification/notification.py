"""Notification records and the order notice payload.

A Notification is one rendered message for one recipient on one channel. The
dispatcher keeps failed notifications in memory for out-of-band retry.

State Machine:
    PENDING → SENT
    PENDING → FAILED → (retry) → SENT / FAILED
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from uuid import uuid4


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class NotificationKind(Enum):
    ORDER_PLACED = "ORDER_PLACED"
    ORDER_SHIPPED = "ORDER_SHIPPED"
    ORDER_CANCELLED = "ORDER_CANCELLED"


class NotificationChannel(Enum):
    EMAIL = "Email"


class NotificationStatus(Enum):
    PENDING = "Pending"
    SENT = "Sent"
    FAILED = "Failed"


class RecipientType(Enum):
    CUSTOMER = "Customer"
    INTERNAL = "Internal"


# ---------------------------------------------------------------------------
# Order notice
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class NoticeItem:
    product_title: str
    quantity: int
    unit_price: float


@dataclass(frozen=True)
class OrderNotice:
    """Everything a template needs about an order, detached from the database."""

    order_id: str
    items: tuple[NoticeItem, ...]
    total: float
    status: str
    shipping_cost: float = 0.0
    notes: str | None = None
    recipient_email: str | None = None
    address: dict = field(default_factory=dict)

    @classmethod
    def from_order(cls, order, address=None) -> "OrderNotice":
        address_dict = address.to_dict() if address is not None else {}
        return cls(
            order_id=order.id,
            items=tuple(
                NoticeItem(product_title=item.title, quantity=item.quantity, unit_price=item.price)
                for item in order.items
            ),
            total=order.total,
            status=order.status,
            shipping_cost=order.shipping_cost,
            notes=order.notes,
            recipient_email=address_dict.get("email"),
            address=address_dict,
        )

    def as_context(self) -> dict:
        return {
            "order_id": self.order_id,
            "items": self.items,
            "total": self.total,
            "shipping_cost": self.shipping_cost,
            "grand_total": self.total + self.shipping_cost,
            "status": self.status,
            "notes": self.notes,
            "address": self.address,
        }


# ---------------------------------------------------------------------------
# Notification record
# ---------------------------------------------------------------------------
@dataclass
class Notification:
    kind: str
    channel: str
    recipient: str
    recipient_type: str
    subject: str
    body: str
    order_id: str
    id: str = field(default_factory=lambda: str(uuid4()))
    status: str = NotificationStatus.PENDING.value
    attempts: int = 0
    failure_reason: str | None = None
    sent_at: datetime | None = None

    def mark_sent(self) -> None:
        self.status = NotificationStatus.SENT.value
        self.sent_at = datetime.now(UTC)
        self.failure_reason = None

    def mark_failed(self, reason: str) -> None:
        self.status = NotificationStatus.FAILED.value
        self.failure_reason = reason
