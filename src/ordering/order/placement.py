"""Order placement: command and handler.

Turns a cart snapshot into a PENDING order. Prices are resolved from the product
rows and stock is reserved through the ledger in the same transaction as the
order insert, so either everything is committed or nothing is.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from catalog.product.pricing import load_products, resolve_price, select_variant
from identity.customer.addresses import Address, address_for_user
from identity.customer.reconciliation import IdentityReconciler
from inventory.stock.ledger import StockLedger
from notifications.notification.dispatch import NotificationDispatcher
from notifications.notification.notification import NotificationKind, OrderNotice
from ordering.order.errors import AddressRequired, EmptyCart, OrderFailed
from ordering.order.order import Order, OrderItem
from shared.database import Database
from shared.exceptions import ValidationError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class CartLine:
    """One line of the client's cart.

    ``price`` and ``discounted_price`` are what the client displayed; they are
    accepted for compatibility and never used.
    """

    product_id: str
    quantity: int
    color: str | None = None
    size: str | None = None
    sku: str | None = None
    delivery_method: str | None = None
    price: float | None = None
    discounted_price: float | None = None


@dataclass(frozen=True)
class PlaceOrder:
    cart_lines: tuple[CartLine, ...]
    user_id: str | None = None
    address_id: str | None = None
    notes: str | None = None


_STORED_TEXT_FIELDS = ("color", "size", "delivery_method")


def _validate_lines(cart_lines) -> None:
    errors: dict[str, list[str]] = {}
    for index, line in enumerate(cart_lines):
        if not line.product_id:
            errors.setdefault(f"cart_lines.{index}.product_id", []).append("Product id is required")
        if line.quantity is None or line.quantity < 1:
            errors.setdefault(f"cart_lines.{index}.quantity", []).append("Quantity must be at least 1")
        for name in _STORED_TEXT_FIELDS:
            value = getattr(line, name)
            limit = OrderItem.__table__.c[name].type.length
            if value is not None and len(value) > limit:
                errors.setdefault(f"cart_lines.{index}.{name}", []).append(
                    f"{name} must be at most {limit} characters"
                )
    if errors:
        raise ValidationError(errors)


class PlaceOrderHandler:
    def __init__(
        self,
        database: Database,
        dispatcher: NotificationDispatcher | None = None,
        reconciler: IdentityReconciler | None = None,
        ledger: StockLedger | None = None,
        flat_shipping_fee: float = 0.0,
    ):
        self.database = database
        self.dispatcher = dispatcher
        self.reconciler = reconciler or IdentityReconciler(database)
        self.ledger = ledger or StockLedger()
        self.flat_shipping_fee = flat_shipping_fee

    def place_order(self, command: PlaceOrder) -> Order:
        if not command.cart_lines:
            raise EmptyCart()
        _validate_lines(command.cart_lines)
        if command.user_id is None and not command.address_id:
            raise AddressRequired("Guest orders need a shipping address")

        try:
            order, address = self.database.run_in_transaction(self._place, command)
        except OperationalError as exc:
            raise OrderFailed() from exc

        logger.info(
            "Order placed",
            order_id=order.id,
            user_id=order.user_id,
            total=order.total,
            item_count=len(order.items),
        )

        if order.user_id is None:
            linked_user_id = self.reconciler.link_guest_order(order.id)
            if linked_user_id is not None:
                order.user_id = linked_user_id

        self._notify(order, address)
        return order

    def _place(self, session: Session, command: PlaceOrder) -> tuple[Order, Address]:
        address = self._resolve_address(session, command.user_id, command.address_id)
        products = load_products(session, (line.product_id for line in command.cart_lines))

        items = []
        for line in command.cart_lines:
            product = products[line.product_id]
            variant = select_variant(product, line.color, line.size)
            price = resolve_price(product, variant)
            items.append(
                OrderItem(
                    product_id=product.id,
                    title=product.title,
                    quantity=line.quantity,
                    price=price.effective_price,
                    color=line.color,
                    size=line.size,
                    sku=(variant.sku if variant is not None and variant.sku else product.sku),
                    delivery_method=line.delivery_method,
                )
            )

        self.ledger.reserve_all(session, ((line.product_id, line.quantity) for line in command.cart_lines))

        order = Order.create(
            user_id=command.user_id,
            address_id=address.id,
            items=items,
            shipping_cost=self.flat_shipping_fee,
            notes=command.notes,
        )
        session.add(order)
        session.flush()
        return order, address

    @staticmethod
    def _resolve_address(session: Session, user_id: str | None, address_id: str | None) -> Address:
        if address_id:
            address = session.get(Address, address_id)
            if address is None:
                raise AddressRequired(f"Address {address_id} not found")
            if address.user_id != user_id:
                raise AddressRequired(f"Address {address_id} does not belong to this customer")
            return address

        address = address_for_user(session, user_id) if user_id else None
        if address is None:
            raise AddressRequired()
        return address

    def _notify(self, order: Order, address: Address) -> None:
        if self.dispatcher is None:
            return
        try:
            self.dispatcher.dispatch(OrderNotice.from_order(order, address), NotificationKind.ORDER_PLACED)
        except Exception as exc:
            logger.error("Order notification failed", order_id=order.id, error=str(exc))
