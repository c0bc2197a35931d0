"""Order status changes: operator transitions and customer cancellation.

Shipping and cancelling notify the buyer after the transaction commits. Stock
is not returned to the ledger when an order is cancelled.
"""

import structlog
from sqlalchemy.orm import Session

from identity.customer.addresses import Address
from notifications.notification.dispatch import NotificationDispatcher
from notifications.notification.notification import NotificationKind, OrderNotice
from ordering.order.order import Order, OrderStatus
from shared.database import Database
from shared.exceptions import ObjectNotFoundError, ValidationError

logger = structlog.get_logger(__name__)

_NOTIFY_ON = {
    OrderStatus.SHIPPED: NotificationKind.ORDER_SHIPPED,
    OrderStatus.CANCELLED: NotificationKind.ORDER_CANCELLED,
}


def _get_order(session: Session, order_id: str) -> Order:
    order = session.get(Order, order_id)
    if order is None:
        raise ObjectNotFoundError({"order_id": [f"Order {order_id} not found"]})
    return order


def parse_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    try:
        return OrderStatus(str(value).upper())
    except ValueError as exc:
        raise ValidationError(
            {"status": [f"Unknown status {value!r}. Expected one of: {', '.join(s.value for s in OrderStatus)}"]}
        ) from exc


class OrderStatusHandler:
    def __init__(self, database: Database, dispatcher: NotificationDispatcher | None = None):
        self.database = database
        self.dispatcher = dispatcher

    def update_status(self, order_id: str, new_status) -> Order:
        """Operator transition along the order state machine."""
        target = parse_status(new_status)

        def _apply(session: Session):
            order = _get_order(session, order_id)
            previous = order.status
            order.transition_to(target)
            session.flush()
            return order, previous, self._address(session, order)

        order, previous, address = self.database.run_in_transaction(_apply)
        logger.info("Order status updated", order_id=order_id, previous=previous, status=order.status)
        self._notify(order, address, target)
        return order

    def cancel_order(self, order_id: str, user_id: str | None) -> Order:
        """Customer cancellation: only the owner, only while PENDING or PROCESSING."""

        def _apply(session: Session):
            order = _get_order(session, order_id)
            if user_id is None or order.user_id != user_id:
                # Other customers' orders are indistinguishable from missing ones
                raise ObjectNotFoundError({"order_id": [f"Order {order_id} not found"]})
            order.cancel()
            session.flush()
            return order, self._address(session, order)

        order, address = self.database.run_in_transaction(_apply)
        logger.info("Order cancelled by customer", order_id=order_id, user_id=user_id)
        self._notify(order, address, OrderStatus.CANCELLED)
        return order

    @staticmethod
    def _address(session: Session, order: Order) -> Address | None:
        if order.address_id is None:
            return None
        return session.get(Address, order.address_id)

    def _notify(self, order: Order, address: Address | None, status: OrderStatus) -> None:
        kind = _NOTIFY_ON.get(status)
        if kind is None or self.dispatcher is None:
            return
        try:
            self.dispatcher.dispatch(OrderNotice.from_order(order, address), kind)
        except Exception as exc:
            logger.error("Order notification failed", order_id=order.id, error=str(exc))
