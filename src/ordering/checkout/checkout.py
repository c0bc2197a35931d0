"""Checkout: coordinates address capture and order placement.

Flow:
    1. Reject an empty cart and an invalid address payload before touching the database
    2. Authenticated: upsert the customer's address. Guest: create an unowned address
    3. Place the order against that address (price resolution, stock reservation)
    4. Guest orders are then linked to a matching account by the placement handler
"""

import structlog
from sqlalchemy.exc import OperationalError

from identity.customer.addresses import AddressDetails
from identity.customer.reconciliation import attach_address, create_guest_address
from ordering.order.errors import AddressRequired, EmptyCart, OrderFailed
from ordering.order.order import Order
from ordering.order.placement import PlaceOrder, PlaceOrderHandler

logger = structlog.get_logger(__name__)


class CheckoutHandler:
    def __init__(self, placement: PlaceOrderHandler):
        self.placement = placement
        self.database = placement.database

    def checkout(
        self,
        cart_lines,
        user_id: str | None = None,
        address=None,
        address_id: str | None = None,
        notes: str | None = None,
    ) -> Order:
        """Place an order for a guest or an authenticated customer.

        ``address`` is a new address payload; ``address_id`` refers to an existing
        one. A payload wins when both are given.
        """
        if not cart_lines:
            raise EmptyCart()

        if address is not None:
            details = AddressDetails.from_payload(address)
            try:
                if user_id is None:
                    saved = self.database.run_in_transaction(create_guest_address, details)
                else:
                    saved = self.database.run_in_transaction(attach_address, user_id, details)
            except OperationalError as exc:
                raise OrderFailed() from exc
            address_id = saved.id
        elif user_id is None and not address_id:
            raise AddressRequired("Guest checkout needs a shipping address")

        logger.info(
            "Checkout started",
            user_id=user_id,
            guest=user_id is None,
            line_count=len(cart_lines),
        )
        return self.placement.place_order(
            PlaceOrder(
                cart_lines=tuple(cart_lines),
                user_id=user_id,
                address_id=address_id,
                notes=notes,
            )
        )
