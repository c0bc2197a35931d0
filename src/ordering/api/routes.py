"""FastAPI routes for the Ordering domain: checkout, orders and tracking."""

from fastapi import APIRouter, Depends, Query

from ordering.api.schemas import (
    CartLineSchema,
    CheckoutRequest,
    OrderResponse,
    PlaceOrderRequest,
    TrackingResponse,
    TrackOrderRequest,
    UpdateStatusRequest,
)
from ordering.checkout.checkout import CheckoutHandler
from ordering.order.errors import AddressRequired
from ordering.order.placement import CartLine, PlaceOrder, PlaceOrderHandler
from ordering.order.queries import (
    all_orders,
    latest_order_for_user,
    order_by_id,
    order_for_user,
    orders_for_user,
    track_order,
)
from ordering.order.status import OrderStatusHandler
from shared.api import Caller, caller_id, current_caller, get_database, get_state, require_admin, require_caller
from shared.database import Database
from shared.exceptions import ObjectNotFoundError


def _cart_lines(lines: list[CartLineSchema]) -> tuple[CartLine, ...]:
    return tuple(CartLine(**line.model_dump()) for line in lines)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(tags=["checkout"])


@checkout_router.post("/checkout", status_code=201, response_model=OrderResponse)
def checkout(
    body: CheckoutRequest,
    user_id: str | None = Depends(caller_id),
    handler: CheckoutHandler = Depends(get_state("checkout")),
) -> OrderResponse:
    """Guest or authenticated checkout.

    1. Save the shipping address (upsert for customers, new unowned one for guests)
    2. Place the order against it
    """
    order = handler.checkout(
        _cart_lines(body.cart_lines),
        user_id=user_id,
        address=body.address.model_dump() if body.address is not None else None,
        address_id=body.address_id,
        notes=body.notes,
    )
    return OrderResponse.model_validate(order)


@checkout_router.post("/order-tracking", response_model=TrackingResponse)
def order_tracking(body: TrackOrderRequest, database: Database = Depends(get_database)) -> TrackingResponse:
    with database.transaction() as session:
        return TrackingResponse.model_validate(track_order(session, body.order_id.strip()))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
def place_order(
    body: PlaceOrderRequest,
    user_id: str = Depends(require_caller),
    handler: PlaceOrderHandler = Depends(get_state("placement")),
) -> OrderResponse:
    command = PlaceOrder(
        cart_lines=_cart_lines(body.cart_lines),
        user_id=user_id,
        address_id=body.address_id,
        notes=body.notes,
    )
    return OrderResponse.model_validate(handler.place_order(command))


@order_router.post("/guest", status_code=201, response_model=OrderResponse)
def place_guest_order(
    body: PlaceOrderRequest,
    handler: PlaceOrderHandler = Depends(get_state("placement")),
) -> OrderResponse:
    if not body.address_id:
        raise AddressRequired("Guest orders need a shipping address")
    command = PlaceOrder(
        cart_lines=_cart_lines(body.cart_lines),
        user_id=None,
        address_id=body.address_id,
        notes=body.notes,
    )
    return OrderResponse.model_validate(handler.place_order(command))


@order_router.get("", response_model=list[OrderResponse])
def my_orders(
    status: str | None = Query(None),
    user_id: str = Depends(require_caller),
    database: Database = Depends(get_database),
) -> list[OrderResponse]:
    with database.transaction() as session:
        return [OrderResponse.model_validate(order) for order in orders_for_user(session, user_id, status)]


@order_router.get("/latest", response_model=OrderResponse)
def my_latest_order(
    user_id: str = Depends(require_caller),
    database: Database = Depends(get_database),
) -> OrderResponse:
    with database.transaction() as session:
        order = latest_order_for_user(session, user_id)
        if order is None:
            raise ObjectNotFoundError({"order": ["No orders yet"]})
        return OrderResponse.model_validate(order)


@order_router.get("/all", response_model=list[OrderResponse])
def every_order(
    _: Caller = Depends(require_admin),
    database: Database = Depends(get_database),
) -> list[OrderResponse]:
    with database.transaction() as session:
        return [OrderResponse.model_validate(order) for order in all_orders(session)]


@order_router.get("/{order_id}", response_model=OrderResponse)
def order_detail(
    order_id: str,
    caller: Caller = Depends(current_caller),
    database: Database = Depends(get_database),
) -> OrderResponse:
    """Any order for admins; otherwise only the caller's own (404 for the rest)."""
    with database.transaction() as session:
        if caller.is_admin:
            order = order_by_id(session, order_id)
        else:
            order = order_for_user(session, order_id, caller.user_id)
        return OrderResponse.model_validate(order)


@order_router.put("/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    body: UpdateStatusRequest,
    _: Caller = Depends(require_admin),
    handler: OrderStatusHandler = Depends(get_state("order_status")),
) -> OrderResponse:
    return OrderResponse.model_validate(handler.update_status(order_id, body.status))


@order_router.post("/{order_id}/cancel", response_model=OrderResponse)
def cancel_order(
    order_id: str,
    user_id: str = Depends(require_caller),
    handler: OrderStatusHandler = Depends(get_state("order_status")),
) -> OrderResponse:
    return OrderResponse.model_validate(handler.cancel_order(order_id, user_id))
