"""Read-side order queries for customers, operators and public tracking."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from identity.customer.addresses import Address
from ordering.order.order import Order
from ordering.order.status import parse_status
from shared.exceptions import ObjectNotFoundError


def orders_for_user(session: Session, user_id: str, status=None) -> list[Order]:
    """The user's orders, newest first, optionally filtered by status."""
    stmt = select(Order).where(Order.user_id == user_id)
    if status:
        stmt = stmt.where(Order.status == parse_status(status).value)
    return list(session.scalars(stmt.order_by(Order.created_at.desc())).all())


def latest_order_for_user(session: Session, user_id: str) -> Order | None:
    return session.scalar(
        select(Order).where(Order.user_id == user_id).order_by(Order.created_at.desc()).limit(1)
    )


def order_by_id(session: Session, order_id: str) -> Order:
    order = session.get(Order, order_id)
    if order is None:
        raise ObjectNotFoundError({"order_id": [f"Order {order_id} not found"]})
    return order


def order_for_user(session: Session, order_id: str, user_id: str) -> Order:
    """``order_by_id`` for customers: another user's order reads as missing."""
    order = session.get(Order, order_id)
    if order is None or order.user_id != user_id:
        raise ObjectNotFoundError({"order_id": [f"Order {order_id} not found"]})
    return order


def all_orders(session: Session) -> list[Order]:
    return list(session.scalars(select(Order).order_by(Order.created_at.desc())).all())


def track_order(session: Session, order_id: str) -> dict:
    """Public tracking view. Exposes no user id, notes or SKUs."""
    order = order_by_id(session, order_id)
    address = session.get(Address, order.address_id) if order.address_id else None
    return {
        "id": order.id,
        "status": order.status,
        "total": order.total,
        "shipping_cost": order.shipping_cost,
        "created_at": order.created_at,
        "items": [
            {
                "product_id": item.product_id,
                "title": item.title,
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in order.items
        ],
        "address": (
            {
                "name": address.name,
                "street": address.street,
                "city": address.city,
                "state": address.state,
                "zip_code": address.zip_code,
            }
            if address is not None
            else None
        ),
    }
