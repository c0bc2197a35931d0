"""Tests for customer order history, operator listing and public tracking."""

import pytest
from ordering.order.queries import (
    all_orders,
    latest_order_for_user,
    order_by_id,
    orders_for_user,
    track_order,
)
from ordering.order.status import OrderStatusHandler
from shared.exceptions import ObjectNotFoundError, ValidationError


@pytest.fixture()
def history(database, place, make_product, make_address):
    make_address(user_id="user-1")
    make_address(user_id="user-2", email="other@example.com")
    fan = make_product(stock=50)
    first = place([(fan.id, 1)], user_id="user-1")
    second = place([(fan.id, 2)], user_id="user-1")
    other = place([(fan.id, 3)], user_id="user-2")
    OrderStatusHandler(database).update_status(first.id, "SHIPPED")
    return first, second, other


class TestOrdersForUser:
    def test_newest_first(self, database, history):
        first, second, _ = history
        with database.transaction() as session:
            assert [o.id for o in orders_for_user(session, "user-1")] == [second.id, first.id]

    def test_status_filter(self, database, history):
        first, _, _ = history
        with database.transaction() as session:
            assert [o.id for o in orders_for_user(session, "user-1", "shipped")] == [first.id]

    def test_unknown_status_filter(self, database, history):
        with database.transaction() as session, pytest.raises(ValidationError):
            orders_for_user(session, "user-1", "LOST")

    def test_no_orders(self, database):
        with database.transaction() as session:
            assert orders_for_user(session, "nobody") == []


class TestLatestAndAll:
    def test_latest(self, database, history):
        _, second, _ = history
        with database.transaction() as session:
            assert latest_order_for_user(session, "user-1").id == second.id
            assert latest_order_for_user(session, "nobody") is None

    def test_all_orders(self, database, history):
        with database.transaction() as session:
            assert len(all_orders(session)) == 3

    def test_order_by_id(self, database, history):
        first, _, _ = history
        with database.transaction() as session:
            assert order_by_id(session, first.id).total == first.total
            with pytest.raises(ObjectNotFoundError):
                order_by_id(session, "missing")


class TestTrackOrder:
    def test_exposes_only_public_fields(self, database, history):
        first, _, _ = history
        with database.transaction() as session:
            tracked = track_order(session, first.id)

        assert tracked["id"] == first.id
        assert tracked["status"] == "SHIPPED"
        assert tracked["items"][0]["quantity"] == 1
        assert "sku" not in tracked["items"][0]
        assert "user_id" not in tracked
        assert "notes" not in tracked
        assert tracked["address"]["street"] == "12 Market Street"
        assert "email" not in tracked["address"]
        assert "phone" not in tracked["address"]

    def test_unknown_order(self, database):
        with database.transaction() as session, pytest.raises(ObjectNotFoundError):
            track_order(session, "missing")
