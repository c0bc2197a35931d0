"""Tests for batch product loading used at order time."""

import pytest
from catalog.product.pricing import load_products
from catalog.product.product import Product
from shared.exceptions import ProductNotFound


class TestLoadProducts:
    def test_loads_by_id(self, database, make_product):
        first = make_product(title="A")
        second = make_product(title="B")
        with database.transaction() as session:
            products = load_products(session, [first.id, second.id, first.id])
            assert set(products) == {first.id, second.id}

    def test_missing_product(self, database, make_product):
        product = make_product()
        with database.transaction() as session, pytest.raises(ProductNotFound) as exc:
            load_products(session, [product.id, "missing"])
        assert exc.value.product_id == "missing"

    def test_soft_deleted_product_is_missing(self, database, make_product):
        product = make_product()
        with database.transaction() as session:
            session.get(Product, product.id).soft_delete()
        with database.transaction() as session, pytest.raises(ProductNotFound):
            load_products(session, [product.id])
