import os
from pathlib import Path

os.environ.setdefault("STOREFRONT_ENV", "test")

import pytest  # noqa: E402


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    os.environ["STOREFRONT_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture()
def config(request, tmp_path):
    """Test configuration pointing at a fresh SQLite file per test."""
    from shared.config import load_config

    return load_config(
        env=request.config.option.env,
        databases={"default": {"database_uri": f"sqlite:///{tmp_path / 'storefront.db'}"}},
        logging={"log_dir": ""},
        notifications={"store_email": "store@example.com", "retry_interval": 0},
    )


@pytest.fixture()
def database(config):
    from shared.database import Database, drop_db, setup_db

    db = Database.from_config(config)
    setup_db(db)

    yield db

    drop_db(db)
    db.dispose()


@pytest.fixture(autouse=True)
def email_adapter():
    """Fresh fake email adapter for every test."""
    from notifications.channel import get_channel, reset_channels
    from notifications.notification.notification import NotificationChannel

    reset_channels()
    adapter = get_channel(NotificationChannel.EMAIL.value)

    yield adapter

    reset_channels()


@pytest.fixture()
def dispatcher():
    from notifications.notification.dispatch import NotificationDispatcher

    return NotificationDispatcher(store_email="store@example.com")


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------
@pytest.fixture()
def make_category(database):
    from catalog.category.category import Category

    def _make(name="Home Electrics", parent_id=None):
        with database.transaction() as session:
            category = Category(name=name, parent_id=parent_id)
            session.add(category)
            session.flush()
        return category

    return _make


@pytest.fixture()
def make_product(database):
    from catalog.product.product import Product

    def _make(**overrides):
        values = {
            "title": "Desk Fan",
            "price": 100.0,
            "stock": 10,
            "stock_status": "IN_STOCK",
        }
        values.update(overrides)
        with database.transaction() as session:
            product = Product(**values)
            session.add(product)
            session.flush()
        return product

    return _make


@pytest.fixture()
def make_customer(database):
    from identity.customer.customer import register_customer

    def _make(name="Jane Doe", email="jane@example.com", verified=False):
        return database.run_in_transaction(register_customer, name, email, verified)

    return _make


@pytest.fixture()
def make_address(database):
    from identity.customer.addresses import Address

    def _make(user_id=None, **overrides):
        values = {
            "user_id": user_id,
            "name": "Jane Doe",
            "email": "jane@example.com",
            "phone": "+1 555 0100",
            "street": "12 Market Street",
            "city": "Springfield",
            "state": "IL",
            "zip_code": "62701",
            "is_default": user_id is not None,
        }
        values.update(overrides)
        with database.transaction() as session:
            address = Address(**values)
            session.add(address)
            session.flush()
        return address

    return _make


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------
@pytest.fixture()
def client(config, database, dispatcher):
    from fastapi.testclient import TestClient

    from app import create_app

    with TestClient(create_app(config, database=database, dispatcher=dispatcher)) as test_client:
        yield test_client
