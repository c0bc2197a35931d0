"""Tests for the address book and customer lookups."""

import pytest
from identity.customer.addresses import Address, address_for_user
from identity.customer.customer import find_customer_by_email
from identity.customer.reconciliation import attach_address, create_guest_address
from shared.exceptions import ValidationError
from sqlalchemy import select

PAYLOAD = {
    "name": "Jane Doe",
    "email": "jane@example.com",
    "phone": "+1 555 0100",
    "street": "12 Market Street",
}


class TestAttachAddress:
    def test_creates_default_address(self, database):
        address = database.run_in_transaction(attach_address, "user-1", PAYLOAD)
        assert address.user_id == "user-1"
        assert address.is_default is True

    def test_updates_existing_address(self, database):
        first = database.run_in_transaction(attach_address, "user-1", PAYLOAD)
        second = database.run_in_transaction(attach_address, "user-1", {**PAYLOAD, "street": "1 Other Way"})

        assert second.id == first.id
        with database.transaction() as session:
            rows = session.scalars(select(Address).where(Address.user_id == "user-1")).all()
            assert [row.street for row in rows] == ["1 Other Way"]

    def test_invalid_payload(self, database):
        with pytest.raises(ValidationError):
            database.run_in_transaction(attach_address, "user-1", {**PAYLOAD, "phone": "n/a"})


class TestGuestAddress:
    def test_unowned(self, database):
        address = database.run_in_transaction(create_guest_address, PAYLOAD)
        assert address.user_id is None
        assert address.is_default is False


class TestAddressForUser:
    def test_prefers_default(self, database, make_address):
        make_address(user_id="user-1", is_default=False)
        default = make_address(user_id="user-1", is_default=True)
        with database.transaction() as session:
            assert address_for_user(session, "user-1").id == default.id

    def test_falls_back_to_oldest(self, database, make_address):
        oldest = make_address(user_id="user-1", is_default=False)
        make_address(user_id="user-1", is_default=False)
        with database.transaction() as session:
            assert address_for_user(session, "user-1").id == oldest.id

    def test_none(self, database):
        with database.transaction() as session:
            assert address_for_user(session, "user-1") is None


class TestCustomers:
    def test_register_normalizes_email(self, make_customer):
        assert make_customer(email=" Jane@Example.COM ").email == "jane@example.com"

    def test_duplicate_email(self, make_customer):
        make_customer(email="jane@example.com")
        with pytest.raises(ValidationError):
            make_customer(email="JANE@example.com")

    def test_invalid_email(self, make_customer):
        with pytest.raises(ValidationError):
            make_customer(email="jane")

    def test_lookup_is_case_insensitive(self, database, make_customer):
        customer = make_customer(email="jane@example.com", verified=True)
        with database.transaction() as session:
            found = find_customer_by_email(session, "JANE@EXAMPLE.COM")
            assert found.id == customer.id
            assert found.is_verified
            assert find_customer_by_email(session, None) is None
