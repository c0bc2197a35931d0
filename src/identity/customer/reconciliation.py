"""Identity reconciliation: addresses for checkouts and guest order linking.

Guest checkouts create an address with no owner. Right after a guest order
commits, ``link_guest_order`` looks for an account with the same email and, if
one exists, attaches the order to it. Linking is a best-effort heuristic: when
``require_verified_email`` is set, only accounts with a verified email qualify.
"""

import structlog
from sqlalchemy import select
from sqlalchemy.orm import Session

from identity.customer.addresses import Address, AddressDetails
from identity.customer.customer import find_customer_by_email
from ordering.order.order import Order
from shared.database import Database

logger = structlog.get_logger(__name__)


def attach_address(session: Session, user_id: str, payload) -> Address:
    """Create the user's address, or update the one they already have.

    The resulting address is the user's default.
    """
    details = AddressDetails.from_payload(payload)
    address = session.scalar(
        select(Address).where(Address.user_id == user_id).order_by(Address.created_at.asc()).limit(1)
    )
    if address is None:
        address = Address(user_id=user_id)
        session.add(address)
        logger.info("Address created", user_id=user_id)
    else:
        logger.info("Address updated", user_id=user_id, address_id=address.id)

    details.apply_to(address)
    address.is_default = True
    session.flush()
    return address


def create_guest_address(session: Session, payload) -> Address:
    details = AddressDetails.from_payload(payload)
    address = details.apply_to(Address(user_id=None, is_default=False))
    session.add(address)
    session.flush()
    logger.info("Guest address created", address_id=address.id)
    return address


class IdentityReconciler:
    def __init__(self, database: Database, require_verified_email: bool = False):
        self.database = database
        self.require_verified_email = require_verified_email

    def link_guest_order(self, order_id: str) -> str | None:
        """Attach a committed guest order to the account owning its address email.

        Returns the linked user id, or ``None``. Never raises.
        """
        try:
            return self.database.run_in_transaction(self._link, order_id)
        except Exception as exc:
            logger.error("Guest order linking failed", order_id=order_id, error=str(exc))
            return None

    def _link(self, session: Session, order_id: str) -> str | None:
        order = session.get(Order, order_id)
        if order is None or order.user_id is not None or order.address_id is None:
            return None

        address = session.get(Address, order.address_id)
        if address is None:
            return None

        customer = find_customer_by_email(session, address.email)
        if customer is None:
            logger.debug("No account for guest email", order_id=order_id)
            return None
        if self.require_verified_email and not customer.is_verified:
            logger.info(
                "Account email not verified, guest order left unlinked",
                order_id=order_id,
                user_id=customer.id,
            )
            return None

        order.user_id = customer.id
        logger.info("Guest order linked to account", order_id=order_id, user_id=customer.id)
        return customer.id
