"""Customer account read model.

Accounts are registered by the external auth service. This system reads them to
resolve default addresses and to link guest orders by email; ``register_customer``
exists for seeding and tests.
"""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, String, func, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from identity.shared.email import is_valid_email, normalize_email
from shared.database import Base
from shared.exceptions import ValidationError


class Customer(Base):
    """A registered person, identified by id and by a unique lower-cased email."""

    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False, unique=True)
    email_verified_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    @property
    def is_verified(self) -> bool:
        return self.email_verified_at is not None


def register_customer(session: Session, name: str, email: str, verified: bool = False) -> Customer:
    if not name or not name.strip():
        raise ValidationError({"name": ["Name is required"]})
    if not is_valid_email(email):
        raise ValidationError({"email": [f"Invalid email address: {email!r}"]})

    normalized = normalize_email(email)
    if find_customer_by_email(session, normalized) is not None:
        raise ValidationError({"email": ["An account with this email already exists"]})

    customer = Customer(
        name=name.strip(),
        email=normalized,
        email_verified_at=datetime.now(UTC) if verified else None,
    )
    session.add(customer)
    session.flush()
    return customer


def find_customer_by_email(session: Session, email: str | None) -> Customer | None:
    """Case-insensitive lookup."""
    if not email:
        return None
    return session.scalar(select(Customer).where(func.lower(Customer.email) == normalize_email(email)))
