"""Address book: the Address model and address payload validation."""

from dataclasses import dataclass, fields
from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, String, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from identity.shared.email import is_valid_email, normalize_email
from identity.shared.phone import is_valid_phone
from shared.database import Base
from shared.exceptions import ValidationError


class Address(Base):
    """A shipping address. ``user_id`` is null for guest-owned addresses."""

    __tablename__ = "addresses"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    street: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    state: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False, default="")
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "street": self.street,
            "city": self.city,
            "state": self.state,
            "zip_code": self.zip_code,
            "is_default": self.is_default,
        }


@dataclass(frozen=True)
class AddressDetails:
    name: str
    email: str
    phone: str
    street: str
    city: str = ""
    state: str = ""
    zip_code: str = ""

    @classmethod
    def from_payload(cls, payload: "dict | AddressDetails") -> "AddressDetails":
        """Validate an incoming address payload.

        Collects every problem into a single ``ValidationError``.
        """
        if isinstance(payload, AddressDetails):
            return payload

        values = {field.name: str(payload.get(field.name) or "").strip() for field in fields(cls)}
        errors: dict[str, list[str]] = {}
        for required in ("name", "street", "phone", "email"):
            if not values[required]:
                errors.setdefault(required, []).append(f"{required} is required")

        if values["email"] and not is_valid_email(values["email"]):
            errors.setdefault("email", []).append(f"Invalid email address: {values['email']!r}")
        if values["phone"] and not is_valid_phone(values["phone"]):
            errors.setdefault("phone", []).append(f"Invalid phone number: {values['phone']!r}")
        for name, value in values.items():
            limit = Address.__table__.c[name].type.length
            if len(value) > limit:
                errors.setdefault(name, []).append(f"{name} must be at most {limit} characters")

        if errors:
            raise ValidationError(errors)

        values["email"] = normalize_email(values["email"])
        return cls(**values)

    def apply_to(self, address: Address) -> Address:
        for field in fields(self):
            setattr(address, field.name, getattr(self, field.name))
        return address


def address_for_user(session: Session, user_id: str) -> Address | None:
    """The user's default address, else their oldest one."""
    return session.scalar(
        select(Address)
        .where(Address.user_id == user_id)
        .order_by(Address.is_default.desc(), Address.created_at.asc())
        .limit(1)
    )
