"""Category model and root-ancestor lookup used for SKU prefixes."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, Session, mapped_column

from shared.database import Base


class Category(Base):
    """A node in the category tree.

    Category CRUD is owned by catalog management; this system only reads the tree
    to find the root ancestor of a product's category.
    """

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    parent_id: Mapped[str | None] = mapped_column(ForeignKey("categories.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(UTC))


def root_category_name(session: Session, category_id: str | None) -> str:
    """Walk the parent chain of ``category_id`` and return the root's name.

    Always reads the tree fresh. Returns the name of the highest ancestor reached
    (stopping on a missing parent or a cycle), or ``""`` when the category is unknown.
    """
    name = ""
    seen: set[str] = set()
    current_id = category_id
    while current_id and current_id not in seen:
        seen.add(current_id)
        category = session.get(Category, current_id, populate_existing=True)
        if category is None:
            break
        name = category.name
        current_id = category.parent_id
    return name
