"""Stock ledger: the only path that takes units out of ``products.stock``.

A reservation is a single conditional UPDATE; the database evaluates the guard
and the decrement atomically, so concurrent orders can never drive stock below
zero. There is no read-then-write path.
"""

from collections import defaultdict
from collections.abc import Iterable
from datetime import UTC, datetime

import structlog
from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from catalog.product.product import Product, StockStatus, stock_status_for
from shared.exceptions import InsufficientStock, ProductNotFound, ValidationError

logger = structlog.get_logger(__name__)

__all__ = ["InsufficientStock", "StockLedger", "stock_status_for"]


class StockLedger:
    def reserve(self, session: Session, product_id: str, quantity: int) -> None:
        """Atomically take ``quantity`` units of ``product_id``.

        Must run inside the caller's transaction. Raises ``InsufficientStock`` when
        the guard fails; the caller's rollback leaves stock untouched.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        remaining = Product.stock - quantity
        stmt = (
            update(Product)
            .where(
                Product.id == product_id,
                Product.deleted_at.is_(None),
                Product.stock >= quantity,
            )
            .values(
                stock=remaining,
                stock_status=case(
                    (Product.stock_status == StockStatus.PRE_ORDER.value, StockStatus.PRE_ORDER.value),
                    (remaining == 0, StockStatus.OUT_OF_STOCK.value),
                    else_=StockStatus.IN_STOCK.value,
                ),
                updated_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        result = session.execute(stmt)
        if result.rowcount == 1:
            logger.debug("Stock reserved", product_id=product_id, quantity=quantity)
            return

        available = session.scalar(
            select(Product.stock).where(Product.id == product_id, Product.deleted_at.is_(None)),
        )
        if available is None:
            raise ProductNotFound(product_id)

        logger.info(
            "Insufficient stock",
            product_id=product_id,
            requested=quantity,
            available=available,
        )
        raise InsufficientStock(product_id, requested=quantity, available=available)

    def reserve_all(self, session: Session, lines: Iterable[tuple[str, int]]) -> dict[str, int]:
        """Reserve every ``(product_id, quantity)`` line, all or nothing.

        Quantities for the same product are summed into one decrement. Products are
        decremented in ascending id order so concurrent batches lock rows in the
        same order.
        """
        totals: dict[str, int] = defaultdict(int)
        for product_id, quantity in lines:
            totals[product_id] += quantity

        for product_id in sorted(totals):
            self.reserve(session, product_id, totals[product_id])
        return dict(totals)
