"""Exception taxonomy shared by every bounded context.

Mirrors the shape used across the domains: validation failures carry a dict of
field name to list of messages, so API handlers can surface them verbatim.
"""


class StorefrontError(Exception):
    """Base class for all domain errors raised by this system."""


class ValidationError(StorefrontError):
    """Input or state failed a validation rule.

    Raised before any transaction opens whenever possible.
    """

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        super().__init__(messages)


class ObjectNotFoundError(StorefrontError):
    """A referenced record does not exist (or is soft-deleted)."""

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        super().__init__(messages)


class InvalidOperationError(StorefrontError):
    """The operation is not allowed in the record's current state."""

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        super().__init__(messages)


class ProductNotFound(ObjectNotFoundError):
    """A cart line references a product that is missing or soft-deleted."""

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__({"product_id": [f"Product {product_id} not found"]})


class InsufficientStock(InvalidOperationError):
    """A conditional stock decrement matched no row."""

    def __init__(self, product_id: str, requested: int, available: int | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            {"stock": [f"Insufficient stock for product {product_id}: requested {requested}, available {available}"]}
        )
