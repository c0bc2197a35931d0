"""Failures raised while placing an order."""

from shared.exceptions import (
    InsufficientStock,
    ProductNotFound,
    StorefrontError,
    ValidationError,
)

__all__ = [
    "AddressRequired",
    "EmptyCart",
    "InsufficientStock",
    "OrderFailed",
    "ProductNotFound",
]


class EmptyCart(ValidationError):
    def __init__(self):
        super().__init__({"cart_lines": ["Cart is empty"]})


class AddressRequired(ValidationError):
    def __init__(self, reason: str = "A shipping address is required"):
        super().__init__({"address_id": [reason]})


class OrderFailed(StorefrontError):
    """Infrastructure failure that survived the retry. Nothing was committed."""

    def __init__(self, reason: str = "Order could not be placed, please try again"):
        self.reason = reason
        super().__init__(reason)
