"""Identity API package."""

from identity.api.routes import address_router

__all__ = ["address_router"]
