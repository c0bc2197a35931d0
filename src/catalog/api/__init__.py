"""Catalog API package."""

from catalog.api.routes import product_router

__all__ = ["product_router"]
