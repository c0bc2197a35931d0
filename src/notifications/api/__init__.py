"""Notifications API package."""

from notifications.api.routes import notification_router

__all__ = ["notification_router"]
