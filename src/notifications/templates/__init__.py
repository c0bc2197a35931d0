"""Template registry: maps NotificationKind to template classes.

Each template knows its default channels, who receives it, and how to render
content from an order notice context.
"""

from notifications.notification.notification import NotificationKind
from notifications.templates.new_order_alert import NewOrderAlertTemplate
from notifications.templates.order_cancellation import OrderCancellationTemplate
from notifications.templates.order_confirmation import OrderConfirmationTemplate
from notifications.templates.shipping_update import ShippingUpdateTemplate

TEMPLATE_REGISTRY: dict[str, list[type]] = {
    NotificationKind.ORDER_PLACED.value: [NewOrderAlertTemplate, OrderConfirmationTemplate],
    NotificationKind.ORDER_SHIPPED.value: [ShippingUpdateTemplate],
    NotificationKind.ORDER_CANCELLED.value: [OrderCancellationTemplate],
}


def get_templates(kind: str) -> list[type]:
    """Look up the templates rendered for a notification kind."""
    templates = TEMPLATE_REGISTRY.get(kind)
    if templates is None:
        raise ValueError(f"No template registered for notification kind: {kind}")
    return templates
