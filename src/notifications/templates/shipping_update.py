"""Shipping update template: sent when an order is marked shipped."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationKind,
    RecipientType,
)
from notifications.templates._lines import format_address, format_items


class ShippingUpdateTemplate:
    notification_kind = NotificationKind.ORDER_SHIPPED.value
    default_channels = [NotificationChannel.EMAIL.value]
    recipient_type = RecipientType.CUSTOMER.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        return {
            "subject": "Your Order Has Shipped!",
            "body": (
                f"Great news! Your order #{order_id} has shipped.\n\n"
                f"{format_items(context.get('items', ()))}\n\n"
                f"Amount due on delivery: {context.get('grand_total', 0.0):.2f}\n\n"
                f"Delivering to:\n{format_address(context.get('address', {}))}"
            ),
        }
