"""Order confirmation template: sent to the buyer when an order is placed."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationKind,
    RecipientType,
)
from notifications.templates._lines import format_address, format_items


class OrderConfirmationTemplate:
    notification_kind = NotificationKind.ORDER_PLACED.value
    default_channels = [NotificationChannel.EMAIL.value]
    recipient_type = RecipientType.CUSTOMER.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        total = context.get("total", 0.0)
        shipping_cost = context.get("shipping_cost", 0.0)
        return {
            "subject": f"Order #{order_id} Received",
            "body": (
                f"Thank you! We have received your order #{order_id}.\n\n"
                f"{format_items(context.get('items', ()))}\n\n"
                f"Items Total: {total:.2f}\n"
                f"Shipping: {shipping_cost:.2f}\n"
                "Payment: cash on delivery\n\n"
                f"Shipping to:\n{format_address(context.get('address', {}))}\n\n"
                "We'll notify you once your order ships."
            ),
        }
