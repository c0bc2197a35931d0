"""Order cancellation template: sent to the buyer when an order is cancelled."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationKind,
    RecipientType,
)
from notifications.templates._lines import format_items


class OrderCancellationTemplate:
    notification_kind = NotificationKind.ORDER_CANCELLED.value
    default_channels = [NotificationChannel.EMAIL.value]
    recipient_type = RecipientType.CUSTOMER.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        items = context.get("items", ())
        cancelled = f"{format_items(items)}\n\n" if items else ""
        return {
            "subject": f"Order #{order_id} Cancelled",
            "body": (
                f"Your order #{order_id} has been cancelled.\n\n"
                f"{cancelled}"
                "Nothing is due for this order.\n\n"
                "Questions? Reply to this email and our team will help."
            ),
        }
