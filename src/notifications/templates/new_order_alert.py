"""New order alert template: internal notification to the store."""

from notifications.notification.notification import (
    NotificationChannel,
    NotificationKind,
    RecipientType,
)
from notifications.templates._lines import format_address, format_items


class NewOrderAlertTemplate:
    notification_kind = NotificationKind.ORDER_PLACED.value
    default_channels = [NotificationChannel.EMAIL.value]
    recipient_type = RecipientType.INTERNAL.value

    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        notes = context.get("notes") or "None"
        return {
            "subject": f"[New Order] #{order_id}",
            "body": (
                f"A new order #{order_id} has been placed.\n\n"
                f"{format_items(context.get('items', ()))}\n\n"
                f"Items Total: {context.get('total', 0.0):.2f}\n"
                f"Shipping: {context.get('shipping_cost', 0.0):.2f}\n"
                f"Notes: {notes}\n\n"
                f"Customer:\n{format_address(context.get('address', {}))}\n"
                f"Email: {context.get('address', {}).get('email', 'N/A')}"
            ),
        }
