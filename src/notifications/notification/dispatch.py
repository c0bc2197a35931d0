"""Notification dispatcher: renders order notices and sends them via channel adapters.

Called after an order transaction commits. Delivery problems never propagate to
the caller: they are logged and the notification is queued in ``failed`` until
``retry_failed`` delivers it. The queue holds at most ``max_failed`` entries
(oldest dropped first), and a notification is abandoned once it has been tried
``max_attempts`` times.
"""

import threading

import structlog

from notifications.channel import get_channel
from notifications.notification.notification import (
    Notification,
    NotificationChannel,
    NotificationKind,
    OrderNotice,
    RecipientType,
)
from notifications.templates import get_templates

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """Dispatches order notifications to the store and the buyer."""

    def __init__(
        self,
        store_email: str,
        channel_lookup=get_channel,
        max_failed: int = 500,
        max_attempts: int = 5,
    ):
        self.store_email = store_email
        self._channel_lookup = channel_lookup
        self.max_failed = max_failed
        self.max_attempts = max_attempts
        self._lock = threading.Lock()
        self.failed: list[Notification] = []

    def dispatch(self, notice: OrderNotice, kind: NotificationKind | str) -> list[Notification]:
        """Render and send every template registered for ``kind``."""
        kind_value = kind.value if isinstance(kind, NotificationKind) else kind
        try:
            notifications = self._build(notice, kind_value)
        except Exception as exc:
            logger.error(
                "Failed to render order notification",
                order_id=notice.order_id,
                kind=kind_value,
                error=str(exc),
            )
            return []

        for notification in notifications:
            self._send(notification)
        return notifications

    def retry_failed(self) -> int:
        """Re-send every failed notification once. Returns how many went through."""
        with self._lock:
            pending, self.failed = self.failed, []

        delivered = 0
        for notification in pending:
            if self._send(notification):
                delivered += 1
        if pending:
            logger.info("Retried failed notifications", retried=len(pending), delivered=delivered)
        return delivered

    def _build(self, notice: OrderNotice, kind: str) -> list[Notification]:
        context = notice.as_context()
        notifications = []
        for template in get_templates(kind):
            if template.recipient_type == RecipientType.INTERNAL.value:
                recipient = self.store_email
            else:
                recipient = notice.recipient_email

            if not recipient:
                logger.warning(
                    "No recipient for notification, skipping",
                    order_id=notice.order_id,
                    kind=kind,
                    recipient_type=template.recipient_type,
                )
                continue

            content = template.render(context)
            for channel in template.default_channels:
                notifications.append(
                    Notification(
                        kind=kind,
                        channel=channel,
                        recipient=recipient,
                        recipient_type=template.recipient_type,
                        subject=content["subject"],
                        body=content["body"],
                        order_id=notice.order_id,
                    )
                )
        return notifications

    def _send(self, notification: Notification) -> bool:
        notification.attempts += 1
        try:
            adapter = self._channel_lookup(notification.channel)
            result = _dispatch_via_channel(adapter, notification)
        except Exception as exc:
            result = {"status": "failed", "error": str(exc)}

        if result.get("status") == "sent":
            notification.mark_sent()
            logger.info(
                "Notification sent",
                notification_id=notification.id,
                order_id=notification.order_id,
                kind=notification.kind,
                recipient_type=notification.recipient_type,
            )
            return True

        notification.mark_failed(result.get("error", "Unknown dispatch error"))
        logger.error(
            "Notification dispatch failed",
            notification_id=notification.id,
            order_id=notification.order_id,
            kind=notification.kind,
            attempts=notification.attempts,
            error=notification.failure_reason,
        )
        self._queue_for_retry(notification)
        return False

    def _queue_for_retry(self, notification: Notification) -> None:
        if notification.attempts >= self.max_attempts:
            logger.error(
                "Notification abandoned",
                notification_id=notification.id,
                order_id=notification.order_id,
                attempts=notification.attempts,
            )
            return

        with self._lock:
            self.failed.append(notification)
            overflow = max(len(self.failed) - self.max_failed, 0)
            dropped = self.failed[:overflow]
            del self.failed[:overflow]

        for stale in dropped:
            logger.warning(
                "Retry queue full, dropping oldest notification",
                notification_id=stale.id,
                order_id=stale.order_id,
                max_failed=self.max_failed,
            )


def _dispatch_via_channel(adapter, notification: Notification) -> dict:
    """Route dispatch to the correct adapter method based on channel."""
    if notification.channel == NotificationChannel.EMAIL.value:
        return adapter.send(
            to=notification.recipient,
            subject=notification.subject,
            body=notification.body,
        )
    return {"status": "failed", "error": f"Unknown channel: {notification.channel}"}
