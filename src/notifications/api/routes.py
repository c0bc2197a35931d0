"""FastAPI endpoints for the notification retry queue (admin only)."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from notifications.notification.dispatch import NotificationDispatcher
from shared.api import Caller, get_state, require_admin

notification_router = APIRouter(prefix="/notifications", tags=["notifications"])


class RetryResponse(BaseModel):
    delivered: int
    pending: int


@notification_router.post("/retry", response_model=RetryResponse)
def retry_failed_notifications(
    _: Caller = Depends(require_admin),
    dispatcher: NotificationDispatcher = Depends(get_state("dispatcher")),
) -> RetryResponse:
    delivered = dispatcher.retry_failed()
    return RetryResponse(delivered=delivered, pending=len(dispatcher.failed))
