"""Celery tasks for notification delivery."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .models import NotificationDispatch
from .services import deliver

logger = logging.getLogger(__name__)


@shared_task(name="notifications.deliver_notification")
def deliver_notification(dispatch_id: int) -> bool:
    """Send the notice recorded in a NotificationDispatch row."""
    try:
        dispatch = NotificationDispatch.objects.select_related("reservation", "reservation__hotel").get(pk=dispatch_id)
    except NotificationDispatch.DoesNotExist:
        logger.warning(f"Notification dispatch {dispatch_id} not found")
        return False
    return deliver(dispatch)
