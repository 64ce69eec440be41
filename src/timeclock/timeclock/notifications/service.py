from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.exceptions import NotificationNotFoundError
from .model import Notification
from .repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:
    """Use case: the admin notification inbox."""

    def __init__(self, notifications: NotificationRepository):
        self._notifications = notifications

    def list_unread(self, recipient_id: Optional[int] = None) -> Sequence[Notification]:
        return self._notifications.list_unread(recipient_id)

    def mark_read(self, notification_id: int) -> None:
        if not self._notifications.mark_read(int(notification_id)):
            raise NotificationNotFoundError(f"Notification {notification_id} does not exist")

    def mark_all_read(self) -> int:
        count = self._notifications.mark_all_read()
        logger.info("Marked %s notifications read", count)
        return count
