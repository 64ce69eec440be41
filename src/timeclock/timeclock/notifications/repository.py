from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import NotificationKind
from .model import Notification


class NotificationRepository(Protocol):
    def notify_admins(
        self,
        *,
        related_user_id: int,
        kind: NotificationKind,
        title: str,
        message: str,
    ) -> int:
        """Create one unread notification per active admin; returns how many were created."""

        raise NotImplementedError

    def list_unread(self, recipient_id: Optional[int] = None) -> Sequence[Notification]:
        """Unread notifications, newest first; all admins when ``recipient_id`` is None."""

        raise NotImplementedError

    def mark_read(self, notification_id: int) -> bool:
        """False when the notification does not exist."""

        raise NotImplementedError

    def mark_all_read(self) -> int:
        raise NotImplementedError
