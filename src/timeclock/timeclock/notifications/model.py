from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import NotificationKind


@dataclass(frozen=True)
class Notification:
    """Domain entity: a message for one admin (``recipient_id``).

    ``related_user_id`` is the account the message is about, e.g. the user
    whose registration awaits approval.
    """

    notification_id: int
    recipient_id: int
    kind: NotificationKind
    title: str
    message: str
    created_at: datetime
    related_user_id: Optional[int] = None
    is_read: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.notification_id,
            "recipientId": self.recipient_id,
            "relatedUserId": self.related_user_id,
            "type": self.kind.value,
            "title": self.title,
            "message": self.message,
            "read": self.is_read,
            "createdAt": self.created_at.isoformat(),
        }
