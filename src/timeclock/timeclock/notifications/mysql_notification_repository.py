from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import NotificationKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Notification
from .repository import NotificationRepository

_COLUMNS = "id, recipient_id, related_user_id, kind, title, message, is_read, created_at"


def _row_to_notification(row: dict) -> Notification:
    related = row.get("related_user_id")
    return Notification(
        notification_id=int(row["id"]),
        recipient_id=int(row["recipient_id"]),
        related_user_id=int(related) if related is not None else None,
        kind=NotificationKind(row["kind"]),
        title=row["title"],
        message=row["message"],
        is_read=bool(row.get("is_read", False)),
        created_at=row["created_at"],
    )


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def notify_admins(
        self,
        *,
        related_user_id: int,
        kind: NotificationKind,
        title: str,
        message: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(recipient_id, related_user_id, kind, title, message)
                SELECT user_id, %s, %s, %s, %s FROM users WHERE is_admin=1 AND is_active=1
                """,
                (int(related_user_id), kind.value, title, message),
            )
            return int(cur.rowcount or 0)

    def list_unread(self, recipient_id: Optional[int] = None) -> Sequence[Notification]:
        sql = f"SELECT {_COLUMNS} FROM notifications WHERE is_read=0"
        params: tuple = ()
        if recipient_id is not None:
            sql += " AND recipient_id=%s"
            params = (int(recipient_id),)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY created_at DESC, id DESC", params)
            return [_row_to_notification(r) for r in fetchall(cur)]

    def mark_read(self, notification_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE id=%s", (int(notification_id),))
            if cur.rowcount:
                return True
            # Zero affected rows also means "already read".
            cur.execute("SELECT 1 FROM notifications WHERE id=%s", (int(notification_id),))
            return fetchone(cur) is not None

    def mark_all_read(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE notifications SET is_read=1 WHERE is_read=0")
            return int(cur.rowcount or 0)
