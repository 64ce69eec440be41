from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AccountStatus, NotificationKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, email, name, password_hash, is_active, is_admin, account_status"


def _row_to_user(row: dict) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        name=row.get("name"),
        password_hash=row["password_hash"],
        is_active=bool(row.get("is_active", True)),
        is_admin=bool(row.get("is_admin", False)),
        account_status=AccountStatus(row.get("account_status") or AccountStatus.PENDING.value),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def create_user(
        self,
        *,
        email: str,
        name: Optional[str],
        password_hash: str,
        is_active: bool = True,
        is_admin: bool = False,
        account_status: AccountStatus = AccountStatus.PENDING,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(email, name, password_hash, is_active, is_admin, account_status)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (email, name, password_hash, int(is_active), int(is_admin), account_status.value),
            )
            return int(cur.lastrowid)

    def list_active(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE is_active=1 ORDER BY user_id")
            return [_row_to_user(r) for r in fetchall(cur)]

    def list_users(self, status: Optional[AccountStatus] = None) -> Sequence[User]:
        sql = f"SELECT {_USER_COLUMNS} FROM users"
        params: tuple = ()
        if status is not None:
            sql += " WHERE account_status=%s"
            params = (status.value,)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY created_at DESC, user_id DESC", params)
            return [_row_to_user(r) for r in fetchall(cur)]

    def set_status_and_mark_notifications_read(self, user_id: int, *, status: AccountStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE users SET account_status=%s, is_active=%s WHERE user_id=%s",
                (status.value, int(status != AccountStatus.REJECTED), int(user_id)),
            )
            if cur.rowcount == 0:
                cur.execute("SELECT 1 FROM users WHERE user_id=%s", (int(user_id),))
                if not fetchone(cur):
                    return False
            cur.execute(
                "UPDATE notifications SET is_read=1 WHERE related_user_id=%s AND kind=%s AND is_read=0",
                (int(user_id), NotificationKind.USER_REGISTRATION.value),
            )
            return True
