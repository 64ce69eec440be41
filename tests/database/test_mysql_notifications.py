from __future__ import annotations

from datetime import datetime

from src.timeclock.timeclock.core.enums import AccountStatus, NotificationKind
from src.timeclock.timeclock.notifications.mysql_notification_repository import MySQLNotificationRepository
from src.timeclock.timeclock.users.mysql_user_repository import MySQLUserRepository
from tests.fakes import FakeFactory


def test_admins_are_notified_with_one_insert_select():
    factory = FakeFactory({"rowcount": 2})

    sent = MySQLNotificationRepository(factory).notify_admins(
        related_user_id=7, kind=NotificationKind.USER_REGISTRATION, title="t", message="m"
    )

    assert sent == 2
    [(sql, params)] = factory.conn.executed
    assert sql.startswith("INSERT INTO notifications")
    assert "WHERE is_admin=1 AND is_active=1" in sql
    assert params == (7, "user_registration", "t", "m")
    assert factory.conn.committed


def test_unread_rows_map_to_notifications():
    row = {
        "id": 4,
        "recipient_id": 10,
        "related_user_id": 7,
        "kind": "user_registration",
        "title": "t",
        "message": "m",
        "is_read": 0,
        "created_at": datetime(2024, 3, 13, 9, 0),
    }
    factory = FakeFactory({"rows": [row]})

    [notification] = MySQLNotificationRepository(factory).list_unread(10)

    assert notification.notification_id == 4
    assert notification.related_user_id == 7
    assert notification.is_read is False
    sql, params = factory.conn.executed[0]
    assert "AND recipient_id=%s" in sql
    assert params == (10,)


def test_marking_an_already_read_notification_still_succeeds():
    factory = FakeFactory({"rowcount": 0}, {"rows": [{"1": 1}]})

    assert MySQLNotificationRepository(factory).mark_read(4) is True


def test_marking_a_missing_notification_fails():
    factory = FakeFactory({"rowcount": 0}, {"rows": []})

    assert MySQLNotificationRepository(factory).mark_read(4) is False


def test_status_update_only_marks_registration_notifications_about_the_user():
    factory = FakeFactory({"rowcount": 1}, {"rowcount": 2})

    MySQLUserRepository(factory).set_status_and_mark_notifications_read(5, status=AccountStatus.APPROVED)

    sql, params = factory.conn.executed[1]
    assert "WHERE related_user_id=%s AND kind=%s" in sql
    assert params == (5, "user_registration")


def test_user_list_filters_by_status():
    factory = FakeFactory({"rows": []})

    assert MySQLUserRepository(factory).list_users(AccountStatus.PENDING) == []

    sql, params = factory.conn.executed[0]
    assert "WHERE account_status=%s" in sql
    assert params == ("PENDING",)
