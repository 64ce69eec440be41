from __future__ import annotations

import pytest

from src.timeclock.timeclock.core.enums import NotificationKind
from src.timeclock.timeclock.core.exceptions import NotificationNotFoundError, NotFoundError
from src.timeclock.timeclock.notifications.service import NotificationService
from tests.fakes import InMemoryUsers, make_user


@pytest.fixture
def inbox():
    users = InMemoryUsers(
        [make_user(1, "Alice"), make_user(10, "Admin", is_admin=True), make_user(11, "Boss", is_admin=True)]
    )
    for _ in range(2):
        users.notifications.notify_admins(
            related_user_id=1,
            kind=NotificationKind.USER_REGISTRATION,
            title="New user awaiting approval",
            message="Alice (alice@example.com) is waiting for access to the platform.",
        )
    return users.notifications


def test_unread_is_newest_first_and_filterable_by_recipient(inbox):
    service = NotificationService(inbox)

    everything = service.list_unread()
    assert [n.notification_id for n in everything] == [4, 3, 2, 1]
    assert {n.recipient_id for n in service.list_unread(10)} == {10}
    assert len(service.list_unread(10)) == 2


def test_mark_one_read(inbox):
    service = NotificationService(inbox)

    service.mark_read(3)

    assert 3 not in [n.notification_id for n in service.list_unread()]


def test_marking_an_unknown_notification_is_not_found(inbox):
    with pytest.raises(NotificationNotFoundError) as exc_info:
        NotificationService(inbox).mark_read(99)
    assert isinstance(exc_info.value, NotFoundError)


def test_mark_all_read_reports_the_count(inbox):
    service = NotificationService(inbox)
    service.mark_read(1)

    assert service.mark_all_read() == 3
    assert service.list_unread() == []
    assert service.mark_all_read() == 0
