from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from src.timeclock.timeclock.core.enums import AccountStatus, NotificationKind
from src.timeclock.timeclock.core.exceptions import UserNotFoundError, ValidationError
from src.timeclock.timeclock.users.service import UserService
from tests.fakes import InMemoryUsers, make_user


@pytest.fixture
def staff():
    return InMemoryUsers(
        [
            make_user(1, "Alice"),
            make_user(2, "Bob"),
            make_user(10, "Admin", is_admin=True),
            make_user(11, "Boss", is_admin=True),
        ]
    )


def _service(users):
    return UserService(users, users.notifications)


def test_registration_creates_a_pending_account(staff):
    user = _service(staff).register(email=" Carol@Example.com ", name="Carol", password="s3cret-pass")

    assert user.account_status == AccountStatus.PENDING
    assert user.email == "carol@example.com"
    assert check_password_hash(user.password_hash, "s3cret-pass")


def test_registration_notifies_every_admin(staff):
    user = _service(staff).register(email="carol@example.com", name="Carol", password="s3cret-pass")

    unread = staff.notifications.list_unread()
    assert {n.recipient_id for n in unread} == {10, 11}
    assert all(n.related_user_id == user.user_id for n in unread)
    assert all(n.kind == NotificationKind.USER_REGISTRATION for n in unread)
    assert "carol@example.com" in unread[0].message


def test_registration_without_admins_still_succeeds(users):
    user = _service(users).register(email="carol@example.com", name=None, password="s3cret-pass")

    assert user.display_name == "carol@example.com"
    assert users.notifications.items == []


@pytest.mark.parametrize(
    "email, password",
    [("", "s3cret-pass"), (None, "s3cret-pass"), ("carol@example.com", "short"), ("carol@example.com", None)],
)
def test_registration_input_is_validated(staff, email, password):
    with pytest.raises(ValidationError):
        _service(staff).register(email=email, name="Carol", password=password)
    assert staff.notifications.items == []


def test_duplicate_email_is_rejected(staff):
    with pytest.raises(ValidationError):
        _service(staff).register(email="alice@example.com", name="Alice", password="s3cret-pass")


def test_status_change_marks_registration_notifications_read(staff):
    service = _service(staff)
    carol = service.register(email="carol@example.com", name="Carol", password="s3cret-pass")
    dave = service.register(email="dave@example.com", name="Dave", password="s3cret-pass")

    service.set_account_status(carol.user_id, AccountStatus.APPROVED)

    assert staff.get_by_id(carol.user_id).account_status == AccountStatus.APPROVED
    assert {n.related_user_id for n in staff.notifications.list_unread()} == {dave.user_id}


def test_rejected_account_is_deactivated(users):
    _service(users).set_account_status(2, AccountStatus.REJECTED)

    assert users.get_by_id(2).account_status == AccountStatus.REJECTED
    assert not users.get_by_id(2).is_active


def test_set_account_status_of_unknown_user(users):
    with pytest.raises(UserNotFoundError):
        _service(users).set_account_status(42, AccountStatus.APPROVED)


def test_list_users_filters_by_status(staff):
    service = _service(staff)
    carol = service.register(email="carol@example.com", name="Carol", password="s3cret-pass")

    assert [u.user_id for u in service.list_users(AccountStatus.PENDING)] == [carol.user_id]
    assert [u.user_id for u in service.list_users()][0] == carol.user_id
