from __future__ import annotations

import logging
from typing import Optional, Sequence

from werkzeug.security import generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import AccountStatus, NotificationKind
from ..core.exceptions import UserNotFoundError, ValidationError
from ..notifications.repository import NotificationRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use case: registration and account administration."""

    def __init__(self, users: UserRepository, notifications: NotificationRepository):
        self._users = users
        self._notifications = notifications

    def register(self, *, email: str, name: Optional[str], password: str) -> User:
        """Create a PENDING account and notify every admin that it awaits approval."""

        email = require_non_empty(email, "email").lower()
        password = require_min_length(str(password or ""), "password", MIN_PASSWORD_LENGTH)
        name = str(name or "").strip() or None

        if self._users.get_by_email(email):
            raise ValidationError(f"An account already exists for {email}")

        user_id = self._users.create_user(
            email=email,
            name=name,
            password_hash=generate_password_hash(password),
            account_status=AccountStatus.PENDING,
        )
        user = self._users.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} does not exist")

        sent = self._notifications.notify_admins(
            related_user_id=user.user_id,
            kind=NotificationKind.USER_REGISTRATION,
            title="New user awaiting approval",
            message=f"{user.display_name} ({user.email}) is waiting for access to the platform.",
        )
        logger.info("Registered user id=%s (pending); notified %s admins", user.user_id, sent)
        return user

    def list_users(self, status: Optional[AccountStatus] = None) -> Sequence[User]:
        return self._users.list_users(status)

    def set_account_status(self, user_id: int, status: AccountStatus) -> None:
        """Change an account status and mark its registration notifications read atomically."""

        if not self._users.set_status_and_mark_notifications_read(int(user_id), status=status):
            raise UserNotFoundError(f"User {user_id} does not exist")
        logger.info("Account status of user id=%s set to %s", user_id, status.value)
