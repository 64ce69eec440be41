from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AccountStatus
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

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
        raise NotImplementedError

    def list_active(self) -> Sequence[User]:
        raise NotImplementedError

    def list_users(self, status: Optional[AccountStatus] = None) -> Sequence[User]:
        """All users, newest account first, optionally restricted to one status."""

        raise NotImplementedError

    def set_status_and_mark_notifications_read(self, user_id: int, *, status: AccountStatus) -> bool:
        """Update the account status and mark the registration notifications about the user read.

        Both writes happen in one transaction; returns False when the user is unknown.
        """

        raise NotImplementedError
