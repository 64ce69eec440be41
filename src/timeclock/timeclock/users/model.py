from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AccountStatus


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Plain data object (no DB access code).
    """

    user_id: int
    email: str
    name: Optional[str]
    password_hash: str
    is_active: bool = True
    is_admin: bool = False
    account_status: AccountStatus = AccountStatus.PENDING

    @property
    def display_name(self) -> str:
        return self.name or self.email

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "name": self.name,
            "isActive": self.is_active,
            "isAdmin": self.is_admin,
            "accountStatus": self.account_status.value,
        }
