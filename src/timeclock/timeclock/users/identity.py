"""Acting-user resolution, including the demo-identity compatibility shim.

Anonymous scans (``"anonymous"`` / ``"demo-user"``) and stale identities that
disappear between lookup and insert are attributed to one well-known demo
account. This substitution lives only here so that it cannot hide identity
bugs anywhere else: every other code path treats a missing user as
``UserNotFoundError``.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from werkzeug.security import generate_password_hash

from ..core.constants import ANONYMOUS_IDENTITIES, DEMO_USER_EMAIL, DEMO_USER_NAME
from ..core.enums import AccountStatus
from ..core.exceptions import UserNotFoundError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_or_create_demo_user(users: UserRepository) -> User:
    user = users.get_by_email(DEMO_USER_EMAIL)
    if user:
        return user

    user_id = users.create_user(
        email=DEMO_USER_EMAIL,
        name=DEMO_USER_NAME,
        # Never used to sign in.
        password_hash=generate_password_hash("demo-password"),
        is_active=True,
        is_admin=False,
        account_status=AccountStatus.APPROVED,
    )
    logger.info("Created demo user id=%s", user_id)
    created = users.get_by_id(user_id)
    if created is None:
        raise UserNotFoundError("Demo user could not be created")
    return created


def resolve_acting_user(users: UserRepository, raw_identity) -> int:
    """Map the identity sent by a client to a stored user id."""

    if raw_identity is None or not str(raw_identity).strip():
        raise ValidationError("User ID is required")

    identity = str(raw_identity).strip()
    if identity in ANONYMOUS_IDENTITIES:
        demo = get_or_create_demo_user(users)
        logger.info("Anonymous identity %r mapped to demo user id=%s", identity, demo.user_id)
        return demo.user_id

    try:
        user_id = int(identity)
    except ValueError:
        raise ValidationError("User ID must be an integer") from None

    if users.get_by_id(user_id) is None:
        raise UserNotFoundError("User not found. Please sign in again.")
    return user_id


def with_demo_fallback(users: UserRepository, user_id: int, operation: Callable[[int], T]) -> T:
    """Run ``operation(user_id)``; if the user vanished meanwhile, rerun it for the demo user."""

    try:
        return operation(user_id)
    except UserNotFoundError:
        demo = get_or_create_demo_user(users)
        if demo.user_id == user_id:
            raise
        logger.warning("User id=%s disappeared mid-request, recording for demo user id=%s", user_id, demo.user_id)
        return operation(demo.user_id)
