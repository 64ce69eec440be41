from __future__ import annotations

from enum import Enum


class EventKind(str, Enum):
    """The three kinds of attendance facts stored by the event store."""

    CHECK_IN = "CHECK_IN"
    PAUSE = "PAUSE"
    CHECKOUT = "CHECKOUT"


class PresenceStatus(str, Enum):
    """Derived presence of a user, never persisted."""

    OFF_CLOCK = "OFF_CLOCK"
    WORKING = "WORKING"
    ON_BREAK = "ON_BREAK"


class PauseMode(str, Enum):
    NORMAL = "normal"
    QUERY_ONLY = "query_only"
    EXPLICIT_RETURN = "explicit_return"


class AccountStatus(str, Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Granularity(str, Enum):
    """Reporting granularity, ordered from finest to coarsest."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def finer(self) -> "Granularity | None":
        order = list(Granularity)
        idx = order.index(self)
        return order[idx - 1] if idx > 0 else None

    @property
    def coarser(self) -> "Granularity | None":
        order = list(Granularity)
        idx = order.index(self)
        return order[idx + 1] if idx + 1 < len(order) else None


class NotificationKind(str, Enum):
    USER_REGISTRATION = "user_registration"
