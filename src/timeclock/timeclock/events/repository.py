from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import EventKind
from .model import AttendanceEvent, EventFilter


class EventStore(Protocol):
    """Repository interface for attendance events.

    Services depend on this protocol, never on a concrete database.
    """

    def insert(
        self,
        *,
        user_id: int,
        kind: EventKind,
        timestamp: datetime,
        is_return: bool = False,
        location: Optional[str] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
        accuracy: Optional[float] = None,
        reason: Optional[str] = None,
    ) -> AttendanceEvent:
        """Persist a new event.

        Raises ``UserNotFoundError`` when ``user_id`` no longer references a user.
        """

        raise NotImplementedError

    def find_latest(self, user_id: int, kind: EventKind) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def find_since(self, user_id: int, kind: EventKind, since: datetime) -> Sequence[AttendanceEvent]:
        """Events of ``kind`` with ``timestamp >= since``, most recent first."""

        raise NotImplementedError

    def find_for_user_on_date(
        self, user_id: int, day: date, kind: Optional[EventKind] = None
    ) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def find_all(self, event_filter: EventFilter) -> Sequence[AttendanceEvent]:
        """Matching events in chronological order."""

        raise NotImplementedError

    def count(self, kind: EventKind) -> int:
        raise NotImplementedError

    def find_recent(self, kind: EventKind, limit: int) -> Sequence[AttendanceEvent]:
        """The ``limit`` most recent events of ``kind`` across all users, newest first."""

        raise NotImplementedError
