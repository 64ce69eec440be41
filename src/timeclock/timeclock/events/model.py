from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import EventKind


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one immutable attendance fact (check-in, pause or checkout).

    ``event_id`` is unique per kind; ``(kind, event_id)`` is unique overall.
    """

    event_id: int
    user_id: int
    kind: EventKind
    timestamp: datetime
    is_return: bool = False
    location: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    accuracy: Optional[float] = None
    reason: Optional[str] = None

    @property
    def work_date(self) -> date:
        return self.timestamp.date()

    def to_dict(self) -> dict:
        data = {
            "id": self.event_id,
            "userId": self.user_id,
            "kind": self.kind.value,
            "timestamp": self.timestamp.isoformat(),
        }
        if self.kind == EventKind.CHECK_IN:
            data["isReturn"] = self.is_return
        if self.kind in (EventKind.CHECK_IN, EventKind.CHECKOUT):
            data.update(
                {
                    "address": self.location,
                    "latitude": self.latitude,
                    "longitude": self.longitude,
                    "accuracy": self.accuracy,
                }
            )
        if self.kind == EventKind.PAUSE:
            data["reason"] = self.reason
        return data


@dataclass(frozen=True)
class Coordinates:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class EventFilter:
    """Criteria for ``EventStore.find_all``; ``None`` means unrestricted."""

    user_id: Optional[int] = None
    kind: Optional[EventKind] = None
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def matches(self, event: AttendanceEvent) -> bool:
        if self.user_id is not None and event.user_id != self.user_id:
            return False
        if self.kind is not None and event.kind != self.kind:
            return False
        if self.start is not None and event.timestamp < self.start:
            return False
        if self.end is not None and event.timestamp > self.end:
            return False
        return True
