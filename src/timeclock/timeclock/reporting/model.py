from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional, Union

from ..core.enums import Granularity


@dataclass(frozen=True)
class PauseInterval:
    """A break as seen by reporting: from the pause to the next check-in or checkout."""

    start: datetime
    end: Optional[datetime]
    duration_ms: int
    reason: Optional[str] = None

    @property
    def is_open(self) -> bool:
        return self.end is None


@dataclass(frozen=True)
class DailyActivityRecord:
    """Read-model: one user's activity for one calendar day. Computed, never stored."""

    user_id: int
    user_name: str
    work_date: date
    check_in_timestamp: Optional[datetime]
    check_out_timestamp: Optional[datetime]
    pauses: tuple[PauseInterval, ...] = ()
    total_work_time: int = 0
    location: Optional[str] = None

    is_aggregated = False

    @property
    def group_key(self) -> str:
        return f"{self.user_id}-{self.work_date.isoformat()}"

    @property
    def pauses_count(self) -> int:
        return len(self.pauses)

    @property
    def average_pause_time(self) -> float:
        if not self.pauses:
            return 0
        return sum(p.duration_ms for p in self.pauses) / len(self.pauses)

    def to_dict(self) -> dict:
        return {
            "groupKey": self.group_key,
            "userId": self.user_id,
            "userName": self.user_name,
            "date": self.work_date.isoformat(),
            "checkInTimestamp": _iso(self.check_in_timestamp),
            "checkOutTimestamp": _iso(self.check_out_timestamp),
            "pauses": [
                {
                    "startTime": _iso(p.start),
                    "endTime": _iso(p.end),
                    "duration": p.duration_ms,
                    "reason": p.reason,
                }
                for p in self.pauses
            ],
            "pausesCount": self.pauses_count,
            "averagePauseTime": self.average_pause_time,
            "totalWorkTime": self.total_work_time,
            "location": self.location,
            "isAggregated": False,
        }


@dataclass(frozen=True)
class AggregatedActivityRecord:
    """Read-model: one user's activity rolled up over a week, month or year."""

    user_id: int
    user_name: str
    period_type: Granularity
    period_key: str
    period_label: str
    first_arrival: Optional[datetime]
    last_departure: Optional[datetime]
    pauses_count: int
    average_pause_time: float
    total_work_time: int
    days_count: int
    pauses: tuple[PauseInterval, ...] = field(default=(), repr=False)

    is_aggregated = True

    @property
    def group_key(self) -> str:
        return f"{self.user_id}-{self.period_key}"

    def to_dict(self) -> dict:
        return {
            "groupKey": self.group_key,
            "userId": self.user_id,
            "userName": self.user_name,
            "periodType": self.period_type.value,
            "periodKey": self.period_key,
            "periodLabel": self.period_label,
            "firstArrival": _iso(self.first_arrival),
            "lastDeparture": _iso(self.last_departure),
            "daysCount": self.days_count,
            "pausesCount": self.pauses_count,
            "averagePauseTime": self.average_pause_time,
            "totalWorkTime": self.total_work_time,
            "isAggregated": True,
        }


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


ActivityRecord = Union[DailyActivityRecord, AggregatedActivityRecord]
