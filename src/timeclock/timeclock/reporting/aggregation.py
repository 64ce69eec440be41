"""Roll daily activity records up into week, month or year summaries."""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..common.datetime_utils import week_start
from ..core.enums import Granularity
from ..core.exceptions import InvalidNavigation
from .model import ActivityRecord, AggregatedActivityRecord, DailyActivityRecord, PauseInterval


def period_key_of(day: date, granularity: Granularity) -> str:
    if granularity == Granularity.DAY:
        return day.isoformat()
    if granularity == Granularity.WEEK:
        return week_start(day).isoformat()
    if granularity == Granularity.MONTH:
        return f"{day.year:04d}-{day.month:02d}"
    return f"{day.year:04d}"


def period_label(period_key: str, granularity: Granularity) -> str:
    if granularity == Granularity.WEEK:
        monday = date.fromisoformat(period_key)
        return f"Week of {monday.strftime('%d/%m/%Y')}"
    if granularity == Granularity.MONTH:
        year, month = period_key.split("-")
        return f"{calendar.month_name[int(month)]} {year}"
    if granularity == Granularity.DAY:
        return date.fromisoformat(period_key).strftime("%d/%m/%Y")
    return period_key


def period_value_from_group_key(group_key: str, user_id: int) -> str:
    """Strip the ``"<user_id>-"`` prefix from a group key."""

    prefix = f"{user_id}-"
    if not group_key.startswith(prefix) or len(group_key) == len(prefix):
        raise InvalidNavigation(f"Malformed group key: {group_key!r}")
    return group_key[len(prefix):]


@dataclass
class _Bucket:
    user_id: int
    user_name: str
    period_key: str
    check_ins: list[datetime] = field(default_factory=list)
    check_outs: list[datetime] = field(default_factory=list)
    pauses: list[PauseInterval] = field(default_factory=list)
    total_work_time: int = 0
    days: int = 0

    def fold(self, record: DailyActivityRecord) -> None:
        if record.check_in_timestamp is not None:
            self.check_ins.append(record.check_in_timestamp)
        if record.check_out_timestamp is not None:
            self.check_outs.append(record.check_out_timestamp)
        self.pauses.extend(record.pauses)
        self.total_work_time += int(record.total_work_time)
        self.days += 1

    def to_record(self, granularity: Granularity) -> AggregatedActivityRecord:
        check_ins = sorted(self.check_ins)
        check_outs = sorted(self.check_outs)
        pauses_count = len(self.pauses)
        average_pause = sum(p.duration_ms for p in self.pauses) / pauses_count if pauses_count else 0

        return AggregatedActivityRecord(
            user_id=self.user_id,
            user_name=self.user_name,
            period_type=granularity,
            period_key=self.period_key,
            period_label=period_label(self.period_key, granularity),
            first_arrival=check_ins[0] if check_ins else None,
            last_departure=check_outs[-1] if check_outs else None,
            pauses_count=pauses_count,
            average_pause_time=average_pause,
            total_work_time=self.total_work_time,
            days_count=self.days,
            pauses=tuple(self.pauses),
        )


def aggregate(records: Iterable[DailyActivityRecord], granularity: Granularity) -> Sequence[ActivityRecord]:
    """Group per-user daily records by period.

    Day granularity is the identity. ``total_work_time`` is the sum of the daily
    totals, so pause time between first arrival and last departure is never counted.
    """

    records = list(records)
    if granularity == Granularity.DAY:
        return records

    buckets: dict[str, _Bucket] = {}
    for record in records:
        key = period_key_of(record.work_date, granularity)
        group = f"{record.user_id}-{key}"
        bucket = buckets.get(group)
        if bucket is None:
            bucket = _Bucket(user_id=record.user_id, user_name=record.user_name, period_key=key)
            buckets[group] = bucket
        bucket.fold(record)

    out = [b.to_record(granularity) for b in buckets.values()]
    out.sort(key=lambda r: r.user_name.lower())
    out.sort(key=lambda r: r.period_key, reverse=True)
    return out


def total_work_time(records: Iterable[ActivityRecord], *, user_id: Optional[int] = None) -> int:
    return sum(int(r.total_work_time) for r in records if user_id is None or r.user_id == user_id)
