"""Replay raw attendance events into per-user, per-day activity records."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Iterable, Mapping, Optional

from ..attendance.state import PauseTransition, pause_transition
from ..common.datetime_utils import end_of_day, to_ms
from ..core.enums import EventKind
from ..events.model import AttendanceEvent
from .model import DailyActivityRecord, PauseInterval

UNKNOWN_USER = "Unknown user"


def build_daily_records(
    events: Iterable[AttendanceEvent],
    *,
    now: datetime,
    user_names: Optional[Mapping[int, str]] = None,
) -> list[DailyActivityRecord]:
    """Group events by user and local day, newest day first.

    Intervals still open at the end of a day's events are counted up to
    ``min(now, end of that day)``.
    """

    user_names = user_names or {}
    by_user_day: dict[tuple[int, date], list[AttendanceEvent]] = defaultdict(list)
    for event in events:
        by_user_day[(event.user_id, event.work_date)].append(event)

    records = [
        _replay_day(user_id, day, day_events, now=now, user_name=user_names.get(user_id, UNKNOWN_USER))
        for (user_id, day), day_events in by_user_day.items()
    ]
    records.sort(key=lambda r: (r.work_date, r.user_name.lower()), reverse=True)
    return records


def _replay_day(
    user_id: int, day: date, events: list[AttendanceEvent], *, now: datetime, user_name: str
) -> DailyActivityRecord:
    events = sorted(events, key=lambda e: e.timestamp)

    first_check_in: Optional[AttendanceEvent] = None
    last_checkout: Optional[datetime] = None
    working_since: Optional[datetime] = None
    open_pause: Optional[AttendanceEvent] = None
    pauses: list[PauseInterval] = []
    worked_ms = 0

    def close_pause(at: datetime) -> None:
        nonlocal open_pause
        pauses.append(
            PauseInterval(
                start=open_pause.timestamp,
                end=at,
                duration_ms=to_ms(at - open_pause.timestamp),
                reason=open_pause.reason,
            )
        )
        open_pause = None

    for event in events:
        ts = event.timestamp
        if event.kind == EventKind.CHECK_IN:
            if first_check_in is None:
                first_check_in = event
            if open_pause is not None:
                close_pause(ts)
            if working_since is None:
                working_since = ts
        elif event.kind == EventKind.PAUSE:
            if pause_transition(open_pause is not None) == PauseTransition.END_BREAK:
                close_pause(ts)
                working_since = ts
                continue
            if working_since is not None:
                worked_ms += to_ms(ts - working_since)
                working_since = None
            open_pause = event
        else:
            last_checkout = ts if last_checkout is None else max(last_checkout, ts)
            if working_since is not None:
                worked_ms += to_ms(ts - working_since)
                working_since = None
            if open_pause is not None:
                close_pause(ts)

    cutoff = min(now, end_of_day(day))
    if working_since is not None and cutoff > working_since:
        worked_ms += to_ms(cutoff - working_since)
    if open_pause is not None:
        pauses.append(
            PauseInterval(
                start=open_pause.timestamp,
                end=None,
                duration_ms=max(to_ms(cutoff - open_pause.timestamp), 0),
                reason=open_pause.reason,
            )
        )

    return DailyActivityRecord(
        user_id=user_id,
        user_name=user_name,
        work_date=day,
        check_in_timestamp=first_check_in.timestamp if first_check_in else None,
        check_out_timestamp=last_checkout,
        pauses=tuple(pauses),
        total_work_time=worked_ms,
        location=first_check_in.location if first_check_in else None,
    )
