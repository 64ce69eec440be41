from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import end_of_day, now_local, start_of_day, to_ms, week_start
from ..core.constants import RECENT_ACTIVITY_LIMIT
from ..core.enums import EventKind
from ..events.model import AttendanceEvent, EventFilter
from ..events.repository import EventStore
from ..users.repository import UserRepository

UNKNOWN_USER = "Unknown user"


@dataclass(frozen=True)
class DashboardSummary:
    users: int
    check_ins: int
    pauses: int
    checkouts: int
    recent_check_ins: list[dict]
    recent_pauses: list[dict]
    recent_checkouts: list[dict]
    weekly_activity: list[dict]
    work_time_data: list[dict]

    def to_dict(self) -> dict:
        return {
            "users": self.users,
            "checkIns": self.check_ins,
            "pauses": self.pauses,
            "checkOuts": self.checkouts,
            "recentCheckIns": self.recent_check_ins,
            "recentPauses": self.recent_pauses,
            "recentCheckOuts": self.recent_checkouts,
            "weeklyActivity": self.weekly_activity,
            "workTimeData": self.work_time_data,
        }


class DashboardService:
    """Admin overview: totals, latest events, this week's activity and average day length."""

    def __init__(self, events: EventStore, users: UserRepository):
        self._events = events
        self._users = users

    def summary(self, *, now: Optional[datetime] = None) -> DashboardSummary:
        now = now or now_local()
        names = {u.user_id: u.display_name for u in self._users.list_active()}

        monday = week_start(now.date())
        week_events = self._events.find_all(
            EventFilter(start=start_of_day(monday), end=end_of_day(monday + timedelta(days=6)))
        )

        return DashboardSummary(
            users=len(names),
            check_ins=self._events.count(EventKind.CHECK_IN),
            pauses=self._events.count(EventKind.PAUSE),
            checkouts=self._events.count(EventKind.CHECKOUT),
            recent_check_ins=self._recent(EventKind.CHECK_IN, names),
            recent_pauses=self._recent(EventKind.PAUSE, names),
            recent_checkouts=self._recent(EventKind.CHECKOUT, names),
            weekly_activity=self._weekly_activity(monday, week_events),
            work_time_data=self._average_work_hours(self._events.find_all(EventFilter())),
        )

    def _recent(self, kind: EventKind, names: dict[int, str]) -> list[dict]:
        out = []
        for e in self._events.find_recent(kind, RECENT_ACTIVITY_LIMIT):
            row = {
                "id": e.event_id,
                "timestamp": e.timestamp.isoformat(),
                "userName": names.get(e.user_id, UNKNOWN_USER),
            }
            if kind != EventKind.PAUSE:
                row["location"] = e.location
            if kind == EventKind.CHECK_IN:
                row["isReturn"] = e.is_return
            out.append(row)
        return out

    @staticmethod
    def _weekly_activity(monday: date, events: list[AttendanceEvent]) -> list[dict]:
        counts: dict[date, dict[EventKind, int]] = defaultdict(lambda: defaultdict(int))
        for e in events:
            counts[e.work_date][e.kind] += 1

        days = []
        for offset in range(7):
            day = monday + timedelta(days=offset)
            per_kind = counts.get(day, {})
            days.append(
                {
                    "day": day.strftime("%a"),
                    "date": day.isoformat(),
                    "checkIns": per_kind.get(EventKind.CHECK_IN, 0),
                    "pauses": per_kind.get(EventKind.PAUSE, 0),
                    "checkOuts": per_kind.get(EventKind.CHECKOUT, 0),
                }
            )
        return days

    @staticmethod
    def _average_work_hours(events: list[AttendanceEvent]) -> list[dict]:
        """Per date: average of (checkout - first check-in of that user and day), in hours."""

        first_check_in: dict[tuple[int, date], datetime] = {}
        for e in events:
            if e.kind == EventKind.CHECK_IN:
                key = (e.user_id, e.work_date)
                if key not in first_check_in or e.timestamp < first_check_in[key]:
                    first_check_in[key] = e.timestamp

        totals: dict[date, list[float]] = defaultdict(list)
        for e in events:
            if e.kind != EventKind.CHECKOUT:
                continue
            start = first_check_in.get((e.user_id, e.work_date))
            if start is None:
                continue
            totals[e.work_date].append(to_ms(e.timestamp - start) / 3_600_000)

        return [
            {
                "date": day.isoformat(),
                "averageHours": sum(hours) / len(hours),
                "formattedDate": day.strftime("%d/%m"),
            }
            for day, hours in sorted(totals.items())
        ]
