from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import end_of_day, now_local, start_of_day
from ..core.enums import Granularity
from ..events.model import EventFilter
from ..events.repository import EventStore
from ..users.repository import UserRepository
from .aggregation import aggregate
from .daily import build_daily_records
from .export import export_headers, export_rows
from .model import ActivityRecord, DailyActivityRecord
from .navigator import NavigatorViewState, Page, get_filtered, get_page

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportWindow:
    """Reporting period; open ends are unrestricted."""

    start: Optional[date] = None
    end: Optional[date] = None


class ActivityReportService:
    """Read side: daily records, aggregation, navigation and export."""

    def __init__(self, events: EventStore, users: UserRepository):
        self._events = events
        self._users = users

    def get_daily(
        self,
        window: ReportWindow = ReportWindow(),
        *,
        user_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> list[DailyActivityRecord]:
        now = now or now_local()
        events = self._events.find_all(
            EventFilter(
                user_id=user_id,
                start=start_of_day(window.start) if window.start else None,
                end=end_of_day(window.end) if window.end else None,
            )
        )
        records = build_daily_records(events, now=now, user_names=self._user_names({e.user_id for e in events}))
        logger.debug("Built %s daily records from %s events", len(records), len(events))
        return records

    def get_aggregated(
        self, granularity: Granularity, window: ReportWindow = ReportWindow(), *, now: Optional[datetime] = None
    ) -> Sequence[ActivityRecord]:
        return aggregate(self.get_daily(window, now=now), granularity)

    def get_filtered(
        self, state: NavigatorViewState, window: ReportWindow = ReportWindow(), *, now: Optional[datetime] = None
    ) -> Sequence[ActivityRecord]:
        return get_filtered(state, self.get_daily(window, now=now))

    def get_page(
        self, state: NavigatorViewState, window: ReportWindow = ReportWindow(), *, now: Optional[datetime] = None
    ) -> Page:
        return get_page(state, self.get_daily(window, now=now))

    def export_rows(
        self, state: NavigatorViewState, window: ReportWindow = ReportWindow(), *, now: Optional[datetime] = None
    ) -> tuple[list[str], list[list[str]]]:
        """Headers and rows of the whole filtered view (not just the current page)."""

        records = self.get_filtered(state, window, now=now)
        return export_headers(state.granularity), export_rows(state.granularity, records)

    def _user_names(self, user_ids: set[int]) -> dict[int, str]:
        names = {u.user_id: u.display_name for u in self._users.list_active()}
        for user_id in user_ids - names.keys():
            user = self._users.get_by_id(user_id)
            if user:
                names[user_id] = user.display_name
        return names
