from __future__ import annotations

import io
from dataclasses import replace
from datetime import date, datetime

import pandas as pd

from src.timeclock.timeclock.core.enums import EventKind, Granularity
from src.timeclock.timeclock.reporting.export import (
    DAY_HEADERS,
    PERIOD_HEADERS,
    export_headers,
    to_csv_bytes,
    to_xlsx_bytes,
)
from src.timeclock.timeclock.reporting.navigator import NavigatorViewState
from src.timeclock.timeclock.reporting.service import ActivityReportService, ReportWindow

NOW = datetime(2024, 3, 20, 9, 0)


def _working_day(events, user_id, day, *, lunch=True):
    events.add(user_id, EventKind.CHECK_IN, datetime.fromisoformat(f"{day}T08:00:00"), location="HQ")
    if lunch:
        events.add(user_id, EventKind.PAUSE, datetime.fromisoformat(f"{day}T12:00:00"))
        events.add(user_id, EventKind.CHECK_IN, datetime.fromisoformat(f"{day}T12:30:00"), is_return=True)
    events.add(user_id, EventKind.CHECKOUT, datetime.fromisoformat(f"{day}T17:00:00"))


def test_daily_records_carry_user_names(events, users):
    _working_day(events, 1, "2024-03-12")
    _working_day(events, 2, "2024-03-12", lunch=False)

    records = ActivityReportService(events, users).get_daily(now=NOW)

    by_user = {r.user_id: r for r in records}
    assert by_user[1].user_name == "Alice"
    assert by_user[1].total_work_time == 30_600_000
    assert by_user[2].total_work_time == 9 * 3_600_000


def test_window_and_user_filter(events, users):
    for day in ("2024-03-11", "2024-03-12", "2024-03-13"):
        _working_day(events, 1, day)
    _working_day(events, 2, "2024-03-12")

    svc = ActivityReportService(events, users)
    records = svc.get_daily(ReportWindow(start=date(2024, 3, 12), end=date(2024, 3, 12)), user_id=1, now=NOW)

    assert [(r.user_id, r.work_date) for r in records] == [(1, date(2024, 3, 12))]


def test_names_of_inactive_users_are_still_resolved(events, users):
    users.users_by_id[2] = replace(users.users_by_id[2], is_active=False)
    _working_day(events, 2, "2024-03-12")

    [record] = ActivityReportService(events, users).get_daily(now=NOW)

    assert record.user_name == "Bob"


def test_aggregated_weekly_view(events, users):
    for day in ("2024-03-11", "2024-03-12"):
        _working_day(events, 1, day)

    [week] = ActivityReportService(events, users).get_aggregated(Granularity.WEEK, now=NOW)

    assert week.days_count == 2
    assert week.total_work_time == 2 * 30_600_000
    assert week.pauses_count == 2
    assert week.average_pause_time == 1_800_000


def test_page_through_service(events, users):
    for day in ("2024-03-11", "2024-03-12", "2024-03-13"):
        _working_day(events, 1, day)

    page = ActivityReportService(events, users).get_page(NavigatorViewState(page_size=2), now=NOW)

    assert page.total == 3
    assert page.page_count == 2
    assert [r.work_date.day for r in page.items] == [13, 12]


def test_export_rows_of_day_view(events, users):
    _working_day(events, 1, "2024-03-12")

    headers, rows = ActivityReportService(events, users).export_rows(NavigatorViewState(), now=NOW)

    assert headers == DAY_HEADERS
    assert rows == [["Alice", "12/03/2024", "08:00", "17:00", "1", "30 min 0 sec", "08:30", "HQ"]]


def test_export_rows_of_month_view(events, users):
    _working_day(events, 1, "2024-03-12")
    _working_day(events, 1, "2024-03-13", lunch=False)

    headers, rows = ActivityReportService(events, users).export_rows(
        NavigatorViewState(granularity=Granularity.MONTH), now=NOW
    )

    assert headers == PERIOD_HEADERS
    assert rows == [
        ["Alice", "March 2024", "12/03/2024 08:00", "13/03/2024 17:00", "2", "1", "30 min 0 sec", "17:30"]
    ]


def test_export_headers_follow_granularity():
    assert export_headers(Granularity.DAY) == DAY_HEADERS
    assert export_headers(Granularity.YEAR) == PERIOD_HEADERS


def test_csv_has_bom_and_header_row():
    payload = to_csv_bytes(["A", "B"], [["1", "é"]])

    assert payload.startswith(b"\xef\xbb\xbf")
    assert payload.decode("utf-8-sig").splitlines() == ["A,B", "1,é"]


def test_xlsx_round_trips_through_pandas():
    payload = to_xlsx_bytes(PERIOD_HEADERS, [["Alice", "2024", "-", "-", "1", "0", "0 min 0 sec", "08:00"]])

    df = pd.read_excel(io.BytesIO(payload), engine="openpyxl", dtype=str)

    assert list(df.columns) == PERIOD_HEADERS
    assert df.iloc[0]["Collaborator"] == "Alice"
