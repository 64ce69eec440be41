from __future__ import annotations

from datetime import date, datetime

from src.timeclock.timeclock.core.enums import EventKind, Granularity
from src.timeclock.timeclock.events.model import AttendanceEvent
from src.timeclock.timeclock.reporting.aggregation import aggregate
from src.timeclock.timeclock.reporting.daily import UNKNOWN_USER, build_daily_records


def _ev(event_id, user_id, kind, stamp, **fields):
    return AttendanceEvent(
        event_id=event_id,
        user_id=user_id,
        kind=kind,
        timestamp=datetime.fromisoformat(stamp),
        **fields,
    )


def _day_with_lunch(user_id=1, day="2024-03-12"):
    return [
        _ev(1, user_id, EventKind.CHECK_IN, f"{day}T08:00:00", location="Office"),
        _ev(1, user_id, EventKind.PAUSE, f"{day}T12:00:00", reason="lunch"),
        _ev(2, user_id, EventKind.CHECK_IN, f"{day}T12:30:00", is_return=True),
        _ev(1, user_id, EventKind.CHECKOUT, f"{day}T17:00:00"),
    ]


def test_work_time_excludes_the_break():
    [record] = build_daily_records(_day_with_lunch(), now=datetime(2024, 3, 13, 9), user_names={1: "Alice"})

    assert record.work_date == date(2024, 3, 12)
    assert record.user_name == "Alice"
    assert record.check_in_timestamp == datetime(2024, 3, 12, 8, 0)
    assert record.check_out_timestamp == datetime(2024, 3, 12, 17, 0)
    assert record.total_work_time == 30_600_000  # 8h30
    assert record.pauses_count == 1
    assert record.pauses[0].duration_ms == 1_800_000
    assert record.pauses[0].reason == "lunch"
    assert record.average_pause_time == 1_800_000
    assert record.location == "Office"
    assert record.group_key == "1-2024-03-12"


def test_events_are_replayed_in_time_order():
    shuffled = list(reversed(_day_with_lunch()))

    [record] = build_daily_records(shuffled, now=datetime(2024, 3, 13, 9))

    assert record.total_work_time == 30_600_000


def test_open_work_interval_is_counted_until_now():
    events = [_ev(1, 1, EventKind.CHECK_IN, "2024-03-13T08:00:00")]

    [record] = build_daily_records(events, now=datetime(2024, 3, 13, 10, 30))

    assert record.check_out_timestamp is None
    assert record.total_work_time == 2.5 * 3_600_000


def test_open_interval_on_a_past_day_stops_at_midnight():
    events = [_ev(1, 1, EventKind.CHECK_IN, "2024-03-12T22:00:00")]

    [record] = build_daily_records(events, now=datetime(2024, 3, 14, 9))

    # end_of_day is 23:59:59.999999
    assert record.total_work_time == 7_199_999


def test_open_break_has_no_end_and_stops_work():
    events = [
        _ev(1, 1, EventKind.CHECK_IN, "2024-03-13T08:00:00"),
        _ev(1, 1, EventKind.PAUSE, "2024-03-13T09:00:00"),
    ]

    [record] = build_daily_records(events, now=datetime(2024, 3, 13, 9, 20))

    assert record.total_work_time == 3_600_000
    assert record.pauses[0].is_open
    assert record.pauses[0].duration_ms == 20 * 60_000


def test_second_pause_scan_ends_the_break():
    events = [
        _ev(1, 1, EventKind.CHECK_IN, "2024-03-13T08:00:00"),
        _ev(1, 1, EventKind.PAUSE, "2024-03-13T10:00:00"),
        _ev(2, 1, EventKind.PAUSE, "2024-03-13T10:15:00"),
        _ev(1, 1, EventKind.CHECKOUT, "2024-03-13T12:00:00"),
    ]

    [record] = build_daily_records(events, now=datetime(2024, 3, 13, 18))

    assert record.pauses_count == 1
    assert record.total_work_time == (2 * 60 + 105) * 60_000


def test_day_without_pauses_has_zero_average():
    events = [
        _ev(1, 1, EventKind.CHECK_IN, "2024-03-13T08:00:00"),
        _ev(1, 1, EventKind.CHECKOUT, "2024-03-13T16:00:00"),
    ]

    [record] = build_daily_records(events, now=datetime(2024, 3, 13, 18))

    assert record.average_pause_time == 0
    assert record.to_dict()["pauses"] == []


def test_records_are_grouped_per_user_and_day_newest_first():
    events = _day_with_lunch(1, "2024-03-11") + _day_with_lunch(1, "2024-03-12") + _day_with_lunch(2, "2024-03-12")

    records = build_daily_records(events, now=datetime(2024, 3, 13, 9), user_names={1: "Alice"})

    assert [(r.work_date.isoformat(), r.user_id) for r in records] == [
        ("2024-03-12", 2),
        ("2024-03-12", 1),
        ("2024-03-11", 1),
    ]
    assert records[0].user_name == UNKNOWN_USER


def test_lunch_day_rolls_up_into_one_week():
    # 2024-03-11 is a Monday.
    daily = build_daily_records(_day_with_lunch(day="2024-03-11"), now=datetime(2024, 3, 20, 9))

    [week] = aggregate(daily, Granularity.WEEK)

    assert week.pauses_count == 1
    assert week.total_work_time == 30_600_000
