from __future__ import annotations

from datetime import datetime

import mysql.connector
import pytest

from src.timeclock.timeclock.core.enums import AccountStatus, EventKind
from src.timeclock.timeclock.core.exceptions import StoreFailure, UserNotFoundError, ValidationError
from src.timeclock.timeclock.database.mysql_base import db_cursor
from src.timeclock.timeclock.events.mysql_event_repository import MySQLEventRepository
from src.timeclock.timeclock.users.mysql_user_repository import MySQLUserRepository
from tests.fakes import FakeFactory


def test_block_is_committed_and_closed():
    factory = FakeFactory()
    with db_cursor(factory) as (_, cur):
        cur.execute("SELECT 1")

    assert factory.conn.committed
    assert not factory.conn.rolled_back
    assert factory.conn.closed


def test_driver_error_becomes_store_failure_and_rolls_back():
    factory = FakeFactory({"raise": mysql.connector.Error(msg="boom")})

    with pytest.raises(StoreFailure):
        with db_cursor(factory) as (_, cur):
            cur.execute("SELECT 1")

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed


def test_domain_error_propagates_unchanged():
    factory = FakeFactory()

    with pytest.raises(ValidationError):
        with db_cursor(factory):
            raise ValidationError("nope")

    assert factory.conn.rolled_back


def test_connect_failure_is_a_store_failure():
    class Down:
        def connect(self):
            raise mysql.connector.Error(msg="refused")

    with pytest.raises(StoreFailure):
        with db_cursor(Down()):
            pass


def test_insert_pause_returns_event_with_new_id():
    factory = FakeFactory({"lastrowid": 41})
    at = datetime(2024, 3, 13, 12, 0)

    event = MySQLEventRepository(factory).insert(user_id=1, kind=EventKind.PAUSE, timestamp=at, reason="lunch")

    assert event.event_id == 41
    assert event.kind == EventKind.PAUSE
    assert event.reason == "lunch"
    sql, params = factory.conn.executed[0]
    assert sql.startswith("INSERT INTO pauses")
    assert params == (1, at, "lunch")


def test_insert_for_missing_user_raises_user_not_found():
    fk = mysql.connector.IntegrityError(msg="fk", errno=1452)
    factory = FakeFactory({"raise": fk})

    with pytest.raises(UserNotFoundError):
        MySQLEventRepository(factory).insert(user_id=9, kind=EventKind.CHECK_IN, timestamp=datetime(2024, 3, 13, 9))

    assert factory.conn.rolled_back


def test_rows_from_all_tables_map_to_events():
    rows = [
        {
            "event_id": 3,
            "user_id": 1,
            "kind": "CHECK_IN",
            "timestamp": datetime(2024, 3, 13, 12, 30),
            "is_return": 1,
            "address": None,
            "latitude": None,
            "longitude": None,
            "accuracy": None,
            "reason": None,
        }
    ]
    factory = FakeFactory({"rows": rows})

    [event] = MySQLEventRepository(factory).find_since(1, EventKind.CHECK_IN, datetime(2024, 3, 13, 12, 29))

    assert event.is_return is True
    assert event.event_id == 3


def test_count_reads_the_kind_table():
    factory = FakeFactory({"rows": [{"n": 7}]})

    assert MySQLEventRepository(factory).count(EventKind.CHECKOUT) == 7
    assert "FROM checkouts" in factory.conn.executed[0][0]


def test_recent_events_are_limited_in_sql():
    factory = FakeFactory({"rows": []})

    assert MySQLEventRepository(factory).find_recent(EventKind.PAUSE, 5) == []

    sql, params = factory.conn.executed[0]
    assert sql.endswith("LIMIT %s")
    assert params == ("PAUSE", 5)

def test_status_update_and_notifications_share_one_transaction():
    factory = FakeFactory({"rowcount": 1}, {"rowcount": 2})

    assert MySQLUserRepository(factory).set_status_and_mark_notifications_read(5, status=AccountStatus.APPROVED)

    statements = [sql for sql, _ in factory.conn.executed]
    assert statements[0].startswith("UPDATE users")
    assert statements[1].startswith("UPDATE notifications")
    assert factory.conn.committed


def test_status_update_for_unknown_user_writes_nothing_else():
    factory = FakeFactory({"rowcount": 0}, {"rows": []})

    assert not MySQLUserRepository(factory).set_status_and_mark_notifications_read(5, status=AccountStatus.APPROVED)
    assert len(factory.conn.executed) == 2
