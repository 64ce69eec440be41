from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..common.datetime_utils import end_of_day, start_of_day
from ..core.enums import EventKind
from ..core.exceptions import UserNotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import FOREIGN_KEY_VIOLATION, db_cursor, fetchall, fetchone, optional_float
from .model import AttendanceEvent, EventFilter
from .repository import EventStore

_TABLES = {
    EventKind.CHECK_IN: "check_ins",
    EventKind.PAUSE: "pauses",
    EventKind.CHECKOUT: "checkouts",
}

# All three tables projected onto one row shape.
_EVENTS_UNION = """
    SELECT id AS event_id, user_id, 'CHECK_IN' AS kind, timestamp, is_return,
           address, latitude, longitude, accuracy, NULL AS reason
    FROM check_ins
    UNION ALL
    SELECT id, user_id, 'PAUSE', timestamp, 0, NULL, NULL, NULL, NULL, reason
    FROM pauses
    UNION ALL
    SELECT id, user_id, 'CHECKOUT', timestamp, 0, address, latitude, longitude, NULL, NULL
    FROM checkouts
"""


def _row_to_event(r: dict) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(r["event_id"]),
        user_id=int(r["user_id"]),
        kind=EventKind(r["kind"]),
        timestamp=r["timestamp"],
        is_return=bool(r.get("is_return") or 0),
        location=r.get("address"),
        latitude=optional_float(r.get("latitude")),
        longitude=optional_float(r.get("longitude")),
        accuracy=optional_float(r.get("accuracy")),
        reason=r.get("reason"),
    )


class MySQLEventRepository(EventStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

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
        if kind == EventKind.CHECK_IN:
            sql = """
                INSERT INTO check_ins(user_id, timestamp, is_return, address, latitude, longitude, accuracy)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
            """
            params = (user_id, timestamp, int(is_return), location, latitude, longitude, accuracy)
        elif kind == EventKind.PAUSE:
            sql = "INSERT INTO pauses(user_id, timestamp, reason) VALUES(%s,%s,%s)"
            params = (user_id, timestamp, reason)
        else:
            sql = """
                INSERT INTO checkouts(user_id, timestamp, address, latitude, longitude)
                VALUES(%s,%s,%s,%s,%s)
            """
            params = (user_id, timestamp, location, latitude, longitude)

        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(sql, params)
            except mysql.connector.IntegrityError as exc:
                if exc.errno == FOREIGN_KEY_VIOLATION:
                    raise UserNotFoundError(f"User {user_id} does not exist") from exc
                raise
            event_id = int(cur.lastrowid)

        return AttendanceEvent(
            event_id=event_id,
            user_id=int(user_id),
            kind=kind,
            timestamp=timestamp,
            is_return=bool(is_return) if kind == EventKind.CHECK_IN else False,
            location=location if kind != EventKind.PAUSE else None,
            latitude=latitude if kind != EventKind.PAUSE else None,
            longitude=longitude if kind != EventKind.PAUSE else None,
            accuracy=accuracy if kind == EventKind.CHECK_IN else None,
            reason=reason if kind == EventKind.PAUSE else None,
        )

    def find_latest(self, user_id: int, kind: EventKind) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM ({_EVENTS_UNION}) ev
                WHERE ev.user_id=%s AND ev.kind=%s
                ORDER BY ev.timestamp DESC, ev.event_id DESC
                LIMIT 1
                """,
                (user_id, kind.value),
            )
            r = fetchone(cur)
            return _row_to_event(r) if r else None

    def find_since(self, user_id: int, kind: EventKind, since: datetime) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM ({_EVENTS_UNION}) ev
                WHERE ev.user_id=%s AND ev.kind=%s AND ev.timestamp >= %s
                ORDER BY ev.timestamp DESC, ev.event_id DESC
                """,
                (user_id, kind.value, since),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def find_for_user_on_date(
        self, user_id: int, day: date, kind: Optional[EventKind] = None
    ) -> Sequence[AttendanceEvent]:
        return self.find_all(
            EventFilter(user_id=user_id, kind=kind, start=start_of_day(day), end=end_of_day(day))
        )

    def find_all(self, event_filter: EventFilter) -> Sequence[AttendanceEvent]:
        clauses: list[str] = []
        params: list[object] = []

        if event_filter.user_id is not None:
            clauses.append("ev.user_id=%s")
            params.append(int(event_filter.user_id))
        if event_filter.kind is not None:
            clauses.append("ev.kind=%s")
            params.append(event_filter.kind.value)
        if event_filter.start is not None:
            clauses.append("ev.timestamp >= %s")
            params.append(event_filter.start)
        if event_filter.end is not None:
            clauses.append("ev.timestamp <= %s")
            params.append(event_filter.end)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM ({_EVENTS_UNION}) ev
                {where}
                ORDER BY ev.timestamp ASC, ev.event_id ASC
                """,
                tuple(params),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def find_recent(self, kind: EventKind, limit: int) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT * FROM ({_EVENTS_UNION}) ev
                WHERE ev.kind=%s
                ORDER BY ev.timestamp DESC, ev.event_id DESC
                LIMIT %s
                """,
                (kind.value, int(limit)),
            )
            return [_row_to_event(r) for r in fetchall(cur)]

    def count(self, kind: EventKind) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS n FROM {_TABLES[kind]}")
            r = fetchone(cur)
            return int(r["n"]) if r else 0
