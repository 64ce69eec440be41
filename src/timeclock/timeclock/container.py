from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.dedup import DeduplicationGuard
from .attendance.service import AttendanceService
from .core.constants import DEDUP_WINDOW_MS
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.repository import EventStore
from .geocoding.resolver import LocationResolver, NullLocationResolver, OpenCageLocationResolver
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .reporting.service import ActivityReportService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    events_repo: EventStore
    users_repo: UserRepository
    notifications_repo: NotificationRepository

    attendance_service: AttendanceService
    report_service: ActivityReportService
    dashboard_service: DashboardService
    user_service: UserService
    notification_service: NotificationService


def build_services(
    events_repo: EventStore,
    users_repo: UserRepository,
    notifications_repo: NotificationRepository,
    *,
    resolver: Optional[LocationResolver] = None,
    dedup_window_ms: int = DEDUP_WINDOW_MS,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""

    attendance_service = AttendanceService(
        events_repo,
        users_repo,
        resolver=resolver or NullLocationResolver(),
        dedup=DeduplicationGuard(events_repo, window_ms=dedup_window_ms),
    )

    return Container(
        events_repo=events_repo,
        users_repo=users_repo,
        notifications_repo=notifications_repo,
        attendance_service=attendance_service,
        report_service=ActivityReportService(events_repo, users_repo),
        dashboard_service=DashboardService(events_repo, users_repo),
        user_service=UserService(users_repo, notifications_repo),
        notification_service=NotificationService(notifications_repo),
    )


def build_container(*, db_config: dict, settings=None) -> Container:
    config = DBConfig.from_mapping(
        db_config, pool_size=int(getattr(settings, "DB_POOL_SIZE", 5)) if settings else 5
    )
    conn = DatabaseConnection.get_instance(config)

    api_key = getattr(settings, "OPENCAGE_API_KEY", "") if settings else ""
    resolver: LocationResolver
    if api_key:
        resolver = OpenCageLocationResolver(api_key, timeout=float(getattr(settings, "GEOCODER_TIMEOUT", 10)))
    else:
        resolver = NullLocationResolver()

    return build_services(
        MySQLEventRepository(conn),
        MySQLUserRepository(conn),
        MySQLNotificationRepository(conn),
        resolver=resolver,
        dedup_window_ms=int(getattr(settings, "DEDUP_WINDOW_MS", DEDUP_WINDOW_MS)) if settings else DEDUP_WINDOW_MS,
    )
