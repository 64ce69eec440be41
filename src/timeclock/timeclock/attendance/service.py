from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local, to_ms
from ..common.formatting import format_break_duration
from ..core.enums import EventKind, PauseMode
from ..core.exceptions import NoCheckInTodayError, NoCheckInYetError, NotOnBreakError, UserIsOnBreakError
from ..events.model import AttendanceEvent, Coordinates
from ..events.repository import EventStore
from ..geocoding.resolver import LocationResolver, NullLocationResolver
from ..users.identity import with_demo_fallback
from ..users.repository import UserRepository
from .dedup import DeduplicationGuard
from .result import ActionResult
from .state import BreakState, PauseTransition, pause_transition

logger = logging.getLogger(__name__)


class AttendanceService:
    """Attendance state machine: validates and classifies check-in, pause and checkout requests.

    Policy rejections are raised as ``PolicyRejection`` subclasses; successful
    outcomes (including suppressed duplicates) are returned as ``ActionResult``.
    """

    def __init__(
        self,
        events: EventStore,
        users: UserRepository,
        *,
        resolver: Optional[LocationResolver] = None,
        dedup: Optional[DeduplicationGuard] = None,
    ):
        self._events = events
        self._users = users
        self._resolver = resolver or NullLocationResolver()
        self._dedup = dedup or DeduplicationGuard(events)

    def current_state(self, user_id: int) -> BreakState:
        return BreakState(
            last_check_in=self._events.find_latest(user_id, EventKind.CHECK_IN),
            last_pause=self._events.find_latest(user_id, EventKind.PAUSE),
        )

    def request_check_in(
        self, user_id: int, coords: Optional[Coordinates] = None, *, now: Optional[datetime] = None
    ) -> ActionResult:
        now = now or now_local()

        existing = self._dedup.find_duplicate(user_id, EventKind.CHECK_IN, now=now)
        if existing:
            message = "You have already resumed work" if existing.is_return else "You are already checked in"
            return ActionResult(success=True, message=message, event=existing, is_duplicate=True)

        state = self.current_state(user_id)
        if state.on_break:
            logger.info("Check-in refused for user id=%s: on break since %s", user_id, state.break_started_at)
            raise UserIsOnBreakError("You are currently on a break. Scan the PAUSE QR code to resume work.")

        address = self._resolve(coords)
        event = self._record(
            user_id,
            kind=EventKind.CHECK_IN,
            timestamp=now,
            is_return=False,
            location=address,
            latitude=coords.latitude if coords else None,
            longitude=coords.longitude if coords else None,
            accuracy=coords.accuracy if coords else None,
        )
        logger.info("Check-in recorded id=%s for user id=%s", event.event_id, event.user_id)
        return ActionResult(success=True, message="Have a good day!", event=event)

    def request_pause(
        self,
        user_id: int,
        reason: Optional[str] = None,
        mode: PauseMode = PauseMode.NORMAL,
        *,
        now: Optional[datetime] = None,
    ) -> ActionResult:
        now = now or now_local()

        state = self.current_state(user_id)
        if state.last_check_in is None:
            raise NoCheckInYetError("You must check in before taking a break.")

        if mode == PauseMode.QUERY_ONLY:
            return self._break_status(state, now=now)

        if mode == PauseMode.EXPLICIT_RETURN:
            if not state.on_break:
                raise NotOnBreakError("You are not on a break, there is nothing to resume.")
            return self._return_from_break(user_id, now=now)

        existing = self._dedup.find_duplicate(user_id, EventKind.PAUSE, now=now)
        if existing:
            return ActionResult(success=True, message="You are already on a break", event=existing, is_duplicate=True)

        if pause_transition(state.on_break) == PauseTransition.END_BREAK:
            return self._return_from_break(user_id, now=now)

        event = self._record(user_id, kind=EventKind.PAUSE, timestamp=now, reason=reason)
        logger.info("Pause recorded id=%s for user id=%s (reason=%s)", event.event_id, event.user_id, reason or "-")
        return ActionResult(success=True, message="Enjoy your break!", event=event)

    def request_check_out(
        self, user_id: int, coords: Optional[Coordinates] = None, *, now: Optional[datetime] = None
    ) -> ActionResult:
        now = now or now_local()

        if not self._events.find_for_user_on_date(user_id, now.date(), EventKind.CHECK_IN):
            raise NoCheckInTodayError("You must check in today before checking out.")

        address = self._resolve(coords)
        event = self._record(
            user_id,
            kind=EventKind.CHECKOUT,
            timestamp=now,
            location=address,
            latitude=coords.latitude if coords else None,
            longitude=coords.longitude if coords else None,
        )
        logger.info("Checkout recorded id=%s for user id=%s", event.event_id, event.user_id)
        return ActionResult(success=True, message="End of day recorded", event=event)

    def _break_status(self, state: BreakState, *, now: datetime) -> ActionResult:
        if not state.on_break:
            return ActionResult(success=True, message="You are not on a break", on_break=False)

        started = state.break_started_at
        duration = format_break_duration(to_ms(now - started))
        return ActionResult(
            success=True,
            message=f"On a break since {started.strftime('%H:%M')} ({duration})",
            event=state.last_pause,
            on_break=True,
            break_duration=duration,
            pause_start_time=started,
        )

    def _return_from_break(self, user_id: int, *, now: datetime) -> ActionResult:
        event = self._record(user_id, kind=EventKind.CHECK_IN, timestamp=now, is_return=True)
        logger.info("Return from break recorded id=%s for user id=%s", event.event_id, event.user_id)
        return ActionResult(
            success=True,
            message="Welcome back, you have resumed work",
            event=event,
            is_return_from_pause=True,
        )

    def _resolve(self, coords: Optional[Coordinates]) -> Optional[str]:
        if coords is None:
            return None
        try:
            return self._resolver.resolve(coords.latitude, coords.longitude)
        except Exception:
            # An address is optional: the attendance fact is recorded without it.
            logger.warning("Location resolver failed for (%s, %s)", coords.latitude, coords.longitude, exc_info=True)
            return None

    def _record(self, user_id: int, **fields) -> AttendanceEvent:
        return with_demo_fallback(self._users, user_id, lambda uid: self._events.insert(user_id=uid, **fields))
