from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import DEDUP_WINDOW_MS
from ..core.enums import EventKind
from ..events.model import AttendanceEvent
from ..events.repository import EventStore

logger = logging.getLogger(__name__)


class DeduplicationGuard:
    """Suppresses double submissions (e.g. a QR scan retried by a flaky client).

    Best effort read-then-write: two truly simultaneous requests can both pass.
    Checkout is not guarded.
    """

    guarded_kinds = frozenset({EventKind.CHECK_IN, EventKind.PAUSE})

    def __init__(self, events: EventStore, *, window_ms: int = DEDUP_WINDOW_MS):
        self._events = events
        self._window = timedelta(milliseconds=int(window_ms))

    @property
    def window_ms(self) -> int:
        return int(self._window.total_seconds() * 1000)

    def find_duplicate(self, user_id: int, kind: EventKind, *, now: datetime) -> Optional[AttendanceEvent]:
        """Most recent event of ``kind`` recorded within the window, if any."""

        if kind not in self.guarded_kinds:
            return None

        recent = self._events.find_since(user_id, kind, now - self._window)
        if not recent:
            return None

        existing = recent[0]
        logger.info(
            "Duplicate %s suppressed for user id=%s (existing id=%s at %s)",
            kind.value,
            user_id,
            existing.event_id,
            existing.timestamp.isoformat(),
        )
        return existing
