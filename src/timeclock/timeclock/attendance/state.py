"""Derived presence state.

Status is never stored: it is recomputed from the latest check-in and the
latest pause on every request. The same transition function drives both the
request handlers and the replay that builds daily activity records.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from ..core.enums import PresenceStatus
from ..events.model import AttendanceEvent


def is_on_break(last_check_in_at: Optional[datetime], last_pause_at: Optional[datetime]) -> bool:
    return last_pause_at is not None and (last_check_in_at is None or last_pause_at > last_check_in_at)


def derive_status(last_check_in_at: Optional[datetime], last_pause_at: Optional[datetime]) -> PresenceStatus:
    if is_on_break(last_check_in_at, last_pause_at):
        return PresenceStatus.ON_BREAK
    if last_check_in_at is not None:
        return PresenceStatus.WORKING
    return PresenceStatus.OFF_CLOCK


class PauseTransition(str, Enum):
    START_BREAK = "start_break"
    END_BREAK = "end_break"


def pause_transition(on_break: bool) -> PauseTransition:
    """Scanning the pause point starts a break, or ends the one in progress."""

    return PauseTransition.END_BREAK if on_break else PauseTransition.START_BREAK


@dataclass(frozen=True)
class BreakState:
    last_check_in: Optional[AttendanceEvent]
    last_pause: Optional[AttendanceEvent]

    @property
    def on_break(self) -> bool:
        return is_on_break(
            self.last_check_in.timestamp if self.last_check_in else None,
            self.last_pause.timestamp if self.last_pause else None,
        )

    @property
    def status(self) -> PresenceStatus:
        return derive_status(
            self.last_check_in.timestamp if self.last_check_in else None,
            self.last_pause.timestamp if self.last_pause else None,
        )

    @property
    def break_started_at(self) -> Optional[datetime]:
        return self.last_pause.timestamp if self.on_break and self.last_pause else None
