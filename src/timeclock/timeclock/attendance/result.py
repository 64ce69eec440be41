from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.exceptions import PolicyRejection
from ..events.model import AttendanceEvent


@dataclass(frozen=True)
class ActionResult:
    """Outcome of one attendance action, as returned to API clients."""

    success: bool
    message: Optional[str] = None
    event: Optional[AttendanceEvent] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    is_duplicate: bool = False
    is_return_from_pause: bool = False
    on_break: Optional[bool] = None
    break_duration: Optional[str] = None
    pause_start_time: Optional[datetime] = None

    @classmethod
    def rejected(cls, exc: PolicyRejection) -> "ActionResult":
        return cls(success=False, error=str(exc), error_code=exc.code)

    def to_dict(self) -> dict:
        data: dict = {"success": self.success}
        if self.message is not None:
            data["message"] = self.message
        if self.error is not None:
            data["error"] = self.error
            data["code"] = self.error_code
        if self.event is not None:
            data["event"] = self.event.to_dict()
            if self.event.location is not None:
                data["address"] = self.event.location
        if self.is_duplicate:
            data["isDuplicate"] = True
        if self.is_return_from_pause:
            data["isReturnFromPause"] = True
        if self.on_break is not None:
            data["userIsOnBreak"] = self.on_break
        if self.break_duration is not None:
            data["breakDuration"] = self.break_duration
        if self.pause_start_time is not None:
            data["pauseStartTime"] = self.pause_start_time.isoformat()
        return data
