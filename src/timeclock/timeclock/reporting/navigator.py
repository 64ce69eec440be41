"""Drill-down navigation over activity records.

The view is an explicit, serializable ``NavigatorViewState`` value. Every
transition returns a new state, and the query functions are pure over
``(state, daily records)``, so a view can be deep-linked through a query
string and tested without a UI.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Mapping, Optional, Sequence

from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_PAGE_SIZE
from ..core.enums import Granularity
from ..core.exceptions import InvalidNavigation, ValidationError
from .aggregation import aggregate, period_key_of, period_value_from_group_key
from .model import ActivityRecord, DailyActivityRecord


@dataclass(frozen=True)
class FocusedPeriod:
    """A pinned week, month or year instance, e.g. ``(MONTH, "2024-03")``."""

    type: Granularity
    value: str

    def contains(self, record: DailyActivityRecord) -> bool:
        return period_key_of(record.work_date, self.type) == self.value


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total else 0


def _parse_granularity(value) -> Granularity:
    try:
        return Granularity(str(value).lower())
    except ValueError:
        raise InvalidNavigation(f"Unknown granularity: {value!r}") from None


@dataclass(frozen=True)
class NavigatorViewState:
    granularity: Granularity = Granularity.DAY
    focused_period: Optional[FocusedPeriod] = None
    collaborator_filter: Optional[int] = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def select_granularity(self, granularity: Granularity) -> "NavigatorViewState":
        """Lateral move: switch level and drop any focused period."""

        return replace(self, granularity=granularity, focused_period=None, page=1)

    def drill_down(self, record: ActivityRecord) -> "NavigatorViewState":
        if not record.is_aggregated or self.granularity == Granularity.DAY:
            raise InvalidNavigation("Only aggregated week, month or year rows can be drilled into")
        if record.period_type != self.granularity:
            raise InvalidNavigation(
                f"Cannot drill into a {record.period_type.value} row from the {self.granularity.value} view"
            )

        focus = FocusedPeriod(
            type=self.granularity,
            value=period_value_from_group_key(record.group_key, record.user_id),
        )

        granularity = self.granularity
        # A collaborator-scoped drill on a year or month keeps its level.
        scoped_coarse = self.collaborator_filter is not None and granularity in (Granularity.YEAR, Granularity.MONTH)
        if not scoped_coarse:
            granularity = granularity.finer or granularity

        return replace(self, granularity=granularity, focused_period=focus, page=1)

    def drill_up(self) -> "NavigatorViewState":
        if self.focused_period is not None:
            return replace(self, focused_period=None, page=1)
        return replace(self, granularity=self.granularity.coarser or self.granularity, page=1)

    def filter_by_collaborator(self, user_id: Optional[int]) -> "NavigatorViewState":
        return replace(self, collaborator_filter=user_id, page=1)

    def go_to_page(self, page: int, *, total: int) -> "NavigatorViewState":
        last = max(page_count(total, self.page_size), 1)
        return replace(self, page=min(max(int(page), 1), last))

    def change_page_size(self, page_size: int, *, total: int) -> "NavigatorViewState":
        if int(page_size) < 1:
            raise ValidationError("page_size must be at least 1")
        resized = replace(self, page_size=int(page_size))
        return resized.go_to_page(self.page, total=total)

    def to_query(self) -> dict[str, str]:
        query = {
            "granularity": self.granularity.value,
            "page": str(self.page),
            "page_size": str(self.page_size),
        }
        if self.focused_period is not None:
            query["focus_type"] = self.focused_period.type.value
            query["focus_value"] = self.focused_period.value
        if self.collaborator_filter is not None:
            query["user_id"] = str(self.collaborator_filter)
        return query

    @classmethod
    def from_query(cls, args: Mapping[str, str], *, default_page_size: int = DEFAULT_PAGE_SIZE) -> "NavigatorViewState":
        focus = None
        focus_type = args.get("focus_type")
        focus_value = args.get("focus_value")
        if focus_type or focus_value:
            if not (focus_type and focus_value):
                raise InvalidNavigation("focus_type and focus_value go together")
            ftype = _parse_granularity(focus_type)
            if ftype == Granularity.DAY:
                raise InvalidNavigation("A focused period is a week, month or year")
            focus = FocusedPeriod(type=ftype, value=str(focus_value))

        user_id = args.get("user_id")
        return cls(
            granularity=_parse_granularity(args.get("granularity") or Granularity.DAY.value),
            focused_period=focus,
            collaborator_filter=require_positive_int(user_id, "user_id") if user_id else None,
            page=require_positive_int(args.get("page") or 1, "page"),
            page_size=require_positive_int(args.get("page_size") or default_page_size, "page_size"),
        )


@dataclass(frozen=True)
class Page:
    items: Sequence[ActivityRecord]
    total: int
    page_count: int
    state: NavigatorViewState


def get_filtered(state: NavigatorViewState, records: Sequence[DailyActivityRecord]) -> Sequence[ActivityRecord]:
    """Collaborator filter, then focused-period filter on raw days, then grouping."""

    selected = list(records)
    if state.collaborator_filter is not None:
        selected = [r for r in selected if r.user_id == state.collaborator_filter]
    if state.focused_period is not None:
        selected = [r for r in selected if state.focused_period.contains(r)]
    return aggregate(selected, state.granularity)


def get_page(state: NavigatorViewState, records: Sequence[DailyActivityRecord]) -> Page:
    filtered = get_filtered(state, records)
    total = len(filtered)
    clamped = state.go_to_page(state.page, total=total)
    offset = (clamped.page - 1) * clamped.page_size
    return Page(
        items=list(filtered[offset : offset + clamped.page_size]),
        total=total,
        page_count=page_count(total, clamped.page_size),
        state=clamped,
    )
