"""Tabular export of the current navigator view (CSV / XLSX)."""

from __future__ import annotations

import csv
import io
from datetime import datetime
from typing import Optional, Sequence

import pandas as pd

from ..common.formatting import format_break_duration, ms_to_hhmm
from ..core.enums import Granularity
from .model import ActivityRecord

DAY_HEADERS = ["Collaborator", "Date", "Arrival", "Departure", "Pauses", "Average pause", "Work time", "Location"]
PERIOD_HEADERS = [
    "Collaborator",
    "Period",
    "First arrival",
    "Last departure",
    "Days",
    "Pauses",
    "Average pause",
    "Work time",
]


def export_headers(granularity: Granularity) -> list[str]:
    return DAY_HEADERS if granularity == Granularity.DAY else PERIOD_HEADERS


def _time(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M") if value else "-"


def _stamp(value: Optional[datetime]) -> str:
    return value.strftime("%d/%m/%Y %H:%M") if value else "-"


def export_rows(granularity: Granularity, records: Sequence[ActivityRecord]) -> list[list[str]]:
    rows: list[list[str]] = []
    for r in records:
        if granularity == Granularity.DAY:
            rows.append(
                [
                    r.user_name,
                    r.work_date.strftime("%d/%m/%Y"),
                    _time(r.check_in_timestamp),
                    _time(r.check_out_timestamp),
                    str(r.pauses_count),
                    format_break_duration(int(r.average_pause_time)),
                    ms_to_hhmm(r.total_work_time),
                    r.location or "",
                ]
            )
        else:
            rows.append(
                [
                    r.user_name,
                    r.period_label,
                    _stamp(r.first_arrival),
                    _stamp(r.last_departure),
                    str(r.days_count),
                    str(r.pauses_count),
                    format_break_duration(int(r.average_pause_time)),
                    ms_to_hhmm(r.total_work_time),
                ]
            )
    return rows


def to_csv_bytes(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> bytes:
    out = io.StringIO()
    writer = csv.writer(out)
    writer.writerow(headers)
    writer.writerows(rows)
    # BOM so spreadsheet tools pick up UTF-8.
    return out.getvalue().encode("utf-8-sig")


def to_xlsx_bytes(headers: Sequence[str], rows: Sequence[Sequence[str]], *, sheet_name: str = "Activity") -> bytes:
    df = pd.DataFrame(list(rows), columns=list(headers))
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return output.getvalue()
