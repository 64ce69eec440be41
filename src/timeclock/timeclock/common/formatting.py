from __future__ import annotations


def format_break_duration(elapsed_ms: int) -> str:
    """Elapsed break time as ``"M min S sec"``."""
    total_seconds = max(int(elapsed_ms), 0) // 1000
    return f"{total_seconds // 60} min {total_seconds % 60} sec"


def ms_to_hhmm(ms: float | int | None) -> str:
    if not ms:
        return "00:00"
    total_minutes = int(ms) // 60_000
    return f"{total_minutes // 60:02d}:{total_minutes % 60:02d}"
