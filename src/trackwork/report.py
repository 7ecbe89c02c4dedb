from __future__ import annotations
import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from .models import WorkRecord, now_local

DAY_HEADER = "Date, Duration"
SESSION_HEADER = "Date, Start, End, Duration, Objective"


def format_hm(td: datetime.timedelta) -> str:
    minutes = max(0, int(td.total_seconds())) // 60
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def format_hms(td: datetime.timedelta) -> str:
    seconds = max(0, int(td.total_seconds()))
    return f"{seconds // 3600:02d}:{seconds // 60 % 60:02d}:{seconds % 60:02d}"


def month_bounds(delta: int, today: datetime.date) -> Tuple[int, int]:
    """(year, month) of the calendar month ``delta`` months before ``today``."""
    if delta < 0:
        raise ValueError("delta must be >= 0")
    idx = today.year * 12 + (today.month - 1) - delta
    year, month0 = divmod(idx, 12)
    return year, month0 + 1


def filter_month(
    records: Iterable[WorkRecord], delta: int, today: datetime.date
) -> List[WorkRecord]:
    year, month = month_bounds(delta, today)
    return [r for r in records if (r.start.year, r.start.month) == (year, month)]


def daily_totals(
    records: Iterable[WorkRecord], now: datetime.datetime
) -> List[Tuple[datetime.date, datetime.timedelta]]:
    """Sum session durations per start date, oldest date first."""
    totals: Dict[datetime.date, datetime.timedelta] = {}
    for r in records:
        day = r.start.date()
        totals[day] = totals.get(day, datetime.timedelta()) + r.duration(now)
    return sorted(totals.items())


def total(durations: Iterable[datetime.timedelta]) -> datetime.timedelta:
    return sum(durations, datetime.timedelta())


def session_line(record: WorkRecord, now: datetime.datetime) -> str:
    end = record.end.strftime("%H:%M") if record.end is not None else ""
    return ", ".join(
        [
            record.start.strftime("%Y-%m-%d"),
            record.start.strftime("%H:%M"),
            end,
            format_hm(record.duration(now)),
            record.objective,
        ]
    )


def render(
    records: Iterable[WorkRecord],
    now: Optional[datetime.datetime] = None,
    uncompressed: bool = False,
) -> List[str]:
    """Report lines: per session when ``uncompressed``, else per day.

    Open sessions are counted up to ``now``.
    """
    now = now or now_local()
    records = list(records)
    if uncompressed:
        lines = [SESSION_HEADER] + [session_line(r, now) for r in records]
        overall = total(r.duration(now) for r in records)
    else:
        days = daily_totals(records, now)
        lines = [DAY_HEADER] + [f"{d.isoformat()}: {format_hm(td)}" for d, td in days]
        overall = total(td for _, td in days)
    lines.append(f"Total: {format_hm(overall)}")
    return lines
