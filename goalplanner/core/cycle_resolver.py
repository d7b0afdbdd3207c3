from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

DAYS_PER_WEEK = 7


@dataclass(frozen=True, slots=True)
class CycleContext:
    year: int
    quarter: int
    week: int


def to_date(value: date | datetime | str) -> date:
    """Normalize a date, a datetime or an ISO string to a calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raw = str(value).strip()
    if not raw:
        raise ValueError("date value is empty")
    return date.fromisoformat(raw[:10])


def quarter_of(value: date | datetime | str) -> int:
    return (to_date(value).month - 1) // 3 + 1


def current_week(
    cycle_start: date | datetime | str,
    today: date | datetime | str,
    *,
    max_week: int | None = None,
) -> int:
    days = (to_date(today) - to_date(cycle_start)).days
    week = days // DAYS_PER_WEEK + 1
    if week < 1:
        return 1
    if max_week is not None and week > max_week:
        return max_week
    return week


def cycle_context(
    cycle_start: date | datetime | str,
    today: date | datetime | str,
    *,
    max_week: int | None = None,
) -> CycleContext:
    start = to_date(cycle_start)
    return CycleContext(
        year=start.year,
        quarter=quarter_of(start),
        week=current_week(start, today, max_week=max_week),
    )
