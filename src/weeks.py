"""Calendar helpers: Sunday-based weeks, date keys and the month picker grid.

All arithmetic is on local calendar dates; a task's ``date`` and the day
bucket keys must both come from date_key() or lookups silently miss.
"""
from __future__ import annotations
import re
from datetime import date, datetime, timedelta
from typing import List, Tuple, Union

DateLike = Union[date, datetime]

DAYS_PER_WEEK = 7
MONTH_GRID_DAYS = 42  # 6 full weeks
_KEY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _as_date(d: DateLike) -> date:
    return d.date() if isinstance(d, datetime) else d


def weekday_index(d: DateLike) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return (_as_date(d).weekday() + 1) % 7


def start_of_week(d: DateLike) -> date:
    day = _as_date(d)
    return day - timedelta(days=weekday_index(day))


def add_days(d: DateLike, n: int) -> date:
    return _as_date(d) + timedelta(days=n)


def week_days(week_start: DateLike, offset_weeks: int = 0) -> List[date]:
    """The 7 consecutive dates starting at week_start (shifted by whole weeks)."""
    first = add_days(week_start, offset_weeks * DAYS_PER_WEEK)
    return [add_days(first, i) for i in range(DAYS_PER_WEEK)]


def date_key(d: DateLike) -> str:
    day = _as_date(d)
    return f"{day.year:04d}-{day.month:02d}-{day.day:02d}"


def parse_date_key(key: str) -> date:
    """Inverse of date_key. Raises ValueError for anything but YYYY-MM-DD."""
    try:
        if not _KEY_RE.match(key):
            raise ValueError(key)
        return datetime.strptime(key, '%Y-%m-%d').date()
    except (TypeError, ValueError):
        raise ValueError(f'Invalid date "{key}"; expected YYYY-MM-DD.') from None


def shift_month(year: int, month: int, n: int) -> Tuple[int, int]:
    idx = year * 12 + (month - 1) + n
    return idx // 12, idx % 12 + 1


def month_grid(year: int, month: int) -> List[date]:
    """42 days covering the month, starting on the Sunday on/before the 1st.

    Leading and trailing days belong to the neighbouring months so the
    picker always shows complete weeks.
    """
    first = start_of_week(date(year, month, 1))
    return [add_days(first, i) for i in range(MONTH_GRID_DAYS)]


def fmt_weekday(d: DateLike) -> str:
    return _as_date(d).strftime('%a')


def fmt_md(d: DateLike) -> str:
    day = _as_date(d)
    return f"{day.strftime('%b')} {day.day}"


def week_label(days: List[date]) -> str:
    return f"{fmt_md(days[0])} - {fmt_md(days[-1])}"
