"""Urgency status of a task relative to the current instant.

Statuses: "unscheduled", "dueSoon", "overdue", "completed".

- completed wins over everything else.
- no start and no end time: unscheduled.
- start and end: dueSoon inside [start, end], overdue after end,
  unscheduled before start.
- a single bound (start, or end alone): dueSoon during the hour before
  it, overdue from that instant on, unscheduled earlier.
- anything that does not parse is unscheduled; classify never raises.
"""
from __future__ import annotations
from datetime import datetime, timedelta
from typing import Tuple

from models import Task
from timecodec import CANONICAL_RE

UNSCHEDULED = "unscheduled"
DUE_SOON = "dueSoon"
OVERDUE = "overdue"
COMPLETED = "completed"
STATUSES: Tuple[str, ...] = (UNSCHEDULED, DUE_SOON, OVERDUE, COMPLETED)

DUE_SOON_WINDOW = timedelta(hours=1)


def task_instant(date_key: str, hhmm: str) -> datetime:
    """Combine a YYYY-MM-DD key and an HH:MM time into a local datetime.

    Raises ValueError when either part is malformed.
    """
    m = CANONICAL_RE.match(hhmm or '')
    if not m:
        raise ValueError(f'Invalid time "{hhmm}"')
    day = datetime.strptime(date_key, '%Y-%m-%d')
    return day.replace(hour=int(m.group(1)), minute=int(m.group(2)))


def _single_bound(due: datetime, now: datetime) -> str:
    if now >= due:
        return OVERDUE
    if now >= due - DUE_SOON_WINDOW:
        return DUE_SOON
    return UNSCHEDULED


def classify(task: Task, now: datetime) -> str:
    if task.completed_at:
        return COMPLETED
    if not task.start_time and not task.end_time:
        return UNSCHEDULED
    try:
        if task.start_time and task.end_time:
            start = task_instant(task.date, task.start_time)
            end = task_instant(task.date, task.end_time)
            if now > end:
                return OVERDUE
            if now >= start:
                return DUE_SOON
            return UNSCHEDULED
        return _single_bound(task_instant(task.date, task.start_time or task.end_time), now)
    except (TypeError, ValueError):
        return UNSCHEDULED
