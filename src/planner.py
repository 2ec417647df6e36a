"""Week view model: buckets a Task Store's tasks into the active week.

Weeks start on Sunday. The active week is an offset in whole weeks from
the week containing "today", and "today" is re-read from the clock on
every query so a long-running view follows the calendar across midnight.
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Tuple

from clock import Clock, system_clock
from models import Task
from status import classify
from tasks import TaskStore
from timecodec import parse_time_to_min
from weeks import date_key, fmt_md, fmt_weekday, start_of_week, week_days, week_label


@dataclass(frozen=True)
class DayStats:
    date: date
    key: str
    label: str
    md: str
    open: int
    completed: int
    total: int


@dataclass(frozen=True)
class WeekTotals:
    open: int = 0
    completed: int = 0
    total: int = 0


def day_sort_key(task: Task) -> Tuple[int, int, str]:
    """Open before done, then by start (or end) time, then creation order."""
    return (1 if task.done else 0, parse_time_to_min(task.sort_time), task.created_at or '')


def sort_day(tasks: Iterable[Task]) -> List[Task]:
    return sorted(tasks, key=day_sort_key)


def bucket_tasks(tasks: Iterable[Task], days: Iterable[date]) -> Dict[str, List[Task]]:
    """One sorted list per day key, in day order; tasks outside the days are left out."""
    buckets: Dict[str, List[Task]] = {date_key(d): [] for d in days}
    for task in tasks:
        if task.date in buckets:
            buckets[task.date].append(task)
    return {key: sort_day(items) for key, items in buckets.items()}


class WeekView:
    def __init__(self, store: TaskStore, clock: Clock = system_clock, offset: int = 0):
        self.store = store
        self.offset = offset
        self._clock = clock

    # -------------------- navigation --------------------
    def today(self) -> date:
        return self._clock().date()

    def week_start(self) -> date:
        return week_days(start_of_week(self.today()), self.offset)[0]

    def days(self) -> List[date]:
        return week_days(self.week_start())

    def label(self) -> str:
        return week_label(self.days())

    def next_week(self) -> None:
        self.offset += 1

    def prev_week(self) -> None:
        self.offset -= 1

    def this_week(self) -> None:
        self.offset = 0

    # -------------------- buckets / chart --------------------
    def buckets(self) -> Dict[str, List[Task]]:
        return bucket_tasks(self.store.tasks, self.days())

    def visible_tasks(self) -> List[Task]:
        return [t for items in self.buckets().values() for t in items]

    def day_stats(self) -> List[DayStats]:
        grouped = self.buckets()
        stats: List[DayStats] = []
        for d in self.days():
            key = date_key(d)
            items = grouped[key]
            completed = sum(1 for t in items if t.done)
            stats.append(DayStats(
                date=d, key=key, label=fmt_weekday(d), md=fmt_md(d),
                open=len(items) - completed, completed=completed, total=len(items),
            ))
        return stats

    def totals(self, stats: Optional[List[DayStats]] = None) -> WeekTotals:
        stats = self.day_stats() if stats is None else stats
        return WeekTotals(
            open=sum(s.open for s in stats),
            completed=sum(s.completed for s in stats),
            total=sum(s.total for s in stats),
        )

    # -------------------- status --------------------
    def statuses(self, now: Optional[datetime] = None) -> Dict[str, str]:
        """Status of every visible task, keyed by task id."""
        now = self._clock() if now is None else now
        return {t.id: classify(t, now) for t in self.visible_tasks()}
