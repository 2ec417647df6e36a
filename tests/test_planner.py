import unittest
from datetime import date, datetime

from models import Task
from planner import WeekTotals, WeekView, bucket_tasks, sort_day
from status import COMPLETED, OVERDUE, UNSCHEDULED
from storage import MemoryStore
from tasks import TaskStore
from weeks import date_key, week_days


class MutableClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def task(tid: str, day: str = "2024-01-01", start: str = "", end: str = "", done: bool = False,
         created: str = "2024-01-01T00:00:00.000Z") -> Task:
    return Task(id=tid, title=tid, date=day, start_time=start, end_time=end, created_at=created,
                completed_at="2024-01-01T00:00:00.000Z" if done else None)


class TestSortDay(unittest.TestCase):
    def test_open_before_done_dominates_time(self) -> None:
        items = [task("done9", start="09:00", done=True), task("open8", start="08:00"),
                 task("open10", start="10:00")]
        self.assertEqual([t.id for t in sort_day(items)], ["open8", "open10", "done9"])

    def test_unset_time_sorts_first(self) -> None:
        items = [task("late", start="18:00"), task("none")]
        self.assertEqual([t.id for t in sort_day(items)], ["none", "late"])

    def test_end_time_used_when_no_start(self) -> None:
        items = [task("start10", start="10:00"), task("end9", end="09:00")]
        self.assertEqual([t.id for t in sort_day(items)], ["end9", "start10"])

    def test_created_at_breaks_ties(self) -> None:
        items = [task("b", start="09:00", created="2024-01-01T10:00:00.000Z"),
                 task("a", start="09:00", created="2024-01-01T09:00:00.000Z")]
        self.assertEqual([t.id for t in sort_day(items)], ["a", "b"])


class TestBucketTasks(unittest.TestCase):
    def test_only_visible_week_is_bucketed(self) -> None:
        days = week_days(date(2023, 12, 31))
        items = [task("in", day="2024-01-01"), task("out", day="2024-01-10")]
        buckets = bucket_tasks(items, days)
        self.assertEqual(list(buckets), [date_key(d) for d in days])
        self.assertEqual([t.id for t in buckets["2024-01-01"]], ["in"])
        self.assertNotIn("out", [t.id for ts in buckets.values() for t in ts])

    def test_date_key_matches_bucket(self) -> None:
        days = week_days(date(2023, 12, 31))
        for d in days:
            buckets = bucket_tasks([task("x", day=date_key(d))], days)
            self.assertEqual([t.id for t in buckets[date_key(d)]], ["x"])


class TestWeekView(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = MutableClock(datetime(2024, 1, 3, 12, 0))  # Wednesday
        self.store = TaskStore(MemoryStore(), "alice", clock=self.clock)
        self.store.tasks = [
            task("mon_open", day="2024-01-01", start="09:00"),
            task("mon_done", day="2024-01-01", done=True),
            task("wed_open", day="2024-01-03", start="13:30"),
            task("next_week", day="2024-01-08"),
        ]
        self.view = WeekView(self.store, clock=self.clock)

    def test_active_week(self) -> None:
        self.assertEqual(self.view.week_start(), date(2023, 12, 31))
        self.assertEqual(self.view.days()[-1], date(2024, 1, 6))
        self.assertEqual(self.view.label(), "Dec 31 - Jan 6")

    def test_navigation(self) -> None:
        self.view.next_week()
        self.assertEqual(self.view.week_start(), date(2024, 1, 7))
        self.assertEqual([t.id for t in self.view.visible_tasks()], ["next_week"])
        self.view.prev_week()
        self.view.prev_week()
        self.assertEqual(self.view.week_start(), date(2023, 12, 24))
        self.view.this_week()
        self.assertEqual(self.view.offset, 0)
        self.assertEqual(self.view.week_start(), date(2023, 12, 31))

    def test_today_follows_the_clock(self) -> None:
        self.clock.now = datetime(2024, 1, 6, 23, 59)
        self.assertEqual(self.view.week_start(), date(2023, 12, 31))
        self.clock.now = datetime(2024, 1, 7, 0, 1)
        self.assertEqual(self.view.week_start(), date(2024, 1, 7))

    def test_buckets_are_sorted(self) -> None:
        buckets = self.view.buckets()
        self.assertEqual([t.id for t in buckets["2024-01-01"]], ["mon_open", "mon_done"])
        self.assertEqual([t.id for t in buckets["2024-01-03"]], ["wed_open"])
        self.assertEqual(buckets["2024-01-06"], [])

    def test_day_stats_and_totals(self) -> None:
        stats = self.view.day_stats()
        self.assertEqual(len(stats), 7)
        monday = stats[1]
        self.assertEqual((monday.label, monday.md, monday.key), ("Mon", "Jan 1", "2024-01-01"))
        self.assertEqual((monday.open, monday.completed, monday.total), (1, 1, 2))
        self.assertEqual(stats[0].total, 0)
        self.assertEqual(self.view.totals(), WeekTotals(open=2, completed=1, total=3))
        self.assertEqual(self.view.totals(stats), WeekTotals(open=2, completed=1, total=3))

    def test_statuses_cover_visible_tasks_only(self) -> None:
        statuses = self.view.statuses()
        self.assertEqual(set(statuses), {"mon_open", "mon_done", "wed_open"})
        self.assertEqual(statuses["mon_open"], OVERDUE)
        self.assertEqual(statuses["mon_done"], COMPLETED)
        self.assertEqual(statuses["wed_open"], UNSCHEDULED)

    def test_statuses_reevaluate_with_new_instant(self) -> None:
        later = datetime(2024, 1, 3, 13, 0)
        self.assertEqual(self.view.statuses(later)["wed_open"], "dueSoon")


if __name__ == "__main__":
    unittest.main(verbosity=2)
