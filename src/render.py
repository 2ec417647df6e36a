"""Terminal rendering: week grid, weekly bar chart and month picker.

Every function returns a list of lines; printing is left to the CLI.
The week grid lays the 7 days out as columns when the terminal is wide
enough and falls back to a stacked agenda otherwise.
"""
from __future__ import annotations
import calendar
import re
import shutil
from datetime import date, datetime
from typing import Container, Dict, List, Mapping, Optional, Sequence

from models import Task
from planner import DayStats, WeekTotals, WeekView
from status import classify
from theme import (BAR_COLOR, BOLD, DIM, EMPTY_COLOR, HEADER_COLOR, ID_COLOR, STATUS_COLOR,
                   STRIKE, TODAY_COLOR, UNDERLINE, color)
from timecodec import format_time_12
from weeks import date_key, fmt_md, fmt_weekday, month_grid

DOT = "●"
DONE_MARK = "✓"
BAR_DONE = "█"
BAR_OPEN = "▒"
MIN_COL_WIDTH = 14
SEP = " | "
SHORT_ID = 6
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def visible_len(s: str) -> int:
    return len(ANSI_RE.sub('', s))


def _pad(s: str, width: int) -> str:
    gap = width - visible_len(s)
    return s + ' ' * gap if gap > 0 else s


def _term_width(width: Optional[int]) -> int:
    return width or shutil.get_terminal_size((120, 30)).columns


def _wrap(text: str, width: int) -> List[str]:
    """Greedy word wrap; words longer than the width are hard-split."""
    width = max(1, width)
    lines: List[str] = []
    current = ''
    for word in text.split():
        while len(word) > width:
            if current:
                lines.append(current)
                current = ''
            lines.append(word[:width])
            word = word[width:]
        candidate = word if not current else current + ' ' + word
        if len(candidate) <= width:
            current = candidate
        else:
            lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines or ['']


def time_label(task: Task) -> str:
    start, end = format_time_12(task.start_time), format_time_12(task.end_time)
    if start and end:
        return f"{start}-{end}"
    if end:
        return f"until {end}"
    return start or "-"


def _day_header(d: date, today: date) -> str:
    text = f"{fmt_weekday(d)} {fmt_md(d)}"
    if d == today:
        return color(text + " *", TODAY_COLOR)
    return color(text, HEADER_COLOR, BOLD)


def _task_cell(task: Task, status: str, width: int) -> List[str]:
    dot = color(DOT, STATUS_COLOR.get(status, ''))
    lines = [f"{dot} {part}" if i == 0 else f"  {part}"
             for i, part in enumerate(_wrap(time_label(task), width - 2))]
    title = f"{DONE_MARK} {task.title}" if task.done else task.title
    title_style = (DIM, STRIKE) if task.done else (BOLD,)
    lines.extend("  " + color(part, *title_style) for part in _wrap(title, width - 2))
    lines.append("  " + color(f"#{task.id[:SHORT_ID]}", ID_COLOR))
    return lines


def render_week(view: WeekView, now: Optional[datetime] = None, width: Optional[int] = None) -> List[str]:
    now = now or datetime.now()
    today = now.date()
    term_width = _term_width(width)
    days = view.days()
    buckets = view.buckets()
    out = [color(f"Week of {view.label()}", HEADER_COLOR, BOLD), '']
    sep_total = len(SEP) * (len(days) - 1)
    if term_width - sep_total >= MIN_COL_WIDTH * len(days):
        out.extend(_week_columns(days, buckets, now, today, (term_width - sep_total) // len(days)))
    else:
        out.extend(_week_agenda(days, buckets, now, today, term_width))
    return out


def _week_columns(days: Sequence[date], buckets: Mapping[str, List[Task]], now: datetime,
                  today: date, col_width: int) -> List[str]:
    columns: List[List[str]] = []
    for d in days:
        col = [_day_header(d, today), color('-' * col_width, HEADER_COLOR)]
        items = buckets[date_key(d)]
        if not items:
            col.append(color('(no tasks)', EMPTY_COLOR))
        for i, task in enumerate(items):
            if i:
                col.append('')
            col.extend(_task_cell(task, classify(task, now), col_width))
        columns.append(col)
    rows = max(len(c) for c in columns)
    lines: List[str] = []
    for r in range(rows):
        cells = [_pad(c[r] if r < len(c) else '', col_width) for c in columns]
        lines.append(SEP.join(cells).rstrip())
    return lines


def _week_agenda(days: Sequence[date], buckets: Mapping[str, List[Task]], now: datetime,
                 today: date, term_width: int) -> List[str]:
    lines: List[str] = []
    for d in days:
        lines.append(_day_header(d, today))
        items = buckets[date_key(d)]
        if not items:
            lines.append("  " + color('(no tasks)', EMPTY_COLOR))
        for task in items:
            status = classify(task, now)
            dot = color(DOT, STATUS_COLOR.get(status, ''))
            title = f"{DONE_MARK} {task.title}" if task.done else task.title
            title = color(title, DIM, STRIKE) if task.done else title
            ident = color(f"#{task.id[:SHORT_ID]}", ID_COLOR)
            lines.append(f"  {dot} {time_label(task):<19} {title}  {ident}")
        lines.append('')
    return lines


def render_chart(stats: Sequence[DayStats], totals: WeekTotals, width: Optional[int] = None) -> List[str]:
    """Stacked horizontal bars per day: completed, then open."""
    bar_width = max(10, _term_width(width) - 30)
    most = max((s.total for s in stats), default=0) or 1
    lines = [
        f"Open: {totals.open}   Completed: {totals.completed}   Total: {totals.total}",
        '',
    ]
    for s in stats:
        done_len = round(s.completed * bar_width / most)
        open_len = round(s.total * bar_width / most) - done_len
        bar = color(BAR_DONE * done_len, BAR_COLOR['completed']) + color(BAR_OPEN * open_len, BAR_COLOR['open'])
        lines.append(f"{s.label} {s.md:>6} │{bar} {s.completed}/{s.total}".rstrip())
    lines.append('')
    lines.append(f"{color(BAR_DONE, BAR_COLOR['completed'])} Completed   {color(BAR_OPEN, BAR_COLOR['open'])} Open")
    return lines


def render_month(year: int, month: int, today: date, marked: Container[str] = (),
                 selected: Optional[date] = None) -> List[str]:
    """Month picker: 6 full weeks, neighbouring-month days muted.

    Days whose key is in ``marked`` are bold; today is highlighted and
    ``selected`` is underlined.
    """
    title = f"{calendar.month_name[month]} {year}"
    lines = [color(title.center(20).rstrip(), HEADER_COLOR, BOLD), "Su Mo Tu We Th Fr Sa"]
    grid = month_grid(year, month)
    for week_start in range(0, len(grid), 7):
        cells: List[str] = []
        for d in grid[week_start:week_start + 7]:
            styles: List[str] = []
            if d.month != month:
                styles.append(DIM)
            if date_key(d) in marked:
                styles.append(BOLD)
            if d == today:
                styles.append(TODAY_COLOR)
            if d == selected:
                styles.append(UNDERLINE)
            cells.append(color(f"{d.day:2d}", *styles))
        lines.append(' '.join(cells))
    return lines


def status_summary(statuses: Dict[str, str]) -> str:
    counts: Dict[str, int] = {}
    for s in statuses.values():
        counts[s] = counts.get(s, 0) + 1
    parts = [color(f"{DOT} {name} {counts[name]}", STATUS_COLOR.get(name, ''))
             for name in STATUS_COLOR if counts.get(name)]
    return '  '.join(parts)
