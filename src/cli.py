"""Command-line interface for the weekly planner.

Every command runs against the signed-in user's collection (see
``planner login``). Times are typed in 12-hour form ("9:30 PM", "9pm")
and stored as 24-hour HH:MM. Task ids can be shortened to any unique
prefix, as shown in the week view (#ab12cd).
"""
from __future__ import annotations
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

import click

from app_logging import configure_logging
from clock import Clock, Ticker, system_clock
from config import Settings, load_settings
from models import Task
from planner import WeekView
from render import SHORT_ID, render_chart, render_month, render_week, status_summary, time_label
from session import AuthError, SessionGate
from storage import JsonFileStore
from tasks import TaskStore
from timecodec import parse_typed_time, to_24_hour
from weeks import add_days, date_key, fmt_md, fmt_weekday, parse_date_key, shift_month, start_of_week

WEEKDAY_NAMES = ('sunday', 'monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday')


# --- terminal control helpers ---
# ESC[3J (scrollback), ESC[H (home), ESC[2J (screen), ESC[H (home)
def _clear_screen() -> None:
    click.echo("\033[3J\033[H\033[2J\033[H", nl=False)


def _enter_alt_screen() -> None:
    click.echo("\033[?1049h", nl=False)


def _leave_alt_screen() -> None:
    click.echo("\033[?1049l", nl=False)


@dataclass
class AppContext:
    settings: Settings
    gate: SessionGate
    clock: Clock = system_clock

    def store(self) -> TaskStore:
        username = self.gate.current_user()
        if not username:
            raise click.ClickException("Not signed in. Run 'planner login USERNAME' first.")
        store = self.gate.open_store(username, clock=self.clock)
        if not store.last_load.ok:
            click.echo(f"Warning: stored tasks unreadable ({store.last_load.error}); starting empty.", err=True)
        return store


# -------------------- parameter helpers --------------------
def resolve_day(text: str, today: date) -> str:
    """Day keyword, weekday name (within the current week) or YYYY-MM-DD -> date key."""
    t = text.strip().lower()
    if t in ('', 'today'):
        return date_key(today)
    if t == 'tomorrow':
        return date_key(add_days(today, 1))
    if t == 'yesterday':
        return date_key(add_days(today, -1))
    if len(t) >= 3:
        for idx, name in enumerate(WEEKDAY_NAMES):
            if name.startswith(t):
                return date_key(add_days(start_of_week(today), idx))
    return date_key(parse_date_key(text.strip()))


def typed_time(text: Optional[str]) -> Optional[str]:
    if text is None:
        return None
    hour, minute, meridiem = parse_typed_time(text)
    return to_24_hour(hour, minute, meridiem)


def _time_option(ctx: click.Context, param: click.Parameter, value: Optional[str]) -> Optional[str]:
    try:
        return typed_time(value)
    except ValueError as exc:
        raise click.BadParameter(str(exc), ctx=ctx, param=param)


def _day_option(app: AppContext, value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return resolve_day(value, app.clock().date())
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="'--date'")


def resolve_task(store: TaskStore, ref: str) -> Task:
    ref = ref.strip().lstrip('#')
    task = store.get(ref)
    if task is not None:
        return task
    matches = store.find_by_prefix(ref)
    if not matches:
        raise click.ClickException(f"Task id {ref} not found.")
    if len(matches) > 1:
        raise click.ClickException(f"Task id {ref} is ambiguous ({len(matches)} matches).")
    return matches[0]


def _describe(task: Task) -> str:
    try:
        day = parse_date_key(task.date)
    except ValueError:
        on = task.date or "(no date)"
    else:
        on = f"{fmt_weekday(day)} {fmt_md(day)}"
    at = f" at {time_label(task)}" if task.start_time or task.end_time else ""
    return f'"{task.title}" on {on}{at} (#{task.id[:SHORT_ID]})'


def _warn_unsaved(store: TaskStore) -> None:
    if store.last_save is not None and not store.last_save.ok:
        click.echo(f"Warning: changes not saved ({store.last_save.error}).", err=True)


# -------------------- command group --------------------
@click.group()
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Weekly task planner."""
    if ctx.obj is None:
        settings = load_settings()
        configure_logging(settings)
        ctx.obj = AppContext(settings=settings, gate=SessionGate(JsonFileStore(settings.store_file)))


pass_app = click.make_pass_decorator(AppContext)


@cli.command()
@click.argument('username')
@click.password_option()
@pass_app
def signup(app: AppContext, username: str, password: str) -> None:
    """Create an account and sign in."""
    try:
        name = app.gate.signup(username, password)
    except AuthError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Signed in as {name}.")


@cli.command()
@click.argument('username')
@click.option('--password', prompt=True, hide_input=True)
@pass_app
def login(app: AppContext, username: str, password: str) -> None:
    """Sign in to an existing account."""
    try:
        name = app.gate.login(username, password)
    except AuthError as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Signed in as {name}.")


@cli.command()
@pass_app
def logout(app: AppContext) -> None:
    """Sign out."""
    name = app.gate.logout()
    click.echo(f"Signed out {name}." if name else "Not signed in.")


@cli.command()
@pass_app
def whoami(app: AppContext) -> None:
    """Show the signed-in user."""
    click.echo(app.gate.current_user() or "Not signed in.")


@cli.command()
@click.argument('title', nargs=-1, required=True)
@click.option('-d', '--date', 'day', default='today', show_default=True,
              help="YYYY-MM-DD, today/tomorrow/yesterday, or a weekday of this week.")
@click.option('--start', callback=_time_option, help='Start time, e.g. "9:30 AM".')
@click.option('--end', callback=_time_option, help='End time, e.g. "11am".')
@pass_app
def add(app: AppContext, title: tuple, day: str, start: Optional[str], end: Optional[str]) -> None:
    """Add a task."""
    store = app.store()
    task = store.add(' '.join(title), _day_option(app, day), start or '', end or '')
    if task is None:
        raise click.ClickException("Title required.")
    click.echo(f"Added {_describe(task)}.")
    _warn_unsaved(store)


@cli.command()
@click.argument('task_id')
@pass_app
def done(app: AppContext, task_id: str) -> None:
    """Toggle a task between open and completed."""
    store = app.store()
    task = store.toggle_complete(resolve_task(store, task_id).id)
    state = "complete" if task.done else "open"
    click.echo(f'Marked "{task.title}" {state}.')
    _warn_unsaved(store)


@cli.command()
@click.argument('task_id')
@pass_app
def rm(app: AppContext, task_id: str) -> None:
    """Delete a task."""
    store = app.store()
    task = resolve_task(store, task_id)
    store.remove(task.id)
    click.echo(f'Task "{task.title}" removed.')
    _warn_unsaved(store)


@cli.command()
@click.argument('task_id')
@click.option('--title', help='New title.')
@click.option('-d', '--date', 'day', help='New day (same forms as add).')
@click.option('--start', callback=_time_option, help='New start time.')
@click.option('--end', callback=_time_option, help='New end time.')
@click.option('--clear-time', is_flag=True, help='Remove start and end times.')
@pass_app
def edit(app: AppContext, task_id: str, title: Optional[str], day: Optional[str],
         start: Optional[str], end: Optional[str], clear_time: bool) -> None:
    """Change a task's title, day or times."""
    if clear_time and (start or end):
        raise click.UsageError("--clear-time cannot be combined with --start/--end.")
    if title is None and day is None and start is None and end is None and not clear_time:
        raise click.UsageError("Nothing to change.")
    store = app.store()
    task = resolve_task(store, task_id)
    if clear_time:
        start = end = ''
    updated = store.update(task.id, title=title, date=_day_option(app, day), start_time=start, end_time=end)
    if updated is None:
        raise click.ClickException("Title required; task unchanged.")
    click.echo(f"Updated {_describe(updated)}.")
    _warn_unsaved(store)


def _week_lines(view: WeekView, now: datetime, width: Optional[int]) -> List[str]:
    lines = render_week(view, now, width)
    summary = status_summary(view.statuses(now))
    if summary:
        lines.append(summary)
    return lines


@cli.command()
@click.option('--offset', default=0, show_default=True, help='Weeks from the current week (-1 = last week).')
@click.option('--watch', is_flag=True, help='Redraw every tick until interrupted.')
@click.option('--width', type=int, hidden=True)
@pass_app
def week(app: AppContext, offset: int, watch: bool, width: Optional[int]) -> None:
    """Show the week grid with status colors."""
    store = app.store()
    view = WeekView(store, clock=app.clock, offset=offset)
    if not watch:
        click.echo('\n'.join(_week_lines(view, app.clock(), width)))
        return

    def redraw(now: datetime) -> None:
        store.load()
        _clear_screen()
        click.echo('\n'.join(_week_lines(view, now, width)))
        click.echo(f"\nRefreshing every {app.settings.tick_seconds:g}s. Ctrl-C to quit.")

    ticker = Ticker(redraw, interval=app.settings.tick_seconds, clock=app.clock)
    if app.settings.alt_screen:
        _enter_alt_screen()
    try:
        ticker.run()
    except KeyboardInterrupt:
        ticker.stop()
    finally:
        if app.settings.alt_screen:
            _leave_alt_screen()


@cli.command()
@click.option('--offset', default=0, show_default=True, help='Weeks from the current week.')
@click.option('--width', type=int, hidden=True)
@pass_app
def chart(app: AppContext, offset: int, width: Optional[int]) -> None:
    """Open/completed counts per day of the week."""
    view = WeekView(app.store(), clock=app.clock, offset=offset)
    stats = view.day_stats()
    click.echo(f"Week of {view.label()}")
    click.echo('\n'.join(render_chart(stats, view.totals(stats), width)))


@cli.command()
@click.option('--year', type=int, help='Defaults to the current year.')
@click.option('--month', type=click.IntRange(1, 12), help='Defaults to the current month.')
@click.option('--offset', default=0, show_default=True, help='Months from the shown month (-1 = previous).')
@click.option('-d', '--date', 'day', help='Underline this day and show its month (same forms as add).')
@pass_app
def month(app: AppContext, year: Optional[int], month: Optional[int], offset: int, day: Optional[str]) -> None:
    """Month calendar; days with open tasks are bold."""
    today = app.clock().date()
    selected = parse_date_key(_day_option(app, day)) if day is not None else None
    anchor = selected or today
    year, month = shift_month(year or anchor.year, month or anchor.month, offset)
    store = app.store()
    marked = {t.date for t in store if not t.done}
    lines = render_month(year, month, today, marked=marked, selected=selected)
    click.echo('\n'.join(lines))


if __name__ == '__main__':  # pragma: no cover
    cli(prog_name='planner')
