"""Task Store: the signed-in identity's task collection and its persistence.

One store per identity, created when the session is admitted and thrown
away on logout. Every mutation re-serializes the whole collection to the
key-value store. Persistence is best effort: a failed read yields an
empty collection and a failed write leaves the in-memory state
authoritative. The outcome of each is kept in ``last_load`` /
``last_save``.
"""
from __future__ import annotations
import json
from typing import Iterator, List, Mapping, Optional

from app_logging import get_logger
from clock import Clock, system_clock
from models import Task, iso_timestamp, new_task_id
from storage import KeyValueStore, StorageError, StorageResult, tasks_key_for
from timecodec import is_canonical
from weeks import parse_date_key

logger = get_logger("tasks")


def _check_date(value: str) -> str:
    parse_date_key(value)
    return value


def _check_time(value: Optional[str]) -> str:
    value = value or ''
    if not is_canonical(value):
        raise ValueError(f'Invalid time "{value}"; expected 24-hour HH:MM.')
    return value


class TaskStore:
    def __init__(self, kv: KeyValueStore, username: Optional[str] = None, clock: Clock = system_clock):
        self.kv = kv
        self.username = username
        self._clock = clock
        self.tasks: List[Task] = []
        self.last_load: StorageResult = StorageResult.success()
        self.last_save: Optional[StorageResult] = None
        self.load()

    @property
    def key(self) -> str:
        return tasks_key_for(self.username)

    # -------------------- persistence --------------------
    def load(self) -> StorageResult:
        """(Re)read the collection; corrupt or unreadable data becomes empty."""
        self.tasks = []
        try:
            raw = self.kv.get(self.key)
        except StorageError as exc:
            logger.warning("could not read tasks for %s: %s", self.key, exc)
            self.last_load = StorageResult.failure(exc)
            return self.last_load
        if raw is None:
            self.last_load = StorageResult.success()
            return self.last_load
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.warning("corrupt task payload under %s, starting empty: %s", self.key, exc)
            self.last_load = StorageResult.failure(f"unparsable payload: {exc}")
            return self.last_load
        if not isinstance(data, list):
            logger.warning("task payload under %s is not a list, starting empty", self.key)
            self.last_load = StorageResult.failure("payload is not a list")
            return self.last_load
        migrated = 0
        for raw_task in data:
            if not isinstance(raw_task, Mapping):
                continue
            task = Task.from_dict(raw_task)
            if task is None:
                continue
            if 'time' in raw_task and 'startTime' not in raw_task:
                migrated += 1
            self.tasks.append(task)
        if migrated:
            logger.info("migrated %d legacy task record(s) for %s", migrated, self.key)
        self.last_load = StorageResult.success()
        return self.last_load

    def save(self) -> StorageResult:
        payload = json.dumps([t.to_dict() for t in self.tasks])
        try:
            self.kv.set(self.key, payload)
        except StorageError as exc:
            logger.warning("could not save tasks for %s: %s", self.key, exc)
            self.last_save = StorageResult.failure(exc)
        else:
            self.last_save = StorageResult.success()
        return self.last_save

    # -------------------- queries --------------------
    def get(self, task_id: str) -> Optional[Task]:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def find_by_prefix(self, prefix: str) -> List[Task]:
        return [t for t in self.tasks if t.id.startswith(prefix)] if prefix else []

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    # -------------------- task operations --------------------
    def add(self, title: str, date: str, start_time: str = '', end_time: str = '') -> Optional[Task]:
        """Prepend a new task; returns None (and changes nothing) for a blank title."""
        title = (title or '').strip()
        if not title:
            return None
        task = Task(
            id=new_task_id(),
            title=title,
            date=_check_date(date),
            start_time=_check_time(start_time),
            end_time=_check_time(end_time),
            created_at=iso_timestamp(self._clock()),
            completed_at=None,
        )
        self.tasks.insert(0, task)
        self.save()
        return task

    def toggle_complete(self, task_id: str) -> Optional[Task]:
        task = self.get(task_id)
        if task is None:
            return None
        task.completed_at = None if task.completed_at else iso_timestamp(self._clock())
        self.save()
        return task

    def remove(self, task_id: str) -> bool:
        task = self.get(task_id)
        if task is None:
            return False
        self.tasks.remove(task)
        self.save()
        return True

    def update(self, task_id: str, *, title: Optional[str] = None, date: Optional[str] = None,
               start_time: Optional[str] = None, end_time: Optional[str] = None) -> Optional[Task]:
        """Merge field changes into a task; None leaves a field as is.

        A title that is blank after trimming refuses the whole edit (None is
        returned and nothing changes). id, created_at and completed_at are
        never touched.
        """
        task = self.get(task_id)
        if task is None:
            return None
        if title is not None:
            title = title.strip()
            if not title:
                return None
        changes = {
            'title': title,
            'date': None if date is None else _check_date(date),
            'start_time': None if start_time is None else _check_time(start_time),
            'end_time': None if end_time is None else _check_time(end_time),
        }
        for field, value in changes.items():
            if value is not None:
                setattr(task, field, value)
        self.save()
        return task
