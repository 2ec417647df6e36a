"""Data models for the weekly planner.

Only exposes the Task dataclass plus its wire conversion. Stored records
use camelCase keys (id, title, date, startTime, endTime, createdAt,
completedAt); older collections carry a single ``time`` field which is
read as ``startTime`` with an empty ``endTime``.
"""
from __future__ import annotations
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional


def new_task_id() -> str:
    return uuid.uuid4().hex


def iso_timestamp(moment: datetime) -> str:
    """Fixed-width UTC ISO-8601 string (naive datetimes are taken as local)."""
    return moment.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


def _time_field(value: Any) -> str:
    return '' if value is None else str(value)


@dataclass
class Task:
    """A single dated task.

    Fields:
        id: Opaque unique token, fixed at creation.
        title: Trimmed, non-empty title.
        date: Day bucket key, YYYY-MM-DD.
        start_time / end_time: Canonical "HH:MM" or "" (both optional).
        created_at: ISO timestamp of creation; ordering tie-break.
        completed_at: ISO timestamp when marked complete, else None.
    """
    id: str
    title: str
    date: str
    start_time: str = ''
    end_time: str = ''
    created_at: Optional[str] = None
    completed_at: Optional[str] = None

    @property
    def done(self) -> bool:
        return bool(self.completed_at)

    @property
    def sort_time(self) -> str:
        return self.start_time or self.end_time

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'date': self.date,
            'startTime': self.start_time,
            'endTime': self.end_time,
            'createdAt': self.created_at,
            'completedAt': self.completed_at,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Optional['Task']:
        """Build a Task from a stored record, migrating the legacy ``time`` field.

        Records without a title are skipped (None); a missing id is replaced
        with a fresh one so every loaded task stays addressable.
        """
        raw_title = raw.get('title')
        if raw_title is None:
            return None
        if 'startTime' in raw or 'endTime' in raw:
            start, end = raw.get('startTime'), raw.get('endTime')
        else:
            start, end = raw.get('time'), ''
        tid = raw.get('id')
        return cls(
            id=str(tid) if tid else new_task_id(),
            title=str(raw_title),
            date=str(raw.get('date') or ''),
            start_time=_time_field(start),
            end_time=_time_field(end),
            created_at=raw.get('createdAt'),
            completed_at=raw.get('completedAt') or None,
        )

    def __repr__(self) -> str:  # pragma: no cover - convenience only
        return f"Task(id={self.id}, title={self.title}, date={self.date})"
