"""Key-value persistence for the planner.

Everything is stored as text values under string keys, the way browser
local storage holds them:

- ``mini_tasks_users_v1``        JSON list of credential records
- ``mini_tasks_session_v1``      JSON ``{"username": ...}`` of the active session
- ``mini_tasks_items_<username>`` JSON list of that identity's task records

Stores raise StorageError on read/write failure; callers decide whether
that degrades to a default. StorageResult is the structured outcome the
Task Store exposes for each load and save.
"""
from __future__ import annotations
import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

USERS_KEY = "mini_tasks_users_v1"
SESSION_KEY = "mini_tasks_session_v1"
ANON_USER = "_anon"


def tasks_key_for(username: Optional[str]) -> str:
    return f"mini_tasks_items_{username or ANON_USER}"


class StorageError(Exception):
    """Backing store could not be read or written."""


@dataclass(frozen=True)
class StorageResult:
    ok: bool
    error: Optional[str] = None

    @classmethod
    def success(cls) -> 'StorageResult':
        return cls(True)

    @classmethod
    def failure(cls, error: object) -> 'StorageResult':
        return cls(False, str(error))


class KeyValueStore:
    """get/set/remove contract over text values."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class JsonFileStore(KeyValueStore):
    """All keys kept in one JSON object on disk, rewritten atomically per set."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"cannot read {self.path}: top level is not an object")
        return data

    def _write_all(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix='.store-', suffix='.json')
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=4)
                os.replace(tmp, self.path)
            except BaseException:
                if os.path.exists(tmp):
                    os.unlink(tmp)
                raise
        except OSError as exc:
            raise StorageError(f"cannot write {self.path}: {exc}") from exc

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)
