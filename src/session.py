"""Local username/password session gate.

Credential records live under USERS_KEY as a JSON list; the active
session is ``{"username": ...}`` under SESSION_KEY. Demo-grade auth only:
passwords are stored as werkzeug password hashes, and older plaintext
``password`` records still log in.
"""
from __future__ import annotations
import json
from typing import Any, Dict, List, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from app_logging import get_logger
from clock import Clock, system_clock
from storage import SESSION_KEY, USERS_KEY, KeyValueStore, StorageError
from tasks import TaskStore

logger = get_logger("session")

UserRecord = Dict[str, Any]


class AuthError(Exception):
    """Credential check failed; the message is meant for the user."""


def _matches(record: UserRecord, password: str) -> bool:
    if 'password_hash' in record:
        return check_password_hash(str(record['password_hash']), password)
    return 'password' in record and str(record['password']) == password


class SessionGate:
    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    def _load_json(self, key: str, default: Any) -> Any:
        try:
            raw = self.kv.get(key)
            return default if raw is None else json.loads(raw)
        except (StorageError, ValueError) as exc:
            logger.warning("unreadable %s, using default: %s", key, exc)
            return default

    def users(self) -> List[UserRecord]:
        data = self._load_json(USERS_KEY, [])
        return [u for u in data if isinstance(u, dict)] if isinstance(data, list) else []

    def _open_session(self, username: str) -> str:
        try:
            self.kv.set(SESSION_KEY, json.dumps({'username': username}))
        except StorageError as exc:
            raise AuthError(f"Could not save session: {exc}") from exc
        return username

    def signup(self, username: str, password: str) -> str:
        username = (username or '').strip()
        if not username:
            raise AuthError("Username required")
        users = self.users()
        if any(u.get('username') == username for u in users):
            raise AuthError("Username already exists")
        users.append({'username': username, 'password_hash': generate_password_hash(password)})
        try:
            self.kv.set(USERS_KEY, json.dumps(users))
        except StorageError as exc:
            raise AuthError(f"Could not save account: {exc}") from exc
        logger.info("signed up %s", username)
        return self._open_session(username)

    def login(self, username: str, password: str) -> str:
        username = (username or '').strip()
        for record in self.users():
            if record.get('username') == username and _matches(record, password):
                logger.info("signed in %s", username)
                return self._open_session(username)
        raise AuthError("Invalid username or password")

    def logout(self) -> Optional[str]:
        username = self.current_user()
        try:
            self.kv.remove(SESSION_KEY)
        except StorageError as exc:
            logger.warning("could not clear session: %s", exc)
        if username:
            logger.info("signed out %s", username)
        return username

    def current_user(self) -> Optional[str]:
        data = self._load_json(SESSION_KEY, None)
        if isinstance(data, dict) and data.get('username'):
            return str(data['username'])
        return None

    def open_store(self, username: Optional[str] = None, clock: Clock = system_clock) -> TaskStore:
        """Task Store for ``username`` (default: the active session)."""
        return TaskStore(self.kv, username or self.current_user(), clock=clock)
