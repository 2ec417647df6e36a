"""Runtime settings.

Priority for every key: real environment variable > project .env file >
default. Malformed values fall back to the default rather than aborting.

Keys:
- PLANNER_DATA_DIR      directory holding store.json and logs/
- PLANNER_TICK_SECONDS  status refresh interval for ``week --watch``
- PLANNER_LOG_LEVEL     file log level (DEBUG/INFO/WARNING/...)
- PLANNER_ALT_SCREEN    use the terminal alternate screen while watching
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Mapping, Optional

PROJECT_ROOT = Path(__file__).resolve().parent.parent
ENV_FILE = PROJECT_ROOT / '.env'
DEFAULT_DATA_DIR = PROJECT_ROOT / 'data'
DEFAULT_TICK_SECONDS = 60.0
STORE_FILENAME = 'store.json'


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    tick_seconds: float = DEFAULT_TICK_SECONDS
    log_level: int = logging.INFO
    alt_screen: bool = True

    @property
    def store_file(self) -> Path:
        return self.data_dir / STORE_FILENAME

    @property
    def log_dir(self) -> Path:
        return self.data_dir / 'logs'


def read_env_file(path: Path = ENV_FILE, prefix: str = 'PLANNER_') -> Dict[str, str]:
    """Parse KEY=VALUE lines from a .env file, keeping keys with ``prefix``."""
    values: Dict[str, str] = {}
    if not path.exists():
        return values
    try:
        text = path.read_text()
    except OSError:
        return values
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        if k.startswith(prefix):
            values[k] = v.strip().strip('"').strip("'")
    return values


def truthy(value: Optional[str], default: bool = True) -> bool:
    if value is None:
        return default
    return value.strip().lower() not in {"0", "false", "no", "off", ""}


def _positive_float(value: Optional[str], default: float) -> float:
    try:
        parsed = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _log_level(value: Optional[str], default: int) -> int:
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def load_settings(environ: Optional[Mapping[str, str]] = None,
                  env_file: Path = ENV_FILE) -> Settings:
    env = os.environ if environ is None else environ
    file_values = read_env_file(env_file)

    def lookup(key: str) -> Optional[str]:
        return env.get(key) or file_values.get(key)

    data_dir = lookup('PLANNER_DATA_DIR')
    return Settings(
        data_dir=Path(data_dir).expanduser() if data_dir else DEFAULT_DATA_DIR,
        tick_seconds=_positive_float(lookup('PLANNER_TICK_SECONDS'), DEFAULT_TICK_SECONDS),
        log_level=_log_level(lookup('PLANNER_LOG_LEVEL'), logging.INFO),
        alt_screen=truthy(lookup('PLANNER_ALT_SCREEN'), True),
    )
