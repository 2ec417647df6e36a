"""Clock collaborator and the periodic status refresh timer."""
from __future__ import annotations
import time
from datetime import datetime
from typing import Callable, Optional

from app_logging import get_logger

Clock = Callable[[], datetime]

logger = get_logger("clock")


def system_clock() -> datetime:
    """Current local wall-clock time (naive, like the stored date keys)."""
    return datetime.now()


class Ticker:
    """Calls ``callback(now)`` every ``interval`` seconds until stopped.

    Runs cooperatively on the calling thread: each tick reads the clock
    once and hands the instant to the callback. stop() (from the callback
    or elsewhere) ends the loop after the current tick.
    """

    def __init__(self, callback: Callable[[datetime], None], interval: float = 60.0,
                 clock: Clock = system_clock, sleep: Callable[[float], None] = time.sleep):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.callback = callback
        self.interval = interval
        self.ticks = 0
        self._clock = clock
        self._sleep = sleep
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def tick(self) -> datetime:
        now = self._clock()
        self.callback(now)
        self.ticks += 1
        return now

    def run(self, max_ticks: Optional[int] = None) -> None:
        self._running = True
        logger.debug("ticker started (interval=%ss)", self.interval)
        try:
            while self._running:
                self.tick()
                if max_ticks is not None and self.ticks >= max_ticks:
                    break
                if not self._running:
                    break
                self._sleep(self.interval)
        finally:
            self._running = False
            logger.debug("ticker stopped after %d tick(s)", self.ticks)

    def stop(self) -> None:
        self._running = False
