"""Clock abstraction and the schedule-extension cooldown"""

import threading
from datetime import date, datetime, timedelta
from typing import Optional, Protocol
from zoneinfo import ZoneInfo


class Clock(Protocol):
    """Source of the current wall-clock time"""

    def now(self) -> datetime:
        ...

    def today(self) -> date:
        ...


class SystemClock:
    """Real clock; "today" is the local calendar date, truncated to midnight"""

    def __init__(self, timezone: str | None = None):
        self.tz = ZoneInfo(timezone) if timezone else None

    def now(self) -> datetime:
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()


class ScheduleThrottle:
    """
    Cooldown gate for the read-path schedule extension.

    The extension is idempotent, so skipping it inside the cooldown window only
    saves work; a zero cooldown lets every request through.
    """

    def __init__(self, cooldown_seconds: float, clock: Clock):
        self.cooldown = timedelta(seconds=cooldown_seconds)
        self.clock = clock
        self._last_run: Optional[datetime] = None
        self._lock = threading.Lock()

    def ready(self) -> bool:
        with self._lock:
            if self._last_run is None or not self.cooldown:
                return True
            return self.clock.now() - self._last_run >= self.cooldown

    def mark(self) -> None:
        with self._lock:
            self._last_run = self.clock.now()

    def reset(self) -> None:
        """Forget the last run so the next read extends unconditionally"""
        with self._lock:
            self._last_run = None
