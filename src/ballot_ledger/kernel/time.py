"""
Time provider abstraction for deterministic testing

Event timestamps come from an injectable provider so that tests can pin
the clock and replay produces identical events.
"""

from datetime import datetime, timedelta, timezone
from typing import Protocol


class TimeProvider(Protocol):
    """Protocol for time providers - allows deterministic testing"""

    def now(self) -> datetime:
        """Return current UTC datetime"""
        ...


class RealTimeProvider:
    """Production time provider using system clock"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class TestTimeProvider:
    """
    Controllable time provider for deterministic tests

    Time stands still until the test advances it.
    """

    __test__ = False

    def __init__(self, initial_time: datetime | None = None) -> None:
        self._current_time = initial_time or datetime(1970, 1, 1, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._current_time

    def set_time(self, dt: datetime) -> None:
        self._current_time = dt

    def advance_seconds(self, seconds: int) -> None:
        self._current_time += timedelta(seconds=seconds)
