"""Clock adapters."""

from datetime import UTC, datetime, timedelta

from onboardkit.domain.interfaces import ClockInterface


class SystemClock(ClockInterface):
    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock(ClockInterface):
    """Clock frozen at a given instant; advance() moves it forward."""

    def __init__(self, instant: datetime) -> None:
        self._instant = instant

    def now(self) -> datetime:
        return self._instant

    def advance(self, seconds: float) -> None:
        self._instant = self._instant + timedelta(seconds=seconds)
