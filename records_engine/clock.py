"""
Time sources for record timestamps.

Notes
-----
RecordStore never reads the wall clock itself. It asks an injected Clock for
``created_at``/``updated_at`` values so tests can pin or step time.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    """A source of aware datetimes."""

    def now(self) -> datetime:
        """
        Return the current time.

        Returns
        -------
        datetime
            A timezone-aware datetime.
        """
        ...


@dataclass(frozen=True, slots=True)
class SystemClock:
    """Clock backed by the system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


@dataclass(frozen=True, slots=True)
class FixedClock:
    """Clock pinned to a single instant. Naive values are treated as UTC."""

    fixed_time: datetime

    def now(self) -> datetime:
        if self.fixed_time.tzinfo is None:
            return self.fixed_time.replace(tzinfo=timezone.utc)
        return self.fixed_time


@dataclass(slots=True)
class SteppingClock:
    """
    Clock that advances by ``step`` after every reading.

    Useful when a test needs consecutive mutations to receive strictly
    increasing timestamps.
    """

    start: datetime
    step: timedelta = timedelta(seconds=1)
    _current: datetime | None = field(default=None, init=False, repr=False)

    def now(self) -> datetime:
        if self._current is None:
            start = self.start
            self._current = start if start.tzinfo else start.replace(tzinfo=timezone.utc)
        value = self._current
        self._current = value + self.step
        return value
