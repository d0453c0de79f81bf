"""Points in time and closed/open time intervals.

Times are timezone-aware datetimes. MINIMUM_VALUE and MAXIMUM_VALUE are the
sentinels for "unbounded in the past" and "unbounded in the future".
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone

MINIMUM_VALUE = datetime.min.replace(tzinfo=timezone.utc)
MAXIMUM_VALUE = datetime.max.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class TimeInterval:
    """An interval between two points in time."""

    start: datetime = MINIMUM_VALUE
    stop: datetime = MAXIMUM_VALUE
    is_start_included: bool = True
    is_stop_included: bool = True

    @classmethod
    def infinite(cls) -> TimeInterval:
        return cls(MINIMUM_VALUE, MAXIMUM_VALUE)

    @property
    def is_empty(self) -> bool:
        """True if no point in time lies within the interval."""
        if self.stop < self.start:
            return True
        if self.stop == self.start:
            return not (self.is_start_included and self.is_stop_included)
        return False

    def contains(self, time: datetime) -> bool:
        if self.is_empty:
            return False
        if time < self.start or time > self.stop:
            return False
        if time == self.start and not self.is_start_included:
            return False
        if time == self.stop and not self.is_stop_included:
            return False
        return True
