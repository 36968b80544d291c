"""Time sources and the single captured "now" used by one evaluation."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from typing import Protocol, Union

import pytz

from .models import ValidationError

SECONDS_PER_DAY = 86400.0

class Clock(Protocol):
    """Anything that can tell the current, timezone-aware time."""

    def now(self) -> datetime:
        ...

class SystemClock:
    """Wall clock in a given timezone."""

    def __init__(self, timezone: str = "UTC"):
        try:
            self.tz = pytz.timezone(timezone)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValidationError(f"Invalid timezone: {timezone}")

    def now(self) -> datetime:
        return datetime.now(self.tz)

class FixedClock:
    """Clock frozen at one moment, for tests and replays."""

    def __init__(self, moment: datetime):
        if not moment.tzinfo:
            raise ValidationError("Timestamp must be timezone-aware")
        self.moment = moment

    def now(self) -> datetime:
        return self.moment

def hour_distance(a: int, b: int, circular: bool = False) -> int:
    """Distance between two clock hours."""
    diff = abs(a - b)
    if circular:
        return min(diff, 24 - diff)
    return diff

def _resolve_tz(timezone: Union[str, tzinfo]) -> tzinfo:
    if isinstance(timezone, str):
        try:
            return pytz.timezone(timezone)
        except pytz.exceptions.UnknownTimeZoneError:
            raise ValidationError(f"Invalid timezone: {timezone}")
    return timezone

@dataclass(frozen=True)
class EvaluationTime:
    """The current moment as seen by one prediction.

    Captured exactly once and handed unchanged to the classifier and to
    whichever model it delegates to, so every age, hour and day-type
    comparison in an evaluation refers to the same instant.
    """
    now: datetime
    tz: tzinfo

    def __post_init__(self) -> None:
        if not self.now.tzinfo:
            raise ValidationError("Evaluation time must be timezone-aware")
        object.__setattr__(self, 'now', self.now.astimezone(self.tz))

    @classmethod
    def capture(cls, clock: Clock, timezone: Union[str, tzinfo] = "UTC") -> 'EvaluationTime':
        return cls(now=clock.now(), tz=_resolve_tz(timezone))

    @property
    def hour(self) -> int:
        return self.now.hour

    @property
    def weekday(self) -> int:
        return self.now.weekday()

    @property
    def is_weekend(self) -> bool:
        return self.weekday >= 5

    def localize(self, moment: datetime) -> datetime:
        """Express a timestamp in the evaluation's timezone."""
        if not moment.tzinfo:
            raise ValidationError("Timestamp must be timezone-aware")
        return moment.astimezone(self.tz)

    def age_of(self, moment: datetime) -> timedelta:
        """Elapsed time since ``moment``; timestamps in the future count as zero."""
        if not moment.tzinfo:
            raise ValidationError("Timestamp must be timezone-aware")
        return max(self.now - moment, timedelta(0))

    def minutes_ago(self, moment: datetime) -> int:
        return int(self.age_of(moment).total_seconds() // 60)

    def days_ago(self, moment: datetime) -> float:
        return self.age_of(moment).total_seconds() / SECONDS_PER_DAY

    def hour_of(self, moment: datetime) -> int:
        return self.localize(moment).hour

    def is_weekend_at(self, moment: datetime) -> bool:
        return self.localize(moment).weekday() >= 5
