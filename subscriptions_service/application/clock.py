"""
Clock collaborators - resolve the "current month" (as-of month).

Use cases receive a clock explicitly; tests pass FixedClock.
"""
from datetime import datetime
from typing import Protocol
from zoneinfo import ZoneInfo

from subscriptions_service.domain.month import Month


class Clock(Protocol):
    def current_month(self) -> Month:
        ...


class SystemClock:
    """Current month in the configured timezone"""

    def __init__(self, timezone: str = "UTC"):
        self.tz = ZoneInfo(timezone)

    def current_month(self) -> Month:
        return Month.from_date(datetime.now(self.tz))


class FixedClock:
    def __init__(self, month: Month):
        self.month = month

    def current_month(self) -> Month:
        return self.month
