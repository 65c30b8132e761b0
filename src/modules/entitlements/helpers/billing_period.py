"""
Calendar-month billing periods used to aggregate usage.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, time, timezone
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive timestamps coming from the database as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class BillingPeriod:
    start: datetime
    end: datetime

    @classmethod
    def for_month_of(cls, moment: Optional[datetime] = None) -> "BillingPeriod":
        """
        Period covering the whole calendar month of ``moment`` (UTC).

        ``end`` is the last representable instant of the month, so a usage row
        written for this period never overlaps the next one.
        """
        moment = ensure_aware(moment) or utcnow()
        moment = moment.astimezone(timezone.utc)
        last_day = calendar.monthrange(moment.year, moment.month)[1]
        start = datetime(moment.year, moment.month, 1, tzinfo=timezone.utc)
        end = datetime.combine(
            moment.date().replace(day=last_day), time.max, tzinfo=timezone.utc
        )
        return cls(start=start, end=end)

