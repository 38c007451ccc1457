"""
Period Resolution and Bucket Generation

Maps period tokens to concrete UTC ranges and to the ordered bucket grids used
by revenue charts.

Grid policy per period:
- day:   24 hourly buckets over the whole calendar day, future hours included
- week:  7 daily buckets Monday through Sunday, future days included
- month: daily buckets from the 1st through today only
- year:  monthly buckets from January through the current month only
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Dict, List, Optional

import structlog

from .models import Bucket, ensure_utc

logger = structlog.get_logger(__name__)

WEEKDAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


class Period(str, Enum):
    """Reporting period token"""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class TimeRange:
    """
    Closed instant range [start, end]; a missing bound is unbounded.

    ``TimeRange()`` is the all-time range.
    """
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def __post_init__(self):
        if self.start is not None:
            object.__setattr__(self, "start", ensure_utc(self.start))
        if self.end is not None:
            object.__setattr__(self, "end", ensure_utc(self.end))

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, instant: datetime) -> bool:
        if self.start is not None and instant < self.start:
            return False
        if self.end is not None and instant > self.end:
            return False
        return True


def parse_period(token: Optional[str], default: Optional[Period] = Period.WEEK) -> Optional[Period]:
    """
    Convert a raw period token into a Period.

    Blank tokens return ``default`` silently; unknown tokens log a warning
    and return ``default``.
    """
    if token is None or not token.strip():
        return default
    try:
        return Period(token.strip().lower())
    except ValueError:
        logger.warning(
            "Unrecognized period token, using fallback",
            period=token,
            fallback=default.value if default else "all-time",
        )
        return default


# =============================================================================
# CALENDAR HELPERS
# =============================================================================

def start_of_day(now: datetime) -> datetime:
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def start_of_week(now: datetime) -> datetime:
    """Monday 00:00 of the ISO week containing ``now``"""
    return start_of_day(now) - timedelta(days=now.weekday())


def start_of_month(now: datetime) -> datetime:
    return start_of_day(now).replace(day=1)


def start_of_year(now: datetime) -> datetime:
    return start_of_day(now).replace(month=1, day=1)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift a first-of-month instant by a number of months"""
    index = moment.month - 1 + months
    return moment.replace(year=moment.year + index // 12, month=index % 12 + 1)


# =============================================================================
# PERIOD RESOLVER
# =============================================================================

_PERIOD_STARTS: Dict[Period, Callable[[datetime], datetime]] = {
    Period.DAY: start_of_day,
    Period.WEEK: start_of_week,
    Period.MONTH: start_of_month,
    Period.YEAR: start_of_year,
}


def resolve_period(period: Optional[Period], now: datetime) -> TimeRange:
    """
    Resolve a period into the range from its calendar start up to ``now``.

    Args:
        period: Period to resolve; None means all time
        now: Anchor instant

    Returns:
        TimeRange: [period start, now], or an unbounded range for None
    """
    if period is None:
        return TimeRange()
    now = ensure_utc(now)
    return TimeRange(_PERIOD_STARTS[period](now), now)


# =============================================================================
# BUCKET GENERATOR
# =============================================================================

def _hourly_buckets(now: datetime) -> List[Bucket]:
    midnight = start_of_day(now)
    return [
        Bucket(
            start=midnight + timedelta(hours=hour),
            end=midnight + timedelta(hours=hour + 1),
            label=f"{hour:02d}:00",
        )
        for hour in range(24)
    ]


def _weekday_buckets(now: datetime) -> List[Bucket]:
    monday = start_of_week(now)
    return [
        Bucket(
            start=monday + timedelta(days=offset),
            end=monday + timedelta(days=offset + 1),
            label=label,
        )
        for offset, label in enumerate(WEEKDAY_LABELS)
    ]


def _month_day_buckets(now: datetime) -> List[Bucket]:
    first = start_of_month(now)
    return [
        Bucket(
            start=first + timedelta(days=day - 1),
            end=first + timedelta(days=day),
            label=str(day),
        )
        for day in range(1, now.day + 1)
    ]


def _year_month_buckets(now: datetime) -> List[Bucket]:
    january = start_of_year(now)
    buckets = []
    for index in range(now.month):
        start = add_months(january, index)
        buckets.append(Bucket(start=start, end=add_months(start, 1), label=MONTH_LABELS[index]))
    return buckets


_BUCKET_GRIDS: Dict[Period, Callable[[datetime], List[Bucket]]] = {
    Period.DAY: _hourly_buckets,
    Period.WEEK: _weekday_buckets,
    Period.MONTH: _month_day_buckets,
    Period.YEAR: _year_month_buckets,
}


def generate_buckets(period: Period, now: datetime) -> List[Bucket]:
    """
    Produce the ordered, zero-valued bucket grid for a period.

    Args:
        period: Chart period
        now: Anchor instant

    Returns:
        List of empty buckets in chronological order
    """
    return _BUCKET_GRIDS[period](ensure_utc(now))
