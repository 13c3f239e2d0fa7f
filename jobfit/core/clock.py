"""
Wall-clock access for day-boundary bookkeeping.

Routes receive the clock through ``Depends(get_clock)`` so tests can pin "now".
"""
import calendar
from datetime import date, datetime, time
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from jobfit.core.config import APP_TIMEZONE

Clock = Callable[[], datetime]


def now() -> datetime:
    """Current naive local datetime (``APP_TIMEZONE`` when configured)."""
    if APP_TIMEZONE:
        return datetime.now(ZoneInfo(APP_TIMEZONE)).replace(tzinfo=None)
    return datetime.now()


def get_clock() -> Clock:
    """FastAPI dependency returning the clock callable."""
    return now


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def to_date(value) -> Optional[date]:
    """Normalize a stored date/datetime to a calendar day."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    return value


def months_before(moment: datetime, months: int) -> datetime:
    """Same wall-clock time ``months`` calendar months earlier (day clamped)."""
    month_index = moment.month - 1 - months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)
