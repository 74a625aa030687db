"""Calendar window boundaries (pure functions).

Every function takes "today" as a plain ``date`` so results depend only on the
calendar day; time of day never enters. Ranges are inclusive on both ends.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime, timedelta

import pytz
from dateutil.relativedelta import relativedelta

from jira_kpis.core.models import DateRange, WindowKind


def sunday_weekday(day: date) -> int:
    """Weekday number with Sunday=0 ... Saturday=6."""
    return (day.weekday() + 1) % 7


def weekly(today: date) -> DateRange:
    """Sunday..Saturday of the week before the current one."""
    offset = sunday_weekday(today)
    return DateRange(today - timedelta(days=7 + offset), today - timedelta(days=1 + offset))


def biweekly(today: date) -> DateRange:
    """The two full weeks before the current one; ends on the same Saturday as ``weekly``."""
    offset = sunday_weekday(today)
    return DateRange(today - timedelta(days=14 + offset), today - timedelta(days=1 + offset))


def monthly(today: date) -> DateRange:
    start = today.replace(day=1)
    return DateRange(start, start + relativedelta(months=1, days=-1))


def quarterly(today: date) -> DateRange:
    first_month = 3 * ((today.month - 1) // 3) + 1
    start = date(today.year, first_month, 1)
    return DateRange(start, start + relativedelta(months=3, days=-1))


def yearly(today: date) -> DateRange:
    start = date(today.year, 1, 1)
    return DateRange(start, start + relativedelta(months=12, days=-1))


WINDOW_FUNCTIONS: dict[WindowKind, Callable[[date], DateRange]] = {
    WindowKind.WEEKLY: weekly,
    WindowKind.BIWEEKLY: biweekly,
    WindowKind.MONTHLY: monthly,
    WindowKind.QUARTERLY: quarterly,
    WindowKind.YEARLY: yearly,
}


def window_range(kind: WindowKind, today: date) -> DateRange:
    return WINDOW_FUNCTIONS[kind](today)


def today_in(timezone: str, now: datetime | None = None) -> date:
    """Return the calendar date of ``now`` (default: current time) in ``timezone``.

    Naive ``now`` values are interpreted as UTC.
    """
    tz = pytz.timezone(timezone)
    if now is None:
        return datetime.now(tz=tz).date()
    if now.tzinfo is None:
        now = pytz.UTC.localize(now)
    return now.astimezone(tz).date()
