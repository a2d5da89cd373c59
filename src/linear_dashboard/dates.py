"""Calendar date helpers.

Linear sends dates as bare ``YYYY-MM-DD`` strings. They are calendar dates,
so they are parsed straight into ``datetime.date`` and never pass through a
timezone conversion that could move them by a day.
"""

import calendar
from datetime import date, datetime


def parse_local_date(value: str | date | None) -> date | None:
    """Parse a ``YYYY-MM-DD`` value to a date object."""
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except (ValueError, TypeError):
        return None


def month_start(d: date) -> date:
    return d.replace(day=1)


def month_end(d: date) -> date:
    return d.replace(day=calendar.monthrange(d.year, d.month)[1])


def add_months(d: date, months: int) -> date:
    """Return the first day of the month ``months`` away from ``d``."""
    index = d.year * 12 + (d.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def months_between(start: date, end: date) -> int:
    """Number of calendar months touched by ``[start, end]``."""
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


def format_short_date(d: date) -> str:
    """Format as ``M/D/YYYY``."""
    return f"{d.month}/{d.day}/{d.year}"


def format_relative_date(value: str | date | None, today: date) -> str:
    """Describe a due date relative to ``today``.

    Returns "Today", "Tomorrow", "in N days" within the coming week,
    "N days ago (OVERDUE)" for past dates and the short date otherwise.
    """
    d = parse_local_date(value)
    if d is None:
        return ""

    diff = (d - today).days
    if diff == 0:
        return "Today"
    if diff == 1:
        return "Tomorrow"
    if 0 < diff < 7:
        return f"in {diff} days"
    if diff < 0:
        return f"{abs(diff)} days ago (OVERDUE)"
    return format_short_date(d)


def format_updated_time(moment: datetime | None) -> str:
    """Format the "last updated" stamp shown in the page header."""
    if moment is None:
        return "Not updated yet"
    return f"Updated: {moment.strftime('%I:%M:%S %p').lstrip('0')}"
