"""Season calendar helpers.

League weeks start on Monday and run seven days. Week N starts
start_date + (N-1)*7 days; all calculations are done on UTC dates so every
member of a league shares the same boundaries.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    return value


def next_monday(from_date: Optional[date | datetime] = None) -> date:
    """Get the next Monday after a date. A Monday maps to the following Monday, never itself."""
    today = _as_date(from_date) if from_date is not None else _utc_today()
    days_ahead = 7 - today.weekday()  # Monday is weekday 0
    return today + timedelta(days=days_ahead)


def start_of_week_monday(value: Optional[date | datetime] = None) -> date:
    """Get the Monday on or before a date."""
    day = _as_date(value) if value is not None else _utc_today()
    return day - timedelta(days=day.weekday())


def get_week_number(start_date: date | datetime, current: Optional[date | datetime] = None) -> int:
    """
    Get the season week a date falls in.

    Days 0-6 after start_date are week 1, days 7-13 week 2, and so on.
    Dates before the start are week 0.
    """
    start = _as_date(start_date)
    today = _as_date(current) if current is not None else _utc_today()
    diff_days = (today - start).days
    if diff_days < 0:
        return 0
    return diff_days // 7 + 1


def week_date_range(start_date: date | datetime, week_number: int) -> tuple[date, date]:
    """Get the first and last day (inclusive) of a season week."""
    week_start = _as_date(start_date) + timedelta(days=(week_number - 1) * 7)
    return week_start, week_start + timedelta(days=6)


def days_remaining_in_week(
    start_date: Optional[date | datetime],
    week_number: int,
    now: Optional[datetime] = None,
) -> int:
    """
    Get whole days left in a season week.

    The week's last day reports 0. Leagues without a start date report a full week.
    """
    if start_date is None:
        return 7
    start = _as_date(start_date)
    week_end = datetime.combine(
        start + timedelta(days=week_number * 7), datetime.min.time(), tzinfo=timezone.utc
    )
    current = now if now is not None else datetime.now(timezone.utc)
    if current.tzinfo is None:
        current = current.replace(tzinfo=timezone.utc)
    return max(0, (week_end - current) // timedelta(days=1))


def is_results_day(value: Optional[date | datetime] = None) -> bool:
    """Sunday is results day: final scores are reviewed and next opponents previewed."""
    day = _as_date(value) if value is not None else _utc_today()
    return day.weekday() == 6


def format_countdown(days_remaining: int) -> str:
    if days_remaining == 0:
        return 'Week ends today!'
    if days_remaining == 1:
        return '1 day remaining'
    return f'{days_remaining} days remaining'
