"""
Earnings reports.

Turns the raw earnings source into the day / week / month / year reports the
dashboard shows, and puts them next to the benefit-eligibility ceilings in
services/earnings_config.py.

Every report takes an optional `source` (anything with get_total() and
fetch_time_entries(), defaults to ClockifySource) and reference date.
"""

import calendar
import logging
from datetime import date, datetime, time, timedelta

from parsers.clockify import earnings_by_day, earnings_by_month
from services.clockify import ClockifySource, SourceUnavailableError
from services.earnings_config import (
    AVERAGE_HOURLY_RATE,
    DAY_LABELS,
    LAST_EARNING_LOOKBACK_DAYS,
    MAX_INCOME_CALGRANT,
    MONTH_LABELS,
    MONTHS_IN_YEAR,
    THRESHOLDS,
    WEEKS_IN_YEAR,
    WORKDAYS_IN_WEEK,
    WORKDAYS_IN_YEAR,
)

logger = logging.getLogger(__name__)

_END_OF_DAY = time(23, 59, 59, 999000)


# ── Date windows ─────────────────────────────────────────────────────────

def _split(moment: date):
    """Return (calendar day, tzinfo) for a date or datetime."""
    if isinstance(moment, datetime):
        return moment.date(), moment.tzinfo
    return moment, None


def _window(first: date, last: date, tz) -> tuple[datetime, datetime]:
    return (
        datetime.combine(first, time.min, tzinfo=tz),
        datetime.combine(last, _END_OF_DAY, tzinfo=tz),
    )


def day_range(moment: date) -> tuple[datetime, datetime]:
    """Midnight to 23:59:59.999 of the given day."""
    day, tz = _split(moment)
    return _window(day, day, tz)


def week_range(moment: date) -> tuple[datetime, datetime]:
    """Monday 00:00 to Sunday 23:59:59.999 of the week containing the day."""
    day, tz = _split(moment)
    monday = day - timedelta(days=day.weekday())
    return _window(monday, monday + timedelta(days=6), tz)


def month_range(moment: date) -> tuple[datetime, datetime]:
    day, tz = _split(moment)
    last = calendar.monthrange(day.year, day.month)[1]
    return _window(day.replace(day=1), day.replace(day=last), tz)


def year_range(moment: date) -> tuple[datetime, datetime]:
    day, tz = _split(moment)
    return _window(date(day.year, 1, 1), date(day.year, 12, 31), tz)


# ── Period reports ───────────────────────────────────────────────────────

def _source(source):
    return source if source is not None else ClockifySource()


def get_day(moment: date, source=None) -> dict:
    return {"total_earnings": _source(source).get_total(*day_range(moment))}


def get_week(moment: date, source=None) -> dict:
    return {"total_earnings": _source(source).get_total(*week_range(moment))}


def get_month(moment: date, source=None) -> dict:
    return {"total_earnings": _source(source).get_total(*month_range(moment))}


def get_year(moment: date, source=None) -> dict:
    """
    Earnings for the calendar year, measured against the Cal Grant ceiling.

    Returns:
        {
            "total_earnings": 24900,
            "max_earnable_to_date": 49800,
            "percent_of_max": 50.0,
            "difference": 24900,
            "workdays_left": 0,
            "avg_hours_per_workday": 2
        }
    """
    earnings = _source(source).get_total(*year_range(moment))

    return {
        "total_earnings": earnings,
        "max_earnable_to_date": MAX_INCOME_CALGRANT,
        "percent_of_max": round(earnings / MAX_INCOME_CALGRANT * 100, 2),
        "difference": MAX_INCOME_CALGRANT - earnings,
        "workdays_left": 0,
        "avg_hours_per_workday": int(earnings / AVERAGE_HOURLY_RATE // WORKDAYS_IN_YEAR),
    }


def _current(report, label: str, source=None, now: datetime | None = None) -> dict:
    now = now or datetime.now()
    try:
        return report(now, source=source)
    except SourceUnavailableError as e:
        logger.error("Error fetching current %s report: %s", label, e)
        return {"error": str(e), "total_earnings": None}


def get_current_day(source=None, now=None) -> dict:
    return _current(get_day, "day", source, now)


def get_current_week(source=None, now=None) -> dict:
    return _current(get_week, "week", source, now)


def get_current_month(source=None, now=None) -> dict:
    return _current(get_month, "month", source, now)


def get_current_year(source=None, now=None) -> dict:
    return _current(get_year, "year", source, now)


# ── Breakdowns (one ranged query each) ──────────────────────────────────

def daily_reports_for_week(moment: date, source=None) -> list[dict]:
    """Per-day earnings, Monday through Sunday, for the week containing the day."""
    start, end = week_range(moment)
    entries = _source(source).fetch_time_entries(start, end)
    by_day = earnings_by_day(entries, start.tzinfo)

    reports = []
    for i, label in enumerate(DAY_LABELS):
        day = start.date() + timedelta(days=i)
        reports.append({
            "date": day.isoformat(),
            "label": label,
            "total_earnings": by_day.get(day, 0),
        })
    return reports


def monthly_reports_for_year(moment: date, source=None) -> list[dict]:
    """Per-month earnings, January through December, for the year containing the day."""
    start, end = year_range(moment)
    entries = _source(source).fetch_time_entries(start, end)
    by_month = earnings_by_month(entries, start.tzinfo)

    return [
        {
            "month": i + 1,
            "label": label,
            "total_earnings": by_month.get((start.year, i + 1), 0),
        }
        for i, label in enumerate(MONTH_LABELS)
    ]


def _recent_earnings_by_day(source, now: datetime) -> dict[date, int]:
    start, _ = day_range(now - timedelta(days=LAST_EARNING_LOOKBACK_DAYS))
    _, end = day_range(now)
    entries = _source(source).fetch_time_entries(start, end)
    return earnings_by_day(entries, now.tzinfo)


def _days_since(by_day: dict[date, int], today: date) -> int | None:
    for offset in range(LAST_EARNING_LOOKBACK_DAYS + 1):
        if by_day.get(today - timedelta(days=offset), 0) > 0:
            return offset
    return None


def days_since_last_earning(source=None, now: datetime | None = None) -> int | None:
    """
    Days since the most recent day with positive earnings.

    0 means today; None means nothing within the lookback window.

    Raises:
        SourceUnavailableError: if the report cannot be fetched
    """
    now = now or datetime.now()
    return _days_since(_recent_earnings_by_day(source, now), now.date())


def get_summary(source=None, now: datetime | None = None) -> dict:
    """Today's earnings and days since last earning, from a single query."""
    now = now or datetime.now()
    by_day = _recent_earnings_by_day(source, now)
    return {
        "earnings_today": by_day.get(now.date(), 0),
        "days_since_last_earning": _days_since(by_day, now.date()),
    }


# ── Ceilings ─────────────────────────────────────────────────────────────

def threshold_series() -> dict:
    """
    Pro-rated benefit ceilings per reporting period.

    Returns:
        {"daily": {"calgrant": 191.54, "snap": 96.92}, "monthly": {...}, "yearly": {...}}
    """
    return {
        "daily": {
            k: round(v / WEEKS_IN_YEAR / WORKDAYS_IN_WEEK, 2) for k, v in THRESHOLDS.items()
        },
        "monthly": {k: round(v / MONTHS_IN_YEAR, 2) for k, v in THRESHOLDS.items()},
        "yearly": dict(THRESHOLDS),
    }


# ── Cumulative pool ──────────────────────────────────────────────────────

def get_total_earned_since(start: datetime, source=None, now: datetime | None = None) -> int:
    """
    Total earned from start until now. Failures resolve to 0 so the
    allocator always receives a concrete pool.
    """
    now = now or datetime.now()

    if start > now:
        logger.warning("Earnings start date %s is in the future. Assuming 0 earnings.", start.isoformat())
        return 0

    try:
        return _source(source).get_total(start, now)
    except SourceUnavailableError as e:
        logger.error("Failed to fetch Clockify earnings since %s: %s", start.date().isoformat(), e)
        return 0
