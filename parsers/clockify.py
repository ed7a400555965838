"""
Parse Clockify detailed-report responses.

Typical response body:
{"totals": [...], "timeentries": [
    {"billable": true, "earnedAmount": 12000,
     "timeInterval": {"start": "2025-06-02T09:00:00Z", "end": "...", "duration": 10800}},
    ...
]}

earnedAmount is reported in cents, so totals are converted to whole dollars.
"""

import logging
from datetime import date, datetime, timezone, tzinfo

logger = logging.getLogger(__name__)


def calculate_total_earnings(report) -> int:
    """Sum billable earnings in a report and return whole dollars."""
    if not isinstance(report, dict) or "timeentries" not in report:
        return 0
    return _to_dollars(_billable_cents(e) for e in report["timeentries"] or [])


def earnings_by_day(entries: list[dict], tz: tzinfo | None = None) -> dict[date, int]:
    """
    Bucket billable earnings by the local date each entry started on.

    Args:
        entries: time entries from the detailed report
        tz: timezone used to pick the calendar day (defaults to local time)

    Returns:
        dict mapping date -> whole dollars earned that day
    """
    return _bucket_earnings(entries, lambda day: day, tz)


def earnings_by_month(entries: list[dict], tz: tzinfo | None = None) -> dict[tuple[int, int], int]:
    """Bucket billable earnings by (year, month), in whole dollars per month."""
    return _bucket_earnings(entries, lambda day: (day.year, day.month), tz)


def _bucket_earnings(entries, key, tz) -> dict:
    cents_by_bucket = {}
    for entry in entries:
        cents = _billable_cents(entry)
        if not cents:
            continue

        started = _parse_start(entry)
        if started is None:
            logger.warning("Skipping time entry %s with no usable start time", entry.get("_id") or entry.get("id"))
            continue

        bucket = key(started.astimezone(tz).date())
        cents_by_bucket.setdefault(bucket, []).append(cents)

    # Each bucket is floored on its own total, like a separate report would be
    return {bucket: _to_dollars(cents) for bucket, cents in cents_by_bucket.items()}


def _billable_cents(entry: dict) -> float:
    if not entry.get("billable"):
        return 0
    amount = entry.get("earnedAmount")
    return amount if amount is not None else 0


def _to_dollars(cents) -> int:
    # Floor, never round up a partial dollar
    return int(sum(cents) // 100)


def _parse_start(entry: dict) -> datetime | None:
    start = (entry.get("timeInterval") or {}).get("start")
    if not start:
        return None
    try:
        parsed = datetime.fromisoformat(start.replace("Z", "+00:00"))
    except (TypeError, ValueError):
        return None
    # Clockify reports UTC; treat a bare timestamp as UTC too
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
