"""Tests for parsers/clockify.py."""

from datetime import date, timedelta, timezone

from parsers.clockify import calculate_total_earnings, earnings_by_day, earnings_by_month
from tests.conftest import make_entry


class TestCalculateTotalEarnings:

    def test_sums_billable_cents_as_dollars(self):
        report = {"timeentries": [
            make_entry("2025-06-02T09:00:00Z", 12000),
            make_entry("2025-06-02T13:00:00Z", 4050),
        ]}
        assert calculate_total_earnings(report) == 160

    def test_floors_partial_dollars(self):
        report = {"timeentries": [make_entry("2025-06-02T09:00:00Z", 199)]}
        assert calculate_total_earnings(report) == 1

    def test_skips_non_billable_and_missing_amounts(self):
        report = {"timeentries": [
            make_entry("2025-06-02T09:00:00Z", 5000, billable=False),
            make_entry("2025-06-02T10:00:00Z", None),
            {"billable": True, "timeInterval": {"start": "2025-06-02T11:00:00Z"}},
            make_entry("2025-06-02T12:00:00Z", 2500),
        ]}
        assert calculate_total_earnings(report) == 25

    def test_missing_timeentries(self):
        assert calculate_total_earnings({"totals": []}) == 0
        assert calculate_total_earnings(None) == 0
        assert calculate_total_earnings({"timeentries": None}) == 0


class TestEarningsByDay:

    def test_buckets_by_start_day(self):
        entries = [
            make_entry("2025-06-02T09:00:00Z", 10000),
            make_entry("2025-06-02T15:00:00Z", 5000),
            make_entry("2025-06-04T09:00:00Z", 8000),
        ]
        assert earnings_by_day(entries, timezone.utc) == {
            date(2025, 6, 2): 150,
            date(2025, 6, 4): 80,
        }

    def test_uses_given_timezone(self):
        pacific = timezone(timedelta(hours=-7))
        entries = [make_entry("2025-06-03T02:00:00Z", 10000)]
        assert earnings_by_day(entries, pacific) == {date(2025, 6, 2): 100}

    def test_offset_timestamps(self):
        entries = [make_entry("2025-06-02T23:30:00+02:00", 10000)]
        assert earnings_by_day(entries, timezone.utc) == {date(2025, 6, 2): 100}

    def test_floors_each_day_separately(self):
        entries = [
            make_entry("2025-06-02T09:00:00Z", 150),
            make_entry("2025-06-03T09:00:00Z", 150),
        ]
        assert earnings_by_day(entries, timezone.utc) == {date(2025, 6, 2): 1, date(2025, 6, 3): 1}

    def test_skips_entries_without_start(self):
        entries = [
            {"billable": True, "earnedAmount": 10000},
            {"billable": True, "earnedAmount": 10000, "timeInterval": {"start": "yesterday"}},
            make_entry("2025-06-02T09:00:00Z", 10000, billable=False),
        ]
        assert earnings_by_day(entries, timezone.utc) == {}


class TestEarningsByMonth:

    def test_buckets_by_month(self):
        entries = [
            make_entry("2025-01-31T22:00:00Z", 10000),
            make_entry("2025-02-01T01:00:00Z", 20050),
            make_entry("2025-02-14T09:00:00Z", 30050),
        ]
        assert earnings_by_month(entries, timezone.utc) == {
            (2025, 1): 100,
            (2025, 2): 501,
        }
