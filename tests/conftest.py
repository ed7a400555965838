"""Pytest configuration and fixtures."""

import pytest

from app import create_app
from models import db as _db


class FakeSource:
    """Stands in for ClockifySource and records every call."""

    def __init__(self, entries=None, total=0, error=None):
        self.entries = entries or []
        self.total = total
        self.error = error
        self.calls = []

    def fetch_time_entries(self, start, end):
        self.calls.append(("fetch_time_entries", start, end))
        if self.error:
            raise self.error
        return list(self.entries)

    def get_total(self, start, end):
        self.calls.append(("get_total", start, end))
        if self.error:
            raise self.error
        return self.total


def make_entry(start: str, cents, billable=True):
    """Build a detailed-report time entry starting at an ISO timestamp."""
    return {
        "billable": billable,
        "earnedAmount": cents,
        "timeInterval": {"start": start},
    }


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
    })
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def fake_source(monkeypatch):
    """Route every report through a FakeSource instead of Clockify."""
    source = FakeSource()
    monkeypatch.setattr("services.earnings.ClockifySource", lambda: source)
    return source
