"""
Goal catalog and progress.

Goals are funded from everything earned since EARNINGS_START_DATE. The
catalog order is kept in Goal.position so same-priority goals are always
funded in the order they were entered.
"""

import logging
import math
from datetime import date, datetime, time

from models import db
from models.goal import Goal
from services.allocator import InvalidPriorityError, compute_progress
from services.earnings import get_total_earned_since
from services.goals_config import EARNINGS_START_DATE, VALID_PRIORITIES, load_seed_goals

logger = logging.getLogger(__name__)


def list_goals() -> list[Goal]:
    return Goal.query.order_by(Goal.position, Goal.id).all()


def goals_to_targets(goals: list[Goal]) -> list:
    """Convert catalog rows (already in catalog order) into funding targets."""
    return [g.to_target() for g in goals]


def replace_goals(goals_data: list[dict]) -> list[Goal]:
    """
    Replace the whole catalog. Every entry is validated before anything is
    written, so a bad entry leaves the existing catalog untouched.

    Raises:
        InvalidPriorityError: if an entry has an unknown priority
        ValueError: if an entry is not an object, is missing a name, or has a
            non-numeric or non-finite amount
    """
    cleaned = [_validate(g) for g in goals_data]

    Goal.query.delete()
    goals = []
    for position, g in enumerate(cleaned):
        goal = Goal(position=position, **g)
        db.session.add(goal)
        goals.append(goal)

    db.session.commit()
    logger.info("Saved %d goals", len(goals))
    return goals


def seed_goals() -> int:
    """Populate an empty catalog from goals.json. Returns the number added."""
    if Goal.query.first() is not None:
        logger.info("Goal catalog already populated, skipping seed")
        return 0
    return len(replace_goals(load_seed_goals()))


def process_goals_with_progress(source=None, now: datetime | None = None) -> dict:
    """
    Fund the catalog from earnings since EARNINGS_START_DATE.

    Returns:
        {
            "total_earned": 5200,
            "goals": [
                {"name": "Emergency Fund", "amount": 4500, "priority": "critical", "progress": 100.0, ...},
                ...
            ]
        }
    """
    now = now or datetime.now()
    targets = goals_to_targets(list_goals())

    start = datetime.combine(EARNINGS_START_DATE, time.min, tzinfo=now.tzinfo)
    total_earned = get_total_earned_since(start, source=source, now=now)

    results = compute_progress(targets, total_earned)
    return {
        "total_earned": total_earned,
        "goals": [r.to_dict() for r in results],
    }


def _validate(data: dict) -> dict:
    if not isinstance(data, dict):
        raise ValueError("Each goal must be an object")

    name = data.get("name")
    name = name.strip() if isinstance(name, str) else ""
    if not name:
        raise ValueError("Each goal needs a name")

    priority = data.get("priority")
    if priority not in VALID_PRIORITIES:
        raise InvalidPriorityError(priority, name)

    amount = data.get("amount")
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        raise ValueError(f"Goal {name!r} needs a numeric amount (got {amount!r})")
    if not math.isfinite(amount):
        raise ValueError(f"Goal {name!r} needs a finite amount (got {amount!r})")

    start_date = data.get("start_date")
    if start_date:
        try:
            start_date = date.fromisoformat(start_date)
        except (TypeError, ValueError):
            raise ValueError(f"Goal {name!r} has an invalid start_date {start_date!r}")

    return {
        "name": name,
        "details": str(data.get("details") or "").strip(),
        "amount": float(amount),
        "priority": priority,
        "start_date": start_date or None,
    }
