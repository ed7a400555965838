"""
Static goal config: priority tiers, the earnings start date, and the seed
catalog.

Seed goals live in goals.json (same directory). Each entry has name,
details, amount, priority and start_date.
"""

import json
import os
from datetime import date
from pathlib import Path

from services.allocator import PRIORITY_ORDER

# ── Valid priorities ─────────────────────────────────────────────────────

VALID_PRIORITIES = list(PRIORITY_ORDER)


# ── Earnings epoch ───────────────────────────────────────────────────────

# Earnings before this date do not count toward goals
EARNINGS_START_DATE = date.fromisoformat(
    os.environ.get("EARNINGS_START_DATE", "2025-05-31")
)


# ── Seed catalog (loaded from JSON) ──────────────────────────────────────

_JSON_PATH = Path(__file__).parent / "goals.json"

def load_seed_goals(path: Path = _JSON_PATH) -> list[dict]:
    """Load the seed goal list from JSON, skipping the _meta key."""
    with open(path) as f:
        data = json.load(f)
    data.pop("_meta", None)
    return data["goals"]
