"""
Static earnings config: benefit-eligibility income ceilings and work-rate
assumptions used to put raw earnings in context.
"""

# ── Annual income ceilings ───────────────────────────────────────────────

MAX_INCOME_CALGRANT = 49800
MAX_INCOME_SNAP = 12 * 2100

THRESHOLDS = {
    "calgrant": MAX_INCOME_CALGRANT,
    "snap": MAX_INCOME_SNAP,
}


# ── Work assumptions ─────────────────────────────────────────────────────

WORKDAYS_IN_YEAR = 4 * 52
AVERAGE_HOURLY_RATE = 40
WEEKS_IN_YEAR = 52
WORKDAYS_IN_WEEK = 5
MONTHS_IN_YEAR = 12

# How far back to look for the most recent day with earnings
LAST_EARNING_LOOKBACK_DAYS = 365

DAY_LABELS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
