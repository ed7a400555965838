"""
Fund allocator.

Given a pool of earned money and a catalog of goals, fund the goals in
priority order (critical > high > medium > low). Overflow from a fully
funded goal carries on to the next one in line.
"""

import math
from dataclasses import dataclass, asdict
from datetime import date


# Lower rank means funded first
PRIORITY_ORDER = {
    "critical": 1,
    "high": 2,
    "medium": 3,
    "low": 4,
}


class InvalidPriorityError(ValueError):
    """A goal's priority is not one of the recognized tiers."""

    def __init__(self, priority, name: str = ""):
        self.priority = priority
        self.name = name
        super().__init__(
            f"Invalid priority {priority!r} for goal {name!r}. "
            f"Must be one of: {', '.join(PRIORITY_ORDER)}"
        )


@dataclass(frozen=True)
class FundingTarget:
    name: str
    cost: float
    priority: str
    details: str = ""
    start_date: date | None = None


@dataclass(frozen=True)
class AllocationResult:
    target: FundingTarget
    completion_percent: float

    def to_dict(self):
        data = asdict(self.target)
        # Same key the goal catalog uses
        data["amount"] = data.pop("cost")
        if self.target.start_date:
            data["start_date"] = self.target.start_date.isoformat()
        data["progress"] = self.completion_percent
        return data


def sort_by_priority(targets: list[FundingTarget]) -> list[FundingTarget]:
    """
    Return a new list of targets ordered by priority tier.

    The sort is stable: targets in the same tier keep their catalog order.

    Raises:
        InvalidPriorityError: if any target has an unknown tier
    """
    for t in targets:
        if t.priority not in PRIORITY_ORDER:
            raise InvalidPriorityError(t.priority, t.name)
    return sorted(targets, key=lambda t: PRIORITY_ORDER[t.priority])


def allocate(sorted_targets: list[FundingTarget], pool: float) -> list[AllocationResult]:
    """
    Distribute the pool across already-sorted targets in a single pass.

    Args:
        sorted_targets: targets in funding order (not re-sorted here)
        pool: total money available; negative is treated as zero

    Returns:
        One AllocationResult per target, in input order.
    """
    if not math.isfinite(pool):
        raise ValueError(f"Pool must be a finite number (got {pool})")

    remaining = max(0.0, pool)
    results = []

    for target in sorted_targets:
        if target.cost <= 0:
            # Nothing to fund, including malformed negative costs
            percent = 100.0
        elif remaining <= 0:
            percent = 0.0
        else:
            allocated = min(remaining, target.cost)
            percent = allocated / target.cost * 100
            remaining -= allocated

        percent = min(100.0, max(0.0, round(percent, 2)))
        results.append(AllocationResult(target=target, completion_percent=percent))

    return results


def compute_progress(raw_targets: list[FundingTarget], pool: float) -> list[AllocationResult]:
    """Sort targets by priority, then fund them from the pool."""
    return allocate(sort_by_priority(raw_targets), pool)
