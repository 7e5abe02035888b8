from datetime import date, datetime, timedelta
from typing import Optional, Sequence, Tuple

from models.review import ReviewOutcome

DEFAULT_INTERVALS: Tuple[int, ...] = (1, 3, 7, 14, 30)
MIN_MASTERY = 0
MAX_MASTERY = 5


def clamp_mastery(level: int) -> int:
    """Clamp a mastery level into [0, 5]."""
    return max(MIN_MASTERY, min(int(level), MAX_MASTERY))


def interval_for_level(level: int, intervals: Sequence[int] = DEFAULT_INTERVALS) -> int:
    """Interval in days for a mastery level; levels past the table use its last entry."""
    if level < len(intervals):
        return intervals[level]
    return intervals[-1]


def next_state(
    current_mastery_level: int,
    outcome: ReviewOutcome,
    intervals: Sequence[int] = DEFAULT_INTERVALS,
) -> Tuple[int, int]:
    """Compute (new mastery level, interval days) for a review outcome.

    Success moves one rung up the ladder and failure one rung down, both
    clamped to [0, 5].
    """
    current = clamp_mastery(current_mastery_level)
    if ReviewOutcome(outcome) is ReviewOutcome.SUCCESS:
        new_level = min(current + 1, MAX_MASTERY)
    else:
        new_level = max(current - 1, MIN_MASTERY)
    return new_level, interval_for_level(new_level, intervals)


def due_date_after(reviewed_at: datetime, interval_days: int) -> date:
    """Day-granularity due date: review day plus the interval."""
    return reviewed_at.date() + timedelta(days=interval_days)


class ReviewScheduler:
    """Leitner-style ladder with a configurable interval table."""

    def __init__(self, intervals: Optional[Sequence[int]] = None):
        self.intervals = tuple(intervals or DEFAULT_INTERVALS)

    def next_state(self, current_mastery_level: int, outcome: ReviewOutcome) -> Tuple[int, int]:
        return next_state(current_mastery_level, outcome, self.intervals)
