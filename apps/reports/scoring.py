"""
Contact-interval scoring.

Pure functions shared by every report. A person on leave is judged by the
gaps between contacts while away; each gap longer than the grace period
costs points, and a department starts from 100.

Penalty per interval of d days:
- d <= 7: 0
- 7 < d <= 10: 1 point per day past 7
- d > 10: 3 points plus 3 per day past 10, counting at most 2 of those days
"""

import logging
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from itertools import pairwise
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

GRACE_DAYS = 7
URGENT_DAYS = 10
SUGGEST_PENALTY_PER_DAY = 1
URGENT_PENALTY_PER_DAY = 3
MAX_URGENT_PENALTY_DAYS = 2
MAX_SCORE = 100
MIN_SCORE = 0


def round_half_up(value, ndigits=0):
    """Round .5 away from zero instead of to even."""
    exponent = Decimal(1).scaleb(-ndigits)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    return int(rounded) if ndigits == 0 else float(rounded)


def interval_penalty(days: int) -> int:
    """Points deducted for a single contact interval of `days` days."""
    if days <= GRACE_DAYS:
        return 0
    if days <= URGENT_DAYS:
        return (days - GRACE_DAYS) * SUGGEST_PENALTY_PER_DAY
    suggest_part = (URGENT_DAYS - GRACE_DAYS) * SUGGEST_PENALTY_PER_DAY
    urgent_days = min(days - URGENT_DAYS, MAX_URGENT_PENALTY_DAYS)
    return suggest_part + urgent_days * URGENT_PENALTY_PER_DAY


def build_intervals(
    leave_start: date,
    leave_end: date,
    contact_dates: Iterable[date],
    as_of: date,
    person_created: Optional[date] = None,
) -> List[int]:
    """
    Day gaps a person went without contact during a leave, up to `as_of`.

    - first: from max(leave_start, person_created) to the first contact on or
      after leave_start, or to `as_of` if there is none
    - middle: between consecutive contacts
    - last: from the latest contact to `as_of`, only while the leave is
      still running on `as_of`

    The result can contain negative values when the data is inconsistent;
    see `valid_intervals`. A leave not yet started yields nothing.
    """
    if leave_start > as_of:
        return []

    first_start = leave_start
    if person_created is not None and person_created > leave_start:
        first_start = person_created

    contacts = sorted(d for d in contact_dates if leave_start <= d <= as_of)
    if not contacts:
        return [(as_of - first_start).days]

    intervals = [(contacts[0] - first_start).days]
    intervals.extend((later - earlier).days for earlier, later in pairwise(contacts))
    if as_of <= leave_end:
        intervals.append((as_of - contacts[-1]).days)
    return intervals


def valid_intervals(intervals: Iterable[int], person_id=None) -> List[int]:
    """Drop negative intervals, logging each one."""
    kept = []
    for days in intervals:
        if days < 0:
            logger.warning("Skipping negative contact interval (%d days) for person %s", days, person_id)
            continue
        kept.append(days)
    return kept


def total_penalty(intervals: Iterable[int]) -> int:
    return sum(interval_penalty(days) for days in intervals)


def clamp_score(value) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, value))


def department_score(penalty) -> int:
    """100 minus the summed penalties, never below 0."""
    return clamp_score(round_half_up(MAX_SCORE - penalty))


def combine_scores(scores: Iterable[int]) -> int:
    """Equal-weight mean of department scores; no departments scores 100."""
    scores = list(scores)
    if not scores:
        return MAX_SCORE
    return clamp_score(round_half_up(sum(scores) / len(scores)))


def average_interval(intervals: Iterable[int]) -> float:
    """Mean interval rounded to one decimal, 0.0 when there are none."""
    intervals = list(intervals)
    if not intervals:
        return 0.0
    return round_half_up(sum(intervals) / len(intervals), 1)


def previous_period(start: date, end: date):
    """The period of equal length that ends the day before `start`."""
    length = (end - start).days
    previous_end = start - timedelta(days=1)
    return previous_end - timedelta(days=length), previous_end


@dataclass
class TrendResult:
    current: float
    previous: float
    change: float
    direction: str

    UP = 'up'
    DOWN = 'down'
    STABLE = 'stable'

    def as_dict(self):
        return {
            'current': self.current,
            'previous': self.previous,
            'change': self.change,
            'direction': self.direction,
        }


def compare(current, previous) -> TrendResult:
    """
    Compare a metric across two periods.

    `change` is the absolute difference; the direction is stable only when
    that difference is zero.
    """
    delta = current - previous
    if isinstance(delta, float):
        delta = round_half_up(delta, 1)

    if delta > 0:
        direction = TrendResult.UP
    elif delta < 0:
        direction = TrendResult.DOWN
    else:
        direction = TrendResult.STABLE

    return TrendResult(current=current, previous=previous, change=abs(delta), direction=direction)
