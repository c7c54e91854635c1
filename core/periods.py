"""
Calendar Periods and Bucket Keys

Maps calendar days to (year, subperiod) bucket keys and back to a fixed
display date per bucket, for each chart granularity.

Display anchors:
- week: Jan 1 + week * 7 + 3 days (mid-week)
- month: the 15th
- quarter: the 15th of the quarter's second month
- year: July 1

Anchoring to fixed dates means repeated aggregations at the same
granularity always land on the same calendar day, whichever days of
the bucket happened to be inside the selected window.

Week buckets count whole 7-day blocks since Jan 1 of the point's year.
This is NOT ISO week numbering: the last block of a year is short (1 or
2 days) and its anchor falls in the first days of the following year.
Downstream display dates depend on this, so keep it.
"""

import math
from datetime import date, timedelta
from enum import Enum
from typing import Tuple

BucketKey = Tuple[int, int]


class Granularity(str, Enum):
    """Chart time granularities."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


def week_index(day: date) -> int:
    """Whole 7-day blocks between Jan 1 of the day's year and the day."""
    return (day - date(day.year, 1, 1)).days // 7


def quarter_of(day: date) -> int:
    return math.ceil(day.month / 3)


def bucket_key(day: date, granularity: Granularity) -> BucketKey:
    """
    Get the bucket key of a day for a granularity.

    Args:
        day: Calendar day
        granularity: Any granularity coarser than DAY

    Returns:
        (year, subperiod) tuple; subperiod is 0 for YEAR

    Raises:
        ValueError: For DAY, which has no buckets
    """
    granularity = Granularity(granularity)

    if granularity == Granularity.WEEK:
        return (day.year, week_index(day))
    elif granularity == Granularity.MONTH:
        return (day.year, day.month)
    elif granularity == Granularity.QUARTER:
        return (day.year, quarter_of(day))
    elif granularity == Granularity.YEAR:
        return (day.year, 0)

    raise ValueError(f"Granularity {granularity.value!r} has no buckets")


def anchor_date(key: BucketKey, granularity: Granularity) -> date:
    """
    Get the representative display date of a bucket.

    Args:
        key: Bucket key as returned by bucket_key()
        granularity: Granularity the key was computed for

    Returns:
        Display date for the bucket
    """
    granularity = Granularity(granularity)
    year, period = key

    if granularity == Granularity.WEEK:
        return date(year, 1, 1) + timedelta(days=period * 7 + 3)
    elif granularity == Granularity.MONTH:
        return date(year, period, 15)
    elif granularity == Granularity.QUARTER:
        first_month = (period - 1) * 3 + 1
        return date(year, first_month + 1, 15)
    elif granularity == Granularity.YEAR:
        return date(year, 7, 1)

    raise ValueError(f"Granularity {granularity.value!r} has no buckets")


def subtract_months(day: date, months: int) -> date:
    """Step back whole months, clamping the day to the target month length."""
    month_index = day.year * 12 + (day.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    if month == 12:
        next_month = date(year + 1, 1, 1)
    else:
        next_month = date(year, month + 1, 1)
    last_day = (next_month - timedelta(days=1)).day
    return date(year, month, min(day.day, last_day))


def subtract_years(day: date, years: int) -> date:
    return subtract_months(day, years * 12)
