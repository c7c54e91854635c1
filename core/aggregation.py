"""
Time-Granularity Aggregation

Down-samples a daily fault-probability series for charting. Points are
grouped by calendar bucket, averaged, and re-anchored to the bucket's
display date (see core.periods).

Aggregation is pure: it never mutates its input and can be recomputed
on every chart selection change.
"""

from collections import OrderedDict
from typing import Dict, List, Sequence

from .periods import BucketKey, Granularity, anchor_date, bucket_key
from .timeseries import PROBABILITY_DECIMALS, TimeSeriesPoint


def bucket_series(
    series: Sequence[TimeSeriesPoint],
    granularity: Granularity
) -> Dict[BucketKey, List[float]]:
    """
    Group probabilities by bucket key.

    Args:
        series: Daily points
        granularity: Any granularity coarser than DAY

    Returns:
        Ordered mapping of bucket key to the probabilities inside it
    """
    buckets: Dict[BucketKey, List[float]] = OrderedDict()
    for point in series:
        key = bucket_key(point.date, granularity)
        buckets.setdefault(key, []).append(point.probability)
    return buckets


def aggregate(
    series: Sequence[TimeSeriesPoint],
    granularity: Granularity
) -> List[TimeSeriesPoint]:
    """
    Aggregate a daily series to the given granularity.

    DAY returns the points unchanged. Coarser granularities produce one
    point per non-empty bucket holding the mean probability (rounded to
    4 decimals), dated at the bucket's display anchor and sorted by date.

    Args:
        series: Daily points
        granularity: Target granularity

    Returns:
        Aggregated points
    """
    granularity = Granularity(granularity)

    if granularity == Granularity.DAY or not series:
        return list(series)

    result = []
    for key, values in bucket_series(series, granularity).items():
        mean = sum(values) / len(values)
        result.append(TimeSeriesPoint(
            date=anchor_date(key, granularity),
            probability=round(mean, PROBABILITY_DECIMALS),
        ))

    result.sort(key=lambda point: point.date)
    return result
