"""
Tests for Calendar Buckets and Aggregation

Run with: pytest tests/test_aggregation.py -v
"""

from datetime import date, timedelta

import pytest

from core.aggregation import aggregate, bucket_series
from core.periods import (
    Granularity,
    anchor_date,
    bucket_key,
    subtract_months,
    subtract_years,
    week_index,
)
from core.timeseries import TimeSeriesPoint


def daily(start: date, values):
    return [
        TimeSeriesPoint(date=start + timedelta(days=i), probability=v)
        for i, v in enumerate(values)
    ]


class TestBucketKeys:
    """Test (year, subperiod) keys."""

    def test_week_key_counts_from_january_first(self):
        assert bucket_key(date(2024, 1, 1), Granularity.WEEK) == (2024, 0)
        assert bucket_key(date(2024, 1, 7), Granularity.WEEK) == (2024, 0)
        assert bucket_key(date(2024, 1, 8), Granularity.WEEK) == (2024, 1)

    def test_last_week_of_year_is_short(self):
        assert week_index(date(2024, 12, 30)) == 52
        assert week_index(date(2024, 12, 31)) == 52
        assert week_index(date(2023, 12, 31)) == 52

    def test_month_key(self):
        assert bucket_key(date(2023, 11, 30), Granularity.MONTH) == (2023, 11)

    def test_quarter_key(self):
        assert bucket_key(date(2024, 1, 31), Granularity.QUARTER) == (2024, 1)
        assert bucket_key(date(2024, 5, 2), Granularity.QUARTER) == (2024, 2)
        assert bucket_key(date(2024, 9, 30), Granularity.QUARTER) == (2024, 3)
        assert bucket_key(date(2024, 10, 1), Granularity.QUARTER) == (2024, 4)

    def test_year_key(self):
        assert bucket_key(date(2022, 8, 9), Granularity.YEAR) == (2022, 0)

    def test_day_has_no_buckets(self):
        with pytest.raises(ValueError):
            bucket_key(date(2024, 1, 1), Granularity.DAY)

    def test_accepts_string_granularity(self):
        assert bucket_key(date(2024, 3, 3), "month") == (2024, 3)


class TestAnchorDates:
    """Test display dates."""

    def test_week_anchor(self):
        assert anchor_date((2024, 0), Granularity.WEEK) == date(2024, 1, 4)
        assert anchor_date((2024, 10), Granularity.WEEK) == date(2024, 3, 14)

    def test_last_week_anchor_spills_into_next_year(self):
        assert anchor_date((2024, 52), Granularity.WEEK) == date(2025, 1, 2)

    def test_month_anchor(self):
        assert anchor_date((2024, 2), Granularity.MONTH) == date(2024, 2, 15)

    def test_quarter_anchor(self):
        assert anchor_date((2024, 1), Granularity.QUARTER) == date(2024, 2, 15)
        assert anchor_date((2024, 4), Granularity.QUARTER) == date(2024, 11, 15)

    def test_year_anchor(self):
        assert anchor_date((2024, 0), Granularity.YEAR) == date(2024, 7, 1)


class TestAggregate:
    """Test down-sampling."""

    def test_full_month_at_constant_value(self):
        series = daily(date(2024, 1, 1), [0.5] * 31)

        result = aggregate(series, Granularity.MONTH)

        assert result == [TimeSeriesPoint(date=date(2024, 1, 15), probability=0.5)]

    def test_day_is_identity(self):
        series = daily(date(2024, 1, 1), [0.1, 0.2, 0.3])
        assert aggregate(series, Granularity.DAY) == series

    def test_empty_input(self):
        for granularity in Granularity:
            assert aggregate([], granularity) == []

    def test_mean_is_rounded(self):
        series = daily(date(2024, 1, 1), [0.1, 0.2, 0.2])
        result = aggregate(series, Granularity.YEAR)
        assert result[0].probability == 0.1667

    def test_reduction(self):
        series = daily(date(2023, 1, 1), [0.05] * 730)

        for granularity in (Granularity.WEEK, Granularity.MONTH, Granularity.QUARTER, Granularity.YEAR):
            assert len(aggregate(series, granularity)) <= len(series)

        assert len(aggregate(series, Granularity.MONTH)) == 24
        assert len(aggregate(series, Granularity.QUARTER)) == 8
        assert len(aggregate(series, Granularity.YEAR)) == 2

    def test_anchor_stability(self):
        full = daily(date(2024, 3, 1), [0.2] * 31)
        partial = [p for p in full if 10 <= p.date.day <= 20]

        assert aggregate(full, Granularity.MONTH)[0].date == date(2024, 3, 15)
        assert aggregate(partial, Granularity.MONTH)[0].date == date(2024, 3, 15)

    def test_output_sorted_by_date(self):
        series = daily(date(2024, 12, 25), [0.1] * 14)
        result = aggregate(series, Granularity.WEEK)

        dates = [p.date for p in result]
        assert dates == sorted(dates)

    def test_input_not_mutated(self):
        series = daily(date(2024, 1, 1), [0.4, 0.6])
        copy = list(series)
        aggregate(series, Granularity.MONTH)
        assert series == copy

    def test_bucket_series_groups_values(self):
        series = daily(date(2024, 1, 30), [0.1, 0.2, 0.3])
        buckets = bucket_series(series, Granularity.MONTH)

        assert list(buckets.keys()) == [(2024, 1), (2024, 2)]
        assert buckets[(2024, 1)] == [0.1, 0.2]
        assert buckets[(2024, 2)] == [0.3]


class TestCalendarArithmetic:
    """Test month and year steps used by the range presets."""

    def test_subtract_months_clamps_day(self):
        assert subtract_months(date(2024, 3, 31), 1) == date(2024, 2, 29)
        assert subtract_months(date(2023, 3, 31), 1) == date(2023, 2, 28)

    def test_subtract_months_across_year(self):
        assert subtract_months(date(2024, 2, 10), 3) == date(2023, 11, 10)

    def test_subtract_years_leap_day(self):
        assert subtract_years(date(2024, 2, 29), 1) == date(2023, 2, 28)
        assert subtract_years(date(2024, 2, 29), 4) == date(2020, 2, 29)
