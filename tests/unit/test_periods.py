"""
Unit Tests - Period Resolution and Bucket Generation
"""
from datetime import datetime, timedelta, timezone

import pytest

from sales_reporting.reporting.periods import (
    MONTH_LABELS,
    WEEKDAY_LABELS,
    Period,
    TimeRange,
    add_months,
    generate_buckets,
    parse_period,
    resolve_period,
)
from tests.conftest import NOW

UTC = timezone.utc


class TestParsePeriod:
    """Tests for period token parsing"""

    @pytest.mark.parametrize("token,expected", [
        ("day", Period.DAY),
        ("week", Period.WEEK),
        ("MONTH", Period.MONTH),
        (" year ", Period.YEAR),
    ])
    def test_known_tokens(self, token, expected):
        assert parse_period(token) == expected

    def test_unknown_token_falls_back(self):
        """Unknown tokens use the fallback instead of failing"""
        assert parse_period("fortnight") == Period.WEEK
        assert parse_period("fortnight", default=None) is None

    def test_missing_token_uses_default(self):
        assert parse_period(None) == Period.WEEK
        assert parse_period("", default=Period.MONTH) == Period.MONTH


class TestResolvePeriod:
    """Tests for period to range resolution"""

    def test_all_time(self):
        assert resolve_period(None, NOW).is_unbounded

    def test_day(self):
        time_range = resolve_period(Period.DAY, NOW)
        assert time_range.start == datetime(2025, 1, 15, tzinfo=UTC)
        assert time_range.end == NOW

    def test_week_starts_on_monday(self):
        assert resolve_period(Period.WEEK, NOW).start == datetime(2025, 1, 13, tzinfo=UTC)

    def test_week_on_sunday(self):
        sunday = datetime(2025, 1, 19, 23, 0, tzinfo=UTC)
        assert resolve_period(Period.WEEK, sunday).start == datetime(2025, 1, 13, tzinfo=UTC)

    def test_month_and_year(self):
        assert resolve_period(Period.MONTH, NOW).start == datetime(2025, 1, 1, tzinfo=UTC)
        assert resolve_period(Period.YEAR, datetime(2024, 7, 4, tzinfo=UTC)).start == datetime(2024, 1, 1, tzinfo=UTC)

    def test_every_period_has_a_start(self):
        """Each period member resolves without falling through"""
        for period in Period:
            time_range = resolve_period(period, NOW)
            assert time_range.start <= time_range.end == NOW

    def test_range_is_closed_at_now(self):
        time_range = resolve_period(Period.WEEK, NOW)
        assert time_range.contains(NOW)
        assert not time_range.contains(NOW + timedelta(microseconds=1))

    def test_naive_now_is_taken_as_utc(self):
        time_range = resolve_period(Period.DAY, datetime(2025, 1, 15, 12, 0))
        assert time_range.end == NOW


class TestTimeRange:
    """Tests for TimeRange"""

    def test_unbounded_contains_everything(self):
        assert TimeRange().contains(datetime(1999, 1, 1, tzinfo=UTC))

    def test_open_end(self):
        time_range = TimeRange(start=NOW)
        assert time_range.contains(NOW + timedelta(days=365))
        assert not time_range.contains(NOW - timedelta(seconds=1))


class TestGenerateBuckets:
    """Tests for bucket grids"""

    def test_day_has_24_hourly_buckets(self):
        buckets = generate_buckets(Period.DAY, NOW)
        assert len(buckets) == 24
        assert buckets[0].label == "00:00"
        assert buckets[-1].label == "23:00"
        assert buckets[0].start == datetime(2025, 1, 15, tzinfo=UTC)

    def test_week_has_all_seven_days(self):
        """Future weekdays are still listed"""
        buckets = generate_buckets(Period.WEEK, NOW)
        assert [b.label for b in buckets] == WEEKDAY_LABELS
        assert buckets[-1].end == datetime(2025, 1, 20, tzinfo=UTC)

    def test_month_stops_at_today(self):
        buckets = generate_buckets(Period.MONTH, NOW)
        assert [b.label for b in buckets] == [str(day) for day in range(1, 16)]

    def test_year_stops_at_current_month(self):
        buckets = generate_buckets(Period.YEAR, datetime(2025, 3, 10, tzinfo=UTC))
        assert [b.label for b in buckets] == MONTH_LABELS[:3]
        assert buckets[-1].end == datetime(2025, 4, 1, tzinfo=UTC)

    def test_december_bucket_ends_next_year(self):
        buckets = generate_buckets(Period.YEAR, datetime(2024, 12, 31, tzinfo=UTC))
        assert len(buckets) == 12
        assert buckets[-1].end == datetime(2025, 1, 1, tzinfo=UTC)

    def test_every_period_has_a_grid(self):
        for period in Period:
            buckets = generate_buckets(period, NOW)
            assert buckets
            for earlier, later in zip(buckets, buckets[1:]):
                assert earlier.end == later.start

    def test_buckets_are_zero_valued(self):
        for bucket in generate_buckets(Period.WEEK, NOW):
            assert bucket.revenue == 0
            assert bucket.order_count == 0


def test_add_months_wraps_years():
    assert add_months(datetime(2024, 11, 1, tzinfo=UTC), 3) == datetime(2025, 2, 1, tzinfo=UTC)
    assert add_months(datetime(2025, 1, 1, tzinfo=UTC), -1) == datetime(2024, 12, 1, tzinfo=UTC)
