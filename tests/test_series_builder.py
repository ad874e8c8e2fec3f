# tests/test_series_builder.py
"""Tests for daily and weekly progress series."""

from datetime import date, datetime

import pytest

from northstar.schemas.progress import TimeWindow
from northstar.services.series_builder import (
    MAX_SERIES_DAYS, SeriesWindowError, build_daily_series, build_weekly_series, start_of_week,
)
from northstar.services.time_windows import end_of_day

from factories import make_kr, make_check_in, at

# Thursday Jan 1 through Wednesday Jan 14
TWO_WEEKS = TimeWindow(start=datetime(2026, 1, 1), end=end_of_day(date(2026, 1, 14)))


class TestDailySeries:

    def test_one_point_per_day(self):
        series = build_daily_series(make_kr(), [], TWO_WEEKS)
        assert len(series) == 14
        assert series[0].date == date(2026, 1, 1)
        assert series[-1].date == date(2026, 1, 14)

    def test_count_accumulates(self):
        kr = make_kr(kr_type="count", target_value=10)
        check_ins = [
            make_check_in(2, at(1, 2, hour=9)),
            make_check_in(1, at(1, 2, hour=17)),
            make_check_in(3, at(1, 5)),
            make_check_in(50, at(2, 1)),
        ]

        series = build_daily_series(kr, check_ins, TWO_WEEKS)

        assert [p.current_value for p in series[:5]] == [0, 3, 3, 3, 6]
        assert series[1].check_in_count == 2
        assert series[-1].current_value == 6
        assert series[-1].progress == pytest.approx(0.6)
        assert series[0].expected_progress == 0
        assert series[-1].expected_progress == 1

    def test_metric_last_value_of_day_wins(self):
        kr = make_kr(start_value=100, target_value=200)
        check_ins = [make_check_in(160, at(1, 3, hour=18)), make_check_in(150, at(1, 3, hour=8))]
        series = build_daily_series(kr, check_ins, TWO_WEEKS)
        assert series[0].current_value == 100
        assert series[2].current_value == 160
        assert series[2].progress == pytest.approx(0.6)

    def test_average_running_mean(self):
        kr = make_kr(kr_type="average", start_value=6, target_value=8)
        check_ins = [make_check_in(7, at(1, 2)), make_check_in(8, at(1, 4))]
        series = build_daily_series(kr, check_ins, TWO_WEEKS)
        assert series[0].current_value == 6
        assert series[1].current_value == 7
        assert series[3].current_value == 7.5

    def test_milestone_follows_latest(self):
        kr = make_kr(kr_type="milestone", target_value=1)
        check_ins = [make_check_in(1, at(1, 3)), make_check_in(0, at(1, 6))]
        series = build_daily_series(kr, check_ins, TWO_WEEKS)
        assert series[0].progress == 0
        assert series[2].progress == 1
        assert series[5].progress == 0

    def test_full_leap_year_is_allowed(self):
        window = TimeWindow(start=datetime(2028, 1, 1), end=end_of_day(date(2028, 12, 31)))
        series = build_daily_series(make_kr(), [], window)
        assert len(series) == MAX_SERIES_DAYS == 366

    def test_longer_window_rejected(self):
        window = TimeWindow(start=datetime(2026, 1, 1), end=end_of_day(date(2027, 1, 2)))
        with pytest.raises(SeriesWindowError, match="367 days"):
            build_daily_series(make_kr(), [], window)

    def test_multi_decade_window_rejected(self):
        window = TimeWindow(start=datetime(2000, 1, 1), end=end_of_day(date(2029, 12, 31)))
        with pytest.raises(ValueError):
            build_daily_series(make_kr(), [], window)


class TestWeeklySeries:

    def test_start_of_week_is_sunday(self):
        assert start_of_week(date(2026, 1, 1)) == date(2025, 12, 28)
        assert start_of_week(date(2026, 1, 4)) == date(2026, 1, 4)
        assert start_of_week(date(2026, 1, 10)) == date(2026, 1, 4)

    def test_weekly_buckets(self):
        kr = make_kr(kr_type="count", target_value=10)
        check_ins = [make_check_in(2, at(1, 2)), make_check_in(1, at(1, 2)), make_check_in(3, at(1, 5))]

        weekly = build_weekly_series(build_daily_series(kr, check_ins, TWO_WEEKS))

        assert [p.date for p in weekly] == [date(2025, 12, 28), date(2026, 1, 4), date(2026, 1, 11)]
        assert [p.check_in_count for p in weekly] == [2, 1, 0]
        assert [p.current_value for p in weekly] == [3, 6, 6]

    def test_empty(self):
        assert build_weekly_series([]) == []
