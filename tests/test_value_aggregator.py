# tests/test_value_aggregator.py
"""Tests for reducing check-ins and tasks to a current value."""

from northstar.schemas.okr import KrConfig, QualifierConfig, TaskStatus, TrackingSource
from northstar.services.value_aggregator import (
    filter_check_ins_in_window, filter_completed_tasks_in_window,
    check_qualifier, latest_check_in, sort_by_recorded_at,
    compute_current_value, compute_baseline,
)

from factories import make_kr, make_check_in, make_task, at


class TestFiltering:

    def test_check_ins_outside_window_dropped(self, year_window):
        inside = make_check_in(10, at(3, 1))
        before = make_check_in(5, at(12, 31, year=2025))
        after = make_check_in(7, at(1, 1, year=2027))
        assert filter_check_ins_in_window([inside, before, after], year_window) == [inside]

    def test_unparseable_timestamps_dropped(self, year_window):
        good = make_check_in(10, "2026-03-01T09:00:00Z")
        bad = make_check_in(99, "not-a-date")
        missing = make_check_in(42, None)
        assert filter_check_ins_in_window([good, bad, missing], year_window) == [good]

    def test_only_completed_tasks_in_window(self, year_window):
        done = make_task(completed_at=at(2, 1))
        pending = make_task(status=TaskStatus.PENDING)
        last_year = make_task(completed_at=at(6, 1, year=2025))
        no_date = make_task(completed_at=None)
        result = filter_completed_tasks_in_window([done, pending, last_year, no_date], year_window)
        assert result == [done]

    def test_qualifier_passes_everything(self):
        qualifier = QualifierConfig(field="source", op="==", value="crm")
        assert check_qualifier(make_check_in(1, at(1, 5)), qualifier) is True


class TestOrdering:

    def test_sort_chronological(self):
        late = make_check_in(3, at(3, 1))
        early = make_check_in(1, at(1, 1))
        assert sort_by_recorded_at([late, early]) == [early, late]
        assert sort_by_recorded_at([late, early], newest_first=True) == [late, early]

    def test_latest_tie_goes_to_last_in_input(self):
        first = make_check_in(1, at(2, 1))
        second = make_check_in(2, at(2, 1))
        assert latest_check_in([first, second]) is second

    def test_latest_of_nothing(self):
        assert latest_check_in([]) is None


class TestCurrentValue:

    def test_metric_uses_latest(self, year_window):
        check_ins = [
            make_check_in(10, at(2, 1)),
            make_check_in(30, at(3, 1)),
            make_check_in(20, at(2, 15)),
        ]
        assert compute_current_value(make_kr(), check_ins, [], year_window) == 30

    def test_metric_without_check_ins_uses_start_value(self, year_window):
        kr = make_kr(start_value=12)
        assert compute_current_value(kr, [], [], year_window) == 12

    def test_rate_uses_latest(self, year_window):
        kr = make_kr(kr_type="rate", target_value=40)
        check_ins = [make_check_in(20.5, at(1, 10)), make_check_in(25.0, at(2, 10))]
        assert compute_current_value(kr, check_ins, [], year_window) == 25.0

    def test_count_sums(self, year_window):
        kr = make_kr(kr_type="count")
        check_ins = [make_check_in(5, at(2, 1)), make_check_in(10, at(3, 1)), make_check_in(15, at(4, 1))]
        assert compute_current_value(kr, check_ins, [], year_window) == 30

    def test_count_without_check_ins_uses_start_value(self, year_window):
        kr = make_kr(kr_type="count", start_value=5)
        assert compute_current_value(kr, [], [], year_window) == 5

    def test_count_from_tasks(self, year_window):
        kr = make_kr(kr_type="count")
        tasks = [
            make_task(completed_at=at(2, 1)),
            make_task(completed_at=at(3, 1)),
            make_task(status=TaskStatus.PENDING),
            make_task(completed_at=at(5, 1, year=2025)),
        ]
        config = KrConfig(tracking_source=TrackingSource.TASKS)
        assert compute_current_value(kr, [make_check_in(50, at(2, 2))], tasks, year_window, config) == 2

    def test_count_mixed(self, year_window):
        kr = make_kr(kr_type="count")
        check_ins = [make_check_in(1, at(2, 1)), make_check_in(2, at(3, 1))]
        tasks = [make_task(completed_at=at(2, 1)), make_task(completed_at=at(4, 1))]
        config = KrConfig(tracking_source=TrackingSource.MIXED)
        assert compute_current_value(kr, check_ins, tasks, year_window, config) == 5

    def test_average(self, year_window):
        kr = make_kr(kr_type="average", start_value=6, target_value=8, unit="hours")
        check_ins = [make_check_in(6.5, at(1, 7)), make_check_in(7.0, at(1, 14)), make_check_in(7.5, at(1, 21))]
        assert compute_current_value(kr, check_ins, [], year_window) == 7.0

    def test_milestone_latest_wins(self, year_window):
        kr = make_kr(kr_type="milestone", target_value=1)
        check_ins = [make_check_in(1, at(2, 1)), make_check_in(0, at(3, 1))]
        assert compute_current_value(kr, check_ins, [], year_window) == 0

    def test_milestone_without_evidence(self, year_window):
        kr = make_kr(kr_type="milestone", target_value=1)
        assert compute_current_value(kr, [], [], year_window) == 0

    def test_milestone_falls_back_to_task_count(self, year_window):
        kr = make_kr(kr_type="milestone", target_value=1)
        tasks = [make_task(completed_at=at(2, 1)), make_task(completed_at=at(2, 2))]
        config = KrConfig(tracking_source=TrackingSource.TASKS)
        assert compute_current_value(kr, [], tasks, year_window, config) == 2


class TestBaseline:

    def test_increase_from_zero(self):
        assert compute_baseline(make_kr()) == 0

    def test_explicit_start_value(self):
        assert compute_baseline(make_kr(start_value=10)) == 10

    def test_decrease_uses_start_value_even_at_zero(self):
        assert compute_baseline(make_kr(direction="decrease", start_value=0, target_value=-5)) == 0
        assert compute_baseline(make_kr(direction="decrease", start_value=25, target_value=15)) == 25

    def test_maintain_starts_at_target(self):
        assert compute_baseline(make_kr(direction="maintain", target_value=50)) == 50
