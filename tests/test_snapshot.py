# tests/test_snapshot.py
"""Tests for objective and plan snapshots over mixed batches of records."""

from datetime import date

import pytest

from northstar.core.config import settings
from northstar.schemas.progress import PaceStatus
from northstar.services.snapshot import (
    PlanYearMissingError, group_by_kr, compute_objective_snapshot, compute_plan_snapshot,
)

from factories import make_kr, make_check_in, make_objective, make_plan, at

AS_OF = date(2026, 7, 2)


def _records():
    signups = make_kr(id="kr-signups", kr_type="count", target_value=100)
    churn = make_kr(id="kr-churn", direction="decrease", start_value=10, target_value=5)
    check_ins = [
        make_check_in(30, at(2, 1), annual_kr_id="kr-signups"),
        make_check_in(30, at(5, 1), annual_kr_id="kr-signups"),
        make_check_in(9, at(6, 1), annual_kr_id="kr-churn"),
    ]
    return signups, churn, check_ins


class TestObjectiveSnapshot:

    def test_records_routed_by_key_result(self, plan_year):
        signups, churn, check_ins = _records()
        objective = make_objective([signups, churn])

        snapshot = compute_objective_snapshot(objective, check_ins, [], plan_year, AS_OF)

        entries = {entry.kr_id: entry for entry in snapshot.kr_progresses}
        assert entries["kr-signups"].progress == pytest.approx(0.6)
        assert entries["kr-churn"].progress == pytest.approx(0.2)
        assert snapshot.progress == pytest.approx(0.4)
        assert snapshot.pace_status == PaceStatus.OFF_TRACK
        assert snapshot.kr_count == 2

    def test_group_by_kr(self):
        _, _, check_ins = _records()
        grouped = group_by_kr(check_ins)
        assert len(grouped["kr-signups"]) == 2
        assert len(grouped["kr-churn"]) == 1


class TestPlanSnapshot:

    def test_plan_rollup(self):
        signups, churn, check_ins = _records()
        plan = make_plan([
            make_objective([signups], objective_id="obj-growth"),
            make_objective([churn], objective_id="obj-retention"),
        ])

        snapshot = compute_plan_snapshot(plan, check_ins, [], AS_OF)

        assert snapshot.objective_count == 2
        assert snapshot.progress == pytest.approx(0.4)
        assert snapshot.pace_status == PaceStatus.OFF_TRACK
        growth = snapshot.objective_progresses[0]
        assert growth.objective_id == "obj-growth"
        assert growth.pace_status == PaceStatus.AHEAD

    def test_missing_year_uses_default(self, monkeypatch):
        signups, _, check_ins = _records()
        monkeypatch.setattr(settings, "DEFAULT_PLAN_YEAR", 2026)
        plan = make_plan([make_objective([signups])], year=None)
        snapshot = compute_plan_snapshot(plan, check_ins, [], AS_OF)
        assert snapshot.progress == pytest.approx(0.6)

    def test_missing_year_without_default(self, monkeypatch):
        monkeypatch.setattr(settings, "DEFAULT_PLAN_YEAR", None)
        plan = make_plan([], year=None)
        with pytest.raises(PlanYearMissingError):
            compute_plan_snapshot(plan, [], [], AS_OF)
