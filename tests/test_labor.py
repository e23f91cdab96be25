"""
Tests for labor cost calculations.
"""
import pytest
import pandas as pd
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.data.model import CostCategory, ExternalWorker, InternalWorker, LaborData
from profitcalc.metrics.labor import (
    external_man_days,
    external_worker_cost,
    internal_daily_rate,
    internal_man_days,
    internal_worker_cost,
    labor_cost_by_category,
    labor_cost_total,
    monthly_labor_cost,
    round_half_up,
    worker_cost_frame,
)


def make_internal(**kwargs):
    defaults = dict(
        id="int_1",
        person_name="김철수",
        monthly_salary=3_300_000,
        working_days_per_month=22,
        overhead_rate=15,
        hours_per_day=8,
        project_hours=80,
        cost_category=CostCategory.WIRING,
    )
    defaults.update(kwargs)
    return InternalWorker(**defaults)


def make_external(**kwargs):
    defaults = dict(
        id="ext_1",
        person_name="이영희",
        company="협력사",
        daily_rate=250_000,
        total_man_days=10,
        project_man_days=8,
        cost_category=CostCategory.DESIGN,
    )
    defaults.update(kwargs)
    return ExternalWorker(**defaults)


class TestRoundHalfUp:

    def test_halves_round_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(172_499.5) == 172_500

    def test_below_half_rounds_down(self):
        assert round_half_up(10.49) == 10


class TestInternalWorker:
    """Salary-derived internal worker costs."""

    def test_salary_derived_cost(self):
        """3.3M salary over 22 days with 15% overhead, 80h at 8h/day."""
        worker = make_internal()

        assert internal_daily_rate(worker) == 172_500
        assert internal_man_days(worker) == 10
        assert internal_worker_cost(worker) == 1_725_000

    def test_zero_working_days_yields_zero(self):
        worker = make_internal(working_days_per_month=0)

        assert internal_daily_rate(worker) == 0
        assert internal_worker_cost(worker) == 0

    def test_manual_rate_overrides_salary(self):
        worker = make_internal(manual_daily_rate=50_000, monthly_salary=9_999_999,
                               overhead_rate=80)

        assert internal_daily_rate(worker) == 50_000
        assert internal_worker_cost(worker) == 500_000

    def test_manual_rate_zero_is_ignored(self):
        worker = make_internal(manual_daily_rate=0)
        assert internal_daily_rate(worker) == 172_500

    def test_zero_hours_per_day(self):
        worker = make_internal(hours_per_day=0)
        assert internal_man_days(worker) == 0
        assert internal_worker_cost(worker) == 0

    def test_fractional_man_days_kept(self):
        worker = make_internal(project_hours=12)
        assert internal_man_days(worker) == pytest.approx(1.5)
        assert internal_worker_cost(worker) == 258_750


class TestExternalWorker:
    """Day-rate external worker costs."""

    def test_uses_project_man_days(self):
        worker = make_external()

        assert external_man_days(worker) == 8
        assert external_worker_cost(worker) == 2_000_000

    def test_falls_back_to_total_man_days(self):
        worker = make_external(project_man_days=None)
        assert external_worker_cost(worker) == 2_500_000

    def test_zero_project_man_days_is_not_a_fallback(self):
        worker = make_external(project_man_days=0)
        assert external_worker_cost(worker) == 0


class TestCategoryRollup:

    def test_every_category_present(self):
        result = labor_cost_by_category([], [])

        assert set(result) == set(CostCategory)
        assert all(v == 0 for v in result.values())

    def test_costs_land_in_their_category(self):
        result = labor_cost_by_category([make_internal()], [make_external()])

        assert result[CostCategory.WIRING] == 1_725_000
        assert result[CostCategory.DESIGN] == 2_000_000
        assert result[CostCategory.PANEL] == 0

    def test_categories_sum_to_total(self):
        internal = [
            make_internal(id="a", project_hours=13, cost_category=CostCategory.PANEL),
            make_internal(id="b", monthly_salary=2_750_001, cost_category=CostCategory.SETUP),
        ]
        external = [
            make_external(id="c", daily_rate=123_456, project_man_days=2.5,
                          cost_category=CostCategory.OTHER),
            make_external(id="d", cost_category=CostCategory.PANEL),
        ]

        by_category = labor_cost_by_category(internal, external)

        assert sum(by_category.values()) == labor_cost_total(internal, external)


class TestMonthlyLaborCost:

    def test_month_bucket_times_rate(self):
        worker = make_external(daily_rate=100_000,
                               monthly_man_days=[1, 2, 0, 0, 0, 0, 0, 0, 0, 0, 0, 3])

        assert monthly_labor_cost([worker], 2) == 200_000
        assert monthly_labor_cost([worker], 12) == 300_000

    def test_out_of_range_month(self):
        worker = make_external(monthly_man_days=[5] * 12)

        assert monthly_labor_cost([worker], 0) == 0
        assert monthly_labor_cost([worker], 13) == 0

    def test_short_bucket_list(self):
        worker = make_external(monthly_man_days=[1])
        assert monthly_labor_cost([worker], 6) == 0


class TestWorkerCostFrame:

    def test_one_row_per_worker(self):
        labor = LaborData(internal_workers=[make_internal()], external_workers=[make_external()])

        df = worker_cost_frame(labor)

        assert list(df["kind"]) == ["internal", "external"]
        assert list(df["cost"]) == [1_725_000, 2_000_000]
        assert list(df["category"]) == ["wiring", "design"]

    def test_empty_labor(self):
        df = worker_cost_frame(LaborData())

        assert isinstance(df, pd.DataFrame)
        assert df.empty
        assert "cost" in df.columns
