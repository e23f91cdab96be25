"""
Labor cost model.

Single source of truth for: daily rate, man-days and cost per worker, and
labor cost per category. Internal workers are salary-derived and hours
based; external workers are day-rate based.
"""
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Sequence, Union

import pandas as pd

from profitcalc.config import COST_CATEGORY_LABELS
from profitcalc.data.model import (
    COST_CATEGORIES,
    CostCategory,
    ExternalWorker,
    InternalWorker,
    LaborData,
)

Number = Union[int, float]


def round_half_up(value: Number) -> int:
    """Round to the nearest whole currency unit, halves away from zero."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


# =============================================================================
# PER WORKER
# =============================================================================

def internal_daily_rate(worker: InternalWorker) -> Number:
    """
    Daily rate for an internal worker.

    A positive manual rate wins. Otherwise the monthly salary is spread over
    the working days and marked up by the overhead rate. Zero working days
    yields 0.
    """
    if worker.manual_daily_rate is not None and worker.manual_daily_rate > 0:
        return worker.manual_daily_rate
    if worker.working_days_per_month <= 0:
        return 0
    base = worker.monthly_salary / worker.working_days_per_month
    return round_half_up(base * (1 + worker.overhead_rate / 100))


def internal_man_days(worker: InternalWorker) -> float:
    """Project hours expressed in man-days. Fractional days are kept."""
    if worker.hours_per_day <= 0:
        return 0
    return worker.project_hours / worker.hours_per_day


def internal_worker_cost(worker: InternalWorker) -> int:
    return round_half_up(internal_daily_rate(worker) * internal_man_days(worker))


def external_man_days(worker: ExternalWorker) -> Number:
    """Cost-bearing man-days: project man-days, else total contracted."""
    if worker.project_man_days is not None:
        return worker.project_man_days
    return worker.total_man_days


def external_worker_cost(worker: ExternalWorker) -> Number:
    return worker.daily_rate * external_man_days(worker)


# =============================================================================
# ROLLUPS
# =============================================================================

def labor_cost_by_category(internal_workers: Sequence[InternalWorker],
                           external_workers: Sequence[ExternalWorker]) -> Dict[CostCategory, Number]:
    """Labor cost per category; every category is present, zero if unused."""
    result: Dict[CostCategory, Number] = {category: 0 for category in COST_CATEGORIES}
    for worker in internal_workers:
        result[CostCategory(worker.cost_category)] += internal_worker_cost(worker)
    for worker in external_workers:
        result[CostCategory(worker.cost_category)] += external_worker_cost(worker)
    return result


def labor_cost_total(internal_workers: Sequence[InternalWorker],
                     external_workers: Sequence[ExternalWorker]) -> Number:
    return sum(labor_cost_by_category(internal_workers, external_workers).values())


def internal_total(labor: LaborData) -> int:
    return sum(internal_worker_cost(w) for w in labor.internal_workers)


def external_total(labor: LaborData) -> Number:
    return sum(external_worker_cost(w) for w in labor.external_workers)


def internal_total_man_days(labor: LaborData) -> float:
    return sum(internal_man_days(w) for w in labor.internal_workers)


def internal_total_hours(labor: LaborData) -> Number:
    return sum(w.project_hours for w in labor.internal_workers)


def external_total_man_days(labor: LaborData) -> Number:
    return sum(external_man_days(w) for w in labor.external_workers)


def monthly_labor_cost(external_workers: Sequence[ExternalWorker], month: int) -> Number:
    """
    External labor cost booked in one calendar month (1-12).

    Uses the monthly man-day buckets, so it reflects the whole engagement
    rather than the project share. Out-of-range months yield 0.
    """
    if month < 1 or month > 12:
        return 0
    total = 0
    for worker in external_workers:
        buckets = worker.monthly_man_days or []
        days = buckets[month - 1] if len(buckets) >= month else 0
        total += (days or 0) * worker.daily_rate
    return total


def worker_cost_frame(labor: LaborData) -> pd.DataFrame:
    """
    One row per worker with rate, man-days and cost.

    Columns: kind, person_name, company, rank, category, category_label,
    daily_rate, man_days, cost
    """
    rows: List[dict] = []
    for w in labor.internal_workers:
        category = CostCategory(w.cost_category)
        rows.append({
            "kind": "internal",
            "person_name": w.person_name,
            "company": "",
            "rank": w.rank,
            "category": category.value,
            "category_label": COST_CATEGORY_LABELS[category.value],
            "daily_rate": internal_daily_rate(w),
            "man_days": internal_man_days(w),
            "cost": internal_worker_cost(w),
        })
    for w in labor.external_workers:
        category = CostCategory(w.cost_category)
        rows.append({
            "kind": "external",
            "person_name": w.person_name,
            "company": w.company,
            "rank": w.rank,
            "category": category.value,
            "category_label": COST_CATEGORY_LABELS[category.value],
            "daily_rate": w.daily_rate,
            "man_days": external_man_days(w),
            "cost": external_worker_cost(w),
        })

    columns = ["kind", "person_name", "company", "rank", "category",
               "category_label", "daily_rate", "man_days", "cost"]
    return pd.DataFrame(rows, columns=columns)
