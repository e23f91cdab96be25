"""
Profit/loss summary.

Single source of truth for: direct cost, indirect cost, total cost, profit,
profit rate, margin gap and per-person productivity.

Computation order matters because later terms use earlier subtotals:

1. direct = labor + materials + travel + outsourcing + delivery + consumables
2. overhead = direct x overhead rate
3. warranty reserve = contract amount x warranty rate (scales with revenue)
4. indirect = overhead + warranty reserve
5. total cost = direct + indirect
6. profit = contract amount - total cost
7. profit rate = profit / contract amount (0 when there is no revenue)
8. margin difference = profit rate - target margin

Every ratio is guarded to return 0 instead of NaN or infinity.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Union

import numpy as np
import pandas as pd

from profitcalc.config import COST_CATEGORY_LABELS
from profitcalc.data.model import CostCategory, ProjectData
from profitcalc.metrics.budget_reconciliation import (
    CostComparison,
    bucket_actuals,
    reconcile_budget,
)
from profitcalc.metrics.cost_items import compute_cost_item_totals
from profitcalc.metrics.labor import labor_cost_by_category

Number = Union[int, float]


def safe_ratio(numerator: Number, denominator: Number) -> float:
    """numerator / denominator, or 0 when the denominator is not positive."""
    if denominator > 0:
        return numerator / denominator
    return 0


@dataclass
class ProfitSummary:
    """Full computed report for one project. Derived, never persisted."""

    total_revenue: Number
    original_estimate: Number
    negotiation_discount: Number
    negotiation_discount_rate: float

    # Direct costs
    labor_by_category: Dict[CostCategory, Number]
    labor_cost_total: Number
    electrical_material_total: Number
    travel_expense_total: Number
    outsourcing_cost_total: Number
    delivery_cost_total: Number
    consumable_cost_total: Number
    direct_cost_subtotal: Number

    # Indirect costs
    overhead_cost: Number
    warranty_reserve_cost: Number
    indirect_cost_subtotal: Number

    # Totals and profit
    total_cost: Number
    profit: Number
    profit_rate: float
    target_margin: Number
    margin_difference: float

    # Budget comparison
    budget_total: Number
    unallocated: Number
    cost_comparisons: List[CostComparison] = field(default_factory=list)

    # Productivity
    total_personnel: Number = 0
    estimated_man_hours: Number = 0
    revenue_per_person: float = 0
    value_added_per_person: float = 0
    efficiency_per_man_hour: float = 0

    @property
    def meets_target_margin(self) -> bool:
        return self.margin_difference >= 0

    def category_cost(self, category: CostCategory) -> Number:
        return self.labor_by_category[category]

    def to_frame(self) -> pd.DataFrame:
        """
        Report lines for display and export.

        Columns: section, item, amount, share_pct (share of total cost)
        """
        rows = [
            ("직접비", COST_CATEGORY_LABELS[c.value], self.labor_by_category[c])
            for c in CostCategory
        ]
        rows += [
            ("직접비", "전기 자재비", self.electrical_material_total),
            ("직접비", "출장 경비", self.travel_expense_total),
            ("직접비", "외주 가공비", self.outsourcing_cost_total),
            ("직접비", "운반/포장비", self.delivery_cost_total),
            ("직접비", "소모품비", self.consumable_cost_total),
            ("간접비", "공통 관리비", self.overhead_cost),
            ("간접비", "하자보수 예비비", self.warranty_reserve_cost),
        ]
        df = pd.DataFrame(rows, columns=["section", "item", "amount"])
        df["share_pct"] = np.where(
            self.total_cost != 0,
            df["amount"] / (self.total_cost or 1) * 100,
            0.0,
        )
        return df


def compute_profit_summary(project: ProjectData) -> ProfitSummary:
    """Derive the profit/loss summary from the current project record."""
    info = project.project_info
    rates = project.overhead_and_margin
    labor = project.man_hour_cost
    revenue = info.contract_amount

    by_category = labor_cost_by_category(labor.internal_workers, labor.external_workers)
    labor_total = sum(by_category.values())
    items = compute_cost_item_totals(project)

    direct = labor_total + items.total
    overhead_cost = direct * rates.overhead_rate / 100
    warranty_cost = revenue * rates.warranty_reserve_rate / 100
    indirect = overhead_cost + warranty_cost
    total_cost = direct + indirect
    profit = revenue - total_cost
    profit_rate = safe_ratio(profit, revenue) * 100

    reconciliation = reconcile_budget(
        project.budget_allocation,
        bucket_actuals(by_category, items, indirect),
        revenue,
    )

    discount = info.original_estimate - revenue if info.original_estimate > 0 else 0

    return ProfitSummary(
        total_revenue=revenue,
        original_estimate=info.original_estimate,
        negotiation_discount=discount,
        negotiation_discount_rate=safe_ratio(discount, info.original_estimate) * 100,
        labor_by_category=by_category,
        labor_cost_total=labor_total,
        electrical_material_total=items.materials,
        travel_expense_total=items.travel,
        outsourcing_cost_total=items.outsourcing,
        delivery_cost_total=items.delivery,
        consumable_cost_total=items.consumables,
        direct_cost_subtotal=direct,
        overhead_cost=overhead_cost,
        warranty_reserve_cost=warranty_cost,
        indirect_cost_subtotal=indirect,
        total_cost=total_cost,
        profit=profit,
        profit_rate=profit_rate,
        target_margin=rates.margin_rate,
        margin_difference=profit_rate - rates.margin_rate,
        budget_total=reconciliation.budget_total,
        unallocated=reconciliation.unallocated,
        cost_comparisons=reconciliation.comparisons,
        total_personnel=info.total_personnel,
        estimated_man_hours=info.estimated_man_hours,
        revenue_per_person=safe_ratio(revenue, info.total_personnel),
        value_added_per_person=safe_ratio(revenue - direct, info.total_personnel),
        efficiency_per_man_hour=safe_ratio(revenue, info.estimated_man_hours),
    )
