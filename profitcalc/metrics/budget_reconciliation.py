"""
Budget vs actual reconciliation.

Compares the planned allocation per bucket against computed actual cost.
Difference is budget - actual: positive means the bucket came in under
budget, negative means it ran over. Purely informational; nothing here
feeds back into cost computation.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Dict, List, Mapping, Union

import pandas as pd

from profitcalc.config import BUDGET_LABELS
from profitcalc.data.model import BudgetAllocation, CostCategory
from profitcalc.metrics.cost_items import CostItemTotals

Number = Union[int, float]


# =============================================================================
# STATUS DEFINITIONS
# =============================================================================

STATUS_CONFIG = {
    "under": {
        "color": "#28a745",
        "icon": "🟢",
        "label": "절감",
        "description": "Actual cost below budget",
    },
    "over": {
        "color": "#dc3545",
        "icon": "🔴",
        "label": "초과",
        "description": "Actual cost above budget",
    },
    "match": {
        "color": "#6c757d",
        "icon": "⚪",
        "label": "일치",
        "description": "Actual cost equals budget",
    },
}


# =============================================================================
# DATA CLASSES
# =============================================================================

@dataclass
class CostComparison:
    label: str
    budget: Number
    actual: Number
    difference: Number
    status: str  # under | over | match


@dataclass
class BudgetReconciliation:
    comparisons: List[CostComparison] = field(default_factory=list)
    budget_total: Number = 0
    unallocated: Number = 0

    @property
    def over_budget(self) -> List[CostComparison]:
        return [c for c in self.comparisons if c.status == "over"]

    @property
    def total_overrun(self) -> Number:
        return -sum(c.difference for c in self.over_budget)

    @property
    def total_savings(self) -> Number:
        return sum(c.difference for c in self.comparisons if c.status == "under")


# =============================================================================
# COMPUTATIONS
# =============================================================================

def comparison_status(difference: Number) -> str:
    if difference > 0:
        return "under"
    if difference < 0:
        return "over"
    return "match"


def compare(label: str, budget: Number, actual: Number) -> CostComparison:
    difference = budget - actual
    return CostComparison(
        label=label,
        budget=budget,
        actual=actual,
        difference=difference,
        status=comparison_status(difference),
    )


def budget_total(allocation: BudgetAllocation) -> Number:
    return sum(getattr(allocation, f.name) for f in fields(allocation))


def bucket_actuals(labor_by_category: Mapping[CostCategory, Number],
                   items: CostItemTotals,
                   indirect_cost: Number) -> Dict[str, Number]:
    """Actual cost keyed by budget allocation field."""
    return {
        "design_cost": labor_by_category[CostCategory.DESIGN],
        "electrical_material": items.materials,
        "panel_cost": labor_by_category[CostCategory.PANEL],
        "wiring_cost": labor_by_category[CostCategory.WIRING],
        "travel_expense": items.travel,
        "setup_cost": labor_by_category[CostCategory.SETUP],
        "outsourcing_cost": items.outsourcing,
        "delivery_cost": items.delivery,
        "consumable_cost": items.consumables,
        "other_labor_cost": labor_by_category[CostCategory.OTHER],
        "overhead": indirect_cost,
    }


def reconcile_budget(allocation: BudgetAllocation,
                     actuals: Mapping[str, Number],
                     contract_amount: Number) -> BudgetReconciliation:
    """
    Compare every bucket in report order.

    ``unallocated`` is contract - budget total: positive means budget left
    unassigned, negative means allocated beyond the contract value.
    """
    comparisons = [
        compare(label, getattr(allocation, name), actuals.get(name, 0))
        for name, label in BUDGET_LABELS
    ]
    total = budget_total(allocation)
    return BudgetReconciliation(
        comparisons=comparisons,
        budget_total=total,
        unallocated=contract_amount - total,
    )


def comparisons_frame(comparisons: List[CostComparison]) -> pd.DataFrame:
    """Comparisons as a table with a usage percentage per bucket."""
    columns = ["label", "budget", "actual", "difference", "status", "usage_pct"]
    if not comparisons:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame([vars(c) for c in comparisons])
    df["usage_pct"] = [
        c.actual / c.budget * 100 if c.budget > 0 else 0.0 for c in comparisons
    ]
    return df[columns]
