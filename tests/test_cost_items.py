"""
Tests for non-labor cost totals.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.data.model import (
    ConsumableCost,
    DeliveryCost,
    ElectricalMaterial,
    OutsourcingCost,
    ProjectData,
    TravelExpense,
)
from profitcalc.metrics.cost_items import (
    compute_cost_item_totals,
    consumables_total,
    delivery_total,
    materials_total,
    outsourcing_total,
    travel_total,
)


class TestItemTotals:

    def test_materials_are_quantity_times_price(self):
        items = [
            ElectricalMaterial(id="m1", item_name="차단기", quantity=2, unit_price=1_000),
            ElectricalMaterial(id="m2", item_name="케이블", quantity=3, unit_price=500),
        ]
        assert materials_total(items) == 3_500
        assert items[0].amount == 2_000

    def test_travel_sums_fields(self):
        travel = TravelExpense(accommodation_cost=100, meal_cost=20, transport_cost=3)
        assert travel_total(travel) == 123

    def test_delivery_sums_fields(self):
        assert delivery_total(DeliveryCost(shipping_cost=50, packaging_cost=5)) == 55

    def test_empty_collections_are_zero(self):
        assert materials_total([]) == 0
        assert outsourcing_total([]) == 0
        assert consumables_total([]) == 0


class TestComputeCostItemTotals:

    def test_project_totals(self):
        project = ProjectData(
            electrical_materials=[ElectricalMaterial(id="m", quantity=4, unit_price=250)],
            travel_expense=TravelExpense(meal_cost=10_000),
            outsourcing_costs=[OutsourcingCost(id="o", vendor="가공", amount=70_000)],
            delivery_cost=DeliveryCost(shipping_cost=5_000),
            consumable_costs=[ConsumableCost(id="c", amount=1_500),
                              ConsumableCost(id="d", amount=500)],
        )

        totals = compute_cost_item_totals(project)

        assert totals.materials == 1_000
        assert totals.travel == 10_000
        assert totals.outsourcing == 70_000
        assert totals.delivery == 5_000
        assert totals.consumables == 2_000
        assert totals.total == 88_000

    def test_empty_project(self):
        assert compute_cost_item_totals(ProjectData()).total == 0
