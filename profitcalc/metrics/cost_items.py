"""
Non-labor cost buckets.

Materials, travel, outsourcing, delivery and consumables each collapse to
one total. Empty collections sum to 0.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Union

from profitcalc.data.model import (
    ConsumableCost,
    DeliveryCost,
    ElectricalMaterial,
    OutsourcingCost,
    ProjectData,
    TravelExpense,
)

Number = Union[int, float]


@dataclass
class CostItemTotals:
    materials: Number = 0
    travel: Number = 0
    outsourcing: Number = 0
    delivery: Number = 0
    consumables: Number = 0

    @property
    def total(self) -> Number:
        return self.materials + self.travel + self.outsourcing + self.delivery + self.consumables


def materials_total(items: Sequence[ElectricalMaterial]) -> Number:
    return sum(item.quantity * item.unit_price for item in items)


def travel_total(travel: TravelExpense) -> Number:
    return travel.accommodation_cost + travel.meal_cost + travel.transport_cost


def outsourcing_total(items: Sequence[OutsourcingCost]) -> Number:
    return sum(item.amount for item in items)


def delivery_total(delivery: DeliveryCost) -> Number:
    return delivery.shipping_cost + delivery.packaging_cost


def consumables_total(items: Sequence[ConsumableCost]) -> Number:
    return sum(item.amount for item in items)


def compute_cost_item_totals(project: ProjectData) -> CostItemTotals:
    return CostItemTotals(
        materials=materials_total(project.electrical_materials),
        travel=travel_total(project.travel_expense),
        outsourcing=outsourcing_total(project.outsourcing_costs),
        delivery=delivery_total(project.delivery_cost),
        consumables=consumables_total(project.consumable_costs),
    )
