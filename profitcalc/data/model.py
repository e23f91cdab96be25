"""
Project data model.

Single source of truth for the editable project record. Persisted records use
camelCase keys; attributes here are snake_case and converted in
``to_record`` / ``project_from_record``.
"""
from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, fields, is_dataclass, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from profitcalc.config import config, SCHEMA_VERSION


Number = Union[int, float]


class CostCategory(str, Enum):
    """Reporting bucket a labor cost rolls up into."""
    DESIGN = "design"
    PANEL = "panel"
    WIRING = "wiring"
    SETUP = "setup"
    OTHER = "other"


COST_CATEGORIES = list(CostCategory)


# =============================================================================
# HELPERS
# =============================================================================

def new_id(prefix: str) -> str:
    """Fresh row identifier, e.g. ``int_3f2a9c1d0b4e``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def to_number(value: Any, default: Number = 0) -> Number:
    """
    Coerce a loosely-typed value to a number.

    Non-numeric input degrades to ``default`` instead of raising.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else default
    if isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return default
        try:
            return int(text)
        except ValueError:
            pass
        try:
            parsed = float(text)
        except ValueError:
            return default
        return parsed if math.isfinite(parsed) else default
    return default


def to_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and math.isnan(value):
        return ""
    return str(value).strip()


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


# =============================================================================
# PROJECT INFO AND COST LINE ITEMS
# =============================================================================

@dataclass
class ProjectInfo:
    project_name: str = ""
    client_name: str = ""
    original_estimate: Number = 0
    contract_amount: Number = 0
    total_personnel: Number = 0
    estimated_man_hours: Number = 0


@dataclass
class ElectricalMaterial:
    id: str
    category: str = ""
    item_name: str = ""
    quantity: Number = 0
    unit_price: Number = 0

    @property
    def amount(self) -> Number:
        return self.quantity * self.unit_price


@dataclass
class OutsourcingCost:
    id: str
    vendor: str = ""
    description: str = ""
    amount: Number = 0


@dataclass
class ConsumableCost:
    id: str
    item_name: str = ""
    amount: Number = 0


@dataclass
class TravelExpense:
    accommodation_cost: Number = 0
    meal_cost: Number = 0
    transport_cost: Number = 0


@dataclass
class DeliveryCost:
    shipping_cost: Number = 0
    packaging_cost: Number = 0


@dataclass
class OverheadAndMargin:
    overhead_rate: Number = field(default_factory=lambda: config.default_overhead_rate)
    warranty_reserve_rate: Number = field(default_factory=lambda: config.default_warranty_reserve_rate)
    margin_rate: Number = field(default_factory=lambda: config.default_margin_rate)


@dataclass
class BudgetAllocation:
    """Planned amount per reporting bucket. Pure user input."""
    design_cost: Number = 0
    electrical_material: Number = 0
    panel_cost: Number = 0
    wiring_cost: Number = 0
    travel_expense: Number = 0
    setup_cost: Number = 0
    outsourcing_cost: Number = 0
    delivery_cost: Number = 0
    consumable_cost: Number = 0
    other_labor_cost: Number = 0
    overhead: Number = 0

    @property
    def total(self) -> Number:
        return sum(getattr(self, f.name) for f in fields(self))


# =============================================================================
# LABOR
# =============================================================================

@dataclass
class InternalWorker:
    """Salaried contributor; cost derived from monthly salary and project hours."""
    id: str
    person_name: str = ""
    rank: str = ""
    monthly_salary: Number = 0
    working_days_per_month: Number = field(default_factory=lambda: config.working_days_per_month)
    overhead_rate: Number = field(default_factory=lambda: config.worker_overhead_rate)
    hours_per_day: Number = field(default_factory=lambda: config.hours_per_day)
    project_hours: Number = 0
    cost_category: CostCategory = CostCategory.WIRING
    employee_id: Optional[str] = None
    manual_daily_rate: Optional[Number] = None


def empty_monthly_man_days() -> List[Number]:
    return [0] * 12


def empty_daily_man_days() -> List[List[Number]]:
    return [[0] * 31 for _ in range(12)]


@dataclass
class ExternalWorker:
    """Contracted contributor; cost is day rate times project man-days."""
    id: str
    person_name: str = ""
    company: str = ""
    rank: str = ""
    daily_rate: Number = 0
    total_man_days: Number = 0
    project_man_days: Optional[Number] = None
    monthly_man_days: List[Number] = field(default_factory=empty_monthly_man_days)
    daily_man_days_per_month: List[List[Number]] = field(default_factory=list)
    cost_category: CostCategory = CostCategory.WIRING


@dataclass
class LaborData:
    internal_workers: List[InternalWorker] = field(default_factory=list)
    external_workers: List[ExternalWorker] = field(default_factory=list)
    source_file: Optional[str] = None
    imported_at: Optional[str] = None


@dataclass
class EmployeeMaster:
    """Project-independent roster entry."""
    id: str
    person_name: str = ""
    rank: str = ""
    monthly_salary: Number = 0
    working_days_per_month: Number = field(default_factory=lambda: config.working_days_per_month)
    overhead_rate: Number = field(default_factory=lambda: config.worker_overhead_rate)
    hours_per_day: Number = field(default_factory=lambda: config.hours_per_day)


def set_daily_man_days(worker: ExternalWorker, month: int, day_index: int,
                       value: Number) -> ExternalWorker:
    """
    Set one calendar cell and recompute the monthly buckets and total.

    Args:
        month: 0-based month index (0 = January)
        day_index: 0-based day of month
    """
    if not 0 <= month < 12 or not 0 <= day_index < 31:
        raise ValueError(f"Calendar cell out of range: month={month}, day={day_index}")

    grid = [list(days) for days in (worker.daily_man_days_per_month or empty_daily_man_days())]
    while len(grid) < 12:
        grid.append([0] * 31)
    month_days = grid[month] + [0] * (31 - len(grid[month]))
    month_days[day_index] = value
    grid[month] = month_days

    monthly = [sum(d or 0 for d in days) for days in grid]
    return replace(
        worker,
        daily_man_days_per_month=grid,
        monthly_man_days=monthly,
        total_man_days=sum(monthly),
    )


# =============================================================================
# PROJECT
# =============================================================================

@dataclass
class ProjectData:
    """Full editable project record."""
    project_info: ProjectInfo = field(default_factory=ProjectInfo)
    electrical_materials: List[ElectricalMaterial] = field(default_factory=list)
    travel_expense: TravelExpense = field(default_factory=TravelExpense)
    outsourcing_costs: List[OutsourcingCost] = field(default_factory=list)
    delivery_cost: DeliveryCost = field(default_factory=DeliveryCost)
    consumable_costs: List[ConsumableCost] = field(default_factory=list)
    overhead_and_margin: OverheadAndMargin = field(default_factory=OverheadAndMargin)
    budget_allocation: BudgetAllocation = field(default_factory=BudgetAllocation)
    man_hour_cost: LaborData = field(default_factory=LaborData)
    schema_version: int = SCHEMA_VERSION


# =============================================================================
# COLLECTION EDITS
# =============================================================================

def add_item(items: list, item) -> list:
    return [*items, item]


def update_item(items: list, item_id: str, **changes) -> list:
    """Return a new list with the matching row's fields replaced."""
    return [replace(item, **changes) if item.id == item_id else item for item in items]


def remove_item(items: list, item_id: str) -> list:
    return [item for item in items if item.id != item_id]


# =============================================================================
# RECORD CONVERSION
# =============================================================================

def to_record(obj: Any) -> Any:
    """Convert dataclasses to camelCase dicts suitable for JSON."""
    if is_dataclass(obj):
        return {_camel(f.name): to_record(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, list):
        return [to_record(item) for item in obj]
    return obj


def _scalar_kwargs(cls, data: Dict[str, Any], numeric: List[str],
                   optional_numeric: Optional[List[str]] = None) -> Dict[str, Any]:
    """Pick fields of ``cls`` out of a camelCase record, coercing types."""
    optional_numeric = optional_numeric or []
    kwargs = {}
    for f in fields(cls):
        key = _camel(f.name)
        if key not in data:
            continue
        value = data[key]
        if f.name in numeric:
            kwargs[f.name] = to_number(value)
        elif f.name in optional_numeric:
            kwargs[f.name] = None if value is None else to_number(value)
        elif f.name in ("employee_id", "source_file", "imported_at"):
            kwargs[f.name] = None if value is None else str(value)
        else:
            kwargs[f.name] = "" if value is None else str(value)
    return kwargs


def _record_id(data: Dict[str, Any], prefix: str) -> str:
    return to_text(data.get("id")) or new_id(prefix)


def _numbers(values: Any) -> List[Number]:
    if not isinstance(values, list):
        return []
    return [to_number(v) for v in values]


def _category(value: Any) -> CostCategory:
    try:
        return CostCategory(value)
    except ValueError:
        return CostCategory.WIRING


def internal_worker_from_record(data: Dict[str, Any]) -> InternalWorker:
    kwargs = _scalar_kwargs(
        InternalWorker, data,
        numeric=["monthly_salary", "working_days_per_month", "overhead_rate",
                 "hours_per_day", "project_hours"],
        optional_numeric=["manual_daily_rate"],
    )
    kwargs.pop("cost_category", None)
    kwargs["id"] = _record_id(data, "int")
    return InternalWorker(cost_category=_category(data.get("costCategory")), **kwargs)


def external_worker_from_record(data: Dict[str, Any]) -> ExternalWorker:
    kwargs = _scalar_kwargs(
        ExternalWorker, data,
        numeric=["daily_rate", "total_man_days"],
        optional_numeric=["project_man_days"],
    )
    for key in ("cost_category", "monthly_man_days", "daily_man_days_per_month"):
        kwargs.pop(key, None)
    kwargs["id"] = _record_id(data, "ext")
    monthly = _numbers(data.get("monthlyManDays"))
    daily = data.get("dailyManDaysPerMonth")
    daily = [_numbers(days) for days in daily] if isinstance(daily, list) else []
    return ExternalWorker(
        monthly_man_days=monthly,
        daily_man_days_per_month=daily,
        cost_category=_category(data.get("costCategory")),
        **kwargs,
    )


def employee_from_record(data: Dict[str, Any]) -> EmployeeMaster:
    kwargs = _scalar_kwargs(
        EmployeeMaster, data,
        numeric=["monthly_salary", "working_days_per_month", "overhead_rate", "hours_per_day"],
    )
    kwargs["id"] = _record_id(data, "emp")
    return EmployeeMaster(**kwargs)


def _dicts(values: Any) -> List[Dict[str, Any]]:
    if not isinstance(values, list):
        return []
    return [v for v in values if isinstance(v, dict)]


def _nested(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def project_from_record(data: Dict[str, Any]) -> ProjectData:
    """
    Build ProjectData from a current-shape record.

    Run records through ``migration.migrate_record`` first; this only
    coerces types and fills per-field defaults.
    """
    info = _nested(data, "projectInfo")
    labor = _nested(data, "manHourCost")

    project_info = ProjectInfo(**_scalar_kwargs(
        ProjectInfo, info,
        numeric=["original_estimate", "contract_amount", "total_personnel", "estimated_man_hours"],
    ))

    materials = []
    for row in _dicts(data.get("electricalMaterials")):
        kwargs = _scalar_kwargs(ElectricalMaterial, row, numeric=["quantity", "unit_price"])
        kwargs["id"] = _record_id(row, "mat")
        materials.append(ElectricalMaterial(**kwargs))

    outsourcing = []
    for row in _dicts(data.get("outsourcingCosts")):
        kwargs = _scalar_kwargs(OutsourcingCost, row, numeric=["amount"])
        kwargs["id"] = _record_id(row, "out")
        outsourcing.append(OutsourcingCost(**kwargs))

    consumables = []
    for row in _dicts(data.get("consumableCosts")):
        kwargs = _scalar_kwargs(ConsumableCost, row, numeric=["amount"])
        kwargs["id"] = _record_id(row, "con")
        consumables.append(ConsumableCost(**kwargs))

    travel = TravelExpense(**_scalar_kwargs(
        TravelExpense, _nested(data, "travelExpense"),
        numeric=[f.name for f in fields(TravelExpense)],
    ))
    delivery = DeliveryCost(**_scalar_kwargs(
        DeliveryCost, _nested(data, "deliveryCost"),
        numeric=[f.name for f in fields(DeliveryCost)],
    ))
    overhead = OverheadAndMargin(**_scalar_kwargs(
        OverheadAndMargin, _nested(data, "overheadAndMargin"),
        numeric=[f.name for f in fields(OverheadAndMargin)],
    ))
    budget = BudgetAllocation(**_scalar_kwargs(
        BudgetAllocation, _nested(data, "budgetAllocation"),
        numeric=[f.name for f in fields(BudgetAllocation)],
    ))

    man_hour_cost = LaborData(
        internal_workers=[internal_worker_from_record(w) for w in _dicts(labor.get("internalWorkers"))],
        external_workers=[external_worker_from_record(w) for w in _dicts(labor.get("externalWorkers"))],
        source_file=labor.get("sourceFile"),
        imported_at=labor.get("importedAt"),
    )

    return ProjectData(
        project_info=project_info,
        electrical_materials=materials,
        travel_expense=travel,
        outsourcing_costs=outsourcing,
        delivery_cost=delivery,
        consumable_costs=consumables,
        overhead_and_margin=overhead,
        budget_allocation=budget,
        man_hour_cost=man_hour_cost,
        schema_version=int(to_number(data.get("schemaVersion"), SCHEMA_VERSION)),
    )
