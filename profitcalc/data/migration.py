"""
Schema migration for persisted project records.

Older saves are upgraded one version at a time:

- v1: one undifferentiated ``manHourCost.workers`` list and per-category
  hours x hourly-rate cost lists (designCosts, panelCosts, ...)
- v2: internal/external worker split, single ``manHourCost`` labor budget
- v3: current shape, tagged with ``schemaVersion``

Every step is total: missing or malformed fields are defaulted, never raised.
Only a wholly unreadable record raises ``ProjectFormatError``.
"""
from __future__ import annotations

import copy
import json
import logging
from typing import Any, Callable, Dict

from profitcalc.config import config, SCHEMA_VERSION
from profitcalc.data.model import (
    CostCategory,
    ProjectData,
    new_id,
    project_from_record,
    to_number,
    to_record,
)

logger = logging.getLogger(__name__)


class ProjectFormatError(Exception):
    """Raised when a persisted project cannot be read at all."""
    pass


# Legacy hours x hourly-rate collections and the category they roll into
LEGACY_HOURLY_COLLECTIONS = {
    "designCosts": CostCategory.DESIGN,
    "panelCosts": CostCategory.PANEL,
    "wiringCosts": CostCategory.WIRING,
    "setupCosts": CostCategory.SETUP,
}

# Budget field that predates the per-category labor split, and its successor
LEGACY_LABOR_BUDGET_FIELD = "manHourCost"
LEGACY_LABOR_BUDGET_SUCCESSOR = "wiringCost"

DEFAULT_CATEGORY = CostCategory.WIRING.value


# =============================================================================
# VERSION DETECTION
# =============================================================================

def detect_version(record: Dict[str, Any]) -> int:
    """Return the schema version of a raw record, tagged or inferred from shape."""
    tagged = record.get("schemaVersion")
    if isinstance(tagged, int) and not isinstance(tagged, bool) and tagged >= 1:
        if tagged > SCHEMA_VERSION:
            logger.warning("Record has schema v%s, newer than v%s; reading as current",
                           tagged, SCHEMA_VERSION)
            return SCHEMA_VERSION
        return tagged

    labor = record.get("manHourCost")
    if isinstance(labor, dict) and "workers" in labor:
        if "internalWorkers" not in labor and "externalWorkers" not in labor:
            return 1
    if any(key in record for key in LEGACY_HOURLY_COLLECTIONS):
        return 1
    return 2


# =============================================================================
# MIGRATION STEPS
# =============================================================================

def _list(value: Any) -> list:
    return [v for v in value if isinstance(v, dict)] if isinstance(value, list) else []


def _dict(value: Any) -> Dict[str, Any]:
    return dict(value) if isinstance(value, dict) else {}


def _with_category(worker: Dict[str, Any]) -> Dict[str, Any]:
    """Tag a worker with the compatibility category when it has none."""
    worker = dict(worker)
    valid = {c.value for c in CostCategory}
    if worker.get("costCategory") not in valid:
        worker["costCategory"] = DEFAULT_CATEGORY
    return worker


def _hourly_item_to_internal(item: Dict[str, Any], category: CostCategory) -> Dict[str, Any]:
    """
    Convert a legacy hours x hourly-rate row into an internal worker.

    A manual daily rate of ``hourlyRate * hoursPerDay`` keeps the row's cost:
    rate * (hours / hoursPerDay) == hours * hourlyRate.
    """
    hours_per_day = config.hours_per_day
    hourly_rate = to_number(item.get("hourlyRate"))
    name = (item.get("personName") or item.get("description")
            or item.get("workType") or "")
    return {
        "id": item.get("id") or new_id("int"),
        "personName": str(name),
        "rank": "",
        "monthlySalary": 0,
        "workingDaysPerMonth": config.working_days_per_month,
        "overheadRate": 0,
        "hoursPerDay": hours_per_day,
        "projectHours": to_number(item.get("hours")),
        "costCategory": category.value,
        "employeeId": None,
        "manualDailyRate": hourly_rate * hours_per_day,
    }


def migrate_v1_to_v2(record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Split the single worker list into internal/external workers.

    Old workers were all day-rate contractors, so they become external
    workers; internal workers start empty. Legacy hourly cost lists become
    internal workers of the matching category.
    """
    result = copy.deepcopy(record)
    labor = _dict(result.get("manHourCost"))

    legacy_workers = _list(labor.pop("workers", []))
    external = _list(labor.get("externalWorkers")) or legacy_workers
    internal = _list(labor.get("internalWorkers"))

    for key, category in LEGACY_HOURLY_COLLECTIONS.items():
        for item in _list(result.pop(key, [])):
            internal.append(_hourly_item_to_internal(item, category))

    labor["internalWorkers"] = internal
    labor["externalWorkers"] = [_with_category(w) for w in external]
    result["manHourCost"] = labor
    result["schemaVersion"] = 2
    return result


def migrate_v2_to_v3(record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Remap the single labor budget and tag the record as current.

    The legacy labor budget moves one-to-one into the wiring bucket (added
    to any wiring budget already present), not spread over categories.
    """
    result = copy.deepcopy(record)

    budget = _dict(result.get("budgetAllocation"))
    if LEGACY_LABOR_BUDGET_FIELD in budget:
        legacy_amount = to_number(budget.pop(LEGACY_LABOR_BUDGET_FIELD))
        budget[LEGACY_LABOR_BUDGET_SUCCESSOR] = (
            to_number(budget.get(LEGACY_LABOR_BUDGET_SUCCESSOR)) + legacy_amount
        )
    if budget or "budgetAllocation" in result:
        result["budgetAllocation"] = budget

    labor = _dict(result.get("manHourCost"))
    if labor:
        labor["internalWorkers"] = [_with_category(w) for w in _list(labor.get("internalWorkers"))]
        labor["externalWorkers"] = [_with_category(w) for w in _list(labor.get("externalWorkers"))]
        result["manHourCost"] = labor

    result["schemaVersion"] = 3
    return result


MIGRATIONS: Dict[int, Callable[[Dict[str, Any]], Dict[str, Any]]] = {
    1: migrate_v1_to_v2,
    2: migrate_v2_to_v3,
}


# =============================================================================
# DEFAULTS
# =============================================================================

def default_record() -> Dict[str, Any]:
    """Current-shape record of an empty project."""
    return to_record(ProjectData())


def apply_defaults(record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Fill missing collections with empty lists and missing nested objects
    with their documented defaults. Present fields win over defaults.
    """
    defaults = default_record()
    result = {}
    for key, default in defaults.items():
        value = record.get(key)
        if isinstance(default, dict):
            merged = dict(default)
            merged.update(value if isinstance(value, dict) else {})
            result[key] = merged
        elif isinstance(default, list):
            result[key] = list(value) if isinstance(value, list) else []
        else:
            result[key] = default if value is None else value

    labor = result["manHourCost"]
    for key in ("internalWorkers", "externalWorkers"):
        labor[key] = _list(labor.get(key))
    return result


# =============================================================================
# ENTRY POINTS
# =============================================================================

def migrate_record(record: Dict[str, Any]) -> Dict[str, Any]:
    """Upgrade a raw record of any known version to the current shape."""
    if not isinstance(record, dict):
        raise ProjectFormatError("Project record must be a JSON object.")

    version = detect_version(record)
    if version < SCHEMA_VERSION:
        logger.info("Migrating project record from schema v%s to v%s", version, SCHEMA_VERSION)

    current = record
    while version < SCHEMA_VERSION:
        current = MIGRATIONS[version](current)
        version += 1

    return to_record(project_from_record(apply_defaults(current)))


def migrate_project(record: Dict[str, Any]) -> ProjectData:
    """Upgrade a raw record and build the ProjectData value."""
    return project_from_record(migrate_record(record))


def load_project_json(text: str) -> ProjectData:
    """
    Parse and migrate a saved project.

    Raises:
        ProjectFormatError: if the text is not a JSON object.
    """
    try:
        record = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise ProjectFormatError(f"Invalid project file: {e}") from e
    return migrate_project(record)
