"""
Employee master roster.

The roster outlives any single project. It is handled as an immutable
snapshot: every add/update/remove returns a new snapshot with a bumped
version, and the caller decides when to persist it.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional, Tuple, Union

from profitcalc.config import config
from profitcalc.data.model import (
    CostCategory,
    EmployeeMaster,
    InternalWorker,
    employee_from_record,
    new_id,
    to_record,
)
from profitcalc.metrics.labor import round_half_up

logger = logging.getLogger(__name__)


class RosterError(Exception):
    """Raised when an operation references an unknown employee."""
    pass


@dataclass(frozen=True)
class RosterSnapshot:
    version: int = 0
    employees: Tuple[EmployeeMaster, ...] = ()

    def get(self, employee_id: str) -> Optional[EmployeeMaster]:
        for employee in self.employees:
            if employee.id == employee_id:
                return employee
        return None


# =============================================================================
# SNAPSHOT OPERATIONS
# =============================================================================

def create_empty_employee() -> EmployeeMaster:
    """Blank roster entry with default working pattern."""
    return EmployeeMaster(id=new_id("emp"))


def add_employee(snapshot: RosterSnapshot,
                 employee: Optional[EmployeeMaster] = None) -> RosterSnapshot:
    """Append an employee; a fresh id is assigned when missing or taken."""
    employee = employee or create_empty_employee()
    if not employee.id or snapshot.get(employee.id) is not None:
        employee = replace(employee, id=new_id("emp"))
    return RosterSnapshot(version=snapshot.version + 1,
                          employees=snapshot.employees + (employee,))


def update_employee(snapshot: RosterSnapshot, employee_id: str,
                    **changes) -> RosterSnapshot:
    """Replace fields on one employee. The id itself cannot change."""
    if snapshot.get(employee_id) is None:
        raise RosterError(f"Unknown employee: {employee_id}")
    changes.pop("id", None)
    employees = tuple(
        replace(e, **changes) if e.id == employee_id else e
        for e in snapshot.employees
    )
    return RosterSnapshot(version=snapshot.version + 1, employees=employees)


def remove_employee(snapshot: RosterSnapshot, employee_id: str) -> RosterSnapshot:
    employees = tuple(e for e in snapshot.employees if e.id != employee_id)
    return RosterSnapshot(version=snapshot.version + 1, employees=employees)


def employee_daily_rate(employee: EmployeeMaster) -> int:
    """Salary-derived daily rate including the overhead markup."""
    if employee.working_days_per_month <= 0:
        return 0
    base = employee.monthly_salary / employee.working_days_per_month
    return round_half_up(base * (1 + employee.overhead_rate / 100))


# =============================================================================
# INTERNAL WORKER INSTANTIATION
# =============================================================================

def new_internal_worker(category: CostCategory = CostCategory.WIRING) -> InternalWorker:
    """Blank internal worker for manual entry."""
    return InternalWorker(id=new_id("int"), cost_category=category)


def internal_worker_from_employee(snapshot: RosterSnapshot, employee_id: str,
                                  category: CostCategory = CostCategory.WIRING) -> InternalWorker:
    """
    Copy a roster entry into a new internal worker with a back-reference.

    Later roster edits do not touch workers already created.
    """
    employee = snapshot.get(employee_id)
    if employee is None:
        raise RosterError(f"Unknown employee: {employee_id}")
    return InternalWorker(
        id=new_id("int"),
        person_name=employee.person_name,
        rank=employee.rank,
        monthly_salary=employee.monthly_salary,
        working_days_per_month=employee.working_days_per_month,
        overhead_rate=employee.overhead_rate,
        hours_per_day=employee.hours_per_day,
        project_hours=0,
        cost_category=category,
        employee_id=employee.id,
    )


# =============================================================================
# PERSISTENCE
# =============================================================================

def load_roster(path: Optional[Union[str, Path]] = None) -> RosterSnapshot:
    """
    Read the roster file.

    A missing or unreadable file yields an empty roster rather than an
    error, so a broken roster never blocks project work.
    """
    source = Path(path) if path else config.roster_path
    if not source.exists():
        return RosterSnapshot()
    try:
        payload = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Failed to load employee roster %s: %s", source, e)
        return RosterSnapshot()

    # Older roster files are a bare list of employees
    if isinstance(payload, list):
        payload = {"version": 0, "employees": payload}
    if not isinstance(payload, dict):
        logger.error("Employee roster %s is not a JSON object", source)
        return RosterSnapshot()

    rows = [r for r in payload.get("employees") or [] if isinstance(r, dict)]
    version = payload.get("version")
    snapshot = RosterSnapshot(
        version=version if isinstance(version, int) else 0,
        employees=tuple(employee_from_record(r) for r in rows),
    )
    logger.info("Loaded %d employees from %s", len(snapshot.employees), source)
    return snapshot


def save_roster(snapshot: RosterSnapshot,
                path: Optional[Union[str, Path]] = None) -> bool:
    """Write the roster file. Returns False on I/O failure."""
    target = Path(path) if path else config.roster_path
    payload = {
        "version": snapshot.version,
        "employees": [to_record(e) for e in snapshot.employees],
    }
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    except OSError as e:
        logger.error("Failed to save employee roster %s: %s", target, e)
        return False
    return True
