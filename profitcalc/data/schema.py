"""
Project validation.

The cost engine accepts any numbers; this module reports inputs that are
out of policy so the UI and scripts can surface them.
"""
import streamlit as st
from typing import Dict, List

from profitcalc.data.model import ProjectData


class ProjectValidationError(Exception):
    """Raised when a project breaks a hard invariant."""
    pass


def find_negative_fields(project: ProjectData) -> List[str]:
    """
    List human-readable locations of negative amounts and quantities.
    """
    found = []

    def check(location: str, value) -> None:
        if value is not None and value < 0:
            found.append(f"{location} = {value}")

    for item in project.electrical_materials:
        check(f"electrical material '{item.item_name}' quantity", item.quantity)
        check(f"electrical material '{item.item_name}' unit price", item.unit_price)
    for item in project.outsourcing_costs:
        check(f"outsourcing '{item.vendor}' amount", item.amount)
    for item in project.consumable_costs:
        check(f"consumable '{item.item_name}' amount", item.amount)

    travel = project.travel_expense
    check("travel accommodation", travel.accommodation_cost)
    check("travel meals", travel.meal_cost)
    check("travel transport", travel.transport_cost)
    check("shipping", project.delivery_cost.shipping_cost)
    check("packaging", project.delivery_cost.packaging_cost)

    for w in project.man_hour_cost.internal_workers:
        check(f"internal worker '{w.person_name}' monthly salary", w.monthly_salary)
        check(f"internal worker '{w.person_name}' project hours", w.project_hours)
        check(f"internal worker '{w.person_name}' manual daily rate", w.manual_daily_rate)
    for w in project.man_hour_cost.external_workers:
        check(f"external worker '{w.person_name}' daily rate", w.daily_rate)
        check(f"external worker '{w.person_name}' project man-days", w.project_man_days)

    return found


def validate_project(project: ProjectData, strict: bool = False) -> Dict:
    """
    Full project validation.
    
    Args:
        project: Project to validate
        strict: If True, raise error on hard invariant violations
        
    Returns:
        Dict with validation results
    """
    info = project.project_info
    errors = []
    if info.contract_amount < 0:
        errors.append(f"Contract amount is negative: {info.contract_amount}")
    if info.original_estimate < 0:
        errors.append(f"Original estimate is negative: {info.original_estimate}")

    warnings = [f"Negative value: {loc}" for loc in find_negative_fields(project)]
    for w in project.man_hour_cost.internal_workers:
        if w.working_days_per_month <= 0 and not (w.manual_daily_rate and w.manual_daily_rate > 0):
            warnings.append(f"Internal worker '{w.person_name}' has no working days; daily rate is 0")

    result = {
        "is_valid": len(errors) == 0,
        "errors": errors,
        "warnings": warnings,
    }

    if strict and errors:
        raise ProjectValidationError("; ".join(errors))

    return result


def display_validation_result(result: Dict):
    """Display validation result in Streamlit."""
    for message in result["errors"]:
        st.error(message)
    if result["warnings"]:
        st.warning("Inputs outside policy (costs still computed):\n\n- " + "\n- ".join(result["warnings"]))
