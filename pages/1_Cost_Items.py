"""
Cost Items Page

Non-labor direct costs: electrical materials, travel, outsourcing,
delivery and consumables.
"""
import streamlit as st
from dataclasses import replace
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.data.model import ConsumableCost, ElectricalMaterial, OutsourcingCost
from profitcalc.metrics.cost_items import compute_cost_item_totals, materials_total
from profitcalc.ui.components import edit_flat_record, edit_items
from profitcalc.ui.formatting import fmt_currency
from profitcalc.ui.layout import render_header, render_project_sidebar, section_header
from profitcalc.ui.state import get_project, init_state, set_project


st.set_page_config(page_title="원가 항목", page_icon="🧾", layout="wide")

init_state()


def main():
    render_project_sidebar()
    render_header("원가 항목")
    project = get_project()

    section_header("전기 자재비", "수량 × 단가")
    materials = edit_items(
        project.electrical_materials, ElectricalMaterial, key="mat_editor",
        labels={"category": "분류", "item_name": "품명", "quantity": "수량", "unit_price": "단가"},
    )
    st.caption(f"소계 {fmt_currency(materials_total(materials))}")

    section_header("출장 경비")
    travel = edit_flat_record(
        project.travel_expense,
        {"accommodation_cost": "숙박비", "meal_cost": "식비", "transport_cost": "교통비"},
        key="travel",
    )

    section_header("외주 가공비")
    outsourcing = edit_items(
        project.outsourcing_costs, OutsourcingCost, key="out_editor",
        labels={"vendor": "업체", "description": "내용", "amount": "금액"},
    )

    section_header("운반/포장비")
    delivery = edit_flat_record(
        project.delivery_cost,
        {"shipping_cost": "운반비", "packaging_cost": "포장비"},
        key="delivery",
    )

    section_header("소모품비")
    consumables = edit_items(
        project.consumable_costs, ConsumableCost, key="con_editor",
        labels={"item_name": "품명", "amount": "금액"},
    )

    updated = replace(
        project,
        electrical_materials=materials,
        travel_expense=travel,
        outsourcing_costs=outsourcing,
        delivery_cost=delivery,
        consumable_costs=consumables,
    )
    if updated != project:
        set_project(updated)

    st.markdown("---")
    totals = compute_cost_item_totals(updated)
    c1, c2, c3, c4, c5, c6 = st.columns(6)
    c1.metric("자재", fmt_currency(totals.materials))
    c2.metric("출장", fmt_currency(totals.travel))
    c3.metric("외주", fmt_currency(totals.outsourcing))
    c4.metric("운반/포장", fmt_currency(totals.delivery))
    c5.metric("소모품", fmt_currency(totals.consumables))
    c6.metric("합계", fmt_currency(totals.total))


main()
