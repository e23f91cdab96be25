"""
Project Profit Calculator

Main entry point for Streamlit app.
"""
import logging
import streamlit as st
from pathlib import Path

# Page config must be first Streamlit command
st.set_page_config(
    page_title="Project Profit Calculator",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Add package root to path
import sys
sys.path.insert(0, str(Path(__file__).parent))

from dataclasses import replace

from profitcalc.config import config
from profitcalc.data.schema import display_validation_result, validate_project
from profitcalc.ui.charts import cost_breakdown_bar, margin_gauge
from profitcalc.ui.components import (
    amount_input,
    edit_flat_record,
    render_kpi_cards,
    render_productivity_cards,
)
from profitcalc.ui.formatting import fmt_currency, fmt_percent
from profitcalc.ui.layout import render_header, render_project_sidebar, section_header
from profitcalc.ui.state import get_project, get_summary, init_state, set_project, widget_key


logging.basicConfig(
    level=logging.INFO if config.is_prod else logging.DEBUG,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


def render_project_info():
    """Project identity, contract figures and productivity inputs."""
    project = get_project()
    info = project.project_info

    c1, c2 = st.columns(2)
    with c1:
        project_name = st.text_input("프로젝트명", value=info.project_name, key=widget_key("info_name"))
    with c2:
        client_name = st.text_input("고객사", value=info.client_name, key=widget_key("info_client"))

    c1, c2, c3, c4 = st.columns(4)
    with c1:
        original_estimate = amount_input("최초 견적금액", info.original_estimate, "info_estimate", step=1000000)
    with c2:
        contract_amount = amount_input("계약금액", info.contract_amount, "info_contract", step=1000000)
    with c3:
        total_personnel = amount_input("투입 인원", info.total_personnel, "info_personnel")
    with c4:
        estimated_man_hours = amount_input("예상 공수 (M/H)", info.estimated_man_hours, "info_man_hours")

    updated = replace(
        info,
        project_name=project_name,
        client_name=client_name,
        original_estimate=original_estimate,
        contract_amount=contract_amount,
        total_personnel=total_personnel,
        estimated_man_hours=estimated_man_hours,
    )

    st.markdown("#### 간접비 및 목표 마진 (%)")
    rates = edit_flat_record(
        project.overhead_and_margin,
        {"overhead_rate": "공통 관리비율", "warranty_reserve_rate": "하자보수 예비비율",
         "margin_rate": "목표 마진율"},
        key="rates",
    )

    if updated != info or rates != project.overhead_and_margin:
        set_project(replace(project, project_info=updated, overhead_and_margin=rates))

    validation = validate_project(get_project())
    if not validation["is_valid"]:
        display_validation_result(validation)


def main():
    """Main app entry point."""

    init_state()
    render_project_sidebar()
    render_header("프로젝트 손익 계산기")
    st.caption("견적 → 원가 입력 → 예산 배분 비교 → 손익 보고서")

    section_header("프로젝트 정보")
    render_project_info()

    summary = get_summary()

    st.markdown("---")
    section_header("손익 요약")
    render_kpi_cards(summary)

    if summary.negotiation_discount > 0:
        st.caption(
            f"네고 할인 {fmt_currency(summary.negotiation_discount)} "
            f"({fmt_percent(summary.negotiation_discount_rate)})"
        )
    if summary.total_revenue == 0:
        st.info("계약금액을 입력하면 이익률이 계산됩니다.")

    col1, col2 = st.columns([2, 1])
    with col1:
        st.plotly_chart(cost_breakdown_bar(summary.to_frame()), use_container_width=True)
    with col2:
        st.plotly_chart(margin_gauge(summary.profit_rate, summary.target_margin),
                        use_container_width=True)
        if summary.meets_target_margin:
            st.success("목표 마진 달성")
        else:
            st.warning("목표 마진 미달")

    section_header("생산성")
    render_productivity_cards(summary)

    st.markdown("---")
    col1, col2 = st.columns([1, 4])
    with col1:
        st.markdown("### Quick Links")
        st.page_link("pages/1_Cost_Items.py", label="원가 항목", icon="🧾")
        st.page_link("pages/2_Labor_Costs.py", label="공수 인건비", icon="👷")
        st.page_link("pages/3_Budget_Reconciliation.py", label="예산 배분 비교", icon="⚖️")
        st.page_link("pages/4_Profit_Report.py", label="손익 보고서", icon="📈")
        st.page_link("pages/5_Employee_Master.py", label="직원 마스터", icon="🗂️")


if __name__ == "__main__":
    main()
