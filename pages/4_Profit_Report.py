"""
Profit Report Page

Full profit/loss statement with productivity figures and exports.
"""
import streamlit as st
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.data.schema import display_validation_result, validate_project
from profitcalc.exports import (
    export_comparisons_csv,
    export_profit_report_excel,
    export_project_json,
)
from profitcalc.metrics.labor import worker_cost_frame
from profitcalc.ui.charts import cost_breakdown_bar
from profitcalc.ui.components import render_kpi_cards, render_productivity_cards
from profitcalc.ui.formatting import fmt_currency, fmt_man_days, fmt_percent
from profitcalc.ui.layout import render_header, render_project_sidebar, section_header
from profitcalc.ui.state import get_project, get_summary, init_state


st.set_page_config(page_title="손익 보고서", page_icon="📈", layout="wide")

init_state()


def render_statement(summary):
    """Statement lines grouped into direct and indirect sections."""
    lines = summary.to_frame()
    display = lines.assign(
        amount=lines["amount"].apply(fmt_currency),
        share_pct=lines["share_pct"].apply(fmt_percent),
    ).rename(columns={"section": "구분", "item": "항목", "amount": "금액", "share_pct": "비율"})
    st.dataframe(display, use_container_width=True, hide_index=True)

    rows = [
        ("직접비 소계", summary.direct_cost_subtotal),
        ("간접비 소계", summary.indirect_cost_subtotal),
        ("총 원가", summary.total_cost),
        ("계약금액", summary.total_revenue),
        ("영업이익", summary.profit),
    ]
    for label, value in rows:
        st.markdown(f"**{label}**: {fmt_currency(value)}")
    st.markdown(
        f"**이익률**: {fmt_percent(summary.profit_rate)} "
        f"(목표 {fmt_percent(summary.target_margin)}, 차이 {summary.margin_difference:+.1f}%p)"
    )


def main():
    render_project_sidebar()
    render_header("손익 보고서")
    project = get_project()
    summary = get_summary()

    validation = validate_project(project)
    if not validation["is_valid"] or validation["warnings"]:
        with st.expander("입력값 점검", expanded=not validation["is_valid"]):
            display_validation_result(validation)

    render_kpi_cards(summary)

    col1, col2 = st.columns([1, 1])
    with col1:
        section_header("손익계산서")
        render_statement(summary)
    with col2:
        st.plotly_chart(cost_breakdown_bar(summary.to_frame()), use_container_width=True)

    section_header("생산성")
    render_productivity_cards(summary)

    section_header("인력별 인건비")
    workers = worker_cost_frame(project.man_hour_cost)
    if workers.empty:
        st.info("등록된 인력이 없습니다.")
    else:
        st.dataframe(
            workers.drop(columns=["category"]).assign(
                daily_rate=workers["daily_rate"].apply(fmt_currency),
                man_days=workers["man_days"].apply(fmt_man_days),
                cost=workers["cost"].apply(fmt_currency),
            ),
            use_container_width=True, hide_index=True,
        )

    st.markdown("---")
    section_header("내보내기")
    c1, c2, c3 = st.columns(3)
    with c1:
        data, filename = export_profit_report_excel(project, summary)
        st.download_button(
            "📥 손익 보고서 (Excel)", data=data, file_name=filename,
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
    with c2:
        data, filename = export_comparisons_csv(summary)
        st.download_button("📥 예산 비교 (CSV)", data=data, file_name=filename, mime="text/csv")
    with c3:
        data, filename = export_project_json(project)
        st.download_button("📥 프로젝트 (JSON)", data=data, file_name=filename,
                           mime="application/json")


main()
