"""
Budget Reconciliation Page

Allocate the contract amount across cost buckets and compare each
allocation with the actual cost.
"""
import streamlit as st
from dataclasses import replace
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.metrics.budget_reconciliation import BudgetReconciliation, comparisons_frame
from profitcalc.ui.charts import budget_vs_actual_bar
from profitcalc.ui.components import edit_budget
from profitcalc.ui.formatting import fmt_currency, format_comparison_df
from profitcalc.ui.layout import render_header, render_project_sidebar, section_header
from profitcalc.ui.state import get_project, get_summary, init_state, set_project


st.set_page_config(page_title="예산 배분 비교", page_icon="⚖️", layout="wide")

init_state()


def main():
    render_project_sidebar()
    render_header("예산 배분 비교")
    project = get_project()

    section_header("예산 배분", "계약금액을 항목별로 배분합니다.")
    allocation = edit_budget(project.budget_allocation, project.project_info.contract_amount)
    if allocation != project.budget_allocation:
        set_project(replace(project, budget_allocation=allocation))

    summary = get_summary()
    reconciliation = BudgetReconciliation(
        comparisons=summary.cost_comparisons,
        budget_total=summary.budget_total,
        unallocated=summary.unallocated,
    )

    if summary.unallocated < 0:
        st.warning(f"배분 합계가 계약금액을 {fmt_currency(-summary.unallocated)} 초과합니다.")

    st.markdown("---")
    section_header("배분 대비 실제 원가")

    c1, c2, c3, c4 = st.columns(4)
    c1.metric("배분 합계", fmt_currency(reconciliation.budget_total))
    c2.metric("미배분", fmt_currency(reconciliation.unallocated))
    c3.metric("초과 항목", f"{len(reconciliation.over_budget)}개",
              delta=fmt_currency(-reconciliation.total_overrun) if reconciliation.total_overrun else None)
    c4.metric("절감 합계", fmt_currency(reconciliation.total_savings))

    df = comparisons_frame(reconciliation.comparisons)
    st.plotly_chart(budget_vs_actual_bar(df), use_container_width=True)
    st.dataframe(format_comparison_df(df), use_container_width=True, hide_index=True)


main()
