"""
Labor Costs Page

Internal (salaried) and external (contracted) workers, each tagged with the
cost category its hours roll up into. External workers can be imported
from a man-hour workbook or a published sheet.
"""
import streamlit as st
from datetime import date
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.config import COST_CATEGORY_LABELS, MONTH_HEADERS
from profitcalc.data.model import CostCategory, add_item
from profitcalc.data.roster import (
    RosterError,
    employee_daily_rate,
    internal_worker_from_employee,
    new_internal_worker,
)
from profitcalc.data.timesheet_import import import_man_hour_file, import_published_sheet
from profitcalc.metrics.labor import (
    external_total,
    external_total_man_days,
    internal_total,
    internal_total_hours,
    internal_total_man_days,
    labor_cost_by_category,
    monthly_labor_cost,
)
from profitcalc.ui.components import (
    category_caption,
    edit_external_workers,
    edit_internal_workers,
    edit_man_day_calendar,
    replace_labor,
)
from profitcalc.ui.formatting import fmt_count, fmt_currency, fmt_man_days
from profitcalc.ui.layout import render_header, render_project_sidebar, section_header
from profitcalc.ui.state import get_project, get_roster, init_state, set_project


st.set_page_config(page_title="공수 인건비", page_icon="👷", layout="wide")

init_state()


def _category_select(key: str) -> CostCategory:
    value = st.selectbox(
        "비용 항목", [c.value for c in CostCategory],
        index=[c.value for c in CostCategory].index(CostCategory.WIRING.value),
        format_func=lambda c: COST_CATEGORY_LABELS[c], key=key,
    )
    return CostCategory(value)


def render_internal_tab():
    project = get_project()
    labor = project.man_hour_cost
    roster = get_roster()

    section_header("내부 인력", "일당 = 월급여 ÷ 월근무일 × (1 + 간접비율), 공수 = 투입시간 ÷ 1일 시간")

    col1, col2, col3 = st.columns([3, 2, 1])
    with col1:
        employees = list(roster.employees)
        employee = st.selectbox(
            "직원 마스터에서 추가", [e.id for e in employees],
            format_func=lambda i: next(
                f"{e.person_name or '(이름 없음)'} · {e.rank} · 일당 {fmt_currency(employee_daily_rate(e))}"
                for e in employees if e.id == i
            ),
            key="roster_pick", disabled=not employees,
        )
    with col2:
        category = _category_select("roster_category")
    with col3:
        st.write("")
        if st.button("➕ 추가", key="roster_add", disabled=not employees):
            try:
                worker = internal_worker_from_employee(roster, employee, category)
            except RosterError as e:
                st.error(str(e))
            else:
                set_project(replace_labor(
                    project, internal_workers=add_item(labor.internal_workers, worker)
                ))
                st.rerun()

    if st.button("빈 행 추가", key="internal_blank"):
        set_project(replace_labor(
            project, internal_workers=add_item(labor.internal_workers, new_internal_worker())
        ))
        st.rerun()

    workers = edit_internal_workers(labor.internal_workers)
    if workers != labor.internal_workers:
        set_project(replace_labor(project, internal_workers=workers))

    updated = get_project().man_hour_cost
    c1, c2, c3 = st.columns(3)
    c1.metric("투입 시간", fmt_count(internal_total_hours(updated), "h"))
    c2.metric("공수", fmt_man_days(internal_total_man_days(updated)))
    c3.metric("내부 인건비", fmt_currency(internal_total(updated)))


def render_external_tab():
    project = get_project()
    labor = project.man_hour_cost

    section_header("외부 인력", "인건비 = 일당 × 프로젝트 공수 (미입력 시 총 공수)")

    with st.expander("공수표 가져오기", expanded=not labor.external_workers):
        st.caption("가져오기는 외부 인력만 교체합니다. 내부 인력은 유지됩니다.")
        upload = st.file_uploader("공수표 (.xlsx)", type=["xlsx"], key="manhour_upload")
        if upload is not None and st.button("엑셀 가져오기", key="manhour_import"):
            result = import_man_hour_file(upload.getvalue(), labor, upload.name)
            _apply_import(project, result)

        url = st.text_input("게시된 시트 CSV URL", key="sheet_url")
        if url and st.button("시트 가져오기", key="sheet_import"):
            with st.spinner("시트를 불러오는 중..."):
                result = import_published_sheet(url, labor)
            _apply_import(project, result)

    if labor.source_file:
        st.caption(f"출처: {labor.source_file} · {labor.imported_at or ''}")

    workers = edit_external_workers(labor.external_workers)
    if workers != labor.external_workers:
        set_project(replace_labor(project, external_workers=workers))

    updated = get_project().man_hour_cost
    c1, c2, c3 = st.columns(3)
    c1.metric("인원", fmt_count(len(updated.external_workers), "명"))
    c2.metric("공수", fmt_man_days(external_total_man_days(updated)))
    c3.metric("외부 인건비", fmt_currency(external_total(updated)))

    render_calendar(updated.external_workers)


def _apply_import(project, result):
    if not result.success:
        st.error(f"가져오기 실패: {result.error}")
        return
    set_project(replace_labor(
        project,
        external_workers=result.labor.external_workers,
        source_file=result.labor.source_file,
        imported_at=result.labor.imported_at,
    ))
    st.success(f"{result.worker_count}명 가져옴")
    st.rerun()


def render_calendar(workers):
    """Per-day man-day entry for one external worker."""
    if not workers:
        return
    section_header("일별 공수 캘린더")

    col1, col2, col3 = st.columns([2, 1, 1])
    with col1:
        worker_id = st.selectbox(
            "작업자", [w.id for w in workers],
            format_func=lambda i: next(w.person_name or "(이름 없음)" for w in workers if w.id == i),
            key="calendar_worker",
        )
    with col2:
        year = st.number_input("연도", min_value=2000, max_value=2100,
                               value=date.today().year, key="calendar_year")
    with col3:
        month = st.selectbox("월", list(range(12)), index=date.today().month - 1,
                             format_func=lambda m: MONTH_HEADERS[m], key="calendar_month")

    worker = next(w for w in workers if w.id == worker_id)
    updated = edit_man_day_calendar(worker, int(year), month)
    if updated != worker:
        project = get_project()
        set_project(replace_labor(project, external_workers=[
            updated if w.id == worker.id else w for w in project.man_hour_cost.external_workers
        ]))
        st.rerun()

    st.caption(
        f"{MONTH_HEADERS[month]} 공수 {fmt_man_days(updated.monthly_man_days[month] if len(updated.monthly_man_days) > month else 0)}"
        f" · 전체 외부 인력 {MONTH_HEADERS[month]} 인건비 {fmt_currency(monthly_labor_cost(workers, month + 1))}"
    )


def main():
    render_project_sidebar()
    render_header("공수 인건비")
    st.caption(category_caption())

    tab_internal, tab_external = st.tabs(["내부 인력", "외부 인력"])
    with tab_internal:
        render_internal_tab()
    with tab_external:
        render_external_tab()

    st.markdown("---")
    section_header("비용 항목별 인건비")
    labor = get_project().man_hour_cost
    by_category = labor_cost_by_category(labor.internal_workers, labor.external_workers)
    cols = st.columns(len(by_category) + 1)
    for col, (category, amount) in zip(cols, by_category.items()):
        col.metric(COST_CATEGORY_LABELS[category.value], fmt_currency(amount))
    cols[-1].metric("합계", fmt_currency(sum(by_category.values())))


main()
