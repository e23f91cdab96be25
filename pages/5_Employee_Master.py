"""
Employee Master Page

Project-independent roster of salaried staff. Internal workers added from
the roster copy these values; editing the roster afterwards does not
change existing project workers.
"""
import streamlit as st
import pandas as pd
from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.config import config
from profitcalc.data.model import EmployeeMaster, new_id, to_number, to_text
from profitcalc.data.roster import (
    RosterSnapshot,
    add_employee,
    employee_daily_rate,
    remove_employee,
    update_employee,
)
from profitcalc.ui.formatting import fmt_currency
from profitcalc.ui.layout import render_header, render_project_sidebar, section_header
from profitcalc.ui.state import get_roster, init_state, set_roster


st.set_page_config(page_title="직원 마스터", page_icon="🗂️", layout="wide")

init_state()

EDITABLE = ["person_name", "rank", "monthly_salary", "working_days_per_month",
            "overhead_rate", "hours_per_day"]


def roster_frame(snapshot: RosterSnapshot) -> pd.DataFrame:
    rows = [{**vars(e), "daily_rate": employee_daily_rate(e)} for e in snapshot.employees]
    return pd.DataFrame(rows, columns=["id"] + EDITABLE + ["daily_rate"])


def apply_edits(snapshot: RosterSnapshot, edited: pd.DataFrame) -> RosterSnapshot:
    """Turn the edited table into add/update/remove operations on the snapshot."""
    seen = set()
    for row in edited.to_dict("records"):
        employee_id = to_text(row.get("id"))
        values = {
            "person_name": to_text(row.get("person_name")),
            "rank": to_text(row.get("rank")),
            "monthly_salary": to_number(row.get("monthly_salary")),
            "working_days_per_month": to_number(row.get("working_days_per_month"),
                                                config.working_days_per_month),
            "overhead_rate": to_number(row.get("overhead_rate"), config.worker_overhead_rate),
            "hours_per_day": to_number(row.get("hours_per_day"), config.hours_per_day),
        }
        existing = snapshot.get(employee_id) if employee_id else None
        if existing is None:
            employee = EmployeeMaster(id=new_id("emp"), **values)
            snapshot = add_employee(snapshot, employee)
            seen.add(employee.id)
            continue
        seen.add(employee_id)
        if any(getattr(existing, k) != v for k, v in values.items()):
            snapshot = update_employee(snapshot, employee_id, **values)

    for employee in list(snapshot.employees):
        if employee.id not in seen:
            snapshot = remove_employee(snapshot, employee.id)
    return snapshot


def main():
    render_project_sidebar()
    render_header("직원 마스터")
    snapshot = get_roster()

    section_header("직원 목록", f"저장 위치: {config.roster_path}")

    edited = st.data_editor(
        roster_frame(snapshot), key=f"roster_editor_{snapshot.version}",
        num_rows="dynamic", use_container_width=True, hide_index=True,
        disabled=["daily_rate"],
        column_config={
            "id": None,
            "person_name": st.column_config.TextColumn("이름", default=""),
            "rank": st.column_config.TextColumn("직급", default=""),
            "monthly_salary": st.column_config.NumberColumn("월급여", min_value=0, default=0),
            "working_days_per_month": st.column_config.NumberColumn(
                "월근무일", min_value=0, default=config.working_days_per_month),
            "overhead_rate": st.column_config.NumberColumn(
                "간접비율(%)", min_value=0, default=config.worker_overhead_rate),
            "hours_per_day": st.column_config.NumberColumn(
                "1일 시간", min_value=0, default=config.hours_per_day),
            "daily_rate": st.column_config.NumberColumn("일당", format="%d"),
        },
    )

    if st.button("💾 직원 마스터 저장", key="roster_save"):
        updated = apply_edits(snapshot, edited)
        if set_roster(updated):
            st.success(f"{len(updated.employees)}명 저장됨")
            st.rerun()
        else:
            st.error("직원 마스터 저장 실패")

    if snapshot.employees:
        average = sum(employee_daily_rate(e) for e in snapshot.employees) / len(snapshot.employees)
        st.caption(f"평균 일당 {fmt_currency(average)}")


main()
