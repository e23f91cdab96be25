"""
Reusable Streamlit components: KPI cards and record editors.

Editors return new record values; pages hand them to ``set_project`` so
the session project is replaced, never patched in place.
"""
from __future__ import annotations

import calendar
import hashlib
from dataclasses import fields, replace
from typing import Dict, List, Optional, Type

import pandas as pd
import streamlit as st

from profitcalc.config import BUDGET_LABELS, COST_CATEGORY_LABELS
from profitcalc.data.model import (
    BudgetAllocation,
    CostCategory,
    ExternalWorker,
    InternalWorker,
    ProjectData,
    new_id,
    set_daily_man_days,
    to_number,
    to_text,
)
from profitcalc.metrics.labor import (
    external_worker_cost,
    internal_daily_rate,
    internal_man_days,
    internal_worker_cost,
)
from profitcalc.metrics.profitability import ProfitSummary
from profitcalc.ui.formatting import fmt_currency, fmt_percent, fmt_variance
from profitcalc.ui.state import widget_key


CATEGORY_OPTIONS = [c.value for c in CostCategory]


def editor_key(key: str, df: pd.DataFrame) -> str:
    """Widget key tied to the input data, so stale edits are never replayed."""
    digest = hashlib.md5(df.to_json(force_ascii=False).encode("utf-8")).hexdigest()[:10]
    return f"{key}_{digest}"


# =============================================================================
# NUMBER INPUTS
# =============================================================================

def input_seed(value) -> float:
    """Stored number as a number_input value, unchanged (no rounding or clamping)."""
    return float(to_number(value))


def input_result(value):
    """number_input value back to a stored number; whole values become ints."""
    value = float(value)
    return int(value) if value.is_integer() else value


def amount_input(label: str, value, key: str, step: float = 1.0):
    """
    Float number input seeded with the stored value.

    New entries stop at 0. A value already below 0 is shown as it is and
    left to ``validate_project`` to report.
    """
    seed = input_seed(value)
    return input_result(st.number_input(
        label, min_value=min(0.0, seed), value=seed, step=float(step), key=widget_key(key),
    ))


# =============================================================================
# KPI CARDS
# =============================================================================

def render_kpi_cards(summary: ProfitSummary):
    """Headline profit figures."""
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("계약금액", fmt_currency(summary.total_revenue))
    with c2:
        st.metric("총 원가", fmt_currency(summary.total_cost))
    with c3:
        st.metric("영업이익", fmt_currency(summary.profit))
    with c4:
        st.metric(
            "이익률",
            fmt_percent(summary.profit_rate),
            delta=fmt_variance(summary.margin_difference, is_percent=True),
        )


def render_productivity_cards(summary: ProfitSummary):
    c1, c2, c3 = st.columns(3)
    with c1:
        st.metric("인당 매출액", fmt_currency(summary.revenue_per_person))
    with c2:
        st.metric("인당 부가가치", fmt_currency(summary.value_added_per_person))
    with c3:
        st.metric("공수당 매출 (M/H)", fmt_currency(summary.efficiency_per_man_hour))


# =============================================================================
# GENERIC LINE-ITEM EDITOR
# =============================================================================

def _numeric_fields(cls: Type) -> List[str]:
    numeric = []
    for f in fields(cls):
        if f.name == "id":
            continue
        if f.type in ("Number", "Optional[Number]"):
            numeric.append(f.name)
    return numeric


def edit_items(items: list, cls: Type, key: str,
               labels: Optional[Dict[str, str]] = None) -> list:
    """
    Editable table for a list of line items.

    New rows get a fresh id and zero amounts; numbers are clamped at 0.
    """
    labels = labels or {}
    columns = [f.name for f in fields(cls)]
    numeric = _numeric_fields(cls)
    prefix = key.split("_")[0]

    df = pd.DataFrame([vars(i) for i in items], columns=columns)
    config = {"id": None}
    for name in columns:
        if name == "id":
            continue
        label = labels.get(name, name)
        if name in numeric:
            config[name] = st.column_config.NumberColumn(label, min_value=0, default=0)
        else:
            config[name] = st.column_config.TextColumn(label, default="")

    edited = st.data_editor(
        df, key=editor_key(key, df), num_rows="dynamic", use_container_width=True,
        column_config=config, hide_index=True,
    )

    result = []
    for row in edited.to_dict("records"):
        kwargs = {}
        for name in columns:
            if name == "id":
                continue
            value = row.get(name)
            kwargs[name] = to_number(value) if name in numeric else to_text(value)
        item_id = to_text(row.get("id")) or new_id(prefix)
        result.append(cls(id=item_id, **kwargs))
    return result


def edit_flat_record(record, labels: Dict[str, str], key: str):
    """Number inputs for a flat record (travel, delivery, rates)."""
    changes = {}
    cols = st.columns(len(labels))
    for col, (name, label) in zip(cols, labels.items()):
        with col:
            changes[name] = amount_input(
                label, getattr(record, name), f"{key}_{name}",
                step=1000 if "rate" not in name else 0.5,
            )
    return replace(record, **changes)


def edit_budget(allocation: BudgetAllocation, contract_amount, key: str = "budget") -> BudgetAllocation:
    """Budget allocation inputs with the running unallocated amount."""
    changes = {}
    cols = st.columns(3)
    for i, (name, label) in enumerate(BUDGET_LABELS):
        with cols[i % 3]:
            changes[name] = amount_input(label, getattr(allocation, name), f"{key}_{name}", step=100000)
    updated = replace(allocation, **changes)
    st.caption(f"배분 합계 {fmt_currency(updated.total)} · 미배분 "
               f"{fmt_currency(contract_amount - updated.total)}")
    return updated


# =============================================================================
# LABOR EDITORS
# =============================================================================

def _category_column(label: str = "비용 항목"):
    return st.column_config.SelectboxColumn(
        label, options=CATEGORY_OPTIONS, default=CostCategory.WIRING.value, required=True,
    )


def edit_internal_workers(workers: List[InternalWorker], key: str = "int_workers") -> List[InternalWorker]:
    """Internal worker table with derived rate, man-days and cost shown read-only."""
    rows = []
    for w in workers:
        row = vars(w).copy()
        row["cost_category"] = CostCategory(w.cost_category).value
        row["daily_rate"] = internal_daily_rate(w)
        row["man_days"] = internal_man_days(w)
        row["cost"] = internal_worker_cost(w)
        rows.append(row)
    columns = [f.name for f in fields(InternalWorker)] + ["daily_rate", "man_days", "cost"]
    df = pd.DataFrame(rows, columns=columns)

    edited = st.data_editor(
        df, key=editor_key(key, df), num_rows="dynamic", use_container_width=True, hide_index=True,
        disabled=["daily_rate", "man_days", "cost", "employee_id"],
        column_config={
            "id": None,
            "person_name": st.column_config.TextColumn("이름", default=""),
            "rank": st.column_config.TextColumn("직급", default=""),
            "monthly_salary": st.column_config.NumberColumn("월급여", min_value=0, default=0),
            "working_days_per_month": st.column_config.NumberColumn("월근무일", min_value=0, default=22),
            "overhead_rate": st.column_config.NumberColumn("간접비율(%)", min_value=0, default=15),
            "hours_per_day": st.column_config.NumberColumn("1일 시간", min_value=0, default=8),
            "project_hours": st.column_config.NumberColumn("투입 시간", min_value=0, default=0),
            "cost_category": _category_column(),
            "employee_id": st.column_config.TextColumn("직원 ID"),
            "manual_daily_rate": st.column_config.NumberColumn("일당 직접입력", min_value=0),
            "daily_rate": st.column_config.NumberColumn("일당", format="%d"),
            "man_days": st.column_config.NumberColumn("M/D", format="%.2f"),
            "cost": st.column_config.NumberColumn("인건비", format="%d"),
        },
    )

    result = []
    for row in edited.to_dict("records"):
        manual = row.get("manual_daily_rate")
        employee_id = to_text(row.get("employee_id")) or None
        result.append(InternalWorker(
            id=to_text(row.get("id")) or new_id("int"),
            person_name=to_text(row.get("person_name")),
            rank=to_text(row.get("rank")),
            monthly_salary=to_number(row.get("monthly_salary")),
            working_days_per_month=to_number(row.get("working_days_per_month"), 22),
            overhead_rate=to_number(row.get("overhead_rate"), 15),
            hours_per_day=to_number(row.get("hours_per_day"), 8),
            project_hours=to_number(row.get("project_hours")),
            cost_category=CostCategory(row.get("cost_category") or CostCategory.WIRING.value),
            employee_id=employee_id,
            manual_daily_rate=None if manual is None or pd.isna(manual) else to_number(manual),
        ))
    return result


def edit_external_workers(workers: List[ExternalWorker], key: str = "ext_workers") -> List[ExternalWorker]:
    """External worker table; monthly and daily grids are kept from the originals."""
    by_id = {w.id: w for w in workers}
    rows = []
    for w in workers:
        rows.append({
            "id": w.id,
            "person_name": w.person_name,
            "company": w.company,
            "rank": w.rank,
            "daily_rate": w.daily_rate,
            "total_man_days": w.total_man_days,
            "project_man_days": w.project_man_days,
            "cost_category": CostCategory(w.cost_category).value,
            "cost": external_worker_cost(w),
        })
    columns = ["id", "person_name", "company", "rank", "daily_rate", "total_man_days",
               "project_man_days", "cost_category", "cost"]
    df = pd.DataFrame(rows, columns=columns)

    edited = st.data_editor(
        df, key=editor_key(key, df), num_rows="dynamic", use_container_width=True, hide_index=True,
        disabled=["cost"],
        column_config={
            "id": None,
            "person_name": st.column_config.TextColumn("이름", default=""),
            "company": st.column_config.TextColumn("소속", default=""),
            "rank": st.column_config.TextColumn("직급", default=""),
            "daily_rate": st.column_config.NumberColumn("일당", min_value=0, default=0),
            "total_man_days": st.column_config.NumberColumn("총 공수", min_value=0, default=0),
            "project_man_days": st.column_config.NumberColumn("프로젝트 공수", min_value=0),
            "cost_category": _category_column(),
            "cost": st.column_config.NumberColumn("인건비", format="%d"),
        },
    )

    result = []
    for row in edited.to_dict("records"):
        worker_id = to_text(row.get("id"))
        base = by_id.get(worker_id) or ExternalWorker(id=new_id("ext"))
        project_days = row.get("project_man_days")
        result.append(replace(
            base,
            person_name=to_text(row.get("person_name")),
            company=to_text(row.get("company")),
            rank=to_text(row.get("rank")),
            daily_rate=to_number(row.get("daily_rate")),
            total_man_days=to_number(row.get("total_man_days")),
            project_man_days=None if project_days is None or pd.isna(project_days) else to_number(project_days),
            cost_category=CostCategory(row.get("cost_category") or CostCategory.WIRING.value),
        ))
    return result


def category_caption() -> str:
    return " · ".join(f"{c}: {label}" for c, label in COST_CATEGORY_LABELS.items())


def replace_labor(project: ProjectData, **changes) -> ProjectData:
    """New project with the labor data fields replaced."""
    return replace(project, man_hour_cost=replace(project.man_hour_cost, **changes))


# =============================================================================
# MAN-DAY CALENDAR
# =============================================================================

WEEKDAY_LABELS = ["월", "화", "수", "목", "금", "토", "일"]


def edit_man_day_calendar(worker: ExternalWorker, year: int, month: int,
                          key: str = "calendar") -> ExternalWorker:
    """
    Day-by-day man-day grid for one worker and month (0-based).

    Each changed cell goes through ``set_daily_man_days`` so the monthly
    buckets and total stay in step with the grid.
    """
    days_in_month = calendar.monthrange(year, month + 1)[1]
    grid = worker.daily_man_days_per_month
    current = list(grid[month]) if len(grid) > month else []
    current = (current + [0] * 31)[:days_in_month]

    columns = [
        f"{day}({WEEKDAY_LABELS[calendar.weekday(year, month + 1, day)]})"
        for day in range(1, days_in_month + 1)
    ]
    df = pd.DataFrame([current], columns=columns)
    edited = st.data_editor(
        df, key=f"{key}_{worker.id}_{year}_{month}", hide_index=True,
        use_container_width=True,
        column_config={
            c: st.column_config.NumberColumn(c, min_value=0, max_value=3, step=0.5)
            for c in columns
        },
    )

    updated = worker
    for day_index, value in enumerate(edited.iloc[0].tolist()):
        value = to_number(value)
        if value != current[day_index]:
            updated = set_daily_man_days(updated, month, day_index, value)
    return updated
