"""
Export utilities for the profit report, comparisons and project files.
"""
import pandas as pd
from typing import Optional
from datetime import datetime
from io import BytesIO

from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from profitcalc.config import (
    EXCEL_COUNT_FORMAT,
    EXCEL_CURRENCY_FORMAT,
    EXCEL_PERCENT_FORMAT,
    EXCEL_QUANTITY_FORMAT,
)
from profitcalc.data.model import ProjectData
from profitcalc.data.persistence import project_filename, project_to_json
from profitcalc.metrics.budget_reconciliation import STATUS_CONFIG, comparisons_frame
from profitcalc.metrics.labor import worker_cost_frame
from profitcalc.metrics.profitability import ProfitSummary


HEADER_FILL = PatternFill(fill_type="solid", fgColor="1F4E79")
HEADER_FONT = Font(bold=True, color="FFFFFF")
LABEL_FILL = PatternFill(fill_type="solid", fgColor="D6DCE4")
THIN = Side(style="thin")
THIN_BORDER = Border(top=THIN, left=THIN, bottom=THIN, right=THIN)

# Overview rows that are not won amounts
OVERVIEW_FORMATS = {
    "이익률(%)": EXCEL_PERCENT_FORMAT,
    "목표 마진율(%)": EXCEL_PERCENT_FORMAT,
    "마진 차이(%p)": EXCEL_PERCENT_FORMAT,
    "투입 인원": EXCEL_COUNT_FORMAT,
    "예상 공수(M/H)": EXCEL_QUANTITY_FORMAT,
}


def _base_name(project: ProjectData) -> str:
    return project_filename(project)[:-len(".json")]


def summary_frame(project: ProjectData, summary: ProfitSummary) -> pd.DataFrame:
    """Key/value overview rows for the first report sheet."""
    info = project.project_info
    rows = [
        ("프로젝트명", info.project_name or "-"),
        ("고객사", info.client_name or "-"),
        ("작성일", datetime.now().strftime("%Y-%m-%d")),
        ("최초 견적금액", summary.original_estimate),
        ("계약금액", summary.total_revenue),
        ("네고 할인액", summary.negotiation_discount),
        ("직접비 소계", summary.direct_cost_subtotal),
        ("간접비 소계", summary.indirect_cost_subtotal),
        ("총 원가", summary.total_cost),
        ("영업이익", summary.profit),
        ("이익률(%)", round(summary.profit_rate, 1)),
        ("목표 마진율(%)", summary.target_margin),
        ("마진 차이(%p)", round(summary.margin_difference, 1)),
        ("배분 합계", summary.budget_total),
        ("미배분 금액", summary.unallocated),
        ("투입 인원", summary.total_personnel),
        ("예상 공수(M/H)", summary.estimated_man_hours),
        ("인당 매출액", summary.revenue_per_person),
        ("인당 부가가치", summary.value_added_per_person),
        ("공수당 매출", summary.efficiency_per_man_hour),
    ]
    return pd.DataFrame(rows, columns=["항목", "값"])


def _style_sheet(ws, currency_cols=()):
    """Header styling, borders, widths and currency formats."""
    for cell in ws[1]:
        cell.fill = HEADER_FILL
        cell.font = HEADER_FONT
        cell.alignment = Alignment(horizontal="center", vertical="center")

    for row in ws.iter_rows(min_row=1, max_row=ws.max_row, max_col=ws.max_column):
        for cell in row:
            cell.border = THIN_BORDER

    for idx in range(1, ws.max_column + 1):
        letter = get_column_letter(idx)
        width = max(len(str(c.value or "")) for c in ws[letter])
        ws.column_dimensions[letter].width = min(max(12, width + 4), 40)

    for idx in currency_cols:
        letter = get_column_letter(idx)
        for cell in ws[letter][1:]:
            if isinstance(cell.value, (int, float)):
                cell.number_format = EXCEL_CURRENCY_FORMAT


def _format_overview(ws):
    """Per-row number formats for the key/value overview sheet."""
    for label_cell, value_cell in ws.iter_rows(min_row=2, max_col=2):
        if isinstance(value_cell.value, (int, float)):
            value_cell.number_format = OVERVIEW_FORMATS.get(label_cell.value, EXCEL_CURRENCY_FORMAT)


def export_profit_report_excel(project: ProjectData, summary: ProfitSummary,
                               filename: Optional[str] = None) -> tuple:
    """
    Export the profit report to Excel.

    Sheets: overview, cost lines, budget comparison, labor detail.

    Returns: (excel_bytes, filename)
    """
    if filename is None:
        filename = f"{_base_name(project)}_손익계산서_{datetime.now().strftime('%Y%m%d')}.xlsx"

    overview = summary_frame(project, summary)

    costs = summary.to_frame().rename(columns={
        "section": "구분", "item": "항목", "amount": "금액", "share_pct": "비율(%)",
    })
    costs["비율(%)"] = costs["비율(%)"].round(1)

    comparisons = comparisons_frame(summary.cost_comparisons)
    comparisons["status"] = comparisons["status"].map(
        lambda s: STATUS_CONFIG[s]["label"]
    )
    comparisons["usage_pct"] = comparisons["usage_pct"].round(1)
    comparisons = comparisons.rename(columns={
        "label": "항목", "budget": "배분금액", "actual": "실제원가",
        "difference": "차이", "status": "상태", "usage_pct": "사용률(%)",
    })

    workers = worker_cost_frame(project.man_hour_cost)[
        ["kind", "person_name", "company", "rank", "category_label", "daily_rate", "man_days", "cost"]
    ].rename(columns={
        "kind": "구분", "person_name": "이름", "company": "소속", "rank": "직급",
        "category_label": "비용항목", "daily_rate": "일당", "man_days": "공수(M/D)", "cost": "금액",
    })
    workers["구분"] = workers["구분"].map({"internal": "내부", "external": "외부"})

    buffer = BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        overview.to_excel(writer, sheet_name="손익요약", index=False)
        costs.to_excel(writer, sheet_name="비용명세", index=False)
        comparisons.to_excel(writer, sheet_name="예산비교", index=False)
        workers.to_excel(writer, sheet_name="공수인건비", index=False)

        _style_sheet(writer.sheets["손익요약"])
        _format_overview(writer.sheets["손익요약"])
        _style_sheet(writer.sheets["비용명세"], currency_cols=(3,))
        _style_sheet(writer.sheets["예산비교"], currency_cols=(2, 3, 4))
        _style_sheet(writer.sheets["공수인건비"], currency_cols=(6, 8))

        label_ws = writer.sheets["손익요약"]
        for cell in label_ws["A"][1:]:
            cell.fill = LABEL_FILL
            cell.font = Font(bold=True)

    return buffer.getvalue(), filename


def export_comparisons_csv(summary: ProfitSummary,
                           filename: Optional[str] = None) -> tuple:
    """
    Export budget comparisons to CSV.

    Returns: (csv_bytes, filename)
    """
    if filename is None:
        filename = f"budget_comparison_{datetime.now().strftime('%Y%m%d')}.csv"

    df = comparisons_frame(summary.cost_comparisons)
    csv_bytes = df.to_csv(index=False).encode("utf-8-sig")

    return csv_bytes, filename


def export_project_json(project: ProjectData) -> tuple:
    """
    Export the project record as it is saved to disk.

    Returns: (json_bytes, filename)
    """
    return project_to_json(project).encode("utf-8"), project_filename(project)
