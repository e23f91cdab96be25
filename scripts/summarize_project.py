#!/usr/bin/env python
"""
Print the profit/loss summary of a saved project.

Usage:
    python scripts/summarize_project.py data/projects/my_project.json
    python scripts/summarize_project.py my_project.json --excel report.xlsx
"""
import argparse
import sys
from pathlib import Path

# Add package root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.config import COST_CATEGORY_LABELS
from profitcalc.data.persistence import load_project
from profitcalc.data.schema import validate_project
from profitcalc.exports import export_profit_report_excel
from profitcalc.metrics.profitability import compute_profit_summary


def print_line(label: str, value, suffix: str = "원"):
    print(f"  {label:<16} {value:>18,.0f}{suffix}")


def main():
    parser = argparse.ArgumentParser(description="Summarize a saved project")
    parser.add_argument("project", type=str, help="Project JSON file")
    parser.add_argument(
        "--excel",
        type=str,
        default=None,
        help="Also write the profit report workbook to this path"
    )

    args = parser.parse_args()

    result = load_project(args.project)
    if not result.success:
        print(f"✗ Could not load {args.project}: {result.error}")
        sys.exit(1)

    project = result.project
    validation = validate_project(project)
    summary = compute_profit_summary(project)

    print("=" * 60)
    print(f"Project: {project.project_info.project_name or '(untitled)'}")
    print(f"Client:  {project.project_info.client_name or '-'}")
    print("=" * 60)

    print("Direct costs")
    for category, amount in summary.labor_by_category.items():
        print_line(COST_CATEGORY_LABELS[category.value], amount)
    print_line("전기 자재비", summary.electrical_material_total)
    print_line("출장 경비", summary.travel_expense_total)
    print_line("외주 가공비", summary.outsourcing_cost_total)
    print_line("운반/포장비", summary.delivery_cost_total)
    print_line("소모품비", summary.consumable_cost_total)
    print_line("직접비 소계", summary.direct_cost_subtotal)
    print()
    print("Indirect costs")
    print_line("공통 관리비", summary.overhead_cost)
    print_line("하자보수 예비비", summary.warranty_reserve_cost)
    print_line("간접비 소계", summary.indirect_cost_subtotal)
    print()
    print_line("계약금액", summary.total_revenue)
    print_line("총 원가", summary.total_cost)
    print_line("영업이익", summary.profit)
    print(f"  {'이익률':<16} {summary.profit_rate:>17.1f}% (target {summary.target_margin}%)")
    print()

    over = [c for c in summary.cost_comparisons if c.status == "over"]
    if over:
        print("Over budget")
        for c in over:
            print(f"  ✗ {c.label}: budget {c.budget:,.0f} / actual {c.actual:,.0f}")
        print()

    for err in validation["errors"]:
        print(f"  ✗ Error: {err}")
    for warn in validation["warnings"]:
        print(f"  ⚠ {warn}")

    if args.excel:
        data, _ = export_profit_report_excel(project, summary)
        Path(args.excel).write_bytes(data)
        print(f"✓ Wrote {args.excel}")

    print("=" * 60)
    sys.exit(0 if validation["is_valid"] else 1)


if __name__ == "__main__":
    main()
