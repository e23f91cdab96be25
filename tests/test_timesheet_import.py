"""
Tests for time-sheet import.
"""
import pytest
import sys
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.data.model import CostCategory, InternalWorker, LaborData
from profitcalc.data.timesheet_import import (
    TimesheetImportError,
    find_header_row,
    import_man_hour_file,
    locate_columns,
    normalize_cost_category,
    parse_delimited_rows,
    parse_delimited_workers,
    parse_man_hour_rows,
    parse_man_hour_workbook,
)


HEADER = ["작업자 이름", "소속", "직급", "단가", "1월", "2월", "합계"]


def sheet_rows(*workers, preamble=2):
    rows = [["2024 공수표"]] + [[] for _ in range(preamble - 1)]
    rows.append(HEADER)
    rows.extend(workers)
    return rows


def workbook_bytes(rows, title="작업자 목록"):
    wb = Workbook()
    ws = wb.active
    ws.title = title
    for row in rows:
        ws.append(row)
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


class TestManHourRows:
    """Workbook rows located by the header marker."""

    def test_parses_workers(self):
        rows = sheet_rows(["김기사", "A전기", "기사", 200_000, 3, 2, 5])

        workers = parse_man_hour_rows(rows)

        assert len(workers) == 1
        worker = workers[0]
        assert worker.person_name == "김기사"
        assert worker.company == "A전기"
        assert worker.daily_rate == 200_000
        assert worker.total_man_days == 5
        assert worker.project_man_days == 5
        assert worker.monthly_man_days[:3] == [3, 2, 0]
        assert len(worker.monthly_man_days) == 12
        assert worker.cost_category == CostCategory.WIRING

    def test_zero_total_rows_excluded(self):
        rows = sheet_rows(
            ["김기사", "A전기", "기사", 200_000, 3, 2, 5],
            ["이기사", "B전기", "", 150_000, 0, 0, 0],
        )
        assert [w.person_name for w in parse_man_hour_rows(rows)] == ["김기사"]

    def test_rows_without_name_skipped(self):
        rows = sheet_rows([None, "A전기", "기사", 200_000, 1, 0, 1], [])
        assert parse_man_hour_rows(rows) == []

    def test_total_from_months_when_column_missing(self):
        rows = [["작업자 이름", "단가", "1월", "3월"], ["박", 100_000, 2, 4]]

        workers = parse_man_hour_rows(rows)

        assert workers[0].total_man_days == 6
        assert workers[0].monthly_man_days[2] == 4

    def test_missing_columns_read_empty(self):
        workers = parse_man_hour_rows([["작업자 이름", "합계"], ["최", 3]])

        assert workers[0].company == ""
        assert workers[0].daily_rate == 0

    def test_header_found_within_scan_window(self):
        rows = [[] for _ in range(9)] + [HEADER]
        assert find_header_row(rows) == 9

    def test_header_beyond_scan_window(self):
        rows = [[] for _ in range(10)] + [HEADER, ["김", "A", "", 1, 1, 0, 1]]

        with pytest.raises(TimesheetImportError):
            parse_man_hour_rows(rows)


class TestManHourWorkbook:

    def test_reads_worker_sheet(self):
        data = workbook_bytes(sheet_rows(["김기사", "A전기", "기사", 200_000, 3, 2, 5]))

        workers = parse_man_hour_workbook(data)

        assert len(workers) == 1
        assert workers[0].total_man_days == 5

    def test_missing_sheet(self):
        data = workbook_bytes(sheet_rows(["김", "A", "", 1, 1, 0, 1]), title="Sheet1")

        with pytest.raises(TimesheetImportError):
            parse_man_hour_workbook(data)

    def test_import_replaces_external_only(self):
        labor = LaborData(internal_workers=[InternalWorker(id="int_keep", person_name="내부")])
        data = workbook_bytes(sheet_rows(["김기사", "A전기", "기사", 200_000, 3, 2, 5]))

        result = import_man_hour_file(data, labor, "manhour.xlsx")

        assert result.success
        assert result.worker_count == 1
        assert [w.id for w in result.labor.internal_workers] == ["int_keep"]
        assert result.labor.source_file == "manhour.xlsx"
        assert result.labor.imported_at

    def test_failed_import_reports_error(self):
        labor = LaborData()
        data = workbook_bytes([["아무것도 없음"]])

        result = import_man_hour_file(data, labor, "bad.xlsx")

        assert not result.success
        assert result.error
        assert result.labor is None


class TestDelimitedImport:
    """Published-sheet rows with synonym-matched columns."""

    def test_english_headers_and_quoted_fields(self):
        text = (
            "Name,Company,Rate,Days,Category\n"
            '"Kim, J",Acme,"200,000",5,설계\n'
            "Lee,Beta,100000,2,\n"
        )

        workers = parse_delimited_workers(text)

        assert [w.person_name for w in workers] == ["Kim, J", "Lee"]
        assert workers[0].daily_rate == 200_000
        assert workers[0].total_man_days == 5
        assert workers[0].project_man_days == 5
        assert workers[0].cost_category == CostCategory.DESIGN
        assert workers[1].cost_category == CostCategory.WIRING

    def test_korean_headers(self):
        rows = [
            ["작업자 이름", "업체", "일당", "투입일수", "비용항목"],
            ["김", "A", "150000", "3", "판넬 제작"],
        ]

        workers = parse_delimited_rows(rows)

        assert workers[0].company == "A"
        assert workers[0].daily_rate == 150_000
        assert workers[0].total_man_days == 3
        assert workers[0].cost_category == CostCategory.PANEL

    def test_tab_delimited(self):
        workers = parse_delimited_workers("이름\t일당\n홍\t1000\n", delimiter="\t")
        assert workers[0].daily_rate == 1000

    def test_missing_name_column(self):
        with pytest.raises(TimesheetImportError):
            parse_delimited_rows([["업체", "일당"], ["A", "1"]])

    def test_empty_sheet(self):
        with pytest.raises(TimesheetImportError):
            parse_delimited_workers("   ")

    def test_unmatched_columns(self):
        columns = locate_columns(["Name", "Notes"])
        assert columns["person_name"] == 0
        assert columns["daily_rate"] == -1

    def test_company_name_column_not_taken_as_worker_name(self):
        columns = locate_columns(["Company Name", "Name", "Rate"])

        assert columns["company"] == 0
        assert columns["person_name"] == 1

    def test_worker_name_after_company_name(self):
        workers = parse_delimited_workers(
            "Company Name,Worker Name,Daily Rate,Days\nAcme,Kim,100000,2\n"
        )

        assert workers[0].person_name == "Kim"
        assert workers[0].company == "Acme"
        assert workers[0].daily_rate == 100_000

    def test_exact_header_preferred_over_substring(self):
        columns = locate_columns(["업체 이름", "이름"])

        assert columns["person_name"] == 1
        assert columns["company"] == 0


class TestNormalizeCostCategory:

    @pytest.mark.parametrize("text,expected", [
        ("전장 설계", CostCategory.DESIGN),
        ("Panel build", CostCategory.PANEL),
        ("배선", CostCategory.WIRING),
        ("시운전", CostCategory.SETUP),
        ("기타", CostCategory.OTHER),
        ("", CostCategory.WIRING),
        (None, CostCategory.WIRING),
        ("unknown", CostCategory.WIRING),
    ])
    def test_keywords(self, text, expected):
        assert normalize_cost_category(text) == expected
