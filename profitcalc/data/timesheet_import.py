"""
Time-sheet import for external workers.

Two sources:

- a man-hour workbook with a "작업자 목록" sheet, header row located by the
  "작업자 이름" marker and columns matched by exact header text
- a published sheet as delimited text, columns matched by case-insensitive
  synonym substrings

Both produce ExternalWorker lists. Import replaces the external workers
only; internal workers are kept.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd

from profitcalc.config import (
    CATEGORY_KEYWORDS,
    COLUMN_SYNONYMS,
    HEADER_MARKER,
    HEADER_SCAN_ROWS,
    MONTH_HEADERS,
    WORKBOOK_COLUMNS,
    WORKER_SHEET_NAME,
)
from profitcalc.data.model import (
    CostCategory,
    ExternalWorker,
    LaborData,
    new_id,
    to_number,
    to_text,
)

logger = logging.getLogger(__name__)


class TimesheetImportError(Exception):
    """Raised when a time-sheet is missing its sheet, header or name column."""
    pass


@dataclass
class ImportResult:
    success: bool
    labor: Optional[LaborData] = None
    error: Optional[str] = None
    worker_count: int = 0


# =============================================================================
# CELL HELPERS
# =============================================================================

def _cell(row: Sequence[Any], idx: int) -> Any:
    if idx < 0 or idx >= len(row):
        return None
    return row[idx]


def _header_index(header: Sequence[Any], text: str) -> int:
    for idx, cell in enumerate(header):
        if to_text(cell) == text:
            return idx
    return -1


def _rows_from_frame(df: pd.DataFrame) -> List[List[Any]]:
    df = df.astype(object).where(pd.notna(df), None)
    return df.values.tolist()


def normalize_cost_category(value: Any) -> CostCategory:
    """
    Map a free-text category cell onto the closed category set.

    Keywords are matched as substrings, case-insensitive. Unrecognized or
    empty text falls back to wiring.
    """
    text = to_text(value).lower()
    if text:
        for category, keywords in CATEGORY_KEYWORDS:
            if any(keyword.lower() in text for keyword in keywords):
                return CostCategory(category)
    return CostCategory.WIRING


# =============================================================================
# WORKBOOK IMPORT
# =============================================================================

def find_header_row(rows: Sequence[Sequence[Any]]) -> int:
    """Index of the first row (within the scan window) holding the marker."""
    for i, row in enumerate(rows[:HEADER_SCAN_ROWS]):
        if row and any(to_text(cell) == HEADER_MARKER for cell in row):
            return i
    return -1


def parse_man_hour_rows(rows: Sequence[Sequence[Any]]) -> List[ExternalWorker]:
    """
    Parse worker rows from a man-hour sheet given as a list of rows.

    Columns may appear in any order or be missing; a missing column reads as
    0 or empty. Rows without a name are skipped, and rows whose total
    man-days is exactly 0 are dropped.

    Raises:
        TimesheetImportError: if no header row is found.
    """
    header_idx = find_header_row(rows)
    if header_idx == -1:
        raise TimesheetImportError(
            f"Header row with '{HEADER_MARKER}' not found in the first {HEADER_SCAN_ROWS} rows."
        )

    header = rows[header_idx]
    name_idx = _header_index(header, HEADER_MARKER)
    company_idx = _header_index(header, WORKBOOK_COLUMNS["company"])
    rank_idx = _header_index(header, WORKBOOK_COLUMNS["rank"])
    rate_idx = _header_index(header, WORKBOOK_COLUMNS["daily_rate"])
    total_idx = _header_index(header, WORKBOOK_COLUMNS["total"])
    month_idx = [_header_index(header, h) for h in MONTH_HEADERS]

    workers: List[ExternalWorker] = []
    skipped_zero = 0
    for row in rows[header_idx + 1:]:
        if not row:
            continue
        person_name = to_text(_cell(row, name_idx))
        if not person_name:
            continue

        monthly = [to_number(_cell(row, idx)) if idx >= 0 else 0 for idx in month_idx]
        if total_idx >= 0:
            total = to_number(_cell(row, total_idx))
        else:
            total = sum(monthly)

        if total == 0:
            skipped_zero += 1
            continue

        workers.append(ExternalWorker(
            id=new_id("ext"),
            person_name=person_name,
            company=to_text(_cell(row, company_idx)),
            rank=to_text(_cell(row, rank_idx)),
            daily_rate=to_number(_cell(row, rate_idx)),
            total_man_days=total,
            project_man_days=total,
            monthly_man_days=monthly,
            daily_man_days_per_month=[],
            cost_category=CostCategory.WIRING,
        ))

    if skipped_zero:
        logger.warning("Skipped %d workers with zero man-days", skipped_zero)
    return workers


def parse_man_hour_workbook(source: Union[str, bytes, io.BytesIO, Any],
                            sheet_name: str = WORKER_SHEET_NAME) -> List[ExternalWorker]:
    """
    Read the worker sheet of a man-hour workbook.

    Raises:
        TimesheetImportError: if the sheet or header row is missing.
    """
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    sheets = pd.read_excel(source, sheet_name=None, header=None, engine="openpyxl")
    if sheet_name not in sheets:
        raise TimesheetImportError(f"Sheet '{sheet_name}' not found.")
    return parse_man_hour_rows(_rows_from_frame(sheets[sheet_name]))


# =============================================================================
# DELIMITED-TEXT IMPORT
# =============================================================================

def locate_columns(header: Sequence[Any]) -> Dict[str, int]:
    """
    Map each field to a header cell by its synonyms.

    A cell equal to a synonym wins over one that merely contains it, and a
    cell claimed by one field is not reused by another. Fields with no
    matching header map to -1.
    """
    cells = [to_text(h).lower() for h in header]
    located = {field_name: -1 for field_name in COLUMN_SYNONYMS}
    claimed = set()

    def claim(field_name, matches):
        for idx, cell in enumerate(cells):
            if idx in claimed or not cell:
                continue
            if any(matches(s.lower(), cell) for s in COLUMN_SYNONYMS[field_name]):
                located[field_name] = idx
                claimed.add(idx)
                return

    for field_name in COLUMN_SYNONYMS:
        claim(field_name, lambda synonym, cell: synonym == cell)
    for field_name in COLUMN_SYNONYMS:
        if located[field_name] == -1:
            claim(field_name, lambda synonym, cell: synonym in cell)
    return located


def parse_delimited_rows(rows: Sequence[Sequence[Any]]) -> List[ExternalWorker]:
    """
    Parse workers from already-split rows; the first row is the header.

    Raises:
        TimesheetImportError: if there is no header or no name column.
    """
    if not rows:
        raise TimesheetImportError("Sheet is empty.")

    columns = locate_columns(rows[0])
    if columns["person_name"] == -1:
        raise TimesheetImportError("Worker name column not found.")

    workers: List[ExternalWorker] = []
    for row in rows[1:]:
        person_name = to_text(_cell(row, columns["person_name"]))
        if not person_name:
            continue
        man_days = to_number(_cell(row, columns["man_days"]))
        workers.append(ExternalWorker(
            id=new_id("ext"),
            person_name=person_name,
            company=to_text(_cell(row, columns["company"])),
            rank=to_text(_cell(row, columns["rank"])),
            daily_rate=to_number(_cell(row, columns["daily_rate"])),
            total_man_days=man_days,
            project_man_days=man_days,
            monthly_man_days=[0] * 12,
            daily_man_days_per_month=[],
            cost_category=normalize_cost_category(_cell(row, columns["cost_category"])),
        ))
    return workers


def parse_delimited_workers(text: str, delimiter: str = ",") -> List[ExternalWorker]:
    """
    Parse workers from delimited text (CSV/TSV).

    Quoted fields may contain the delimiter.
    """
    if not text or not text.strip():
        raise TimesheetImportError("Sheet is empty.")
    df = pd.read_csv(
        io.StringIO(text),
        sep=delimiter,
        header=None,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        quotechar='"',
    )
    return parse_delimited_rows(_rows_from_frame(df))


def fetch_published_sheet(url: str) -> List[ExternalWorker]:
    """Download a published sheet (CSV export URL) and parse its workers."""
    df = pd.read_csv(url, header=None, dtype=str, keep_default_na=False)
    return parse_delimited_rows(_rows_from_frame(df))


# =============================================================================
# RESULT WRAPPERS
# =============================================================================

def _replace_external(labor: LaborData, workers: List[ExternalWorker],
                      source: Optional[str]) -> LaborData:
    return replace(
        labor,
        internal_workers=list(labor.internal_workers),
        external_workers=workers,
        source_file=source,
        imported_at=datetime.now().isoformat(timespec="seconds"),
    )


def import_man_hour_file(source: Union[str, bytes, io.BytesIO, Any], labor: LaborData,
                         file_name: Optional[str] = None) -> ImportResult:
    """Import a man-hour workbook. The current labor data is untouched on failure."""
    try:
        workers = parse_man_hour_workbook(source)
    except TimesheetImportError as e:
        logger.error("Man-hour import failed: %s", e)
        return ImportResult(success=False, error=str(e))
    except (OSError, ValueError) as e:
        logger.error("Could not read workbook %s: %s", file_name or source, e)
        return ImportResult(success=False, error=f"Could not read workbook: {e}")

    name = file_name or (source if isinstance(source, str) else None)
    logger.info("Imported %d external workers from %s", len(workers), name or "<upload>")
    return ImportResult(
        success=True,
        labor=_replace_external(labor, workers, name),
        worker_count=len(workers),
    )


def import_published_sheet(url: str, labor: LaborData) -> ImportResult:
    """Import workers from a published sheet URL."""
    try:
        workers = fetch_published_sheet(url)
    except TimesheetImportError as e:
        logger.error("Published sheet import failed: %s", e)
        return ImportResult(success=False, error=str(e))
    except (OSError, ValueError) as e:
        logger.error("Could not fetch published sheet %s: %s", url, e)
        return ImportResult(success=False, error=f"Could not fetch sheet: {e}")

    logger.info("Imported %d external workers from %s", len(workers), url)
    return ImportResult(
        success=True,
        labor=_replace_external(labor, workers, url),
        worker_count=len(workers),
    )
