"""
Application configuration management.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field


def _default_data_dir() -> Path:
    env_dir = os.getenv("DATA_DIR")
    if env_dir:
        return Path(env_dir)
    return Path("./data")


@dataclass
class AppConfig:
    """Application configuration with environment overrides."""
    
    # Paths
    data_dir: Path = field(default_factory=_default_data_dir)
    roster_file: str = field(default_factory=lambda: os.getenv("ROSTER_FILE", "employee_master.json"))
    
    # Environment
    app_env: str = field(default_factory=lambda: os.getenv("APP_ENV", "dev"))
    
    # Indirect cost and margin defaults (%)
    default_overhead_rate: float = field(default_factory=lambda: float(os.getenv("DEFAULT_OVERHEAD_RATE", "10")))
    default_warranty_reserve_rate: float = field(default_factory=lambda: float(os.getenv("DEFAULT_WARRANTY_RESERVE_RATE", "3")))
    default_margin_rate: float = field(default_factory=lambda: float(os.getenv("DEFAULT_MARGIN_RATE", "15")))
    
    # Internal worker defaults
    working_days_per_month: int = 22
    worker_overhead_rate: float = 15.0
    hours_per_day: float = 8.0
    
    @property
    def projects_dir(self) -> Path:
        return self.data_dir / "projects"
    
    @property
    def roster_path(self) -> Path:
        return self.data_dir / self.roster_file
    
    @property
    def is_prod(self) -> bool:
        return self.app_env.lower() == "prod"


# Global config instance
config = AppConfig()


# Current on-disk project schema
SCHEMA_VERSION = 3

# Labor cost categories (report labels)
COST_CATEGORY_LABELS = {
    "design": "전장설계비",
    "panel": "판넬 제작비",
    "wiring": "기체 배선비",
    "setup": "시운전/셋업",
    "other": "기타 공수",
}

# Budget allocation fields in report order: (field, label)
BUDGET_LABELS = [
    ("design_cost", "전장설계비"),
    ("electrical_material", "전기 자재비"),
    ("panel_cost", "판넬 제작비"),
    ("wiring_cost", "기체 배선비"),
    ("travel_expense", "출장 경비"),
    ("setup_cost", "시운전/셋업"),
    ("outsourcing_cost", "외주 가공비"),
    ("delivery_cost", "운반/포장비"),
    ("consumable_cost", "소모품비"),
    ("other_labor_cost", "기타 공수"),
    ("overhead", "간접비"),
]

# Time-sheet workbook import
WORKER_SHEET_NAME = "작업자 목록"
HEADER_MARKER = "작업자 이름"
HEADER_SCAN_ROWS = 10
WORKBOOK_COLUMNS = {
    "company": "소속",
    "rank": "직급",
    "daily_rate": "단가",
    "total": "합계",
}
MONTH_HEADERS = [f"{m}월" for m in range(1, 13)]

# Published-sheet import: case-insensitive substring synonyms per field.
# Checked in order; the name field is last since "name" also appears in
# headers like "Company Name".
COLUMN_SYNONYMS = {
    "company": ["업체", "소속", "company", "vendor"],
    "rank": ["직급", "rank", "grade"],
    "daily_rate": ["일당", "단가", "rate"],
    "man_days": ["투입", "일수", "공수", "days"],
    "cost_category": ["비용", "항목", "category"],
    "person_name": ["이름", "성명", "name"],
}

# Free-text category normalisation, checked in order
CATEGORY_KEYWORDS = [
    ("design", ["설계", "design"]),
    ("panel", ["판넬", "panel"]),
    ("wiring", ["배선", "wiring"]),
    ("setup", ["셋업", "시운전", "setup", "commissioning"]),
    ("other", ["기타", "other"]),
]

# Excel number formats: won amounts, percentages, head counts, man-hours
EXCEL_CURRENCY_FORMAT = '#,##0"원"'
EXCEL_PERCENT_FORMAT = "0.0"
EXCEL_COUNT_FORMAT = "#,##0"
EXCEL_QUANTITY_FORMAT = "#,##0.0"
