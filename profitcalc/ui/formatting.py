"""
Consistent number and display formatting.
"""
import pandas as pd
from typing import Union

from profitcalc.metrics.budget_reconciliation import STATUS_CONFIG


# =============================================================================
# NUMBER FORMATTERS
# =============================================================================

def fmt_currency(value: Union[float, int, None]) -> str:
    """Format as won: ₩1,234"""
    if value is None or pd.isna(value):
        return "—"
    return f"₩{value:,.0f}"


def fmt_man_days(value: Union[float, int, None]) -> str:
    """Format man-days: 12.5 M/D"""
    if value is None or pd.isna(value):
        return "—"
    return f"{value:,.1f} M/D"


def fmt_percent(value: Union[float, int, None], decimals: int = 1) -> str:
    """Format percentage: 12.3%"""
    if value is None or pd.isna(value):
        return "—"
    return f"{value:,.{decimals}f}%"


def fmt_count(value: Union[float, int, None], unit: str = "") -> str:
    """Format count: 1,234"""
    if value is None or pd.isna(value):
        return "—"
    return f"{int(value):,}{unit}"


def fmt_variance(value: Union[float, int, None], is_percent: bool = False) -> str:
    """Format variance with +/- sign."""
    if value is None or pd.isna(value):
        return "—"
    
    sign = "+" if value > 0 else ""
    if is_percent:
        return f"{sign}{value:,.1f}%p"
    return f"{sign}₩{value:,.0f}"


def status_badge(status: str) -> str:
    """Icon and label for a comparison status."""
    cfg = STATUS_CONFIG.get(status, STATUS_CONFIG["match"])
    return f"{cfg['icon']} {cfg['label']}"


# =============================================================================
# DATAFRAME FORMATTERS
# =============================================================================

def format_comparison_df(df: pd.DataFrame) -> pd.DataFrame:
    """Format a comparisons table for display."""
    df = df.copy()
    for col in ["budget", "actual"]:
        if col in df.columns:
            df[col] = df[col].apply(fmt_currency)
    if "difference" in df.columns:
        df["difference"] = df["difference"].apply(fmt_variance)
    if "usage_pct" in df.columns:
        df["usage_pct"] = df["usage_pct"].apply(fmt_percent)
    if "status" in df.columns:
        df["status"] = df["status"].apply(status_badge)
    return df.rename(columns={
        "label": "항목", "budget": "배분", "actual": "실제", "difference": "차이",
        "status": "상태", "usage_pct": "사용률",
    })
