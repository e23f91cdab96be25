"""
Standard chart wrappers using Plotly.
"""
import plotly.express as px
import plotly.graph_objects as go
import pandas as pd

from profitcalc.metrics.budget_reconciliation import STATUS_CONFIG


# =============================================================================
# CHART THEME
# =============================================================================

CHART_COLORS = {
    "primary": "#1f4e79",
    "secondary": "#ff7f0e",
    "success": "#28a745",
    "danger": "#dc3545",
    "neutral": "#6c757d",
}

CHART_TEMPLATE = "plotly_white"

DEFAULT_LAYOUT = {
    "template": CHART_TEMPLATE,
    "font": {"family": "Arial, sans-serif", "size": 12},
    "margin": {"l": 50, "r": 30, "t": 40, "b": 50},
    "hoverlabel": {"bgcolor": "white"},
}


def apply_layout(fig: go.Figure, **kwargs) -> go.Figure:
    """Apply standard layout to figure."""
    layout = {**DEFAULT_LAYOUT, **kwargs}
    fig.update_layout(**layout)
    return fig


def cost_breakdown_bar(cost_lines: pd.DataFrame, title: str = "원가 구성") -> go.Figure:
    """Horizontal bar of cost lines (output of ProfitSummary.to_frame)."""
    df = cost_lines[cost_lines["amount"] != 0]
    fig = px.bar(
        df, x="amount", y="item", color="section", orientation="h",
        title=title,
        color_discrete_map={"직접비": CHART_COLORS["primary"], "간접비": CHART_COLORS["secondary"]},
    )
    fig.update_layout(yaxis={"categoryorder": "total ascending"})
    return apply_layout(fig)


def budget_vs_actual_bar(comparisons: pd.DataFrame, title: str = "배분 대비 실제 원가") -> go.Figure:
    """Grouped bars of budget and actual, actual colored by status."""
    fig = go.Figure()
    fig.add_trace(go.Bar(
        x=comparisons["label"], y=comparisons["budget"],
        name="배분", marker_color=CHART_COLORS["neutral"],
    ))
    fig.add_trace(go.Bar(
        x=comparisons["label"], y=comparisons["actual"],
        name="실제",
        marker_color=[STATUS_CONFIG[s]["color"] for s in comparisons["status"]],
    ))
    fig.update_layout(barmode="group", title=title)
    return apply_layout(fig)


def margin_gauge(profit_rate: float, target: float) -> go.Figure:
    """Gauge of profit rate with the target margin as threshold."""
    fig = go.Figure(go.Indicator(
        mode="gauge+number+delta",
        value=profit_rate,
        number={"suffix": "%"},
        delta={"reference": target, "suffix": "%p"},
        title={"text": "이익률"},
        gauge={
            "axis": {"range": [min(0, profit_rate), max(50, profit_rate, target)]},
            "bar": {"color": CHART_COLORS["success"] if profit_rate >= target else CHART_COLORS["danger"]},
            "threshold": {"line": {"color": CHART_COLORS["primary"], "width": 2}, "value": target},
        },
    ))
    return apply_layout(fig, height=240)
