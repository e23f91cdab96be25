"""
Session state management for Streamlit app.

The session holds exactly one ProjectData. Edits replace it wholesale via
``set_project``; derived figures are recomputed on every render.
"""
import streamlit as st
from typing import Any, Optional

from profitcalc.data.model import ProjectData
from profitcalc.data.roster import RosterSnapshot, load_roster, save_roster
from profitcalc.metrics.profitability import ProfitSummary, compute_profit_summary


# =============================================================================
# STATE KEYS
# =============================================================================

STATE_KEYS = {
    "project": "project",
    "project_path": "project_path",
    "roster": "roster",
    "project_rev": "project_rev",  # bumped when a different project is opened
}


# =============================================================================
# DEFAULT VALUES
# =============================================================================

DEFAULTS = {
    "project": None,
    "project_path": None,
    "roster": None,
    "project_rev": 0,
}


# =============================================================================
# STATE HELPERS
# =============================================================================

def init_state():
    """Initialize all session state keys with defaults."""
    for key, default in DEFAULTS.items():
        if key not in st.session_state:
            st.session_state[key] = default
    if st.session_state["project"] is None:
        st.session_state["project"] = ProjectData()
    if st.session_state["roster"] is None:
        st.session_state["roster"] = load_roster()


def get_state(key: str) -> Any:
    """Get state value with default fallback."""
    init_state()
    return st.session_state.get(key, DEFAULTS.get(key))


def set_state(key: str, value: Any):
    """Set state value."""
    st.session_state[key] = value


def reset_project():
    """Discard the current project and start from defaults."""
    open_project(ProjectData(), None)


# =============================================================================
# PROJECT
# =============================================================================

def get_project() -> ProjectData:
    return get_state("project")


def set_project(project: ProjectData, path: Optional[str] = None):
    """Replace the whole project record."""
    set_state("project", project)
    if path is not None:
        set_state("project_path", path)


def open_project(project: ProjectData, path: Optional[str] = None):
    """Swap in a different project; input widgets start over from its values."""
    set_state("project", project)
    set_state("project_path", path)
    set_state("project_rev", get_state("project_rev") + 1)


def widget_key(name: str) -> str:
    """Input widget key scoped to the currently open project."""
    return f"{name}_{get_state('project_rev')}"


def get_summary() -> ProfitSummary:
    """Profit summary of the current project, computed fresh."""
    return compute_profit_summary(get_project())


# =============================================================================
# ROSTER
# =============================================================================

def get_roster() -> RosterSnapshot:
    return get_state("roster")


def set_roster(snapshot: RosterSnapshot) -> bool:
    """Store and persist a new roster snapshot."""
    set_state("roster", snapshot)
    return save_roster(snapshot)
