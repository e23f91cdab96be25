"""
Layout components: header, project sidebar, section headers.
"""
import streamlit as st
from typing import Optional

from profitcalc.config import config
from profitcalc.data.persistence import (
    list_projects,
    load_project,
    load_uploaded_project,
    save_project,
)
from profitcalc.data.schema import display_validation_result, validate_project
from profitcalc.ui.state import get_project, get_state, open_project, reset_project, set_project


# =============================================================================
# HEADER AND SIDEBAR
# =============================================================================

def render_header(title: str):
    """Page title with the open project's name."""
    project = get_project()
    col1, col2 = st.columns([3, 1])

    with col1:
        st.title(title)

    with col2:
        name = project.project_info.project_name or "(이름 없음)"
        st.caption(f"프로젝트: {name}")
        path = get_state("project_path")
        if path:
            st.caption(f"파일: {path}")


def render_project_sidebar():
    """Save, open and reset the session project."""
    st.sidebar.markdown("### 프로젝트 파일")

    if st.sidebar.button("💾 저장", key="sidebar_save", use_container_width=True):
        result = save_project(get_project(), get_state("project_path"))
        if result.success:
            set_project(get_project(), result.file_path)
            st.sidebar.success(f"저장됨: {result.file_path}")
        else:
            st.sidebar.error(f"저장 실패: {result.error}")

    saved = list_projects(config.projects_dir)
    if saved:
        choice = st.sidebar.selectbox(
            "저장된 프로젝트", saved, format_func=lambda p: p.name, key="sidebar_saved",
        )
        if st.sidebar.button("📂 열기", key="sidebar_open", use_container_width=True):
            _apply_load(load_project(choice))

    upload = st.sidebar.file_uploader("JSON 불러오기", type=["json"], key="sidebar_upload")
    if upload is not None and st.sidebar.button("⬆ 불러오기", key="sidebar_load_upload"):
        _apply_load(load_uploaded_project(upload.getvalue(), upload.name))

    if st.sidebar.button("🆕 새 프로젝트", key="sidebar_reset", use_container_width=True):
        reset_project()
        st.rerun()


def _apply_load(result):
    if not result.success:
        st.sidebar.error(f"불러오기 실패: {result.error}")
        return
    open_project(result.project, result.file_path)
    validation = validate_project(result.project)
    if not validation["is_valid"] or validation["warnings"]:
        display_validation_result(validation)


def section_header(title: str, description: Optional[str] = None):
    """Render section header with optional description."""
    st.subheader(title)
    if description:
        st.caption(description)
