"""
Project save/load.

Projects are stored as one JSON file each, camelCase keys, UTF-8. Loading
always runs the migration chain, so files written by older releases open
in the current shape.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Union

from profitcalc.config import config
from profitcalc.data.migration import ProjectFormatError, load_project_json
from profitcalc.data.model import ProjectData, to_record

logger = logging.getLogger(__name__)


@dataclass
class SaveResult:
    success: bool
    file_path: Optional[str] = None
    error: Optional[str] = None


@dataclass
class LoadResult:
    success: bool
    project: Optional[ProjectData] = None
    file_path: Optional[str] = None
    error: Optional[str] = None


def project_to_json(project: ProjectData) -> str:
    """Serialize a project the way it is written to disk."""
    return json.dumps(to_record(project), indent=2, ensure_ascii=False)


def project_filename(project: ProjectData) -> str:
    """Safe file name derived from the project name."""
    name = project.project_info.project_name.strip() or "untitled"
    name = re.sub(r"[\\/:*?\"<>|\s]+", "_", name)
    return f"{name}.json"


def save_project(project: ProjectData,
                 path: Optional[Union[str, Path]] = None) -> SaveResult:
    """
    Write a project to disk.

    Args:
        project: Project to save
        path: Target file; defaults to the projects directory
    """
    target = Path(path) if path else config.projects_dir / project_filename(project)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(project_to_json(project), encoding="utf-8")
    except OSError as e:
        logger.error("Failed to save project to %s: %s", target, e)
        return SaveResult(success=False, file_path=str(target), error=str(e))

    logger.info("Saved project to %s", target)
    return SaveResult(success=True, file_path=str(target))


def load_project(path: Union[str, Path]) -> LoadResult:
    """
    Read and migrate a project file.

    Never raises; failures come back as ``LoadResult(success=False)`` and
    the caller keeps its current state.
    """
    source = Path(path)
    try:
        text = source.read_text(encoding="utf-8")
    except OSError as e:
        logger.error("Failed to read project %s: %s", source, e)
        return LoadResult(success=False, file_path=str(source), error=str(e))

    return load_project_text(text, file_path=str(source))


def load_project_text(text: Union[str, bytes],
                      file_path: Optional[str] = None) -> LoadResult:
    """Migrate project JSON already in memory (e.g. an uploaded file)."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            return LoadResult(success=False, file_path=file_path,
                              error=f"Invalid project file: {e}")
    try:
        project = load_project_json(text)
    except ProjectFormatError as e:
        logger.error("Unreadable project %s: %s", file_path or "<upload>", e)
        return LoadResult(success=False, file_path=file_path, error=str(e))

    logger.info("Loaded project '%s' (%d internal, %d external workers)",
                project.project_info.project_name,
                len(project.man_hour_cost.internal_workers),
                len(project.man_hour_cost.external_workers))
    return LoadResult(success=True, project=project, file_path=file_path)


def uploaded_project_path(name: str,
                          directory: Optional[Union[str, Path]] = None) -> Path:
    """Where an uploaded file is saved: its base name inside the projects directory."""
    root = Path(directory) if directory else config.projects_dir
    return root / (Path(name).name or "untitled.json")


def load_uploaded_project(data: Union[str, bytes], name: str,
                          directory: Optional[Union[str, Path]] = None) -> LoadResult:
    """
    Migrate an uploaded project file.

    The returned file path sits in the projects directory under the
    upload's base name; a later save writes there.
    """
    return load_project_text(data, file_path=str(uploaded_project_path(name, directory)))


def list_projects(directory: Optional[Union[str, Path]] = None) -> List[Path]:
    """Saved project files, newest first."""
    root = Path(directory) if directory else config.projects_dir
    if not root.exists():
        return []
    return sorted(root.glob("*.json"), key=lambda p: p.stat().st_mtime, reverse=True)
