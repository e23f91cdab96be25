"""
Tests for project save/load.
"""
import json
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.data.model import (
    CostCategory,
    ElectricalMaterial,
    ExternalWorker,
    InternalWorker,
    LaborData,
    ProjectData,
    ProjectInfo,
)
from profitcalc.data.persistence import (
    list_projects,
    load_project,
    load_project_text,
    load_uploaded_project,
    project_filename,
    project_to_json,
    save_project,
)


@pytest.fixture
def project():
    return ProjectData(
        project_info=ProjectInfo(project_name="A라인 제어반", client_name="고객", contract_amount=50_000_000),
        electrical_materials=[ElectricalMaterial(id="mat_1", category="차단기", item_name="MCCB",
                                                 quantity=3, unit_price=45_000)],
        man_hour_cost=LaborData(
            internal_workers=[InternalWorker(id="int_1", person_name="김", project_hours=40,
                                             cost_category=CostCategory.DESIGN, employee_id="emp_1")],
            external_workers=[ExternalWorker(id="ext_1", person_name="이", daily_rate=200_000,
                                             total_man_days=5, project_man_days=4)],
        ),
    )


class TestSaveLoad:

    def test_round_trip(self, project, tmp_path):
        path = tmp_path / "project.json"

        saved = save_project(project, path)
        loaded = load_project(path)

        assert saved.success
        assert loaded.success
        assert loaded.project == project
        assert loaded.file_path == str(path)

    def test_camel_case_on_disk(self, project):
        record = json.loads(project_to_json(project))

        assert "projectInfo" in record
        assert record["manHourCost"]["externalWorkers"][0]["projectManDays"] == 4
        assert record["manHourCost"]["internalWorkers"][0]["costCategory"] == "design"
        assert record["schemaVersion"] == 3

    def test_default_location(self, project, tmp_path, monkeypatch):
        from profitcalc.config import config
        monkeypatch.setattr(config, "data_dir", tmp_path)

        result = save_project(project)

        assert result.success
        assert list_projects() == [tmp_path / "projects" / "A라인_제어반.json"]

    def test_missing_file(self, tmp_path):
        result = load_project(tmp_path / "nope.json")

        assert not result.success
        assert result.error

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("not json", encoding="utf-8")

        result = load_project(path)

        assert not result.success
        assert result.project is None

    def test_upload_bytes_with_bom(self, project):
        data = project_to_json(project).encode("utf-8-sig")

        result = load_project_text(data, "upload.json")

        assert result.success
        assert result.project == project


class TestUploads:

    def test_save_after_upload_lands_in_projects_dir(self, project, tmp_path, monkeypatch):
        from profitcalc.config import config
        monkeypatch.setattr(config, "data_dir", tmp_path)
        monkeypatch.chdir(tmp_path)
        data = project_to_json(project).encode("utf-8")

        loaded = load_uploaded_project(data, "uploaded.json")
        saved = save_project(loaded.project, loaded.file_path)

        assert saved.success
        assert Path(saved.file_path) == tmp_path / "projects" / "uploaded.json"
        assert not (tmp_path / "uploaded.json").exists()
        assert list_projects() == [tmp_path / "projects" / "uploaded.json"]

    def test_upload_name_stripped_of_directories(self, project, tmp_path):
        data = project_to_json(project)

        loaded = load_uploaded_project(data, "../../elsewhere/p.json", tmp_path)

        assert loaded.success
        assert loaded.file_path == str(tmp_path / "p.json")

    def test_failed_upload_keeps_error(self, tmp_path):
        loaded = load_uploaded_project(b"not json", "bad.json", tmp_path)

        assert not loaded.success
        assert loaded.project is None


class TestFilenames:

    def test_sanitized(self):
        project = ProjectData(project_info=ProjectInfo(project_name="A/B 라인: 2차"))
        assert project_filename(project) == "A_B_라인_2차.json"

    def test_untitled(self):
        assert project_filename(ProjectData()) == "untitled.json"

    def test_list_missing_directory(self, tmp_path):
        assert list_projects(tmp_path / "missing") == []
