"""
Tests for project record migration.
"""
import json
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.config import SCHEMA_VERSION
from profitcalc.data.migration import (
    ProjectFormatError,
    default_record,
    detect_version,
    load_project_json,
    migrate_project,
    migrate_record,
)
from profitcalc.data.model import CostCategory
from profitcalc.metrics.labor import internal_worker_cost


V1_RECORD = {
    "projectInfo": {"projectName": "구형 프로젝트", "contractAmount": 80_000_000},
    "manHourCost": {
        "workers": [
            {"id": "w1", "personName": "박기사", "company": "협력사", "rank": "기사",
             "dailyRate": 200_000, "totalManDays": 5,
             "monthlyManDays": [5, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0, 0]},
        ],
        "sourceFile": "old.xlsx",
    },
    "designCosts": [
        {"id": "d1", "description": "도면 작성", "hours": 16, "hourlyRate": 30_000},
    ],
    "budgetAllocation": {"manHourCost": 3_000_000, "designCost": 1_000_000},
}


class TestDetectVersion:

    def test_tagged(self):
        assert detect_version({"schemaVersion": 2}) == 2

    def test_single_worker_list_is_v1(self):
        assert detect_version({"manHourCost": {"workers": []}}) == 1

    def test_hourly_lists_are_v1(self):
        assert detect_version({"panelCosts": []}) == 1

    def test_untagged_current_shape(self):
        assert detect_version({"manHourCost": {"internalWorkers": [], "externalWorkers": []}}) == 2

    def test_newer_version_reads_as_current(self):
        assert detect_version({"schemaVersion": 99}) == SCHEMA_VERSION


class TestDefaults:

    def test_empty_record_gets_defaults(self):
        assert migrate_record({}) == default_record()

    def test_partial_nested_object_keeps_values(self):
        record = migrate_record({"overheadAndMargin": {"overheadRate": 12}})

        assert record["overheadAndMargin"]["overheadRate"] == 12
        assert record["overheadAndMargin"]["warrantyReserveRate"] == default_record()["overheadAndMargin"]["warrantyReserveRate"]

    def test_missing_collections_are_empty(self):
        record = migrate_record({"projectInfo": {"projectName": "x"}})

        assert record["electricalMaterials"] == []
        assert record["manHourCost"]["internalWorkers"] == []
        assert record["schemaVersion"] == SCHEMA_VERSION


class TestLegacyMigration:

    def test_workers_become_external(self):
        project = migrate_project(V1_RECORD)
        labor = project.man_hour_cost

        assert len(labor.external_workers) == 1
        worker = labor.external_workers[0]
        assert worker.id == "w1"
        assert worker.daily_rate == 200_000
        assert worker.cost_category == CostCategory.WIRING
        assert labor.source_file == "old.xlsx"

    def test_hourly_items_keep_their_cost(self):
        project = migrate_project(V1_RECORD)

        internal = project.man_hour_cost.internal_workers
        assert len(internal) == 1
        assert internal[0].cost_category == CostCategory.DESIGN
        assert internal[0].project_hours == 16
        assert internal_worker_cost(internal[0]) == 16 * 30_000

    def test_labor_budget_moves_to_wiring(self):
        record = migrate_record(V1_RECORD)
        budget = record["budgetAllocation"]

        assert budget["wiringCost"] == 3_000_000
        assert budget["designCost"] == 1_000_000
        assert "manHourCost" not in budget

    def test_labor_budget_adds_to_existing_wiring(self):
        record = migrate_record({
            "schemaVersion": 2,
            "budgetAllocation": {"manHourCost": 3_000_000, "wiringCost": 1_000_000},
        })
        assert record["budgetAllocation"]["wiringCost"] == 4_000_000

    def test_untagged_workers_default_to_wiring(self):
        record = migrate_record({
            "manHourCost": {"internalWorkers": [{"id": "i1", "personName": "김"}],
                            "externalWorkers": []},
        })
        assert record["manHourCost"]["internalWorkers"][0]["costCategory"] == "wiring"

    def test_source_not_mutated(self):
        before = json.dumps(V1_RECORD, sort_keys=True)
        migrate_record(V1_RECORD)
        assert json.dumps(V1_RECORD, sort_keys=True) == before


class TestIdempotence:

    def test_migrating_twice_changes_nothing(self):
        once = migrate_record(V1_RECORD)
        assert migrate_record(once) == once

    def test_current_record_unchanged(self):
        current = migrate_record({"projectInfo": {"projectName": "현행", "contractAmount": 1}})
        assert migrate_record(current) == current


class TestLoadProjectJson:

    def test_invalid_json(self):
        with pytest.raises(ProjectFormatError):
            load_project_json("{not json")

    def test_not_an_object(self):
        with pytest.raises(ProjectFormatError):
            load_project_json("[1, 2, 3]")

    def test_valid(self):
        project = load_project_json(json.dumps(V1_RECORD, ensure_ascii=False))
        assert project.project_info.project_name == "구형 프로젝트"
        assert project.schema_version == SCHEMA_VERSION
