"""
Tests for project validation.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.data.model import (
    ConsumableCost,
    ExternalWorker,
    InternalWorker,
    LaborData,
    ProjectData,
    ProjectInfo,
)
from profitcalc.data.schema import (
    ProjectValidationError,
    find_negative_fields,
    validate_project,
)


class TestFindNegativeFields:

    def test_clean_project(self):
        assert find_negative_fields(ProjectData()) == []

    def test_negative_line_item(self):
        project = ProjectData(consumable_costs=[ConsumableCost(id="c", item_name="테이프", amount=-100)])

        found = find_negative_fields(project)

        assert len(found) == 1
        assert "테이프" in found[0]

    def test_negative_worker_fields(self):
        project = ProjectData(man_hour_cost=LaborData(
            external_workers=[ExternalWorker(id="e", person_name="이", daily_rate=-1,
                                             project_man_days=-2)],
        ))
        assert len(find_negative_fields(project)) == 2


class TestValidateProject:

    def test_valid_project(self):
        result = validate_project(ProjectData())

        assert result["is_valid"] is True
        assert result["errors"] == []
        assert result["warnings"] == []

    def test_negative_contract_is_error(self):
        project = ProjectData(project_info=ProjectInfo(contract_amount=-1))

        result = validate_project(project)

        assert result["is_valid"] is False
        assert len(result["errors"]) == 1

    def test_strict_mode_raises(self):
        project = ProjectData(project_info=ProjectInfo(original_estimate=-5))

        with pytest.raises(ProjectValidationError):
            validate_project(project, strict=True)

    def test_negative_items_only_warn(self):
        project = ProjectData(consumable_costs=[ConsumableCost(id="c", amount=-100)])

        result = validate_project(project, strict=True)

        assert result["is_valid"] is True
        assert len(result["warnings"]) == 1

    def test_zero_working_days_warns(self):
        project = ProjectData(man_hour_cost=LaborData(
            internal_workers=[InternalWorker(id="i", person_name="김", working_days_per_month=0)],
        ))
        assert any("김" in w for w in validate_project(project)["warnings"])

    def test_zero_working_days_with_manual_rate(self):
        project = ProjectData(man_hour_cost=LaborData(
            internal_workers=[InternalWorker(id="i", working_days_per_month=0,
                                             manual_daily_rate=100_000)],
        ))
        assert validate_project(project)["warnings"] == []
