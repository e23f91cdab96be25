"""
Tests for number-input seeding in the UI editors.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.data.model import ProjectInfo
from profitcalc.ui.components import input_result, input_seed


class TestNumberInputSeeding:
    """Rendering an input must not change the stored value."""

    @pytest.mark.parametrize("stored", [12.5, -3_000_000, 50_000_000, 0, 0.25])
    def test_stored_value_survives_render(self, stored):
        assert input_result(input_seed(stored)) == stored

    def test_whole_values_come_back_as_int(self):
        assert isinstance(input_result(input_seed(800)), int)
        assert isinstance(input_result(7.0), int)

    def test_fraction_kept(self):
        assert input_result(input_seed(12.5)) == 12.5

    def test_loaded_project_info_unchanged(self):
        info = ProjectInfo(contract_amount=-1_000_000, original_estimate=90_000_000,
                           total_personnel=3, estimated_man_hours=412.5)

        rendered = ProjectInfo(
            contract_amount=input_result(input_seed(info.contract_amount)),
            original_estimate=input_result(input_seed(info.original_estimate)),
            total_personnel=input_result(input_seed(info.total_personnel)),
            estimated_man_hours=input_result(input_seed(info.estimated_man_hours)),
        )

        assert rendered == info

    def test_blank_seeds_zero(self):
        assert input_seed(None) == 0.0
