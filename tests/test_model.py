"""
Tests for the project data model helpers.
"""
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from profitcalc.data.model import (
    ExternalWorker,
    OutsourcingCost,
    add_item,
    remove_item,
    set_daily_man_days,
    to_number,
    to_record,
    update_item,
)


class TestToNumber:

    @pytest.mark.parametrize("value,expected", [
        (5, 5),
        (2.5, 2.5),
        ("1,200", 1200),
        (" 3.5 ", 3.5),
        ("", 0),
        ("abc", 0),
        (None, 0),
        (float("nan"), 0),
        (True, 1),
    ])
    def test_coercion(self, value, expected):
        assert to_number(value) == expected

    def test_custom_default(self):
        assert to_number("x", default=22) == 22


class TestCollectionEdits:

    def test_add_update_remove(self):
        items = add_item([], OutsourcingCost(id="o1", vendor="A", amount=100))
        items = add_item(items, OutsourcingCost(id="o2", vendor="B", amount=200))

        updated = update_item(items, "o2", amount=250)
        removed = remove_item(updated, "o1")

        assert [i.amount for i in updated] == [100, 250]
        assert items[1].amount == 200
        assert [i.id for i in removed] == ["o2"]


class TestDailyManDays:

    def test_recomputes_month_and_total(self):
        worker = ExternalWorker(id="e", daily_rate=100_000)

        worker = set_daily_man_days(worker, 0, 0, 1)
        worker = set_daily_man_days(worker, 0, 14, 0.5)
        worker = set_daily_man_days(worker, 2, 30, 1.5)

        assert worker.monthly_man_days[0] == 1.5
        assert worker.monthly_man_days[2] == 1.5
        assert worker.total_man_days == 3
        assert len(worker.daily_man_days_per_month) == 12

    def test_overwrites_cell(self):
        worker = set_daily_man_days(ExternalWorker(id="e"), 5, 3, 2)
        worker = set_daily_man_days(worker, 5, 3, 0)

        assert worker.total_man_days == 0

    @pytest.mark.parametrize("month,day", [(12, 0), (-1, 0), (0, 31)])
    def test_out_of_range(self, month, day):
        with pytest.raises(ValueError):
            set_daily_man_days(ExternalWorker(id="e"), month, day, 1)


class TestToRecord:

    def test_camel_case_and_enum_values(self):
        record = to_record(ExternalWorker(id="e", person_name="이"))

        assert record["personName"] == "이"
        assert record["costCategory"] == "wiring"
        assert record["projectManDays"] is None
