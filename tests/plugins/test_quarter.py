"""Tests for the built-in quarter precision plugin."""

from __future__ import annotations

from datetime import datetime

import pytest

from calinterval.domain.algebra import Relation, relation
from calinterval.domain.interval import Interval
from calinterval.domain.precision import DAY, MONTH, YEAR
from calinterval.domain.registry import PrecisionRegistry
from calinterval.errors import InvalidPrecisionError, ParseError
from calinterval.plugins.builtins.quarter import QUARTER, QuarterPlugin, QuarterUnit, register
from calinterval.plugins.manager import PluginManager


class TestRegister:
    def test_inserted_after_year(self, quarter_registry: PrecisionRegistry) -> None:
        assert quarter_registry.precisions()[:3] == [YEAR, QUARTER, MONTH]

    def test_idempotent(self) -> None:
        registry = PrecisionRegistry([register, register])
        assert registry.precisions().count(QUARTER) == 1

    def test_not_enabled_by_default(self) -> None:
        with pytest.raises(ParseError):
            Interval.parse("2019Q1")

    def test_compare(self, quarter_registry: PrecisionRegistry) -> None:
        assert quarter_registry.compare(YEAR, QUARTER) == "lt"
        assert quarter_registry.compare(QUARTER, MONTH) == "lt"


@pytest.mark.usefixtures("quarter_registry")
class TestQuarterIntervals:
    def test_parse_single(self) -> None:
        interval = Interval.parse("2019Q2")
        assert interval.first == datetime(2019, 4, 1)
        assert interval.last == datetime(2019, 6, 30, 23, 59, 59, 999999)
        assert interval.precision == QUARTER

    @pytest.mark.parametrize("text", ["2019Q1", "2019Q1/Q3", "2019Q4/2020Q1", "2019Q1/2021Q2"])
    def test_round_trip(self, text: str) -> None:
        assert str(Interval.parse(text)) == text

    @pytest.mark.parametrize("text", ["2019Q0", "2019Q5", "2019Q1/Q5"])
    def test_rejects_bad_quarter(self, text: str) -> None:
        with pytest.raises(ParseError):
            Interval.parse(text)

    def test_new_truncates_to_quarter(self) -> None:
        assert str(Interval.new(datetime(2019, 8, 17, 12), QUARTER)) == "2019Q3"

    def test_count(self) -> None:
        assert Interval.parse("2019Q1/2020Q2").count() == 6

    def test_next_and_prev(self) -> None:
        assert Interval.parse("2019Q4").next() == Interval.parse("2020Q1")
        assert Interval.parse("2019Q1/Q2").next() == Interval.parse("2019Q3/Q4")
        assert Interval.parse("2019Q1").prev(5) == Interval.parse("2017Q4")

    def test_iter(self) -> None:
        assert [str(q) for q in Interval.parse("2019Q1/Q4")] == [
            "2019Q1",
            "2019Q2",
            "2019Q3",
            "2019Q4",
        ]

    def test_nest_and_enclosing(self) -> None:
        quarter = Interval.parse("2019Q2")
        assert str(quarter.nest(MONTH)) == "2019-04/06"
        assert Interval.parse("2019-05-17").enclosing(QUARTER) == quarter
        with pytest.raises(InvalidPrecisionError):
            quarter.nest(YEAR)

    def test_relation(self) -> None:
        assert relation(Interval.parse("2019Q1"), Interval.parse("2019Q2")) is Relation.MEETS

    def test_day_text_unaffected(self) -> None:
        assert Interval.parse("2019-04-01").precision == DAY


class TestQuarterPlugin:
    def test_enables_quarter_via_manager(self) -> None:
        pm = PluginManager()
        pm.register_plugin(QuarterPlugin())
        registry = PrecisionRegistry(plugin_manager=pm)
        assert QUARTER in registry.precisions()


class TestQuarterUnit:
    def test_to_iso(self) -> None:
        assert QuarterUnit().to_iso("2019Q3") == (QUARTER, "2019-07-01 00:00:00.000000")
        assert QuarterUnit().to_iso("2019-07") is None

    def test_format_left_right_across_years(self) -> None:
        assert QuarterUnit().format_left_right("2019Q4", "2020Q1") is None

    def test_truncate(self) -> None:
        assert QuarterUnit().truncate(datetime(2019, 12, 31, 23), QUARTER) == datetime(
            2019, 10, 1
        )
