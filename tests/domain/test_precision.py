"""Tests for precision values and their textual form."""

import pytest

from calinterval.domain.precision import (
    BUILTIN_PRECISIONS,
    DAY,
    MICROSECOND,
    MILLISECOND,
    Precision,
    microsecond,
)
from calinterval.errors import InvalidPrecisionError


class TestPrecision:
    def test_builtins_coarsest_first(self) -> None:
        assert [str(p) for p in BUILTIN_PRECISIONS] == [
            "year",
            "month",
            "day",
            "hour",
            "minute",
            "second",
            "microsecond(1)",
            "microsecond(2)",
            "microsecond(3)",
            "microsecond(4)",
            "microsecond(5)",
            "microsecond(6)",
        ]

    def test_aliases(self) -> None:
        assert MILLISECOND == microsecond(3)
        assert MICROSECOND == microsecond(6)

    def test_hashable_value(self) -> None:
        assert {Precision("day"), DAY} == {DAY}

    @pytest.mark.parametrize("scale", [0, 7, -1])
    def test_microsecond_scale_out_of_range(self, scale: int) -> None:
        with pytest.raises(InvalidPrecisionError):
            microsecond(scale)
