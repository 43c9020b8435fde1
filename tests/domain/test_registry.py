"""Tests for the precision registry and the current-registry context."""

from datetime import datetime

import pytest

from calinterval.domain.precision import (
    BUILTIN_PRECISIONS,
    DAY,
    MILLISECOND,
    MONTH,
    YEAR,
    Precision,
)
from calinterval.domain.registry import (
    PrecisionEntry,
    PrecisionRegistry,
    get_registry,
    set_default_registry,
    use_registry,
)
from calinterval.domain.units import FixedWidthUnit
from calinterval.errors import (
    InvalidPrecisionError,
    ParseError,
    RegistryConfigError,
    UnregisteredPrecisionError,
)

FORTNIGHT = Precision("fortnight")


def _drop_month(entries: list[PrecisionEntry]) -> list[PrecisionEntry]:
    return [entry for entry in entries if entry[0] != MONTH]


class TestOrdering:
    def test_builtins(self, registry: PrecisionRegistry) -> None:
        assert registry.precisions() == list(BUILTIN_PRECISIONS)

    def test_compare(self, registry: PrecisionRegistry) -> None:
        assert registry.compare(YEAR, DAY) == "lt"
        assert registry.compare(MILLISECOND, DAY) == "gt"
        assert registry.compare(DAY, DAY) == "eq"

    def test_compare_unregistered(self, registry: PrecisionRegistry) -> None:
        with pytest.raises(UnregisteredPrecisionError):
            registry.compare(FORTNIGHT, DAY)

    def test_require(self, registry: PrecisionRegistry) -> None:
        assert registry.require(DAY) is DAY
        assert registry.is_valid(FORTNIGHT) is False
        with pytest.raises(InvalidPrecisionError):
            registry.require(FORTNIGHT)


class TestText:
    def test_parse_detects_precision(self, registry: PrecisionRegistry) -> None:
        assert registry.parse("2018-06-15") == (DAY, "2018-06-15 00:00:00.000000")

    def test_parse_unknown_shape(self, registry: PrecisionRegistry) -> None:
        with pytest.raises(ParseError):
            registry.parse("2018-6")

    def test_format_left_right_prefers_longest_prefix(self, registry: PrecisionRegistry) -> None:
        assert registry.format_left_right("2018-12-31 23:00:00", "2018-12-31 23:59:59") == (
            "2018-12-31 23:00:00/59:59"
        )

    def test_format_left_right_fallback(self, registry: PrecisionRegistry) -> None:
        assert registry.format_left_right("2018", "2019") == "2018/2019"

    def test_format_left_right_equal(self, registry: PrecisionRegistry) -> None:
        assert registry.format_left_right("2018", "2018") == "2018"


class TestArithmetic:
    def test_negative_step_rejected(self, registry: PrecisionRegistry) -> None:
        with pytest.raises(ValueError, match="Step"):
            registry.next_timestamp(datetime(2018, 1, 1), DAY, -1)

    def test_zero_step(self, registry: PrecisionRegistry) -> None:
        ts = datetime(2018, 1, 31, 12)
        assert registry.next_timestamp(ts, MONTH, 0) == ts
        assert registry.prev_timestamp(ts, MONTH, 0) == ts

    def test_unregistered_precision(self, registry: PrecisionRegistry) -> None:
        with pytest.raises(UnregisteredPrecisionError):
            registry.truncate(datetime(2018, 1, 1), FORTNIGHT)


class TestModifiers:
    def test_none_leaves_list_unchanged(self) -> None:
        registry = PrecisionRegistry([lambda entries: None])
        assert registry.precisions() == list(BUILTIN_PRECISIONS)

    def test_modifier_can_add(self) -> None:
        def add_fortnight(entries: list[PrecisionEntry]) -> list[PrecisionEntry]:
            return [*entries, (FORTNIGHT, FixedWidthUnit(FORTNIGHT, 8))]

        registry = PrecisionRegistry([add_fortnight])
        assert registry.precisions()[-1] == FORTNIGHT

    def test_add_and_remove_take_effect_immediately(self, registry: PrecisionRegistry) -> None:
        registry.add_modifier(_drop_month)
        with pytest.raises(RegistryConfigError, match="dropped"):
            registry.precisions()
        registry.remove_modifier(_drop_month)
        assert MONTH in registry.precisions()

    def test_duplicate_rejected(self) -> None:
        registry = PrecisionRegistry([lambda entries: [*entries, entries[0]]])
        with pytest.raises(RegistryConfigError, match="more than once"):
            registry.entries()

    def test_malformed_entry_rejected(self) -> None:
        registry = PrecisionRegistry([lambda entries: [*entries, "fortnight"]])
        with pytest.raises(RegistryConfigError):
            registry.entries()

    def test_unit_must_claim_precision(self) -> None:
        registry = PrecisionRegistry(
            [lambda entries: [*entries, (FORTNIGHT, FixedWidthUnit(DAY, 10))]]
        )
        with pytest.raises(RegistryConfigError, match="does not serve"):
            registry.entries()

    def test_modifiers_chain_in_order(self) -> None:
        seen: list[int] = []

        def first(entries: list[PrecisionEntry]) -> None:
            seen.append(len(entries))

        def second(entries: list[PrecisionEntry]) -> list[PrecisionEntry]:
            seen.append(len(entries))
            return [*entries, (FORTNIGHT, FixedWidthUnit(FORTNIGHT, 8))]

        def third(entries: list[PrecisionEntry]) -> None:
            seen.append(len(entries))

        PrecisionRegistry([first, second, third]).entries()
        assert seen == [12, 12, 13]


class TestCurrentRegistry:
    def test_use_registry_scopes_override(self, registry: PrecisionRegistry) -> None:
        other = PrecisionRegistry()
        assert get_registry() is registry
        with use_registry(other):
            assert get_registry() is other
        assert get_registry() is registry

    def test_set_default_registry_returns_previous(self) -> None:
        replacement = PrecisionRegistry()
        previous = set_default_registry(replacement)
        try:
            assert set_default_registry(replacement) is replacement
        finally:
            set_default_registry(previous)
