"""Precision registry — the ordered, extensible catalog of granularities.

The registration list is rebuilt on every query: built-in entries first,
then each modifier rewrites the list in turn (plugin-provided modifiers
in registration order, then explicitly supplied ones). Reconfiguring a
registry is therefore visible on the very next operation.

INVARIANT: after modification the list holds every built-in precision,
no precision twice, and each entry's unit claims its precision.

The registry used by interval operations is resolved through
:func:`get_registry`: a context-local override set by :func:`use_registry`,
falling back to the process default installed at configuration time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Generator, Iterable
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime
from typing import TYPE_CHECKING, Literal

from calinterval.domain.precision import BUILTIN_PRECISIONS, Precision
from calinterval.domain.units import PrecisionUnit, builtin_entries
from calinterval.errors import (
    InvalidPrecisionError,
    ParseError,
    RegistryConfigError,
    UnregisteredPrecisionError,
)

if TYPE_CHECKING:
    from calinterval.plugins.manager import PluginManager

logger = logging.getLogger(__name__)

PrecisionEntry = tuple[Precision, PrecisionUnit]
PrecisionsModifier = Callable[[list[PrecisionEntry]], list[PrecisionEntry] | None]
Ordering = Literal["lt", "eq", "gt"]

_BUILTIN_ENTRIES: tuple[PrecisionEntry, ...] = tuple(builtin_entries())


class PrecisionRegistry:
    """Ordered catalog of precisions and the units that serve them.

    Args:
        modifiers: Callables rewriting the ordered ``(precision, unit)`` list.
            Returning None leaves the list unchanged.
        plugin_manager: Optional source of ``modify_precisions`` hook
            implementations, consulted on every query.
    """

    def __init__(
        self,
        modifiers: Iterable[PrecisionsModifier] = (),
        *,
        plugin_manager: PluginManager | None = None,
    ) -> None:
        self._modifiers: list[PrecisionsModifier] = list(modifiers)
        self._plugin_manager = plugin_manager

    # ── configuration ────────────────────────────────────────────────

    def add_modifier(self, modifier: PrecisionsModifier) -> None:
        self._modifiers.append(modifier)
        logger.debug("Added precision modifier: %r", modifier)

    def remove_modifier(self, modifier: PrecisionsModifier) -> None:
        self._modifiers.remove(modifier)
        logger.debug("Removed precision modifier: %r", modifier)

    @property
    def plugin_manager(self) -> PluginManager | None:
        return self._plugin_manager

    def entries(self) -> list[PrecisionEntry]:
        """Build and validate the current ordered registration list."""
        entries: list[PrecisionEntry] = list(_BUILTIN_ENTRIES)
        for modifier in self._active_modifiers():
            result = modifier(list(entries))
            if result is not None:
                entries = list(result)
        _validate(entries)
        return entries

    def _active_modifiers(self) -> list[PrecisionsModifier]:
        modifiers: list[PrecisionsModifier] = []
        if self._plugin_manager is not None:
            modifiers.extend(self._plugin_manager.precision_modifiers())
        modifiers.extend(self._modifiers)
        return modifiers

    # ── ordering ─────────────────────────────────────────────────────

    def precisions(self) -> list[Precision]:
        """All registered precisions, coarsest first."""
        return [precision for precision, _ in self.entries()]

    def is_valid(self, precision: Precision) -> bool:
        return precision in self.precisions()

    def require(self, precision: Precision) -> Precision:
        """Return *precision* unchanged, or raise if it is not registered."""
        if not self.is_valid(precision):
            msg = f"Precision {precision} is not registered"
            raise InvalidPrecisionError(msg)
        return precision

    def compare(self, left: Precision, right: Precision) -> Ordering:
        """Compare positions in the registration order; ``"lt"`` means *left* is coarser."""
        order = self.precisions()
        for precision in (left, right):
            if precision not in order:
                msg = f"Tried to use precision {precision}, which is no longer registered"
                raise UnregisteredPrecisionError(msg)
        i, j = order.index(left), order.index(right)
        if i < j:
            return "lt"
        if i > j:
            return "gt"
        return "eq"

    # ── text ─────────────────────────────────────────────────────────

    def parse(self, string: str) -> tuple[Precision, str]:
        """Detect the precision of a boundary string and pad it to canonical form.

        Units are tried in registration order; the first match wins.

        Raises:
            ParseError: If no registered unit recognises the shape.
        """
        for unit in _units(self.entries()):
            result = unit.to_iso(string)
            if result is not None:
                return result
        msg = f"{string!r} does not match any registered precision"
        raise ParseError(msg)

    def format(self, ts: datetime, precision: Precision) -> str:
        return self._unit_for(precision).format(ts, precision)

    def format_left_right(self, left: str, right: str) -> str:
        """Pack two formatted boundaries into the shortest combined form.

        Units are tried finest first, so the longest shared prefix wins.
        Falls back to ``left/right`` verbatim.
        """
        if left == right:
            return left
        for unit in reversed(_units(self.entries())):
            combined = unit.format_left_right(left, right)
            if combined is not None:
                return combined
        return f"{left}/{right}"

    # ── arithmetic ───────────────────────────────────────────────────

    def count(self, first: datetime, last: datetime, precision: Precision) -> int:
        return self._unit_for(precision).count(first, last, precision)

    def next_timestamp(self, ts: datetime, precision: Precision, step: int) -> datetime:
        """Move *ts* forward by *step* whole *precision* units."""
        _check_step(step)
        if step == 0:
            return ts
        return self._unit_for(precision).next_timestamp(ts, precision, step)

    def prev_timestamp(self, ts: datetime, precision: Precision, step: int) -> datetime:
        """Move *ts* backward by *step* whole *precision* units."""
        _check_step(step)
        if step == 0:
            return ts
        return self._unit_for(precision).prev_timestamp(ts, precision, step)

    def truncate(self, ts: datetime, precision: Precision) -> datetime:
        return self._unit_for(precision).truncate(ts, precision)

    def _unit_for(self, precision: Precision) -> PrecisionUnit:
        for registered, unit in self.entries():
            if registered == precision:
                return unit
        msg = f"Tried to use precision {precision}, which is no longer registered"
        raise UnregisteredPrecisionError(msg)

    def __repr__(self) -> str:
        return (
            f"PrecisionRegistry(modifiers={len(self._modifiers)}, "
            f"plugin_manager={self._plugin_manager!r})"
        )


def _units(entries: list[PrecisionEntry]) -> list[PrecisionUnit]:
    """Distinct units in registration order."""
    return list(dict.fromkeys(unit for _, unit in entries))


def _check_step(step: int) -> None:
    if step < 0:
        msg = f"Step must be >= 0; got {step}"
        raise ValueError(msg)


def _validate(entries: list[PrecisionEntry]) -> None:
    seen: set[Precision] = set()
    for entry in entries:
        if not (isinstance(entry, tuple) and len(entry) == 2):
            msg = f"Registry entry {entry!r} is not a (precision, unit) pair"
            raise RegistryConfigError(msg)
        precision, unit = entry
        if not isinstance(precision, Precision) or not isinstance(unit, PrecisionUnit):
            msg = f"Registry entry {entry!r} is not a (Precision, PrecisionUnit) pair"
            raise RegistryConfigError(msg)
        if precision in seen:
            msg = f"Precision {precision} is registered more than once"
            raise RegistryConfigError(msg)
        if precision not in unit.precisions():
            msg = f"Unit {unit!r} does not serve precision {precision}"
            raise RegistryConfigError(msg)
        seen.add(precision)

    missing = [str(p) for p in BUILTIN_PRECISIONS if p not in seen]
    if missing:
        msg = f"Precision modifiers dropped built-in precisions: {missing}"
        raise RegistryConfigError(msg)


# ── current registry ─────────────────────────────────────────────────

_default_registry = PrecisionRegistry()
_current_registry: ContextVar[PrecisionRegistry | None] = ContextVar(
    "_current_registry", default=None
)


def get_registry() -> PrecisionRegistry:
    """Registry in effect: the context-local override, else the process default."""
    registry = _current_registry.get()
    if registry is None:
        return _default_registry
    return registry


def set_default_registry(registry: PrecisionRegistry) -> PrecisionRegistry:
    """Install *registry* as the process default; returns the previous default.

    A configuration-time operation: the host application serializes it.
    """
    global _default_registry
    previous = _default_registry
    _default_registry = registry
    logger.debug("Installed default precision registry: %r", registry)
    return previous


@contextmanager
def use_registry(registry: PrecisionRegistry) -> Generator[PrecisionRegistry]:
    """Make *registry* current for the enclosed block (context-local)."""
    token = _current_registry.set(registry)
    try:
        yield registry
    finally:
        _current_registry.reset(token)
