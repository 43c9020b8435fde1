"""Pluggy hook specifications for calinterval precision extensions.

A single configuration hook lets plugins rewrite the ordered precision
registration list, e.g. to interleave ``quarter`` between year and month.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from calinterval.domain.registry import PrecisionEntry

hookspec = pluggy.HookspecMarker("calinterval")


class CalintervalHookSpec:
    """Hook specifications for the calinterval plugin system."""

    @hookspec
    def modify_precisions(self, entries: list[PrecisionEntry]) -> list[PrecisionEntry] | None:
        """Return a rewritten ``(precision, unit)`` list, or None to leave it unchanged.

        Implementations are chained in registration order: each one receives
        the list produced by the previous one.
        """
