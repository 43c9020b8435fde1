"""Shared pytest fixtures for calinterval tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from calinterval.domain.registry import PrecisionRegistry, use_registry
from calinterval.plugins.builtins.quarter import register


@pytest.fixture(autouse=True)
def registry() -> Generator[PrecisionRegistry]:
    """Fresh built-in registry, current for the duration of each test."""
    reg = PrecisionRegistry()
    with use_registry(reg):
        yield reg


@pytest.fixture
def quarter_registry(registry: PrecisionRegistry) -> Generator[PrecisionRegistry]:
    """Registry with the quarter precision interleaved after year."""
    reg = PrecisionRegistry([register])
    with use_registry(reg):
        yield reg
