"""Pytest configuration and shared fixtures for nesting tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from nesting.domain.value_objects import PackingOptions, PartSpec, StockSheetSpec

FIXTURES_PATH = Path(__file__).parent / "fixtures"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def square_sheet() -> StockSheetSpec:
    """Unbounded 1000x1000 test sheet."""
    return StockSheetSpec(length=1000.0, width=1000.0, label="Square")


@pytest.fixture
def board_sheet() -> StockSheetSpec:
    """Standard 2750x1830 chipboard sheet."""
    return StockSheetSpec(length=2750.0, width=1830.0, label="Board")


@pytest.fixture
def kerf_options() -> PackingOptions:
    """Options with a 3mm saw kerf."""
    return PackingOptions(kerf_mm=3.0)


@pytest.fixture
def cabinet_parts() -> list[PartSpec]:
    """A small base cabinet's worth of parts."""
    return [
        PartSpec(length=720.0, width=560.0, quantity=2, label="Side"),
        PartSpec(length=564.0, width=560.0, quantity=2, label="Bottom/Top"),
        PartSpec(length=564.0, width=540.0, quantity=1, label="Shelf"),
        PartSpec(length=716.0, width=596.0, quantity=1, label="Door"),
    ]
