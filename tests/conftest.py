"""Pytest configuration and shared fixtures for gridfinity tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from gridfinity.domain import BuildSettings, LayoutPlan, PhysicalSize, compute_layout

FIXTURES_PATH = Path(__file__).parent / "fixtures" / "configs"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that build multi-piece geometry")


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def fixtures_path() -> Path:
    """Directory holding the JSON configuration fixtures."""
    return FIXTURES_PATH


@pytest.fixture
def settings() -> BuildSettings:
    return BuildSettings()


@pytest.fixture
def drawer_plan() -> LayoutPlan:
    """The 508 x 332mm drawer on a 256mm bed used throughout the docs."""
    return compute_layout(PhysicalSize(508.0, 332.0), PhysicalSize(256.0, 256.0))


@pytest.fixture
def small_plan() -> LayoutPlan:
    """A plan small enough to build every piece quickly.

    130 x 100mm on a 100mm bed: one 2x2 baseplate, a narrow 1x2 baseplate,
    side spacers and front/back rows split into pairs.
    """
    return compute_layout(
        PhysicalSize(130.0, 100.0), PhysicalSize(100.0, 100.0), front_padding=6.0
    )
