"""Unit tests for the tab outline and the tab/socket solids."""

import pytest

from gridfinity.domain import BuildSettings
from gridfinity.infrastructure import TabProfile, kernel
from gridfinity.infrastructure.profiles import socket_outline, tab_outline, tab_pair_outline


class TestTabOutline:
    def test_is_valid_and_symmetric(self) -> None:
        outline = tab_outline()
        min_x, _, max_x, _ = outline.bounds
        assert outline.is_valid
        assert min_x == pytest.approx(-max_x)

    def test_reaches_the_clearance_and_overlaps_the_piece(self) -> None:
        _, min_y, _, max_y = tab_outline().bounds
        assert max_y == pytest.approx(2.0)
        assert min_y == pytest.approx(-0.5)

    def test_is_cached(self) -> None:
        assert tab_outline() is tab_outline()

    def test_pair_at_quarter_points(self) -> None:
        pair = tab_pair_outline(42.0)
        assert len(kernel.polygons(pair)) == 2
        assert pair.centroid.x == pytest.approx(21.0)


class TestSocketOutline:
    def test_grown_by_tolerance_and_pulled_out(self) -> None:
        _, min_y, _, max_y = socket_outline(BuildSettings(tolerance=0.2)).bounds
        assert max_y == pytest.approx(2.1, abs=0.01)
        assert min_y == pytest.approx(-0.8, abs=0.01)

    def test_socket_contains_tab(self) -> None:
        assert socket_outline(BuildSettings()).contains(tab_outline())

    def test_zero_tolerance_only_shifts(self) -> None:
        outline = socket_outline(BuildSettings(tolerance=0.0))
        assert outline.area == pytest.approx(tab_outline().area)


class TestTabProfile:
    def test_positive_tabs_are_shortened(self) -> None:
        profile = TabProfile(7.0)
        assert profile.positive_height == pytest.approx(6.6)
        assert kernel.height_range(profile.positive([0.0])) == pytest.approx((0.0, 6.6))

    def test_negative_sockets_cut_through(self) -> None:
        low, high = kernel.height_range(TabProfile(7.0).negative([0.0]))
        assert low < 0.0
        assert high > 7.0

    def test_one_solid_per_position(self) -> None:
        tabs = TabProfile(7.0).positive([10.5, 31.5])
        assert tabs.volume == pytest.approx(2 * tab_outline().area * 6.6, rel=1e-6)
        assert kernel.footprint(tabs).min_x == pytest.approx(10.5 + tab_outline().bounds[0])
