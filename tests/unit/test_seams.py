"""Unit tests for seam detection and the hardware list."""

import pytest

from gridfinity.domain import (
    BaseplateOption,
    LayoutPlan,
    Side,
    find_seams,
    plan_hardware,
)
from gridfinity.domain.seams import global_layout
from gridfinity.infrastructure import SPACER_SEATS

SEAT_DEPTH = SPACER_SEATS.minimum_depth


class TestFindSeams:
    def test_drawer_seams(self, drawer_plan: LayoutPlan) -> None:
        seams = find_seams(drawer_plan)
        assert len(seams) == 10
        pairs = {(seam.tab_piece, seam.socket_piece) for seam in seams}
        assert ("Baseplate 1-2", "Baseplate 1-1") in pairs
        assert ("Baseplate 1-1", "Side spacer, left 1") in pairs
        assert ("Side spacer, right 1", "Baseplate 1-2") in pairs
        assert ("Baseplate, shallow 1", "Back spacer, left") in pairs
        assert ("Baseplate, shallow 2", "Back spacer, right") in pairs

    def test_every_tab_meets_a_socket(self, drawer_plan: LayoutPlan, small_plan: LayoutPlan) -> None:
        for plan in (drawer_plan, small_plan):
            for seam in find_seams(plan):
                assert seam.tab_centers, (seam.tab_piece, seam.socket_piece)
                assert seam.is_aligned, (seam.tab_piece, seam.socket_piece)

    def test_front_spacers_straddle_baseplates(self, small_plan: LayoutPlan) -> None:
        seams = [seam for seam in find_seams(small_plan) if seam.tab_piece == "Front spacer, right"]
        assert {seam.socket_piece for seam in seams} == {"Baseplate 1-1", "Baseplate, narrow 1"}
        assert all(seam.tab_side is Side.TOP for seam in seams)
        assert all(len(seam.tab_centers) == 2 for seam in seams)

    def test_fastener_centres_in_footprint_coordinates(self, small_plan: LayoutPlan) -> None:
        seam = next(
            seam
            for seam in find_seams(small_plan)
            if seam.tab_piece == "Front spacer, left" and seam.socket_piece == "Baseplate 1-1"
        )
        assert len(seam.fastener_centers) == 1
        assert seam.fastener_centers[0].x == pytest.approx(23.0)
        assert seam.fastener_centers[0].y == pytest.approx(6.0)

    def test_global_layout_missing_side(self, drawer_plan: LayoutPlan) -> None:
        spacer = drawer_plan.piece("Side spacer, left 1")
        assert global_layout(spacer, Side.TOP) is None
        assert global_layout(spacer, Side.RIGHT) is not None


class TestPlanHardware:
    def test_tabs_only_need_nothing(self, drawer_plan: LayoutPlan) -> None:
        items = plan_hardware(
            drawer_plan, frozenset({BaseplateOption.TABS}), min_spacer_depth=SEAT_DEPTH
        )
        assert items == []

    def test_seat_depth_is_required(self, drawer_plan: LayoutPlan) -> None:
        with pytest.raises(TypeError):
            plan_hardware(drawer_plan, frozenset({BaseplateOption.SCREWS}))

    def test_bolts_skip_thin_spacers(self, drawer_plan: LayoutPlan) -> None:
        items = plan_hardware(
            drawer_plan, frozenset({BaseplateOption.SCREWS}), min_spacer_depth=SEAT_DEPTH
        )
        quantities = {item.name: item.quantity for item in items}
        # The 2mm side spacers are too thin for fasteners.
        assert quantities == {"M3x6 countersunk bolt": 31, "M3 thin square nut": 31}

    def test_every_joined_unit_without_depth_limit(self, drawer_plan: LayoutPlan) -> None:
        items = plan_hardware(
            drawer_plan, frozenset({BaseplateOption.SCREWS}), min_spacer_depth=0.0
        )
        assert items[0].quantity == 45

    def test_small_set_bolts(self, small_plan: LayoutPlan) -> None:
        items = plan_hardware(
            small_plan, frozenset({BaseplateOption.SCREWS}), min_spacer_depth=SEAT_DEPTH
        )
        assert items[0].quantity == 8

    def test_four_magnets_per_cell(self, drawer_plan: LayoutPlan) -> None:
        items = plan_hardware(
            drawer_plan, frozenset({BaseplateOption.MAGNETS}), min_spacer_depth=SEAT_DEPTH
        )
        assert len(items) == 1
        assert items[0].name == "6x2mm magnet"
        assert items[0].quantity == 84 * 4
