"""Unit tests for building planned pieces."""

import pytest

from gridfinity.domain import (
    BaseplateOption,
    BuildSettings,
    LayoutPlan,
    PhysicalSize,
    PieceKind,
    PieceRole,
    PieceSpec,
    Point2D,
)
from gridfinity.infrastructure import BuiltPiece, Spacer, build_piece, kernel


class TestBuildPiece:
    def test_baseplate_keeps_its_name_and_units(self, small_plan: LayoutPlan) -> None:
        spec = small_plan.piece("Baseplate, narrow 1")
        built = build_piece(spec)
        assert isinstance(built, BuiltPiece)
        assert built.name == "Baseplate, narrow 1"
        bounds = kernel.footprint(built.mesh)
        assert bounds.max_x == pytest.approx(42.0, abs=1e-6)
        assert bounds.max_y == pytest.approx(84.0 + 2.0, abs=1e-6)

    def test_spacer_tabs_follow_the_plan(self, small_plan: LayoutPlan) -> None:
        spec = small_plan.piece("Front spacer, right")
        built = build_piece(spec, BuildSettings(), frozenset({BaseplateOption.TABS}), chamfer=0.5)
        bounds = kernel.footprint(built.mesh)
        assert bounds.max_x == pytest.approx(spec.size.width, abs=1e-6)
        assert bounds.max_y == pytest.approx(spec.size.depth + 2.0, abs=1e-6)

    def test_spacers_always_carry_fasteners(self, small_plan: LayoutPlan) -> None:
        spec = small_plan.piece("Back spacer, right")
        tabs_only = build_piece(spec, options=frozenset({BaseplateOption.TABS}))
        screws = build_piece(
            spec, options=frozenset({BaseplateOption.TABS, BaseplateOption.SCREWS})
        )
        unfastened = Spacer(spec.size, spec.connectors[0], fasteners=False).build()
        assert tabs_only.mesh.volume == pytest.approx(screws.mesh.volume)
        assert tabs_only.mesh.volume < unfastened.volume

    def test_baseplate_without_units(self) -> None:
        spec = PieceSpec(
            name="Broken",
            kind=PieceKind.BASEPLATE,
            role=PieceRole.MAIN,
            origin=Point2D(0.0, 0.0),
            size=PhysicalSize(42.0, 42.0),
        )
        with pytest.raises(ValueError, match="no grid units"):
            build_piece(spec)

    def test_spacer_without_connector(self) -> None:
        spec = PieceSpec(
            name="Loose",
            kind=PieceKind.SPACER,
            role=PieceRole.SIDE_SPACER,
            origin=Point2D(0.0, 0.0),
            size=PhysicalSize(5.0, 42.0),
        )
        with pytest.raises(ValueError, match="no interlocking side"):
            build_piece(spec)
