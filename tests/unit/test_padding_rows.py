"""Unit tests for splitting front/back padding rows to fit the bed width."""

import pytest

from gridfinity.domain import (
    Alignment,
    ConfigurationError,
    PaddingSplit,
    PieceRole,
    Side,
    partition_padding_row,
)


def _row(total_units: int, side_padding: float = 0.0, bed_width: float = 256.0, **kwargs):
    return partition_padding_row(
        total_units=total_units,
        side_padding=side_padding,
        max_part_width=bed_width,
        depth=kwargs.pop("depth", 10.0),
        interlocking_side=kwargs.pop("interlocking_side", Side.TOP),
        base_name=kwargs.pop("base_name", "Front spacer"),
        role=kwargs.pop("role", PieceRole.FRONT_SPACER),
        **kwargs,
    )


def _units(row) -> list[int]:
    return [piece.connectors[0].unit_count for piece in row.pieces]


class TestRowSplitBoundaries:
    """The single / pair / centred split thresholds on a 256mm bed."""

    def test_six_units_fit_as_one_piece(self) -> None:
        row = _row(6)
        assert row.split is PaddingSplit.SINGLE
        assert [piece.name for piece in row.pieces] == ["Front spacer"]
        assert row.pieces[0].size.width == pytest.approx(252.0)
        assert _units(row) == [6]

    def test_eight_units_split_into_a_pair(self) -> None:
        row = _row(8)
        assert row.split is PaddingSplit.PAIR
        assert [piece.name for piece in row.pieces] == ["Front spacer, left", "Front spacer, right"]
        assert _units(row) == [4, 4]

    def test_odd_pair_gives_the_right_piece_the_extra_unit(self) -> None:
        assert _units(_row(7, side_padding=50.0)) == [3, 4]

    def test_twenty_units_need_centre_pieces(self) -> None:
        row = _row(20)
        assert row.split is PaddingSplit.CENTERED
        assert [piece.name for piece in row.pieces] == [
            "Front spacer, left",
            "Front spacer, center 1",
            "Front spacer, center 2",
            "Front spacer, right",
        ]
        assert _units(row) == [6, 4, 4, 6]

    def test_uneven_centres_favour_the_leftmost(self) -> None:
        assert _units(_row(21)) == [6, 5, 4, 6]

    def test_many_centres(self) -> None:
        row = _row(32)
        # 20 centre units over ceil(20 / 6) = 4 pieces.
        assert _units(row) == [6, 5, 5, 5, 5, 6]


class TestRowGeometry:
    def test_widths_cover_the_row(self) -> None:
        row = _row(20, side_padding=3.0)
        assert row.width == pytest.approx(20 * 42 + 6.0)
        assert row.pieces[0].size.width == pytest.approx(row.pieces[0].connectors[0].unit_count * 42 + 3.0)
        assert row.pieces[1].size.width == pytest.approx(row.pieces[1].connectors[0].unit_count * 42)

    def test_side_padding_reduces_side_units(self) -> None:
        # floor((256 - 10) / 42) = 5 units per side piece.
        row = _row(20, side_padding=10.0)
        assert _units(row)[0] == 5
        assert _units(row)[-1] == 5

    def test_pieces_are_contiguous(self) -> None:
        row = _row(21, side_padding=2.0, origin_y=300.0)
        x = 0.0
        for piece in row.pieces:
            assert piece.origin.x == pytest.approx(x)
            assert piece.origin.y == 300.0
            x += piece.size.width

    def test_connectors_meet_the_grid(self) -> None:
        row = _row(8, side_padding=2.0)
        left, right = row.pieces
        assert left.connectors[0].alignment is Alignment.MAX
        assert right.connectors[0].alignment is Alignment.MIN
        assert left.connectors[0].side is Side.TOP

    def test_single_piece_is_centred(self) -> None:
        row = _row(5, side_padding=2.0)
        assert row.pieces[0].connectors[0].alignment is Alignment.MID

    def test_every_piece_fits_the_bed(self) -> None:
        for total in range(1, 40):
            row = _row(total, side_padding=7.0)
            assert all(piece.size.width <= 256.0 + 1e-9 for piece in row.pieces)

    def test_role_is_applied(self) -> None:
        row = _row(20, interlocking_side=Side.BOTTOM, base_name="Back spacer", role=PieceRole.BACK_SPACER)
        assert {piece.role for piece in row.pieces} == {PieceRole.BACK_SPACER}
        assert row.pieces[0].name == "Back spacer, left"


class TestRowErrors:
    def test_non_positive_depth(self) -> None:
        with pytest.raises(ConfigurationError):
            _row(6, depth=0.0)

    def test_deeper_than_bed(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            _row(6, depth=255.0, bed_depth=256.0, protrusion=2.0)
        assert exc_info.value.piece == "Front spacer"

    def test_bed_narrower_than_a_unit(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            _row(3, bed_width=40.0)
        assert exc_info.value.axis == "x"
