"""Print-bed-independent arrangement of a plan's pieces.

Rows of the plan are stacked along +Y and pieces within a row along +X, each
separated by a fixed gap, so the exported assembly shows every piece apart
from its neighbours. Rows are centred on X = 0 and pieces within a row are
aligned at their minimum Y. Bounding boxes include protruding tabs.
"""

from __future__ import annotations

from dataclasses import dataclass

from .partitioner import LayoutPlan, PieceSpec
from .value_objects import Bounds2D, Point2D

DEFAULT_STACK_SPACING = 1.0


@dataclass(frozen=True)
class PlacedPiece:
    """A piece and the translation applied to its local geometry.

    Attributes:
        spec: The planned piece.
        offset: Translation of the piece's local origin in the assembly.
        bounds: Bounding rectangle in assembly coordinates.
    """

    spec: PieceSpec
    offset: Point2D
    bounds: Bounds2D

    @property
    def name(self) -> str:
        return self.spec.name


@dataclass(frozen=True)
class AssemblyLayout:
    """Placement of every piece of a plan, in plan order."""

    pieces: tuple[PlacedPiece, ...]
    spacing: float

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(piece.name for piece in self.pieces)

    @property
    def bounds(self) -> Bounds2D:
        return Bounds2D(
            min(piece.bounds.min_x for piece in self.pieces),
            min(piece.bounds.min_y for piece in self.pieces),
            max(piece.bounds.max_x for piece in self.pieces),
            max(piece.bounds.max_y for piece in self.pieces),
        )


def arrange_pieces(plan: LayoutPlan, spacing: float = DEFAULT_STACK_SPACING) -> AssemblyLayout:
    """Lay out a plan's pieces in two nested linear stacks.

    Args:
        plan: The partitioned layout.
        spacing: Gap in millimeters between adjacent pieces and rows.

    Returns:
        AssemblyLayout with one PlacedPiece per plan piece, in plan order.

    Raises:
        ValueError: If spacing is negative.
    """
    if spacing < 0:
        raise ValueError("Stack spacing must be non-negative")

    placed: list[PlacedPiece] = []
    row_y = 0.0
    for row in plan.rows:
        if not row:
            continue
        local = [piece.local_bounds(plan.tab_clearance) for piece in row]
        row_width = sum(bounds.width for bounds in local) + spacing * (len(row) - 1)
        row_depth = max(bounds.depth for bounds in local)

        cursor_x = -row_width / 2
        for piece, bounds in zip(row, local):
            offset = Point2D(cursor_x - bounds.min_x, row_y - bounds.min_y)
            placed.append(
                PlacedPiece(
                    spec=piece,
                    offset=offset,
                    bounds=Bounds2D(
                        offset.x + bounds.min_x,
                        offset.y + bounds.min_y,
                        offset.x + bounds.max_x,
                        offset.y + bounds.max_y,
                    ),
                )
            )
            cursor_x += bounds.width + spacing
        row_y += row_depth + spacing

    return AssemblyLayout(tuple(placed), spacing)
