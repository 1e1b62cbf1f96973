"""Shared edges between planned pieces and the hardware needed to join them."""

from __future__ import annotations

from dataclasses import dataclass

from .connectors import ConnectorKind, EdgeConnectorLayout
from .partitioner import LayoutPlan, PieceKind, PieceSpec
from .value_objects import Axis, BaseplateOption, Point2D, Side

# Coordinates are compared after rounding to this many decimals.
_PRECISION = 6

MAGNETS_PER_CELL = 4


@dataclass(frozen=True)
class HardwareItem:
    """Purchased part needed to assemble a baseplate set.

    Attributes:
        name: Human-readable name of the part.
        quantity: Number of parts required.
        notes: Optional usage notes.
    """

    name: str
    quantity: int
    notes: str | None = None


@dataclass(frozen=True)
class Seam:
    """An edge where a tab-carrying piece meets a socket-carrying piece.

    Attributes:
        tab_piece: Piece with positive tabs on the shared edge.
        socket_piece: Piece with negative sockets on the shared edge.
        tab_side: Side of the tab piece on the shared edge.
        tab_centers: Tab centres of the tab piece along the shared edge.
        socket_centers: Socket centres of the socket piece along the shared edge.
        fastener_centers: Fastener positions present on both pieces.
    """

    tab_piece: str
    socket_piece: str
    tab_side: Side
    tab_centers: tuple[Point2D, ...]
    socket_centers: tuple[Point2D, ...]
    fastener_centers: tuple[Point2D, ...]

    @property
    def is_aligned(self) -> bool:
        """True when every tab lands on a socket and vice versa."""
        return _keys(self.tab_centers) == _keys(self.socket_centers)


def _key(point: Point2D) -> tuple[float, float]:
    return (round(point.x, _PRECISION), round(point.y, _PRECISION))


def _keys(points: tuple[Point2D, ...]) -> set[tuple[float, float]]:
    return {_key(point) for point in points}


def global_layout(piece: PieceSpec, side: Side) -> EdgeConnectorLayout | None:
    """Connector layout on one side of a piece, if it carries one."""
    for connector in piece.connectors:
        if connector.side is side:
            return EdgeConnectorLayout.for_piece(connector, piece.size.width, piece.size.depth)
    return None


def _global(piece: PieceSpec, points: list[Point2D]) -> tuple[Point2D, ...]:
    return tuple(piece.origin + point for point in points)


def _touching(tab_piece: PieceSpec, side: Side, other: PieceSpec) -> bool:
    """Whether ``other`` sits against ``side`` of ``tab_piece`` with a shared span."""
    a, b = tab_piece.footprint_bounds, other.footprint_bounds
    edge = {
        Side.LEFT: (a.min_x, b.max_x),
        Side.RIGHT: (a.max_x, b.min_x),
        Side.BOTTOM: (a.min_y, b.max_y),
        Side.TOP: (a.max_y, b.min_y),
    }[side]
    if round(edge[0] - edge[1], _PRECISION) != 0:
        return False
    if side.axis is Axis.X:
        return min(a.max_y, b.max_y) - max(a.min_y, b.min_y) > 10 ** -_PRECISION
    return min(a.max_x, b.max_x) - max(a.min_x, b.min_x) > 10 ** -_PRECISION


def find_seams(plan: LayoutPlan) -> list[Seam]:
    """Every tab edge of the plan that meets a socket edge of a neighbour.

    Tab/socket centres are reported in footprint coordinates and restricted
    to the span the two pieces share.
    """
    seams: list[Seam] = []
    pieces = plan.pieces
    for tab_piece in pieces:
        for connector in tab_piece.connectors:
            if connector.kind is not ConnectorKind.TAB:
                continue
            side = connector.side
            tab_layout = global_layout(tab_piece, side)
            for other in pieces:
                if other is tab_piece or not _touching(tab_piece, side, other):
                    continue
                socket_layout = global_layout(other, side.opposite)
                if socket_layout is None:
                    continue
                shared = _shared_span(tab_piece, other, side)
                tabs = _within(_global(tab_piece, tab_layout.tab_centers()), shared, side)
                sockets = _within(_global(other, socket_layout.tab_centers()), shared, side)
                fasteners = _keys(
                    _within(_global(tab_piece, tab_layout.fastener_centers()), shared, side)
                ) & _keys(_within(_global(other, socket_layout.fastener_centers()), shared, side))
                seams.append(
                    Seam(
                        tab_piece=tab_piece.name,
                        socket_piece=other.name,
                        tab_side=side,
                        tab_centers=tabs,
                        socket_centers=sockets,
                        fastener_centers=tuple(Point2D(x, y) for x, y in sorted(fasteners)),
                    )
                )
    return seams


def _shared_span(a: PieceSpec, b: PieceSpec, side: Side) -> tuple[float, float]:
    first, second = a.footprint_bounds, b.footprint_bounds
    if side.axis is Axis.X:
        return max(first.min_y, second.min_y), min(first.max_y, second.max_y)
    return max(first.min_x, second.min_x), min(first.max_x, second.max_x)


def _within(points: tuple[Point2D, ...], span: tuple[float, float], side: Side) -> tuple[Point2D, ...]:
    low, high = span
    along = (lambda point: point.y) if side.axis is Axis.X else (lambda point: point.x)
    return tuple(point for point in points if low <= along(point) <= high)


def _fastened(plan: LayoutPlan, seam: Seam, min_spacer_depth: float) -> bool:
    """Whether both pieces of a seam are deep enough to hold a bolt or nut."""
    for name in (seam.tab_piece, seam.socket_piece):
        piece = plan.piece(name)
        if piece.kind is PieceKind.SPACER and piece.size.along(seam.tab_side.axis) <= min_spacer_depth:
            return False
    return True


def plan_hardware(
    plan: LayoutPlan,
    options: frozenset[BaseplateOption],
    *,
    min_spacer_depth: float,
) -> list[HardwareItem]:
    """Bolts, nuts and magnets needed to assemble a plan.

    Spacers no deeper than ``min_spacer_depth`` across a seam are built
    without fasteners, so their seams need no bolts. Callers pass the
    deepest fastener seat of the spacers they build.
    """
    items: list[HardwareItem] = []
    if BaseplateOption.SCREWS in options:
        count = sum(
            len(seam.fastener_centers)
            for seam in find_seams(plan)
            if _fastened(plan, seam, min_spacer_depth)
        )
        if count:
            items.append(HardwareItem("M3x6 countersunk bolt", count, "One per joined grid unit"))
            items.append(HardwareItem("M3 thin square nut", count))
    if BaseplateOption.MAGNETS in options:
        cells = sum(
            piece.units.cell_count
            for piece in plan.pieces
            if piece.kind is PieceKind.BASEPLATE and piece.units is not None
        )
        items.append(HardwareItem("6x2mm magnet", cells * MAGNETS_PER_CELL))
    return items
