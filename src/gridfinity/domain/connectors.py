"""Interlocking tab and socket placement along piece edges.

Every connector is described in a canonical seam frame: the edge runs along
+u starting at u=0, and the tab protrudes towards +v across the seam (v=0).
A piece carrying positive tabs lies on the -v side of its seam; a piece
carrying negative sockets lies on the +v side. ``SeamFrame`` maps that frame
onto a concrete side of a piece, and both the placement math here and the
solids built in ``gridfinity.infrastructure`` go through it, so a tab and the
socket it mates with always land on the same coordinates.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .value_objects import (
    Alignment,
    Axis,
    AxisDirection,
    GridUnit2D,
    Point2D,
    Side,
    UNIT_SIZE,
)

# Fractions of a unit-length edge segment where the two tabs sit.
TAB_POSITIONS: tuple[float, float] = (0.25, 0.75)
# Fraction of a unit-length segment where the fastener sits.
FASTENER_POSITION = 0.5

# Positive tabs are this much shorter than the layer they connect.
POSITIVE_TAB_HEIGHT_REDUCTION = 0.4
# Negative sockets are pushed this far out past the edge.
NEGATIVE_TAB_LEAD_IN = 0.1

# Left half of the tab outline: a start point followed by cubic segments
# (control 1, control 2, end). A control 1 of None continues the previous
# segment's tangent for SMOOTH_CONTROL_DISTANCE millimeters.
TAB_PROFILE_START: tuple[float, float] = (-2.5, -0.5)
TAB_PROFILE_CURVES: tuple[
    tuple[tuple[float, float] | None, tuple[float, float], tuple[float, float]], ...
] = (
    ((-0.5, 0.0), (-0.5, 0.55), (-2.0, 0.9)),
    (None, (-2.5, 2.0), (0.0, 2.0)),
)
SMOOTH_CONTROL_DISTANCE = 1.0
# The outline closes with straight lines down the centre line and back.
TAB_PROFILE_CLOSE: tuple[tuple[float, float], ...] = ((0.0, -0.5),)


class ConnectorKind(str, Enum):
    """Form of connector stamped onto an edge.

    Attributes:
        TAB: Positive protrusion, paired with a bolt clearance hole.
        SOCKET: Negative recess, paired with a captured-nut trap.
    """

    TAB = "tab"
    SOCKET = "socket"


def tab_profile_segments() -> list[
    tuple[tuple[float, float], tuple[float, float], tuple[float, float], tuple[float, float]]
]:
    """Resolve the half tab outline into explicit cubic Bezier segments.

    Returns:
        List of (start, control1, control2, end) tuples.
    """
    segments = []
    start = TAB_PROFILE_START
    previous_control: tuple[float, float] | None = None
    for control1, control2, end in TAB_PROFILE_CURVES:
        if control1 is None:
            if previous_control is None:
                raise ValueError("A smooth segment needs a preceding curve")
            dx = start[0] - previous_control[0]
            dy = start[1] - previous_control[1]
            length = math.hypot(dx, dy)
            control1 = (
                start[0] + dx / length * SMOOTH_CONTROL_DISTANCE,
                start[1] + dy / length * SMOOTH_CONTROL_DISTANCE,
            )
        segments.append((start, control1, control2, end))
        previous_control = control2
        start = end
    return segments


def tab_clearance() -> float:
    """Distance a positive tab protrudes past its edge.

    A Bezier curve lies inside the hull of its control points and passes
    through its end points, so the highest control or end point is exact
    here: the outline's top is an end point.
    """
    points = [TAB_PROFILE_START, *TAB_PROFILE_CLOSE]
    for segment in tab_profile_segments():
        points.extend(segment)
    return max(y for _, y in points)


def connector_kind(side: Side) -> ConnectorKind:
    """Which connector form a given side carries.

    Tabs go on the left and top edges, sockets on the right and bottom
    edges, so any piece mates with its right-hand and rear neighbours.
    """
    match (side.axis, side.direction):
        case (Axis.X, AxisDirection.NEGATIVE):
            return ConnectorKind.TAB
        case (Axis.X, AxisDirection.POSITIVE):
            return ConnectorKind.SOCKET
        case (Axis.Y, AxisDirection.NEGATIVE):
            return ConnectorKind.SOCKET
        case (Axis.Y, AxisDirection.POSITIVE):
            return ConnectorKind.TAB
    raise ValueError(f"Unhandled side {side!r}")


@dataclass(frozen=True)
class SeamFrame:
    """Maps the canonical seam frame onto one side of a piece.

    Attributes:
        rotation: Rotation about Z in degrees (0 or 90).
        origin: Piece-local position of the canonical origin.
    """

    rotation: float
    origin: Point2D

    def to_piece(self, u: float, v: float = 0.0) -> Point2D:
        """Convert canonical (u, v) to piece-local coordinates."""
        if self.rotation == 90:
            x, y = -v, u
        else:
            x, y = u, v
        return Point2D(self.origin.x + x, self.origin.y + y)


def seam_frame(side: Side, width: float, depth: float) -> SeamFrame:
    """Canonical frame for a side of a width x depth piece."""
    match side:
        case Side.LEFT:
            return SeamFrame(90, Point2D(0.0, 0.0))
        case Side.RIGHT:
            return SeamFrame(90, Point2D(width, 0.0))
        case Side.BOTTOM:
            return SeamFrame(0, Point2D(0.0, 0.0))
        case Side.TOP:
            return SeamFrame(0, Point2D(0.0, depth))
    raise ValueError(f"Unhandled side {side!r}")


@dataclass(frozen=True)
class ConnectorSpec:
    """Where tab/socket pairs are stamped onto a piece boundary.

    Attributes:
        side: Edge of the piece carrying the connectors.
        alignment: Where slack goes when the edge is longer than the units.
        offset: Extra shift along the edge in millimeters.
        unit_count: Number of unit segments; None means as many whole units
            as fit on the edge.
        pitch: Length of one unit segment.
    """

    side: Side
    alignment: Alignment = Alignment.MID
    offset: float = 0.0
    unit_count: int | None = None
    pitch: float = UNIT_SIZE.width

    def __post_init__(self) -> None:
        if self.unit_count is not None and self.unit_count < 0:
            raise ValueError("Connector unit count cannot be negative")
        if self.pitch <= 0:
            raise ValueError("Connector pitch must be positive")

    @property
    def kind(self) -> ConnectorKind:
        return connector_kind(self.side)


@dataclass(frozen=True)
class EdgeConnectorLayout:
    """Resolved positions of every tab, socket and fastener on one edge."""

    spec: ConnectorSpec
    edge_length: float
    frame: SeamFrame

    @classmethod
    def for_piece(cls, spec: ConnectorSpec, width: float, depth: float) -> EdgeConnectorLayout:
        edge_length = width if spec.side.axis is Axis.Y else depth
        return cls(spec, edge_length, seam_frame(spec.side, width, depth))

    @property
    def unit_count(self) -> int:
        if self.spec.unit_count is not None:
            return self.spec.unit_count
        # Nudge so that n * pitch computed in floating point still counts n.
        return int(math.floor(self.edge_length / self.spec.pitch + 1e-9))

    @property
    def start(self) -> float:
        """Position along the edge where the first unit segment begins."""
        slack = self.edge_length - self.unit_count * self.spec.pitch
        return slack * self.spec.alignment.fraction + self.spec.offset

    def unit_starts(self) -> list[float]:
        return [self.start + index * self.spec.pitch for index in range(self.unit_count)]

    def tab_positions(self) -> list[float]:
        """Positions of tab centres along the edge."""
        return [
            unit_start + fraction * self.spec.pitch
            for unit_start in self.unit_starts()
            for fraction in TAB_POSITIONS
        ]

    def fastener_positions(self) -> list[float]:
        return [unit_start + FASTENER_POSITION * self.spec.pitch for unit_start in self.unit_starts()]

    def tab_centers(self) -> list[Point2D]:
        """Piece-local centres of the tabs (or sockets) on the seam line."""
        return [self.frame.to_piece(u) for u in self.tab_positions()]

    def fastener_centers(self) -> list[Point2D]:
        return [self.frame.to_piece(u) for u in self.fastener_positions()]


def baseplate_connectors(units: GridUnit2D) -> tuple[ConnectorSpec, ...]:
    """Connectors on all four edges of a baseplate with tabs."""
    return tuple(
        ConnectorSpec(
            side=side,
            alignment=Alignment.MIN,
            unit_count=units.y if side.axis is Axis.X else units.x,
        )
        for side in (Side.LEFT, Side.TOP, Side.BOTTOM, Side.RIGHT)
    )
