"""M3 bolt clearance and square-nut trap cutters.

Each seam is fastened with an M3x6 countersunk bolt driven from the tab
piece into a thin square nut captured in the socket piece. Cutters are
built in the canonical seam frame (edge along +X, seam at y = 0, tab piece
at y < 0, socket piece at y > 0) and centred at a given x and z.
"""

from __future__ import annotations

from dataclasses import dataclass

import trimesh

from gridfinity.domain import BuildSettings

from . import kernel

# ISO 10642 M3 countersunk head and DIN 562 thin square nut.
BOLT_DIAMETER = 3.0
BOLT_HEAD_DIAMETER = 6.72
BOLT_HEAD_HEIGHT = (BOLT_HEAD_DIAMETER - BOLT_DIAMETER) / 2
NUT_WIDTH = 5.5
NUT_THICKNESS = 1.8


@dataclass(frozen=True)
class FastenerSeats:
    """Distances from the seam to where the bolt head and nut bear.

    Attributes:
        bolt: Seam to the top face of the countersunk head.
        nut: Seam to the face of the nut nearest the seam.
    """

    bolt: float
    nut: float

    def __post_init__(self) -> None:
        if self.bolt <= BOLT_HEAD_HEIGHT:
            raise ValueError(f"Bolt seat ({self.bolt}mm) leaves no room for the countersink")
        if self.nut <= 0:
            raise ValueError("Nut seat must be positive")

    @property
    def minimum_depth(self) -> float:
        """Smallest piece depth across the seam that can hold either fastener."""
        return max(self.bolt, self.nut + NUT_THICKNESS)


SPACER_SEATS = FastenerSeats(bolt=4.0, nut=2.0)
# Baseplate seats sit against the 2.85mm socket wall.
BASEPLATE_SEATS = FastenerSeats(bolt=2.65, nut=2.85)


def _into_piece(solid: trimesh.Trimesh, direction: int, x: float, z: float) -> trimesh.Trimesh:
    """Turn a cutter built along +Z so that +Z points into the piece.

    ``direction`` is -1 for the tab piece (y < 0) and +1 for the socket piece.
    """
    turned = kernel.rotated(solid, 90.0 if direction < 0 else -90.0, axis=(1.0, 0.0, 0.0))
    return kernel.translated(turned, dx=x, dz=z)


def bolt_clearance(
    x: float,
    z: float,
    channel_end: float,
    seats: FastenerSeats = SPACER_SEATS,
    settings: BuildSettings = BuildSettings(),
) -> trimesh.Trimesh:
    """Countersunk bolt hole in the tab piece.

    The shaft runs from just past the seam to the countersink, and a channel
    the width of the head runs from the seat to ``channel_end`` so the bolt
    can be inserted from that side.

    Args:
        x: Position along the edge.
        z: Height of the bolt axis.
        channel_end: Distance from the seam where the access channel ends.
        seats: Bearing distances from the seam.
        settings: Fit parameters.

    Returns:
        The cutter in the canonical seam frame.
    """
    if channel_end <= seats.bolt:
        raise ValueError(f"Bolt channel ({channel_end}mm) must end beyond the seat ({seats.bolt}mm)")
    epsilon = kernel.COINCIDENT_FACE_EPSILON
    shaft_radius = BOLT_DIAMETER / 2 + settings.tolerance
    head_radius = BOLT_HEAD_DIAMETER / 2
    countersink_start = seats.bolt - BOLT_HEAD_HEIGHT

    cutter = kernel.union(
        [
            kernel.cylinder(shaft_radius, countersink_start + 2 * epsilon, z=-epsilon),
            kernel.cone(shaft_radius, head_radius, BOLT_HEAD_HEIGHT, z=countersink_start),
            kernel.cylinder(head_radius, channel_end - seats.bolt + 2 * epsilon, z=seats.bolt - epsilon),
        ]
    )
    return _into_piece(cutter, -1, x, z)


def nut_trap(
    x: float,
    z: float,
    channel_end: float,
    seats: FastenerSeats = SPACER_SEATS,
    settings: BuildSettings = BuildSettings(),
) -> trimesh.Trimesh:
    """Captured square-nut slot with bolt clearance in the socket piece.

    The nut slides in from ``channel_end`` and bears on the wall left
    between its seat and the seam.
    """
    if channel_end <= seats.nut:
        raise ValueError(f"Nut channel ({channel_end}mm) must end beyond the seat ({seats.nut}mm)")
    epsilon = kernel.COINCIDENT_FACE_EPSILON
    shaft_radius = BOLT_DIAMETER / 2 + settings.tolerance
    nut_width = NUT_WIDTH + 2 * settings.tolerance
    channel_length = max(channel_end - seats.nut, NUT_THICKNESS + 2 * settings.tolerance)

    cutter = kernel.union(
        [
            kernel.cylinder(shaft_radius, seats.nut + 2 * epsilon, z=-epsilon),
            kernel.box(
                nut_width,
                nut_width,
                channel_length + 2 * epsilon,
                x=-nut_width / 2,
                y=-nut_width / 2,
                z=seats.nut - epsilon,
            ),
        ]
    )
    return _into_piece(cutter, 1, x, z)
