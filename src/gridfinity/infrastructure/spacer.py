"""Padding pieces that fill the non-grid slack around a baseplate set.

A spacer is a rectangular block as tall as a baseplate with a foundation.
Its bottom edges are chamfered on every side except the interlocking one,
which instead carries tabs (with bolt holes) or sockets (with nut traps)
matching the neighbouring baseplate.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import trimesh

from gridfinity.domain import (
    BuildSettings,
    ConnectorSpec,
    EdgeConnectorLayout,
    PhysicalSize,
    Side,
    UNIT_HEIGHT,
)

from . import kernel
from .baseplate import BASEPLATE_HEIGHT
from .edge_connector import build_edge_connector
from .fasteners import SPACER_SEATS

logger = logging.getLogger(__name__)

SPACER_HEIGHT = BASEPLATE_HEIGHT
# Tabs and fasteners live in the bottom unit, level with a baseplate foundation.
SPACER_CONNECTOR_HEIGHT = UNIT_HEIGHT
DEFAULT_CHAMFER = 1.0


def chamfered_block(
    width: float, depth: float, height: float, chamfer: float, keep: Side | None = None
) -> trimesh.Trimesh:
    """A box whose bottom edges are chamfered, except along ``keep``.

    The chamfer is clamped so it never consumes more than a third of the
    smaller side or the full height.
    """
    chamfer = max(0.0, min(chamfer, height, min(width, depth) / 3))
    if chamfer == 0:
        return kernel.box(width, depth, height)

    left = 0.0 if keep is Side.LEFT else chamfer
    right = width if keep is Side.RIGHT else width - chamfer
    bottom = 0.0 if keep is Side.BOTTOM else chamfer
    top = depth if keep is Side.TOP else depth - chamfer
    base = kernel.rectangle(right - left, top - bottom, left, bottom)
    full = kernel.rectangle(width, depth)
    return kernel.convex_solid([(0.0, base), (chamfer, full), (height, full)])


@dataclass(frozen=True)
class Spacer:
    """A padding piece with one interlocking side.

    Attributes:
        size: Footprint of the spacer body; height defaults to SPACER_HEIGHT.
        connector: The interlocking side, its alignment, offset and units.
        chamfer: Bottom chamfer depth on the other three sides.
        fasteners: Add bolt holes or nut traps at each connector unit.
        settings: Fit parameters.
    """

    size: PhysicalSize
    connector: ConnectorSpec
    chamfer: float = DEFAULT_CHAMFER
    fasteners: bool = True
    settings: BuildSettings = BuildSettings()

    def __post_init__(self) -> None:
        if self.chamfer < 0:
            raise ValueError("Spacer chamfer cannot be negative")

    @property
    def height(self) -> float:
        return self.size.height or SPACER_HEIGHT

    @property
    def layout(self) -> EdgeConnectorLayout:
        return EdgeConnectorLayout.for_piece(self.connector, self.size.width, self.size.depth)

    @property
    def depth_across_seam(self) -> float:
        """Extent of the spacer perpendicular to its interlocking side."""
        return self.size.along(self.connector.side.axis)

    def build(self) -> trimesh.Trimesh:
        """Build the spacer with its body's min corner at the origin."""
        side = self.connector.side
        body = chamfered_block(self.size.width, self.size.depth, self.height, self.chamfer, keep=side)

        fasteners = self.fasteners and self.depth_across_seam > SPACER_SEATS.minimum_depth
        if self.fasteners and not fasteners:
            logger.debug(
                f"Spacer {self.size.width}x{self.size.depth}mm is too thin across its "
                f"{side.value} side for fasteners"
            )
        solids = build_edge_connector(
            self.layout,
            SPACER_CONNECTOR_HEIGHT,
            self.settings,
            fasteners=fasteners,
            seats=SPACER_SEATS,
            channel_end=self.depth_across_seam + kernel.COINCIDENT_FACE_EPSILON,
        )
        if solids.additions:
            body = kernel.union([body, *solids.additions])
        return kernel.difference(body, list(solids.cutters))
