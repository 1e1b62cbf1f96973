"""Gridfinity baseplate solids.

A baseplate is a socket layer, one socket cavity per grid cell, optionally
standing on a 7mm foundation. The foundation carries the interlocking tabs,
fastener holes and magnet pockets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import trimesh
from shapely import affinity

from gridfinity.domain import (
    BaseplateOption,
    BuildSettings,
    EdgeConnectorLayout,
    GridUnit2D,
    UNIT_HEIGHT,
    UNIT_SIZE,
    baseplate_connectors,
    requires_foundation,
)

from . import kernel
from .edge_connector import build_edge_connector
from .fasteners import BASEPLATE_SEATS

logger = logging.getLogger(__name__)

# Socket cross-section, bottom to top: a small chamfer, a vertical wall and
# a large chamfer out to the full cell outline.
SOCKET_SMALL_CHAMFER = 0.7
SOCKET_VERTICAL = 1.8
SOCKET_LARGE_CHAMFER = 2.15
SOCKET_CORNER_RADIUS = 4.0
SOCKET_WALL_THICKNESS = SOCKET_SMALL_CHAMFER + SOCKET_LARGE_CHAMFER
SOCKET_HEIGHT = SOCKET_WALL_THICKNESS + SOCKET_VERTICAL
# The socket layer stops short of the full profile, leaving a ridge
# between neighbouring cells.
SOCKET_LAYER_HEIGHT = SOCKET_HEIGHT - 0.4

FOUNDATION_HEIGHT = UNIT_HEIGHT
BASEPLATE_HEIGHT = FOUNDATION_HEIGHT + SOCKET_LAYER_HEIGHT

MAGNET_INSET = 8.0
MAGNET_DIAMETER = 6.5
MAGNET_DEPTH = 2.2
MAGNET_MARGIN = 3.0
INSIDE_CORNER_RADIUS = 3.0

# Fastener access channels end this far past the socket wall, inside the
# cell opening.
FASTENER_CHANNEL_OVERRUN = 1.0


def socket_cavity(cell_x: float = 0.0, cell_y: float = 0.0) -> trimesh.Trimesh:
    """The cutter for one cell's socket, min corner at (cell_x, cell_y).

    The profile starts inset by the wall thickness at z = 0 and opens out to
    the full 42mm outline at the socket height, which lies above the top of
    the socket layer.
    """
    width, depth = UNIT_SIZE.width, UNIT_SIZE.depth
    epsilon = kernel.COINCIDENT_FACE_EPSILON

    def section(inset: float):
        return kernel.inset_rounded_rectangle(width, depth, SOCKET_CORNER_RADIUS, inset, cell_x, cell_y)

    vertical_top = SOCKET_SMALL_CHAMFER + SOCKET_VERTICAL
    return kernel.loft_stack(
        [
            (-epsilon, section(SOCKET_WALL_THICKNESS)),
            (SOCKET_SMALL_CHAMFER, section(SOCKET_LARGE_CHAMFER)),
            (vertical_top, section(SOCKET_LARGE_CHAMFER)),
            (SOCKET_HEIGHT + epsilon, section(-epsilon)),
        ]
    )


def socket_layer(units: GridUnit2D) -> trimesh.Trimesh:
    """A slab of the given units with every cell's socket cut out."""
    width, depth = units.physical_size()
    slab = kernel.box(width, depth, SOCKET_LAYER_HEIGHT)
    cavity = socket_cavity()
    cutters = [
        kernel.translated(cavity, column * UNIT_SIZE.width, row * UNIT_SIZE.depth)
        for row in range(units.y)
        for column in range(units.x)
    ]
    return kernel.difference(slab, cutters)


def socket_layer_outline(units: GridUnit2D):
    """Projection of the socket layer: the rectangle minus each cell opening."""
    width, depth = units.physical_size()
    opening = kernel.inset_rounded_rectangle(
        UNIT_SIZE.width, UNIT_SIZE.depth, SOCKET_CORNER_RADIUS, SOCKET_WALL_THICKNESS
    )
    openings = [
        kernel.translate2d(opening, column * UNIT_SIZE.width, row * UNIT_SIZE.depth)
        for row in range(units.y)
        for column in range(units.x)
    ]
    return kernel.rectangle(width, depth).difference(kernel.union2d(openings))


def _magnet_pads(units: GridUnit2D):
    """Corner pads under every cell, each with a rounded inner corner."""
    pad = MAGNET_INSET + MAGNET_DIAMETER / 2 + MAGNET_MARGIN
    fillet = MAGNET_DIAMETER / 2 + MAGNET_MARGIN
    corner = kernel.union2d(
        [
            kernel.rectangle(pad - fillet, pad),
            kernel.rectangle(pad, pad - fillet),
            kernel.circle(fillet, pad - fillet, pad - fillet),
        ]
    )
    center = (UNIT_SIZE.width / 2, UNIT_SIZE.depth / 2)
    cell = kernel.union2d(
        affinity.scale(corner, xfact=sx, yfact=sy, origin=center)
        for sx in (1.0, -1.0)
        for sy in (1.0, -1.0)
    )
    return kernel.union2d(
        kernel.translate2d(cell, column * UNIT_SIZE.width, row * UNIT_SIZE.depth)
        for row in range(units.y)
        for column in range(units.x)
    )


def _magnet_pockets(units: GridUnit2D) -> list[trimesh.Trimesh]:
    epsilon = kernel.COINCIDENT_FACE_EPSILON
    offsets = (MAGNET_INSET, UNIT_SIZE.width - MAGNET_INSET)
    return [
        kernel.cylinder(
            MAGNET_DIAMETER / 2,
            MAGNET_DEPTH + epsilon,
            column * UNIT_SIZE.width + dx,
            row * UNIT_SIZE.depth + dy,
            FOUNDATION_HEIGHT - MAGNET_DEPTH,
        )
        for row in range(units.y)
        for column in range(units.x)
        for dx in offsets
        for dy in offsets
    ]


@dataclass(frozen=True)
class Baseplate:
    """A Gridfinity baseplate of ``units`` cells.

    Attributes:
        units: Cells along X and Y.
        options: Optional features; tabs, screws and magnets imply the
            foundation layer.
        settings: Fit parameters for sockets and fasteners.
    """

    units: GridUnit2D
    options: frozenset[BaseplateOption] = field(default_factory=frozenset)
    settings: BuildSettings = BuildSettings()

    def __post_init__(self) -> None:
        if self.units.x < 1 or self.units.y < 1:
            raise ValueError(f"Baseplate needs at least one cell (got {self.units})")

    @property
    def has_foundation(self) -> bool:
        return requires_foundation(self.options)

    @property
    def height(self) -> float:
        return BASEPLATE_HEIGHT if self.has_foundation else SOCKET_LAYER_HEIGHT

    def build(self) -> trimesh.Trimesh:
        """Build the baseplate with its min corner at the origin."""
        layer = socket_layer(self.units)
        if not self.has_foundation:
            return layer
        foundation = self.build_foundation()
        return kernel.union([foundation, kernel.translated(layer, dz=FOUNDATION_HEIGHT)])

    def build_foundation(self) -> trimesh.Trimesh:
        """The foundation layer with its tabs, sockets, fasteners and magnets."""
        width, depth = self.units.physical_size()
        outline = socket_layer_outline(self.units)
        magnets = BaseplateOption.MAGNETS in self.options
        if magnets:
            pads = _magnet_pads(self.units).intersection(kernel.rectangle(width, depth))
            outline = kernel.round_inside_corners(kernel.union2d([outline, pads]), INSIDE_CORNER_RADIUS)

        solid = kernel.extrude(outline, FOUNDATION_HEIGHT)
        additions: list[trimesh.Trimesh] = []
        cutters: list[trimesh.Trimesh] = []

        tabs = BaseplateOption.TABS in self.options
        screws = BaseplateOption.SCREWS in self.options
        if tabs or screws:
            for spec in baseplate_connectors(self.units):
                layout = EdgeConnectorLayout.for_piece(spec, width, depth)
                solids = build_edge_connector(
                    layout,
                    FOUNDATION_HEIGHT,
                    self.settings,
                    tabs=tabs,
                    fasteners=screws,
                    seats=BASEPLATE_SEATS,
                    channel_end=SOCKET_WALL_THICKNESS + FASTENER_CHANNEL_OVERRUN,
                )
                additions.extend(solids.additions)
                cutters.extend(solids.cutters)

        if magnets:
            cutters.extend(_magnet_pockets(self.units))

        if additions:
            solid = kernel.union([solid, *additions])
        logger.debug(
            f"Baseplate {self.units} foundation: {len(additions)} tab group(s), "
            f"{len(cutters)} cutter(s)"
        )
        return kernel.difference(solid, cutters)
