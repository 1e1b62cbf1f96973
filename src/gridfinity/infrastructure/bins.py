"""Gridfinity blocks and bins that sit in baseplate sockets."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import trimesh
from shapely.geometry import Polygon

from gridfinity.domain import GridUnit2D, GridUnit3D, UNIT_SIZE

from . import kernel

logger = logging.getLogger(__name__)

# Base unit profile, bottom to top.
BASE_SMALL_CHAMFER = 0.8
BASE_VERTICAL = 1.8
BASE_LARGE_CHAMFER = 2.15
BASE_HEIGHT = BASE_SMALL_CHAMFER + BASE_VERTICAL + BASE_LARGE_CHAMFER
BASE_CORNER_RADIUS = 3.75
# Bases are 0.5mm smaller than the grid pitch.
BASE_OUTER_TOLERANCE = 0.5
BASE_WIDTH = UNIT_SIZE.width - BASE_OUTER_TOLERANCE

MAGNET_INSET = 8.0
MAGNET_DIAMETER = 6.5
MAGNET_DEPTH = 2.2

# Stacking lip profile, measured inwards from the outline.
LIP_SMALL_CHAMFER = 0.7
LIP_LARGE_CHAMFER = 1.9
LIP_VERTICAL = 1.8
LIP_SUPPORT = LIP_SMALL_CHAMFER + LIP_LARGE_CHAMFER
LIP_HEIGHT = LIP_SMALL_CHAMFER + LIP_VERTICAL + LIP_LARGE_CHAMFER

# Steps used to approximate the inner bottom fillet of a bin.
FILLET_STEPS = 4


def _cell_origin(column: int, row: int) -> tuple[float, float]:
    return column * UNIT_SIZE.width, row * UNIT_SIZE.depth


def base_unit(x: float = 0.0, y: float = 0.0) -> trimesh.Trimesh:
    """One base unit with its min corner at (x, y)."""

    def section(inset: float) -> Polygon:
        return kernel.inset_rounded_rectangle(BASE_WIDTH, BASE_WIDTH, BASE_CORNER_RADIUS, inset, x, y)

    return kernel.loft_stack(
        [
            (0.0, section(BASE_SMALL_CHAMFER + BASE_LARGE_CHAMFER)),
            (BASE_SMALL_CHAMFER, section(BASE_LARGE_CHAMFER)),
            (BASE_SMALL_CHAMFER + BASE_VERTICAL, section(BASE_LARGE_CHAMFER)),
            (BASE_HEIGHT, section(0.0)),
        ]
    )


def block_outline(units: GridUnit2D) -> Polygon:
    """Convex hull of every base unit's outer outline, min corner at the origin."""
    outlines = [
        kernel.rounded_rectangle(BASE_WIDTH, BASE_WIDTH, BASE_CORNER_RADIUS, *_cell_origin(column, row))
        for row in range(units.y)
        for column in range(units.x)
    ]
    return kernel.union2d(outlines).convex_hull


@dataclass(frozen=True)
class Block:
    """A solid block: base units topped by the outline extruded to full height.

    Attributes:
        units: Cells along X and Y.
        height: Total height in millimeters.
        magnets: Magnet pockets under the four corners of every base.
        centered_magnet: One magnet pocket under the centre of every base.
    """

    units: GridUnit2D
    height: float
    magnets: bool = False
    centered_magnet: bool = False

    def __post_init__(self) -> None:
        if self.units.x < 1 or self.units.y < 1:
            raise ValueError(f"Block needs at least one cell (got {self.units})")
        if self.height <= BASE_HEIGHT:
            raise ValueError(f"Block height must exceed the base height ({BASE_HEIGHT}mm)")

    @classmethod
    def from_units(cls, units: GridUnit3D, magnets: bool = False, centered_magnet: bool = False) -> Block:
        return cls(units.base, units.height, magnets, centered_magnet)

    @property
    def outline(self) -> Polygon:
        return block_outline(self.units)

    def _magnet_pockets(self) -> list[trimesh.Trimesh]:
        epsilon = kernel.COINCIDENT_FACE_EPSILON
        half = BASE_WIDTH / 2
        offsets: list[tuple[float, float]] = []
        if self.magnets:
            corner = UNIT_SIZE.width / 2 - MAGNET_INSET
            offsets.extend((sx * corner, sy * corner) for sx in (-1, 1) for sy in (-1, 1))
        if self.centered_magnet:
            offsets.append((0.0, 0.0))
        pockets = []
        for row in range(self.units.y):
            for column in range(self.units.x):
                cx, cy = _cell_origin(column, row)
                pockets.extend(
                    kernel.cylinder(
                        MAGNET_DIAMETER / 2, MAGNET_DEPTH + epsilon, cx + half + dx, cy + half + dy, -epsilon
                    )
                    for dx, dy in offsets
                )
        return pockets

    def build(self) -> trimesh.Trimesh:
        bases = [
            base_unit(*_cell_origin(column, row))
            for row in range(self.units.y)
            for column in range(self.units.x)
        ]
        top = kernel.extrude(self.outline, self.height - BASE_HEIGHT, z=BASE_HEIGHT)
        solid = kernel.union([*bases, top])
        return kernel.difference(solid, self._magnet_pockets())


def _fillet_insets(radius: float, steps: int = FILLET_STEPS) -> list[tuple[float, float]]:
    """(height, inset) samples of a concave quarter-circle fillet."""
    samples = []
    for index in range(steps + 1):
        angle = math.pi / 2 * index / steps
        samples.append((radius * (1 - math.cos(angle)), radius * (1 - math.sin(angle))))
    return samples


def stacking_lip(outline: Polygon, z: float) -> trimesh.Trimesh:
    """Lip around the top of a bin whose top edge is at ``z``.

    A support chamfer reaches LIP_SUPPORT below ``z`` so the lip prints
    without overhangs on the inner wall.
    """
    epsilon = kernel.COINCIDENT_FACE_EPSILON
    shell = kernel.extrude(outline, LIP_SUPPORT + LIP_HEIGHT, z=z - LIP_SUPPORT)
    cavity = kernel.loft_stack(
        [
            (z - LIP_SUPPORT - epsilon, kernel.offset(outline, epsilon)),
            (z, kernel.offset(outline, -LIP_SUPPORT)),
            (z + LIP_SMALL_CHAMFER, kernel.offset(outline, -LIP_LARGE_CHAMFER)),
            (z + LIP_SMALL_CHAMFER + LIP_VERTICAL, kernel.offset(outline, -LIP_LARGE_CHAMFER)),
            (z + LIP_HEIGHT + epsilon, kernel.offset(outline, epsilon)),
        ]
    )
    return kernel.difference(shell, [cavity])


@dataclass(frozen=True)
class Bin:
    """A hollow block, optionally with a stacking lip.

    Attributes:
        units: Cells along X and Y, height in 7mm units.
        wall_thickness: Side wall thickness.
        bottom_thickness: Floor thickness above the bases.
        inner_bottom_corner_radius: Fillet between floor and walls.
        stacking_lip: Add a lip so bins stack on each other.
        magnets: Corner magnet pockets under every base.
        centered_magnet: Centre magnet pocket under every base.
    """

    units: GridUnit3D
    wall_thickness: float = 1.0
    bottom_thickness: float = 0.6
    inner_bottom_corner_radius: float = 1.0
    stacking_lip: bool = False
    magnets: bool = False
    centered_magnet: bool = False

    def __post_init__(self) -> None:
        if self.wall_thickness <= 0:
            raise ValueError("Wall thickness must be positive")
        if self.bottom_thickness < 0:
            raise ValueError("Bottom thickness cannot be negative")
        if self.inner_bottom_corner_radius < 0:
            raise ValueError("Inner bottom corner radius cannot be negative")
        if self.floor_height >= self.units.height:
            raise ValueError(f"Bin {self.units} is too low for its base and floor")

    @property
    def block(self) -> Block:
        return Block.from_units(self.units, self.magnets, self.centered_magnet)

    @property
    def floor_height(self) -> float:
        return BASE_HEIGHT + self.bottom_thickness

    @property
    def height(self) -> float:
        return self.units.height + (LIP_HEIGHT if self.stacking_lip else 0.0)

    def _hollow(self, outline: Polygon) -> trimesh.Trimesh:
        epsilon = kernel.COINCIDENT_FACE_EPSILON
        inner = kernel.offset(outline, -self.wall_thickness)
        top = self.units.height + epsilon
        radius = min(self.inner_bottom_corner_radius, top - self.floor_height)
        if radius <= 0:
            return kernel.extrude(inner, top - self.floor_height, z=self.floor_height)
        sections = [
            (self.floor_height + height, kernel.offset(inner, -inset) if inset > 0 else inner)
            for height, inset in _fillet_insets(radius)
        ]
        if top > sections[-1][0]:
            sections.append((top, inner))
        return kernel.loft_stack(sections)

    def build(self) -> trimesh.Trimesh:
        outline = self.block.outline
        shell = kernel.difference(self.block.build(), [self._hollow(outline)])
        if not self.stacking_lip:
            return shell
        logger.debug(f"Adding stacking lip to bin {self.units}")
        return kernel.union([shell, stacking_lip(outline, self.units.height)])
