"""Thin adapter over shapely (2D) and trimesh (3D).

Every solid in the package is produced through this module, so the kernel
choices live in one place:

- 2D outlines are shapely polygons; offsets use round joins.
- 3D solids are ``trimesh.Trimesh`` objects. Booleans run on the manifold
  engine. Lofts between two convex outlines are exact convex hulls, which
  covers chamfers and the constant socket/base cross-sections.

Kernel exceptions are not caught here; they propagate to the caller.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

import numpy as np
import trimesh
from shapely import affinity
from shapely.geometry import MultiPolygon, Point, Polygon
from shapely.geometry import box as shapely_box
from shapely.ops import unary_union

from gridfinity.domain import Bounds2D

logger = logging.getLogger(__name__)

BOOLEAN_ENGINE = "manifold"

# Cutters that would end flush with a face of the body they cut are extended
# by this much so the boolean never has to resolve coincident faces.
COINCIDENT_FACE_EPSILON = 0.01

# Segments per quarter circle for arcs and round offsets.
ARC_RESOLUTION = 8
# Segments of a full circle for cylinders.
CIRCLE_SECTIONS = 4 * ARC_RESOLUTION

Shape2D = Polygon | MultiPolygon


# ---------------------------------------------------------------------------
# 2D
# ---------------------------------------------------------------------------


def rectangle(width: float, depth: float, x: float = 0.0, y: float = 0.0) -> Polygon:
    """Axis-aligned rectangle with its min corner at (x, y)."""
    return shapely_box(x, y, x + width, y + depth)


def rounded_rectangle(
    width: float, depth: float, radius: float, x: float = 0.0, y: float = 0.0
) -> Polygon:
    """Rectangle with circular corners, min corner at (x, y).

    The radius is clamped to half the smaller side.
    """
    radius = min(radius, width / 2, depth / 2)
    if radius <= 0:
        return rectangle(width, depth, x, y)
    core = shapely_box(x + radius, y + radius, x + width - radius, y + depth - radius)
    return core.buffer(radius, quad_segs=ARC_RESOLUTION, join_style="round")


def circle(radius: float, x: float = 0.0, y: float = 0.0) -> Polygon:
    return Point(x, y).buffer(radius, quad_segs=ARC_RESOLUTION)


def inset_rounded_rectangle(
    width: float, depth: float, radius: float, inset: float, x: float = 0.0, y: float = 0.0
) -> Polygon:
    """A rounded rectangle shrunk uniformly by ``inset`` on every side.

    The corner radius shrinks with it, never below zero, like an inward
    offset of the full outline.
    """
    return rounded_rectangle(
        width - 2 * inset,
        depth - 2 * inset,
        max(radius - inset, 0.0),
        x + inset,
        y + inset,
    )


def offset(shape: Shape2D, distance: float) -> Shape2D:
    """Grow (positive) or shrink (negative) an outline with round joins."""
    return shape.buffer(distance, quad_segs=ARC_RESOLUTION, join_style="round")


def round_inside_corners(shape: Shape2D, radius: float) -> Shape2D:
    """Round concave corners by a closing operation."""
    return offset(offset(shape, radius), -radius)


def translate2d(shape: Shape2D, dx: float = 0.0, dy: float = 0.0) -> Shape2D:
    return affinity.translate(shape, dx, dy)


def union2d(shapes: Iterable[Shape2D]) -> Shape2D:
    return unary_union(list(shapes))


def distribute(shape: Shape2D, positions: Sequence[float]) -> Shape2D:
    """Copies of a shape at each x position, merged into one outline."""
    return union2d(translate2d(shape, dx=position) for position in positions)


def polygons(shape: Shape2D) -> list[Polygon]:
    """The individual polygons of a 2D shape, skipping empty parts."""
    if shape.is_empty:
        return []
    if isinstance(shape, Polygon):
        return [shape]
    return [geom for geom in shape.geoms if isinstance(geom, Polygon) and not geom.is_empty]


# ---------------------------------------------------------------------------
# 3D construction
# ---------------------------------------------------------------------------


def extrude(shape: Shape2D, height: float, z: float = 0.0) -> trimesh.Trimesh:
    """Extrude a 2D outline along +Z starting at ``z``.

    Raises:
        ValueError: If the outline is empty or the height is not positive.
    """
    if height <= 0:
        raise ValueError(f"Extrusion height must be positive (got {height})")
    parts = polygons(shape)
    if not parts:
        raise ValueError("Cannot extrude an empty outline")
    meshes = [trimesh.creation.extrude_polygon(polygon, height) for polygon in parts]
    solid = meshes[0] if len(meshes) == 1 else trimesh.util.concatenate(meshes)
    if z:
        solid.apply_translation((0.0, 0.0, z))
    return solid


def _ring_points(shape: Polygon, z: float) -> np.ndarray:
    coords = np.asarray(shape.exterior.coords)[:-1]
    return np.column_stack([coords, np.full(len(coords), z)])


def loft(bottom: Polygon, z0: float, top: Polygon, z1: float) -> trimesh.Trimesh:
    """Solid spanning two convex outlines at heights z0 < z1.

    For convex outlines the convex hull of both rings is exactly the ruled
    loft between them.
    """
    if z1 <= z0:
        raise ValueError(f"Loft needs z1 > z0 (got {z0}..{z1})")
    points = np.vstack([_ring_points(bottom, z0), _ring_points(top, z1)])
    return trimesh.convex.convex_hull(points)


def convex_solid(sections: Sequence[tuple[float, Polygon]]) -> trimesh.Trimesh:
    """Convex hull of several (z, outline) sections.

    Exact when the solid they describe is convex, like a box with
    chamfered bottom edges.
    """
    return trimesh.convex.convex_hull(np.vstack([_ring_points(shape, z) for z, shape in sections]))


def loft_stack(sections: Sequence[tuple[float, Polygon]]) -> trimesh.Trimesh:
    """Union of lofts between consecutive (z, outline) sections.

    Each pair of neighbouring sections must be convex; the stack as a whole
    need not be.
    """
    if len(sections) < 2:
        raise ValueError("A loft stack needs at least two sections")
    pieces = [
        loft(lower, z0, upper, z1)
        for (z0, lower), (z1, upper) in zip(sections, sections[1:])
    ]
    return union(pieces)


def box(
    width: float, depth: float, height: float, x: float = 0.0, y: float = 0.0, z: float = 0.0
) -> trimesh.Trimesh:
    """Axis-aligned box with its min corner at (x, y, z)."""
    solid = trimesh.creation.box(extents=(width, depth, height))
    solid.apply_translation((x + width / 2, y + depth / 2, z + height / 2))
    return solid


def cylinder(
    radius: float, height: float, x: float = 0.0, y: float = 0.0, z: float = 0.0
) -> trimesh.Trimesh:
    """Vertical cylinder with its bottom face centred on (x, y, z)."""
    solid = trimesh.creation.cylinder(radius=radius, height=height, sections=CIRCLE_SECTIONS)
    solid.apply_translation((x, y, z + height / 2))
    return solid


def cone(
    bottom_radius: float, top_radius: float, height: float, z: float = 0.0
) -> trimesh.Trimesh:
    """Truncated cone on the Z axis between z and z + height."""
    return loft(circle(bottom_radius), z, circle(top_radius), z + height)


# ---------------------------------------------------------------------------
# Booleans and transforms
# ---------------------------------------------------------------------------


def union(meshes: Sequence[trimesh.Trimesh]) -> trimesh.Trimesh:
    meshes = [mesh for mesh in meshes if mesh is not None]
    if not meshes:
        raise ValueError("Cannot union an empty list of solids")
    if len(meshes) == 1:
        return meshes[0].copy()
    return trimesh.boolean.union(meshes, engine=BOOLEAN_ENGINE)


def difference(base: trimesh.Trimesh, cutters: Sequence[trimesh.Trimesh]) -> trimesh.Trimesh:
    """Subtract every cutter from the base solid."""
    cutters = [cutter for cutter in cutters if cutter is not None]
    if not cutters:
        return base.copy()
    logger.debug(f"Subtracting {len(cutters)} cutter(s) from a {len(base.faces)}-face solid")
    return trimesh.boolean.difference([base, *cutters], engine=BOOLEAN_ENGINE)


def translated(
    mesh: trimesh.Trimesh, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0
) -> trimesh.Trimesh:
    """A translated copy of a solid."""
    moved = mesh.copy()
    moved.apply_translation((dx, dy, dz))
    return moved


def rotated(
    mesh: trimesh.Trimesh,
    degrees: float,
    axis: Sequence[float] = (0.0, 0.0, 1.0),
    point: Sequence[float] = (0.0, 0.0, 0.0),
) -> trimesh.Trimesh:
    """A copy of a solid rotated about an axis through ``point``."""
    matrix = trimesh.transformations.rotation_matrix(math.radians(degrees), axis, point)
    moved = mesh.copy()
    moved.apply_transform(matrix)
    return moved


def footprint(mesh: trimesh.Trimesh) -> Bounds2D:
    """XY bounding rectangle of a solid."""
    (min_x, min_y, _), (max_x, max_y, _) = mesh.bounds
    return Bounds2D(float(min_x), float(min_y), float(max_x), float(max_y))


def height_range(mesh: trimesh.Trimesh) -> tuple[float, float]:
    (_, _, min_z), (_, _, max_z) = mesh.bounds
    return float(min_z), float(max_z)
