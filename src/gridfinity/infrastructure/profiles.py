"""Tab and socket solids in the canonical seam frame.

The outline comes from the Bezier description in
``gridfinity.domain.connectors``; this module samples it into a polygon and
turns it into the positive (tab) and negative (socket) solids. All solids
here are in the canonical frame: the edge runs along +X, the seam is y = 0,
the tab points towards +y and z = 0 is the bottom of the connecting layer.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache

import trimesh
from shapely.geometry import Polygon

from gridfinity.domain import BuildSettings
from gridfinity.domain.connectors import (
    NEGATIVE_TAB_LEAD_IN,
    POSITIVE_TAB_HEIGHT_REDUCTION,
    TAB_POSITIONS,
    tab_profile_segments,
)

from . import kernel

# Samples per cubic segment of the outline.
BEZIER_SAMPLES = 16


def _cubic_point(
    p0: tuple[float, float],
    p1: tuple[float, float],
    p2: tuple[float, float],
    p3: tuple[float, float],
    t: float,
) -> tuple[float, float]:
    s = 1.0 - t
    a, b, c, d = s * s * s, 3 * s * s * t, 3 * s * t * t, t * t * t
    return (
        a * p0[0] + b * p1[0] + c * p2[0] + d * p3[0],
        a * p0[1] + b * p1[1] + c * p2[1] + d * p3[1],
    )


def _half_outline(samples: int) -> list[tuple[float, float]]:
    """Left half of the tab, from the base corner up to the centre line."""
    segments = tab_profile_segments()
    points = [segments[0][0]]
    for p0, p1, p2, p3 in segments:
        points.extend(_cubic_point(p0, p1, p2, p3, step / samples) for step in range(1, samples + 1))
    return points


@lru_cache(maxsize=None)
def tab_outline(samples: int = BEZIER_SAMPLES) -> Polygon:
    """The full tab outline, symmetric about x = 0.

    The left half runs from the base corner to the centre line at the top of
    the tab; the right half is its mirror image, and the base closes along
    y = -0.5 so the outline overlaps the piece it belongs to.
    """
    left = _half_outline(samples)
    right = [(-x, y) for x, y in reversed(left[:-1])]
    outline = Polygon(left + right)
    if not outline.is_valid:
        outline = outline.buffer(0)
    return outline


def tab_pair_outline(pitch: float) -> Polygon:
    """Both tabs of one unit-length edge segment starting at x = 0."""
    return kernel.distribute(tab_outline(), [pitch * fraction for fraction in TAB_POSITIONS])


def socket_outline(settings: BuildSettings) -> Polygon:
    """Tab outline grown by the fit tolerance and pulled out of the piece."""
    return kernel.translate2d(kernel.offset(tab_outline(), settings.tolerance), dy=-NEGATIVE_TAB_LEAD_IN)


@dataclass(frozen=True)
class TabProfile:
    """Positive/negative tab pair generator for a connecting layer.

    Attributes:
        height: Height of the layer the tabs connect.
        settings: Fit parameters; the tolerance grows every socket.
    """

    height: float
    settings: BuildSettings = BuildSettings()

    @property
    def positive_height(self) -> float:
        return self.height - POSITIVE_TAB_HEIGHT_REDUCTION

    def positive(self, positions: Sequence[float]) -> trimesh.Trimesh:
        """Tabs centred on each x position, shortened so they clear the mating piece."""
        return kernel.extrude(kernel.distribute(tab_outline(), positions), self.positive_height)

    def negative(self, positions: Sequence[float]) -> trimesh.Trimesh:
        """Sockets centred on each x position, through the full layer height."""
        epsilon = kernel.COINCIDENT_FACE_EPSILON
        return kernel.extrude(
            kernel.distribute(socket_outline(self.settings), positions),
            self.height + 2 * epsilon,
            z=-epsilon,
        )
