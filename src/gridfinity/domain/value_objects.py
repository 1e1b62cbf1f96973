"""Value objects for the Gridfinity domain."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum


class ConfigurationError(ValueError):
    """Raised when dimensions or a footprint and bed cannot be partitioned.

    Attributes:
        axis: Axis the problem was found on ("x" or "y"), if any.
        piece: Name of the piece being planned, if any.
    """

    def __init__(self, message: str, axis: str | None = None, piece: str | None = None) -> None:
        self.axis = axis
        self.piece = piece
        super().__init__(message)


def require_length(value: float, label: str, axis: str | None = None) -> None:
    """Raise ConfigurationError unless value is a finite positive length."""
    if not (math.isfinite(value) and value > 0):
        raise ConfigurationError(f"{label} must be positive and finite (got {value})", axis=axis)


class Axis(str, Enum):
    """Horizontal axes of the grid."""

    X = "x"
    Y = "y"

    @property
    def other(self) -> Axis:
        return Axis.Y if self is Axis.X else Axis.X


class AxisDirection(str, Enum):
    """Direction along an axis."""

    NEGATIVE = "negative"
    POSITIVE = "positive"


class Side(str, Enum):
    """One of the four edges of a rectangular piece, seen from above.

    BOTTOM is the min-Y (front) edge and TOP the max-Y (back) edge.

    Attributes:
        LEFT: min-X edge.
        RIGHT: max-X edge.
        BOTTOM: min-Y edge.
        TOP: max-Y edge.
    """

    LEFT = "left"
    RIGHT = "right"
    BOTTOM = "bottom"
    TOP = "top"

    @property
    def axis(self) -> Axis:
        """Axis the edge is perpendicular to."""
        return Axis.X if self in (Side.LEFT, Side.RIGHT) else Axis.Y

    @property
    def direction(self) -> AxisDirection:
        if self in (Side.LEFT, Side.BOTTOM):
            return AxisDirection.NEGATIVE
        return AxisDirection.POSITIVE

    @property
    def opposite(self) -> Side:
        return {
            Side.LEFT: Side.RIGHT,
            Side.RIGHT: Side.LEFT,
            Side.BOTTOM: Side.TOP,
            Side.TOP: Side.BOTTOM,
        }[self]


class Alignment(str, Enum):
    """Where slack is placed when a run of whole units sits on a longer edge."""

    MIN = "min"
    MID = "mid"
    MAX = "max"

    @property
    def fraction(self) -> float:
        return {Alignment.MIN: 0.0, Alignment.MID: 0.5, Alignment.MAX: 1.0}[self]


class BaseplateOption(str, Enum):
    """Optional features of a baseplate.

    Attributes:
        FOUNDATION: Solid 7mm layer beneath the socket grid.
        TABS: Interlocking tabs on the top/left edges, sockets on bottom/right.
        SCREWS: M3 bolt clearance on tab edges and nut traps on socket edges.
        MAGNETS: 6.5mm magnet pockets near the corners of every cell.
    """

    FOUNDATION = "foundation"
    TABS = "tabs"
    SCREWS = "screws"
    MAGNETS = "magnets"


FOUNDATION_OPTIONS: frozenset[BaseplateOption] = frozenset(
    {
        BaseplateOption.FOUNDATION,
        BaseplateOption.TABS,
        BaseplateOption.SCREWS,
        BaseplateOption.MAGNETS,
    }
)


def requires_foundation(options: frozenset[BaseplateOption] | set[BaseplateOption]) -> bool:
    """Return True if any requested option needs the foundation layer."""
    return bool(FOUNDATION_OPTIONS.intersection(options))


@dataclass(frozen=True)
class PhysicalSize:
    """Real-valued dimensions in millimeters.

    Attributes:
        width: Extent along X.
        depth: Extent along Y.
        height: Extent along Z, if relevant.
    """

    width: float
    depth: float
    height: float | None = None

    def __post_init__(self) -> None:
        require_length(self.width, "Width", "x")
        require_length(self.depth, "Depth", "y")
        if self.height is not None:
            require_length(self.height, "Height")

    def along(self, axis: Axis) -> float:
        """Extent along a horizontal axis."""
        return self.width if axis is Axis.X else self.depth


@dataclass(frozen=True)
class GridUnit2D:
    """A count of grid cells along X and Y."""

    x: int
    y: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Unit counts cannot be negative (got {self.x}x{self.y})")

    def along(self, axis: Axis) -> int:
        return self.x if axis is Axis.X else self.y

    @property
    def cell_count(self) -> int:
        return self.x * self.y

    def physical_size(self, unit_size: PhysicalSize | None = None) -> tuple[float, float]:
        """Width and depth in millimeters covered by these units."""
        unit = unit_size or UNIT_SIZE
        return self.x * unit.width, self.y * unit.depth

    def __str__(self) -> str:
        return f"{self.x}x{self.y}"


@dataclass(frozen=True)
class GridUnit3D:
    """A count of grid cells along X, Y and in 7mm height units along Z."""

    x: int
    y: int
    z: int

    def __post_init__(self) -> None:
        if self.x < 1 or self.y < 1 or self.z < 1:
            raise ValueError(f"Unit counts must be at least 1 (got {self.x}x{self.y}x{self.z})")

    @property
    def base(self) -> GridUnit2D:
        return GridUnit2D(self.x, self.y)

    @property
    def height(self) -> float:
        """Height in millimeters."""
        return self.z * UNIT_HEIGHT

    def __str__(self) -> str:
        return f"{self.x}x{self.y}x{self.z}"


@dataclass(frozen=True)
class Point2D:
    """A point (or offset) on the XY plane in millimeters."""

    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Point2D) -> Point2D:
        return Point2D(self.x + other.x, self.y + other.y)


@dataclass(frozen=True)
class Bounds2D:
    """Axis-aligned rectangle on the XY plane."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def depth(self) -> float:
        return self.max_y - self.min_y

    def fits_within(self, size: PhysicalSize, tolerance: float = 1e-9) -> bool:
        """Check whether the rectangle fits on a bed of the given size."""
        return self.width <= size.width + tolerance and self.depth <= size.depth + tolerance


@dataclass(frozen=True)
class BuildSettings:
    """Fit parameters threaded through every geometry builder.

    Attributes:
        tolerance: Clearance in millimeters added around every negative
            connector, nut trap and bolt hole.
    """

    tolerance: float = 0.2

    def __post_init__(self) -> None:
        if self.tolerance < 0:
            raise ValueError("Tolerance must be non-negative")


# Gridfinity grid pitch (42mm x 42mm) and vertical unit (7mm).
UNIT_SIZE = PhysicalSize(42.0, 42.0)
UNIT_HEIGHT = 7.0
