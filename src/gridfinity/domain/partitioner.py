"""Partitioning of a footprint into bed-sized baseplate pieces.

A footprint (for example a drawer interior) is covered by:

- a grid of identical main baseplates, each as large as the print bed allows,
- a narrow column and/or shallow row of baseplates for leftover whole units,
- one corner baseplate where the narrow column meets the shallow row,
- side spacers absorbing the non-grid slack left and right of the grid,
- front/back padding rows absorbing the slack along the depth axis. A padding
  row wider than the bed is split into a left/right pair or into
  left + centre pieces + right.

Every piece is described by a ``PieceSpec`` placed in footprint coordinates
(origin at the front-left corner), so the plan can be checked without
building any geometry.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

from .connectors import ConnectorKind, ConnectorSpec, baseplate_connectors
from .connectors import tab_clearance as profile_tab_clearance
from .value_objects import (
    Alignment,
    Axis,
    BaseplateOption,
    Bounds2D,
    ConfigurationError,
    GridUnit2D,
    PhysicalSize,
    Point2D,
    Side,
    UNIT_SIZE,
    require_length,
)

logger = logging.getLogger(__name__)

# Guards integer unit counts against values like 5.999999999 that are 6 in intent.
_UNIT_EPSILON = 1e-9


class PieceKind(str, Enum):
    """Kind of solid a piece is built as."""

    BASEPLATE = "baseplate"
    SPACER = "spacer"


class PieceRole(str, Enum):
    """Position of a piece within the plan."""

    MAIN = "main"
    NARROW = "narrow"
    SHALLOW = "shallow"
    CORNER = "corner"
    SIDE_SPACER = "side_spacer"
    FRONT_SPACER = "front_spacer"
    BACK_SPACER = "back_spacer"


class PaddingSplit(str, Enum):
    """How a padding row was divided to fit on the bed."""

    SINGLE = "single"
    PAIR = "pair"
    CENTERED = "centered"


@dataclass(frozen=True)
class PieceSpec:
    """A named piece of the plan, positioned in footprint coordinates.

    Attributes:
        name: Unique human-readable name used for export.
        kind: Baseplate or spacer.
        role: Where the piece sits in the plan.
        origin: Front-left corner in footprint coordinates.
        size: Footprint of the piece body (tabs excluded).
        units: Grid units of a baseplate, None for spacers.
        connectors: Tab/socket edges of the piece.
    """

    name: str
    kind: PieceKind
    role: PieceRole
    origin: Point2D
    size: PhysicalSize
    units: GridUnit2D | None = None
    connectors: tuple[ConnectorSpec, ...] = ()

    @property
    def interlocking_side(self) -> Side | None:
        """The single connector side of a spacer."""
        if self.kind is PieceKind.SPACER and self.connectors:
            return self.connectors[0].side
        return None

    def local_bounds(self, protrusion: float | None = None) -> Bounds2D:
        """Piece-local bounding rectangle including protruding tabs."""
        depth = profile_tab_clearance() if protrusion is None else protrusion
        min_x, min_y = 0.0, 0.0
        max_x, max_y = self.size.width, self.size.depth
        for connector in self.connectors:
            if connector.kind is not ConnectorKind.TAB or connector.unit_count == 0:
                continue
            if connector.side is Side.LEFT:
                min_x = -depth
            elif connector.side is Side.TOP:
                max_y = self.size.depth + depth
        return Bounds2D(min_x, min_y, max_x, max_y)

    @property
    def footprint_bounds(self) -> Bounds2D:
        """Body rectangle in footprint coordinates."""
        return Bounds2D(
            self.origin.x,
            self.origin.y,
            self.origin.x + self.size.width,
            self.origin.y + self.size.depth,
        )


@dataclass(frozen=True)
class PaddingRow:
    """A row of spacers absorbing non-grid slack at the front or back."""

    depth: float
    split: PaddingSplit
    pieces: tuple[PieceSpec, ...]

    @property
    def width(self) -> float:
        return sum(piece.size.width for piece in self.pieces)


@dataclass(frozen=True)
class LayoutPlan:
    """The partitioner's output.

    Attributes:
        footprint: Requested footprint.
        bed_size: Print bed the pieces must fit on.
        unit_size: Grid pitch.
        tab_clearance: Depth consumed by protruding tabs.
        total_units: Whole grid units covering the footprint per axis.
        max_bed_units: Whole grid units fitting on the bed per axis.
        main_units: Units of each main piece.
        main_count: Number of main pieces along each axis.
        remainder_units: Leftover units per axis (0 when absent).
        side_padding: Slack on each of the left and right sides.
        front_padding: Slack in front of the grid.
        back_padding: Slack behind the grid.
        front_row: Front padding row, if any.
        back_row: Back padding row, if any.
        rows: All pieces, row by row from front to back, left to right.
    """

    footprint: PhysicalSize
    bed_size: PhysicalSize
    unit_size: PhysicalSize
    tab_clearance: float
    total_units: GridUnit2D
    max_bed_units: GridUnit2D
    main_units: GridUnit2D
    main_count: GridUnit2D
    remainder_units: GridUnit2D
    side_padding: float
    front_padding: float
    back_padding: float
    front_row: PaddingRow | None
    back_row: PaddingRow | None
    rows: tuple[tuple[PieceSpec, ...], ...] = field(default_factory=tuple)

    @property
    def pieces(self) -> tuple[PieceSpec, ...]:
        return tuple(piece for row in self.rows for piece in row)

    @property
    def main_grid(self) -> tuple[tuple[GridUnit2D, ...], ...]:
        """Units of every main piece, row by row."""
        return tuple(
            tuple(self.main_units for _ in range(self.main_count.x))
            for _ in range(self.main_count.y)
        )

    @property
    def has_corner(self) -> bool:
        return self.remainder_units.x > 0 and self.remainder_units.y > 0

    def piece(self, name: str) -> PieceSpec:
        """Look up a piece by name."""
        for piece in self.pieces:
            if piece.name == name:
                return piece
        raise KeyError(f"No piece named {name!r}")


def _units(length: float, unit: float) -> int:
    return int(math.floor(length / unit + _UNIT_EPSILON))


def compute_layout(
    footprint: PhysicalSize,
    bed_size: PhysicalSize,
    front_padding: float = 0.0,
    unit_size: PhysicalSize = UNIT_SIZE,
    tab_clearance: float | None = None,
    options: frozenset[BaseplateOption] = frozenset({BaseplateOption.TABS}),
) -> LayoutPlan:
    """Partition a footprint into pieces that each fit on the print bed.

    Algorithm:
    1. Usable bed units per axis: floor((bed - tab clearance) / unit).
    2. Footprint units per axis: floor((footprint - tab clearance) / unit).
    3. Main pieces use min(footprint units, bed units) per axis and are
       repeated footprint_units // main_units times.
    4. Leftover units form a narrow column, a shallow row and a corner.
    5. X slack is split equally into left/right side spacers.
    6. Y slack goes to the caller's front padding; the back absorbs the rest.
    7. Each non-empty padding row is split to fit the bed width.

    Args:
        footprint: Area to cover in millimeters.
        bed_size: Largest printable piece in millimeters.
        front_padding: Non-grid space reserved in front of the grid.
        unit_size: Grid pitch.
        tab_clearance: Depth consumed by protruding tabs; defaults to the
            tab profile's protrusion.
        options: Baseplate options; without tabs the baseplates carry no
            connectors.

    Returns:
        A deterministic LayoutPlan.

    Raises:
        ConfigurationError: If any dimension is invalid, the bed or
            footprint is smaller than one unit plus the tab clearance, or
            the front padding exceeds the available depth slack.
    """
    clearance = profile_tab_clearance() if tab_clearance is None else tab_clearance
    if not math.isfinite(clearance) or clearance < 0:
        raise ConfigurationError(f"Tab clearance must be finite and non-negative (got {clearance})")
    if not math.isfinite(front_padding):
        raise ConfigurationError(f"Front padding must be finite (got {front_padding})", axis="y")
    if front_padding < 0:
        raise ConfigurationError(
            f"Front padding cannot be negative (got {front_padding})", axis="y"
        )

    max_bed_units = GridUnit2D(
        _units(bed_size.width - clearance, unit_size.width),
        _units(bed_size.depth - clearance, unit_size.depth),
    )
    for axis, count, bed in (
        ("x", max_bed_units.x, bed_size.width),
        ("y", max_bed_units.y, bed_size.depth),
    ):
        if count < 1:
            raise ConfigurationError(
                f"Bed size along {axis} ({bed}mm) is smaller than one grid unit "
                f"plus tab clearance ({unit_size.along(Axis(axis)) + clearance}mm)",
                axis=axis,
            )

    total_units = GridUnit2D(
        _units(footprint.width - clearance, unit_size.width),
        _units(footprint.depth - clearance, unit_size.depth),
    )
    for axis, count, length in (
        ("x", total_units.x, footprint.width),
        ("y", total_units.y, footprint.depth),
    ):
        if count < 1:
            raise ConfigurationError(
                f"Footprint along {axis} ({length}mm) is smaller than one grid unit "
                f"plus tab clearance ({unit_size.along(Axis(axis)) + clearance}mm)",
                axis=axis,
            )

    main_units = GridUnit2D(
        min(total_units.x, max_bed_units.x),
        min(total_units.y, max_bed_units.y),
    )
    main_count = GridUnit2D(total_units.x // main_units.x, total_units.y // main_units.y)
    remainder_units = GridUnit2D(total_units.x % main_units.x, total_units.y % main_units.y)

    grid_width = total_units.x * unit_size.width
    grid_depth = total_units.y * unit_size.depth
    side_padding = (footprint.width - grid_width) / 2
    back_padding = (footprint.depth - grid_depth) - front_padding
    if back_padding < -_UNIT_EPSILON:
        raise ConfigurationError(
            f"Front padding ({front_padding}mm) exceeds the available depth slack "
            f"({footprint.depth - grid_depth:.3f}mm)",
            axis="y",
            piece="Back spacer",
        )
    back_padding = max(back_padding, 0.0)
    if back_padding < clearance:
        logger.warning(
            f"Back padding ({back_padding:.3f}mm) is thinner than the tab clearance "
            f"({clearance}mm); rear tabs will overhang the footprint"
        )

    logger.debug(
        f"Footprint {footprint.width}x{footprint.depth}mm: {total_units} units, "
        f"main pieces {main_units} x {main_count}, remainder {remainder_units}"
    )

    with_tabs = BaseplateOption.TABS in options
    rows: list[tuple[PieceSpec, ...]] = []

    front_row = None
    if front_padding > 0:
        front_row = partition_padding_row(
            total_units=total_units.x,
            side_padding=side_padding,
            max_part_width=bed_size.width,
            depth=front_padding,
            interlocking_side=Side.TOP,
            base_name="Front spacer",
            role=PieceRole.FRONT_SPACER,
            origin_y=0.0,
            unit_width=unit_size.width,
            bed_depth=bed_size.depth,
            protrusion=clearance,
        )
        rows.append(front_row.pieces)

    y = front_padding
    row_depth = main_units.y * unit_size.depth
    for y_index in range(main_count.y):
        rows.append(
            _grid_row(
                y=y,
                depth_units=main_units.y,
                main_units=main_units,
                main_count=main_count.x,
                remainder_x=remainder_units.x,
                side_padding=side_padding,
                unit_size=unit_size,
                with_tabs=with_tabs,
                names=_main_row_names(y_index + 1, main_count.x),
            )
        )
        y += row_depth

    if remainder_units.y > 0:
        rows.append(
            _grid_row(
                y=y,
                depth_units=remainder_units.y,
                main_units=main_units,
                main_count=main_count.x,
                remainder_x=remainder_units.x,
                side_padding=side_padding,
                unit_size=unit_size,
                with_tabs=with_tabs,
                names=_shallow_row_names(main_count.x),
            )
        )
        y += remainder_units.y * unit_size.depth

    back_row = None
    if back_padding > 0:
        back_row = partition_padding_row(
            total_units=total_units.x,
            side_padding=side_padding,
            max_part_width=bed_size.width,
            depth=back_padding,
            interlocking_side=Side.BOTTOM,
            base_name="Back spacer",
            role=PieceRole.BACK_SPACER,
            origin_y=y,
            unit_width=unit_size.width,
            bed_depth=bed_size.depth,
        )
        rows.append(back_row.pieces)

    return LayoutPlan(
        footprint=footprint,
        bed_size=bed_size,
        unit_size=unit_size,
        tab_clearance=clearance,
        total_units=total_units,
        max_bed_units=max_bed_units,
        main_units=main_units,
        main_count=main_count,
        remainder_units=remainder_units,
        side_padding=side_padding,
        front_padding=front_padding,
        back_padding=back_padding,
        front_row=front_row,
        back_row=back_row,
        rows=tuple(rows),
    )


@dataclass(frozen=True)
class _RowNames:
    left_spacer: str
    right_spacer: str
    main: tuple[str, ...]
    remainder: str


def _main_row_names(row: int, columns: int) -> _RowNames:
    return _RowNames(
        left_spacer=f"Side spacer, left {row}",
        right_spacer=f"Side spacer, right {row}",
        main=tuple(f"Baseplate {row}-{column + 1}" for column in range(columns)),
        remainder=f"Baseplate, narrow {row}",
    )


def _shallow_row_names(columns: int) -> _RowNames:
    return _RowNames(
        left_spacer="Side spacer, left short",
        right_spacer="Side spacer, right short",
        main=tuple(f"Baseplate, shallow {column + 1}" for column in range(columns)),
        remainder="Baseplate, corner",
    )


def _grid_row(
    y: float,
    depth_units: int,
    main_units: GridUnit2D,
    main_count: int,
    remainder_x: int,
    side_padding: float,
    unit_size: PhysicalSize,
    with_tabs: bool,
    names: _RowNames,
) -> tuple[PieceSpec, ...]:
    """One row of baseplates flanked by side spacers."""
    shallow = depth_units != main_units.y
    depth = depth_units * unit_size.depth
    pieces: list[PieceSpec] = []
    x = 0.0

    if side_padding > 0:
        pieces.append(
            _side_spacer(names.left_spacer, Point2D(x, y), side_padding, depth, Side.RIGHT, depth_units)
        )
        x += side_padding

    for name in names.main:
        units = GridUnit2D(main_units.x, depth_units)
        pieces.append(
            _baseplate(name, PieceRole.SHALLOW if shallow else PieceRole.MAIN, Point2D(x, y), units, unit_size, with_tabs)
        )
        x += units.x * unit_size.width

    if remainder_x > 0:
        units = GridUnit2D(remainder_x, depth_units)
        pieces.append(
            _baseplate(names.remainder, PieceRole.CORNER if shallow else PieceRole.NARROW, Point2D(x, y), units, unit_size, with_tabs)
        )
        x += units.x * unit_size.width

    if side_padding > 0:
        pieces.append(
            _side_spacer(names.right_spacer, Point2D(x, y), side_padding, depth, Side.LEFT, depth_units)
        )

    return tuple(pieces)


def _baseplate(
    name: str,
    role: PieceRole,
    origin: Point2D,
    units: GridUnit2D,
    unit_size: PhysicalSize,
    with_tabs: bool,
) -> PieceSpec:
    width, depth = units.physical_size(unit_size)
    return PieceSpec(
        name=name,
        kind=PieceKind.BASEPLATE,
        role=role,
        origin=origin,
        size=PhysicalSize(width, depth),
        units=units,
        connectors=baseplate_connectors(units) if with_tabs else (),
    )


def _side_spacer(
    name: str,
    origin: Point2D,
    width: float,
    depth: float,
    interlocking_side: Side,
    unit_count: int,
) -> PieceSpec:
    return PieceSpec(
        name=name,
        kind=PieceKind.SPACER,
        role=PieceRole.SIDE_SPACER,
        origin=origin,
        size=PhysicalSize(width, depth),
        connectors=(ConnectorSpec(interlocking_side, Alignment.MID, 0.0, unit_count),),
    )


def partition_padding_row(
    total_units: int,
    side_padding: float,
    max_part_width: float,
    depth: float,
    interlocking_side: Side,
    base_name: str,
    role: PieceRole,
    origin_y: float = 0.0,
    unit_width: float = UNIT_SIZE.width,
    bed_depth: float | None = None,
    protrusion: float = 0.0,
) -> PaddingRow:
    """Split a padding row spanning the footprint width to fit the bed.

    - If the whole row fits the bed width, one piece spans it.
    - If two pieces holding at most max_side_units each cover it, the left
      piece takes total_units // 2 and the right piece the rest; their
      connectors are aligned so the tabs meet the grid at the shared edge.
    - Otherwise left and right pieces take max_side_units each and the
      remaining units are shared by ceil(rest / max_center_units) centre
      pieces, the leftmost ones taking one extra unit when it does not
      divide evenly.

    Args:
        total_units: Grid units spanned by the row (side padding excluded).
        side_padding: Slack on each end of the row.
        max_part_width: Bed width.
        depth: Depth of the row.
        interlocking_side: Side facing the grid (TOP for front, BOTTOM for back).
        base_name: Name prefix, e.g. "Front spacer".
        role: Role assigned to every piece of the row.
        origin_y: Y of the row in footprint coordinates.
        unit_width: Grid pitch along X.
        bed_depth: Bed depth, checked against the row depth when given.
        protrusion: How far the row's tabs stick out past its depth.

    Returns:
        The row with its pieces ordered left to right.

    Raises:
        ConfigurationError: If the row cannot be printed on the bed.
    """
    require_length(max_part_width, "Bed width", "x")
    if not (math.isfinite(depth) and depth > 0):
        raise ConfigurationError(f"{base_name} depth must be positive (got {depth})", axis="y", piece=base_name)
    if bed_depth is not None and depth + protrusion > bed_depth + _UNIT_EPSILON:
        raise ConfigurationError(
            f"{base_name} depth ({depth}mm plus {protrusion}mm of tabs) exceeds the bed depth ({bed_depth}mm)",
            axis="y",
            piece=base_name,
        )

    total_width = total_units * unit_width + side_padding * 2
    max_side_units = _units(max_part_width - side_padding, unit_width)
    max_center_units = _units(max_part_width, unit_width)

    def spacer(name: str, x: float, units: int, padding: float, alignment: Alignment) -> PieceSpec:
        return PieceSpec(
            name=name,
            kind=PieceKind.SPACER,
            role=role,
            origin=Point2D(x, origin_y),
            size=PhysicalSize(units * unit_width + padding, depth),
            connectors=(ConnectorSpec(interlocking_side, alignment, 0.0, units),),
        )

    if total_width <= max_part_width + _UNIT_EPSILON:
        piece = spacer(base_name, 0.0, total_units, side_padding * 2, Alignment.MID)
        return PaddingRow(depth, PaddingSplit.SINGLE, (piece,))

    if max_center_units < 1:
        raise ConfigurationError(
            f"Bed width ({max_part_width}mm) cannot hold one grid unit of {base_name}",
            axis="x",
            piece=base_name,
        )

    if total_units <= max_side_units * 2:
        left_units = total_units // 2
        right_units = total_units - left_units
        left = spacer(f"{base_name}, left", 0.0, left_units, side_padding, Alignment.MAX)
        right = spacer(
            f"{base_name}, right",
            left.size.width,
            right_units,
            side_padding,
            Alignment.MIN,
        )
        return PaddingRow(depth, PaddingSplit.PAIR, (left, right))

    center_units_total = total_units - max_side_units * 2
    center_count = math.ceil(center_units_total / max_center_units)
    center_base, center_remainder = divmod(center_units_total, center_count)

    pieces = [spacer(f"{base_name}, left", 0.0, max_side_units, side_padding, Alignment.MAX)]
    x = pieces[0].size.width
    for index in range(center_count):
        units = center_base + (1 if index < center_remainder else 0)
        center = spacer(f"{base_name}, center {index + 1}", x, units, 0.0, Alignment.MID)
        pieces.append(center)
        x += center.size.width
    pieces.append(spacer(f"{base_name}, right", x, max_side_units, side_padding, Alignment.MIN))

    logger.debug(
        f"{base_name}: {total_units} units split into {max_side_units} + "
        f"{center_count} centre piece(s) + {max_side_units}"
    )
    return PaddingRow(depth, PaddingSplit.CENTERED, tuple(pieces))
