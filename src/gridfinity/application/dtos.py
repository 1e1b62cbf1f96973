"""Data Transfer Objects for the application layer."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from gridfinity.application.config import BaseplateSetConfiguration
from gridfinity.domain import (
    AssemblyLayout,
    BaseplateOption,
    BuildSettings,
    GridUnit2D,
    GridUnit3D,
    HardwareItem,
    LayoutPlan,
    PhysicalSize,
)
from gridfinity.infrastructure import BuiltPiece


def _parse_options(names: list[str], errors: list[str]) -> frozenset[BaseplateOption]:
    valid = [option.value for option in BaseplateOption]
    options = set()
    for name in names:
        if name not in valid:
            errors.append(f"Unknown option {name!r}; must be one of: {', '.join(valid)}")
        else:
            options.add(BaseplateOption(name))
    return frozenset(options)


@dataclass
class BaseplateSetInput:
    """Input DTO for a baseplate set."""

    footprint_width: float
    footprint_depth: float
    bed_width: float = 256.0
    bed_depth: float = 256.0
    front_padding: float = 0.0
    padding_chamfer: float = 1.0
    options: list[str] = field(default_factory=lambda: [BaseplateOption.TABS.value])
    tolerance: float = 0.2
    stack_spacing: float = 1.0

    @classmethod
    def from_config(cls, config: BaseplateSetConfiguration) -> BaseplateSetInput:
        return cls(
            footprint_width=config.footprint.width,
            footprint_depth=config.footprint.depth,
            bed_width=config.printbed.width,
            bed_depth=config.printbed.depth,
            front_padding=config.front_padding,
            padding_chamfer=config.padding_chamfer,
            options=[option.value for option in config.options],
            tolerance=config.tolerance,
            stack_spacing=config.stack_spacing,
        )

    def validate(self) -> list[str]:
        """Validate input and return list of error messages."""
        errors: list[str] = []
        non_finite = [
            name
            for name in (
                "footprint_width",
                "footprint_depth",
                "bed_width",
                "bed_depth",
                "front_padding",
                "padding_chamfer",
                "tolerance",
                "stack_spacing",
            )
            if not math.isfinite(getattr(self, name))
        ]
        if non_finite:
            errors.append(f"Values must be finite numbers: {', '.join(non_finite)}")
        if self.footprint_width <= 0 or self.footprint_depth <= 0:
            errors.append("Footprint dimensions must be positive")
        if self.bed_width <= 0 or self.bed_depth <= 0:
            errors.append("Print bed dimensions must be positive")
        if self.front_padding < 0:
            errors.append("Front padding cannot be negative")
        if self.padding_chamfer < 0:
            errors.append("Padding chamfer cannot be negative")
        if self.tolerance < 0:
            errors.append("Tolerance cannot be negative")
        if self.stack_spacing < 0:
            errors.append("Stack spacing cannot be negative")
        _parse_options(self.options, errors)
        return errors

    @property
    def footprint(self) -> PhysicalSize:
        return PhysicalSize(self.footprint_width, self.footprint_depth)

    @property
    def bed_size(self) -> PhysicalSize:
        return PhysicalSize(self.bed_width, self.bed_depth)

    @property
    def option_set(self) -> frozenset[BaseplateOption]:
        return _parse_options(self.options, [])

    @property
    def settings(self) -> BuildSettings:
        return BuildSettings(tolerance=self.tolerance)


@dataclass
class BaseplateSetOutput:
    """Output DTO containing a planned, and optionally built, baseplate set.

    Attributes:
        plan: The partitioned layout.
        layout: Placement of every piece for the assembly file.
        pieces: Built solids in plan order; empty for plan-only runs.
        hardware: Bolts, nuts and magnets needed to assemble the set.
        errors: List of error messages if generation failed.
    """

    plan: LayoutPlan | None
    layout: AssemblyLayout | None
    pieces: list[BuiltPiece] = field(default_factory=list)
    hardware: list[HardwareItem] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Check if the set was planned successfully."""
        return len(self.errors) == 0


@dataclass
class BaseplateInput:
    """Input DTO for a single baseplate."""

    units_x: int
    units_y: int
    options: list[str] = field(default_factory=list)
    tolerance: float = 0.2

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.units_x < 1 or self.units_y < 1:
            errors.append("A baseplate needs at least one unit along each axis")
        if self.tolerance < 0:
            errors.append("Tolerance cannot be negative")
        _parse_options(self.options, errors)
        return errors

    @property
    def units(self) -> GridUnit2D:
        return GridUnit2D(self.units_x, self.units_y)

    @property
    def option_set(self) -> frozenset[BaseplateOption]:
        return _parse_options(self.options, [])


@dataclass
class BinInput:
    """Input DTO for a single bin."""

    units_x: int
    units_y: int
    units_z: int
    wall_thickness: float = 1.0
    bottom_thickness: float = 0.6
    inner_bottom_corner_radius: float = 1.0
    stacking_lip: bool = False
    magnets: bool = False
    centered_magnet: bool = False

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.units_x < 1 or self.units_y < 1 or self.units_z < 1:
            errors.append("A bin needs at least one unit along each axis")
        if self.wall_thickness <= 0:
            errors.append("Wall thickness must be positive")
        if self.bottom_thickness < 0:
            errors.append("Bottom thickness cannot be negative")
        if self.inner_bottom_corner_radius < 0:
            errors.append("Inner bottom corner radius cannot be negative")
        return errors

    @property
    def units(self) -> GridUnit3D:
        return GridUnit3D(self.units_x, self.units_y, self.units_z)


@dataclass
class ModelOutput:
    """Output DTO for a single built model."""

    piece: BuiltPiece | None
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0
