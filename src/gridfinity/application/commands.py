"""Application commands (use cases) for baseplate and bin generation."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from gridfinity.domain import (
    BaseplateOption,
    BuildSettings,
    ConfigurationError,
    LayoutPlan,
    PieceSpec,
    arrange_pieces,
    compute_layout,
    plan_hardware,
)
from gridfinity.infrastructure import SPACER_SEATS, Baseplate, Bin, BuiltPiece, build_piece

from .dtos import BaseplateInput, BaseplateSetInput, BaseplateSetOutput, BinInput, ModelOutput

logger = logging.getLogger(__name__)

PieceBuilder = Callable[[PieceSpec, BuildSettings, frozenset[BaseplateOption], float], BuiltPiece]


class GenerateBaseplateSetCommand:
    """Command to plan and build a set of interlocking baseplates.

    Pieces are independent of each other, so with ``max_workers`` above one
    they are built on a thread pool. Results are collected with
    ``Executor.map`` and so always come back in plan order.
    """

    def __init__(
        self,
        piece_builder: PieceBuilder | None = None,
        max_workers: int = 1,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.piece_builder = piece_builder or build_piece
        self.max_workers = max_workers

    def execute(self, set_input: BaseplateSetInput, build_geometry: bool = True) -> BaseplateSetOutput:
        """Execute the baseplate set command.

        Args:
            set_input: Footprint, print bed and options of the set.
            build_geometry: Build a solid for every piece. When False only
                the plan, assembly layout and hardware are produced.

        Returns:
            BaseplateSetOutput with the plan, the built pieces and any errors.
        """
        errors = set_input.validate()
        if errors:
            return BaseplateSetOutput(plan=None, layout=None, errors=errors)

        options = set_input.option_set
        try:
            plan = compute_layout(
                set_input.footprint,
                set_input.bed_size,
                front_padding=set_input.front_padding,
                options=options,
            )
        except ConfigurationError as e:
            return BaseplateSetOutput(plan=None, layout=None, errors=[str(e)])

        layout = arrange_pieces(plan, spacing=set_input.stack_spacing)
        hardware = plan_hardware(plan, options, min_spacer_depth=SPACER_SEATS.minimum_depth)
        logger.info(f"Planned {len(plan.pieces)} piece(s) for {plan.total_units} units")

        pieces: list[BuiltPiece] = []
        if build_geometry:
            pieces = self.build_pieces(
                plan, set_input.settings, options, set_input.padding_chamfer
            )

        return BaseplateSetOutput(plan=plan, layout=layout, pieces=pieces, hardware=hardware)

    def build_pieces(
        self,
        plan: LayoutPlan,
        settings: BuildSettings,
        options: frozenset[BaseplateOption],
        chamfer: float,
    ) -> list[BuiltPiece]:
        """Build every piece of a plan, returned in plan order."""

        def build(spec: PieceSpec) -> BuiltPiece:
            return self.piece_builder(spec, settings, options, chamfer)

        specs = plan.pieces
        if self.max_workers == 1 or len(specs) < 2:
            return [build(spec) for spec in specs]

        logger.debug(f"Building {len(specs)} pieces on {self.max_workers} workers")
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(build, specs))


class BuildBaseplateCommand:
    """Command to build a single baseplate."""

    def execute(self, baseplate_input: BaseplateInput) -> ModelOutput:
        errors = baseplate_input.validate()
        if errors:
            return ModelOutput(piece=None, errors=errors)

        units = baseplate_input.units
        baseplate = Baseplate(
            units,
            baseplate_input.option_set,
            BuildSettings(tolerance=baseplate_input.tolerance),
        )
        return ModelOutput(piece=BuiltPiece(f"Baseplate {units}", baseplate.build()))


class BuildBinCommand:
    """Command to build a single bin."""

    def execute(self, bin_input: BinInput) -> ModelOutput:
        errors = bin_input.validate()
        if errors:
            return ModelOutput(piece=None, errors=errors)

        units = bin_input.units
        try:
            model = Bin(
                units,
                wall_thickness=bin_input.wall_thickness,
                bottom_thickness=bin_input.bottom_thickness,
                inner_bottom_corner_radius=bin_input.inner_bottom_corner_radius,
                stacking_lip=bin_input.stacking_lip,
                magnets=bin_input.magnets,
                centered_magnet=bin_input.centered_magnet,
            )
        except ValueError as e:
            return ModelOutput(piece=None, errors=[str(e)])
        return ModelOutput(piece=BuiltPiece(f"Bin {units}", model.build()))
