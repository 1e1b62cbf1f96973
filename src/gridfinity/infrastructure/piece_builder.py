"""Turn a planned piece into its solid."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import trimesh

from gridfinity.domain import (
    BaseplateOption,
    BuildSettings,
    PhysicalSize,
    PieceKind,
    PieceSpec,
)

from . import kernel
from .baseplate import Baseplate
from .spacer import DEFAULT_CHAMFER, Spacer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuiltPiece:
    """A named solid ready for export.

    Attributes:
        name: The piece name from the plan.
        mesh: Solid in piece-local coordinates, body min corner at the origin.
    """

    name: str
    mesh: trimesh.Trimesh


def build_piece(
    spec: PieceSpec,
    settings: BuildSettings = BuildSettings(),
    options: frozenset[BaseplateOption] = frozenset({BaseplateOption.TABS}),
    chamfer: float = DEFAULT_CHAMFER,
) -> BuiltPiece:
    """Build the solid for one planned piece.

    Baseplates get the requested options. Spacers always carry their
    interlocking edge with a bolt hole or nut trap at every unit, whatever
    the options; spacers too thin to seat a fastener leave them out.

    Args:
        spec: The planned piece.
        settings: Fit parameters.
        options: Baseplate options of the set.
        chamfer: Bottom chamfer of spacers.

    Returns:
        BuiltPiece named after the planned piece.

    Raises:
        ValueError: If a baseplate spec carries no units or a spacer spec
            carries no connector.
    """
    logger.debug(f"Building {spec.name}")
    match spec.kind:
        case PieceKind.BASEPLATE:
            if spec.units is None:
                raise ValueError(f"Baseplate piece {spec.name!r} has no grid units")
            solid = Baseplate(spec.units, frozenset(options), settings).build()
        case PieceKind.SPACER:
            if not spec.connectors:
                raise ValueError(f"Spacer piece {spec.name!r} has no interlocking side")
            solid = Spacer(
                PhysicalSize(spec.size.width, spec.size.depth),
                spec.connectors[0],
                chamfer=chamfer,
                settings=settings,
            ).build()
    bounds = kernel.footprint(solid)
    _, top = kernel.height_range(solid)
    logger.debug(f"Built {spec.name}: {bounds.width:.2f} x {bounds.depth:.2f} x {top:.2f}mm")
    return BuiltPiece(spec.name, solid)
