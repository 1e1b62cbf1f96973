"""Solids for the tabs, sockets and fasteners along one edge of a piece."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import trimesh

from gridfinity.domain import BuildSettings, ConnectorKind, EdgeConnectorLayout, SeamFrame

from . import kernel
from .fasteners import SPACER_SEATS, FastenerSeats, bolt_clearance, nut_trap
from .profiles import TabProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeConnectorSolids:
    """What an edge connector adds to and removes from its piece.

    Attributes:
        additions: Solids to union onto the piece (positive tabs).
        cutters: Solids to subtract from the piece (sockets, bolt holes, nut traps).
    """

    additions: tuple[trimesh.Trimesh, ...] = ()
    cutters: tuple[trimesh.Trimesh, ...] = ()


def place_in_frame(solid: trimesh.Trimesh, frame: SeamFrame) -> trimesh.Trimesh:
    """Move a canonical-frame solid onto the piece side described by ``frame``."""
    if frame.rotation:
        solid = kernel.rotated(solid, frame.rotation)
    return kernel.translated(solid, frame.origin.x, frame.origin.y)


def build_edge_connector(
    layout: EdgeConnectorLayout,
    height: float,
    settings: BuildSettings,
    tabs: bool = True,
    fasteners: bool = False,
    seats: FastenerSeats = SPACER_SEATS,
    channel_end: float | None = None,
    fastener_z: float | None = None,
) -> EdgeConnectorSolids:
    """Build the connector solids for one edge.

    Args:
        layout: Resolved connector positions on the edge.
        height: Height of the connecting layer.
        settings: Fit parameters.
        tabs: Add the tabs or sockets themselves.
        fasteners: Add a bolt hole (tab edges) or nut trap (socket edges)
            at the centre of every unit.
        seats: Bearing distances for the fasteners.
        channel_end: Distance from the seam where fastener access channels
            end. Required when fasteners is True.
        fastener_z: Height of the fastener axis; defaults to mid-layer.

    Returns:
        EdgeConnectorSolids in piece-local coordinates.
    """
    if layout.unit_count == 0:
        return EdgeConnectorSolids()

    profile = TabProfile(height, settings)
    kind = layout.spec.kind
    additions: list[trimesh.Trimesh] = []
    cutters: list[trimesh.Trimesh] = []

    if tabs and kind is ConnectorKind.TAB:
        additions.append(profile.positive(layout.tab_positions()))
    elif tabs:
        cutters.append(profile.negative(layout.tab_positions()))

    if fasteners:
        if channel_end is None:
            raise ValueError("Fasteners need a channel end distance")
        z = height / 2 if fastener_z is None else fastener_z
        build = bolt_clearance if kind is ConnectorKind.TAB else nut_trap
        cutters.extend(
            build(position, z, channel_end, seats, settings)
            for position in layout.fastener_positions()
        )

    logger.debug(
        f"{layout.spec.side.value} edge: {layout.unit_count} unit(s) of {kind.value}s"
        f"{' with fasteners' if fasteners else ''}"
    )
    return EdgeConnectorSolids(
        additions=tuple(place_in_frame(solid, layout.frame) for solid in additions),
        cutters=tuple(place_in_frame(solid, layout.frame) for solid in cutters),
    )
