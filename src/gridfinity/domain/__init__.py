"""Domain layer - grid arithmetic, connector placement and partitioning."""

from .assembly import AssemblyLayout, PlacedPiece, arrange_pieces
from .connectors import (
    ConnectorKind,
    ConnectorSpec,
    EdgeConnectorLayout,
    SeamFrame,
    baseplate_connectors,
    connector_kind,
    seam_frame,
    tab_clearance,
)
from .partitioner import (
    LayoutPlan,
    PaddingRow,
    PaddingSplit,
    PieceKind,
    PieceRole,
    PieceSpec,
    compute_layout,
    partition_padding_row,
)
from .seams import HardwareItem, Seam, find_seams, plan_hardware
from .value_objects import (
    Alignment,
    Axis,
    AxisDirection,
    BaseplateOption,
    Bounds2D,
    BuildSettings,
    ConfigurationError,
    GridUnit2D,
    GridUnit3D,
    PhysicalSize,
    Point2D,
    Side,
    UNIT_HEIGHT,
    UNIT_SIZE,
    requires_foundation,
)

__all__ = [
    "Alignment",
    "AssemblyLayout",
    "Axis",
    "AxisDirection",
    "BaseplateOption",
    "Bounds2D",
    "BuildSettings",
    "ConfigurationError",
    "ConnectorKind",
    "ConnectorSpec",
    "EdgeConnectorLayout",
    "GridUnit2D",
    "HardwareItem",
    "GridUnit3D",
    "LayoutPlan",
    "PaddingRow",
    "PaddingSplit",
    "PhysicalSize",
    "PieceKind",
    "PieceRole",
    "PieceSpec",
    "PlacedPiece",
    "Point2D",
    "Seam",
    "SeamFrame",
    "Side",
    "UNIT_HEIGHT",
    "UNIT_SIZE",
    "arrange_pieces",
    "baseplate_connectors",
    "compute_layout",
    "connector_kind",
    "find_seams",
    "partition_padding_row",
    "plan_hardware",
    "requires_foundation",
    "seam_frame",
    "tab_clearance",
]
