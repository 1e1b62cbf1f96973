"""Infrastructure layer - solids, exporters and formatters."""

from . import kernel

# Solids
from .baseplate import BASEPLATE_HEIGHT, Baseplate
from .bins import Bin, Block
from .edge_connector import EdgeConnectorSolids, build_edge_connector
from .fasteners import BASEPLATE_SEATS, SPACER_SEATS, FastenerSeats
from .piece_builder import BuiltPiece, build_piece
from .profiles import TabProfile
from .spacer import Spacer

# Formatters
from .formatters import HardwareReportFormatter, JsonPlanExporter, LayoutPlanFormatter

# STL exporter
from .stl_exporter import StlExporter, StlMeshBuilder, slugify

__all__ = [
    "kernel",
    # Solids
    "BASEPLATE_HEIGHT",
    "BASEPLATE_SEATS",
    "Baseplate",
    "Bin",
    "Block",
    "BuiltPiece",
    "EdgeConnectorSolids",
    "FastenerSeats",
    "SPACER_SEATS",
    "Spacer",
    "TabProfile",
    "build_edge_connector",
    "build_piece",
    # Formatters
    "HardwareReportFormatter",
    "JsonPlanExporter",
    "LayoutPlanFormatter",
    # STL exporter
    "StlExporter",
    "StlMeshBuilder",
    "slugify",
]
