"""STL export functionality using numpy-stl."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from pathlib import Path

import numpy as np
import trimesh
from stl import mesh

from gridfinity.domain import AssemblyLayout

from .piece_builder import BuiltPiece

logger = logging.getLogger(__name__)

ASSEMBLY_FILENAME = "assembly.stl"


def slugify(name: str) -> str:
    """File-system friendly form of a piece name.

    ``"Baseplate, narrow 2"`` becomes ``"baseplate-narrow-2"``.
    """
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "piece"


class StlMeshBuilder:
    """Builds numpy-stl meshes from trimesh solids.

    Slicers expect Z-up millimeters, which is also the solids' frame, so
    vertices are copied without a change of axes.
    """

    def build_mesh(self, solid: trimesh.Trimesh) -> mesh.Mesh:
        """Convert a solid into an STL mesh.

        Args:
            solid: The solid to convert.

        Returns:
            A numpy-stl Mesh with one facet per triangle.
        """
        triangles = np.asarray(solid.triangles, dtype=np.float64)
        stl_mesh = mesh.Mesh(np.zeros(len(triangles), dtype=mesh.Mesh.dtype))
        stl_mesh.vectors[:] = triangles
        stl_mesh.update_normals()
        return stl_mesh

    def combine_meshes(self, meshes: Sequence[mesh.Mesh]) -> mesh.Mesh:
        """Combine multiple meshes into a single mesh.

        Args:
            meshes: Meshes to combine.

        Returns:
            A single combined mesh containing all faces.
        """
        if not meshes:
            return mesh.Mesh(np.zeros(0, dtype=mesh.Mesh.dtype))
        return mesh.Mesh(np.concatenate([m.data for m in meshes]))


class StlExporter:
    """Exports built pieces to STL files.

    Each piece is written on its own in piece-local coordinates, ready to
    print. The assembly file places every piece at its arranged offset.
    """

    def __init__(self, mesh_builder: StlMeshBuilder | None = None) -> None:
        """Initialize the exporter.

        Args:
            mesh_builder: Optional mesh builder instance for dependency injection.
        """
        self.mesh_builder = mesh_builder or StlMeshBuilder()

    def export(self, piece: BuiltPiece) -> mesh.Mesh:
        """Convert one built piece to an STL mesh object."""
        return self.mesh_builder.build_mesh(piece.mesh)

    def export_to_file(self, piece: BuiltPiece, filepath: Path | str) -> None:
        """Export one built piece to an STL file."""
        self.export(piece).save(str(filepath))

    def export_assembly(
        self, pieces: Sequence[BuiltPiece], layout: AssemblyLayout
    ) -> mesh.Mesh:
        """Combine pieces at their assembly offsets into one mesh.

        Args:
            pieces: Built pieces in plan order.
            layout: Placement of the same pieces.

        Returns:
            A numpy-stl Mesh containing every piece.

        Raises:
            ValueError: If the pieces and the layout disagree on names.
        """
        names = tuple(piece.name for piece in pieces)
        if names != layout.names:
            raise ValueError("Built pieces do not match the assembly layout")

        meshes = []
        for piece, placed in zip(pieces, layout.pieces):
            moved = piece.mesh.copy()
            moved.apply_translation((placed.offset.x, placed.offset.y, 0.0))
            meshes.append(self.mesh_builder.build_mesh(moved))
        return self.mesh_builder.combine_meshes(meshes)

    def export_set(
        self,
        pieces: Sequence[BuiltPiece],
        directory: Path | str,
        layout: AssemblyLayout | None = None,
    ) -> list[Path]:
        """Write one STL file per piece, plus the assembly when a layout is given.

        Args:
            pieces: Built pieces in plan order.
            directory: Output directory; created when missing.
            layout: Placement used for the combined assembly file.

        Returns:
            Paths of every written file, pieces first in plan order.
        """
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        for piece in pieces:
            path = directory / f"{slugify(piece.name)}.stl"
            self.export_to_file(piece, path)
            logger.debug(f"Wrote {piece.name} to {path}")
            written.append(path)

        if layout is not None:
            path = directory / ASSEMBLY_FILENAME
            self.export_assembly(pieces, layout).save(str(path))
            written.append(path)

        logger.info(f"Exported {len(written)} STL file(s) to {directory}")
        return written
