"""Output formatters and exporters for baseplate set plans."""

from __future__ import annotations

import json
from typing import Any

from gridfinity.domain import (
    AssemblyLayout,
    ConnectorSpec,
    HardwareItem,
    LayoutPlan,
    PaddingRow,
    PieceSpec,
)

JSON_FORMAT_VERSION = "1.0"


def _mm(value: float) -> str:
    return f"{value:.2f}"


class LayoutPlanFormatter:
    """Formats a layout plan for display."""

    def format(self, plan: LayoutPlan) -> str:
        """Format the plan summary followed by a table of pieces."""
        lines = [
            "BASEPLATE SET",
            "=" * 78,
            f"Footprint:      {_mm(plan.footprint.width)} x {_mm(plan.footprint.depth)} mm",
            f"Print bed:      {_mm(plan.bed_size.width)} x {_mm(plan.bed_size.depth)} mm",
            f"Grid:           {plan.total_units} units "
            f"({plan.main_count} main pieces of {plan.main_units})",
            f"Remainder:      {plan.remainder_units}",
            f"Side padding:   {_mm(plan.side_padding)} mm each",
            f"Front padding:  {_mm(plan.front_padding)} mm",
            f"Back padding:   {_mm(plan.back_padding)} mm",
            "",
        ]
        lines.extend(self._format_pieces(plan.pieces))
        return "\n".join(lines)

    def _format_pieces(self, pieces: tuple[PieceSpec, ...]) -> list[str]:
        lines = [
            f"{'Piece':<28} {'Units':>6} {'Width':>8} {'Depth':>8} {'X':>8} {'Y':>8}  Connector",
            "-" * 78,
        ]
        for piece in pieces:
            units = str(piece.units) if piece.units is not None else "-"
            side = piece.interlocking_side
            connector = side.value if side is not None else ""
            lines.append(
                f"{piece.name:<28} {units:>6} {_mm(piece.size.width):>8} "
                f"{_mm(piece.size.depth):>8} {_mm(piece.origin.x):>8} "
                f"{_mm(piece.origin.y):>8}  {connector}"
            )
        lines.append("-" * 78)
        lines.append(f"{len(pieces)} piece(s)")
        return lines


class JsonPlanExporter:
    """Exports a layout plan as JSON.

    Keys are emitted in a fixed order so identical plans give identical
    files.
    """

    def export(
        self,
        plan: LayoutPlan,
        layout: AssemblyLayout | None = None,
        hardware: list[HardwareItem] | None = None,
    ) -> str:
        """Export a plan, and optionally its assembly layout and hardware."""
        return json.dumps(self.to_dict(plan, layout, hardware), indent=2)

    def to_dict(
        self,
        plan: LayoutPlan,
        layout: AssemblyLayout | None = None,
        hardware: list[HardwareItem] | None = None,
    ) -> dict[str, Any]:
        data: dict[str, Any] = {
            "version": JSON_FORMAT_VERSION,
            "footprint": {"width": plan.footprint.width, "depth": plan.footprint.depth},
            "printbed": {"width": plan.bed_size.width, "depth": plan.bed_size.depth},
            "unit_size": {"width": plan.unit_size.width, "depth": plan.unit_size.depth},
            "tab_clearance": plan.tab_clearance,
            "total_units": {"x": plan.total_units.x, "y": plan.total_units.y},
            "max_bed_units": {"x": plan.max_bed_units.x, "y": plan.max_bed_units.y},
            "main_units": {"x": plan.main_units.x, "y": plan.main_units.y},
            "main_count": {"x": plan.main_count.x, "y": plan.main_count.y},
            "remainder_units": {"x": plan.remainder_units.x, "y": plan.remainder_units.y},
            "padding": {
                "side": plan.side_padding,
                "front": plan.front_padding,
                "back": plan.back_padding,
            },
            "padding_rows": {
                "front": self._format_row(plan.front_row),
                "back": self._format_row(plan.back_row),
            },
            "pieces": [self._format_piece(piece) for piece in plan.pieces],
        }
        if layout is not None:
            data["assembly"] = {
                "spacing": layout.spacing,
                "pieces": [
                    {
                        "name": placed.name,
                        "offset": {"x": placed.offset.x, "y": placed.offset.y},
                    }
                    for placed in layout.pieces
                ],
            }
        if hardware is not None:
            data["hardware"] = [
                {"name": item.name, "quantity": item.quantity, "notes": item.notes}
                for item in hardware
            ]
        return data

    def _format_row(self, row: PaddingRow | None) -> dict[str, Any] | None:
        if row is None:
            return None
        return {
            "depth": row.depth,
            "split": row.split.value,
            "pieces": [piece.name for piece in row.pieces],
        }

    def _format_piece(self, piece: PieceSpec) -> dict[str, Any]:
        """Format a single piece for JSON output."""
        result: dict[str, Any] = {
            "name": piece.name,
            "kind": piece.kind.value,
            "role": piece.role.value,
            "origin": {"x": piece.origin.x, "y": piece.origin.y},
            "size": {"width": piece.size.width, "depth": piece.size.depth},
            "units": (
                {"x": piece.units.x, "y": piece.units.y} if piece.units is not None else None
            ),
            "connectors": [self._format_connector(spec) for spec in piece.connectors],
        }
        return result

    def _format_connector(self, spec: ConnectorSpec) -> dict[str, Any]:
        return {
            "side": spec.side.value,
            "kind": spec.kind.value,
            "alignment": spec.alignment.value,
            "offset": spec.offset,
            "unit_count": spec.unit_count,
        }


class HardwareReportFormatter:
    """Formats the purchased parts needed to assemble a set."""

    def format(self, items: list[HardwareItem], title: str = "HARDWARE LIST") -> str:
        """Format hardware as a readable report.

        Args:
            items: Hardware to list.
            title: Report title.

        Returns:
            Formatted report string.
        """
        lines = [title, "=" * 60, ""]
        if not items:
            lines.append("No hardware required.")
            return "\n".join(lines)

        lines.append(f"{'Item':<35} {'Qty':>8}")
        lines.append("-" * 60)
        for item in items:
            lines.append(f"  {item.name:<33} {item.quantity:>8}")
            if item.notes:
                lines.append(f"    ({item.notes})")
        lines.append("-" * 60)
        lines.append(f"{'TOTAL':<35} {sum(item.quantity for item in items):>8}")
        return "\n".join(lines)
