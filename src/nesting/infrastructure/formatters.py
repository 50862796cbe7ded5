"""Output formatters and exporters for packing layouts."""

from __future__ import annotations

import json
from typing import Any

from nesting.application.packing_service import MaterialLayout, PackingReport
from nesting.domain.services.board_calculator import BoardCalculation
from nesting.domain.value_objects import LayoutResult, SheetLayout


def layout_title(layout: MaterialLayout) -> str:
    """Report heading of a material layout."""
    title = "BACKER LAYOUT" if layout.is_backer else "CUTTING LAYOUT"
    return f"{title} - {layout.material}" if layout.material else title


class LayoutReportFormatter:
    """Formats a packing result as a plain text report."""

    def __init__(self, show_placements: bool = True) -> None:
        """Initialize formatter.

        Args:
            show_placements: Whether to list every placement per sheet.
        """
        self._show_placements = show_placements

    def format(self, result: LayoutResult, title: str = "CUTTING LAYOUT") -> str:
        """Format sheets, statistics and warnings as a report."""
        lines = [title, "=" * 70]

        if not result.sheets and not result.unplaceable:
            lines.append("No parts to cut.")
            return "\n".join(lines)

        for sheet in result.sheets:
            lines.extend(self._format_sheet(sheet))
            lines.append("")

        lines.extend(self._format_stats(result))

        if result.offcuts:
            lines.append("")
            lines.append("USABLE OFFCUTS")
            lines.append("-" * 70)
            for offcut in result.offcuts:
                lines.append(
                    f"  Sheet {offcut.sheet_index + 1}: {offcut.width:.0f} x "
                    f"{offcut.height:.0f} at ({offcut.x:.0f}, {offcut.y:.0f})"
                )

        warnings = self._format_warnings(result)
        if warnings:
            lines.append("")
            lines.extend(warnings)

        return "\n".join(lines)

    def format_report(self, report: PackingReport) -> str:
        """Format every material layout and the board group summary."""
        sections = [
            self.format(layout.result, title=layout_title(layout))
            for layout in report.layouts
        ]
        if report.board_calculation is not None:
            sections.append("\n".join(self._format_board_summary(report.board_calculation)))
        return "\n\n".join(sections)

    def _format_board_summary(self, calculation: BoardCalculation) -> list[str]:
        lines = ["BOARD GROUPS", "=" * 70]
        for group in calculation.groups:
            pieces = f"{group.primary_pieces} primary"
            if group.backer_pieces:
                pieces += f", {group.backer_pieces} backer"
            lines.append(
                f"  {group.name or 'Unnamed'}: {group.board_type.display_name} "
                f"({pieces} pieces)"
            )
            lines.append(f"    {group.board_type.description}")
        lines.append("")
        lines.append(f"  Primary pieces:   {calculation.total_primary_parts}")
        lines.append(f"  Backer pieces:    {calculation.total_backer_parts}")
        for thickness, length in calculation.edging_by_thickness.items():
            lines.append(f"  Estimated edging {thickness}: {length / 1000:.2f} m")
        return lines

    def _format_sheet(self, sheet: SheetLayout) -> list[str]:
        spec = sheet.sheet_type
        lines = [
            f"Sheet {sheet.sheet_index + 1}: {spec.name} "
            f"({spec.length:g} x {spec.width:g} mm) - "
            f"{sheet.piece_count} pieces, {sheet.waste_percentage:.1f}% waste",
        ]
        if not self._show_placements:
            return lines

        lines.append(
            f"  {'Piece':<24} {'X':>8} {'Y':>8} {'Width':>8} {'Height':>8}  Rot"
        )
        lines.append("  " + "-" * 66)
        for p in sheet.placements:
            lines.append(
                f"  {p.unit_label:<24} {p.x:>8.1f} {p.y:>8.1f} "
                f"{p.placed_width:>8.1f} {p.placed_height:>8.1f}  "
                f"{'yes' if p.rotated else 'no'}"
            )
        return lines

    def _format_stats(self, result: LayoutResult) -> list[str]:
        stats = result.stats
        lines = [
            "SUMMARY",
            "-" * 70,
            f"  Sheets used:      {result.total_sheets}",
            f"  Pieces placed:    {result.total_pieces_placed}",
            f"  Used area:        {stats.used_area / 1e6:.3f} m2",
            f"  Waste area:       {stats.waste_area / 1e6:.3f} m2 "
            f"({stats.total_waste_percentage:.1f}%)",
            f"  Cuts:             {stats.cut_count} "
            f"({stats.total_cut_length / 1000:.2f} m)",
        ]
        for name, fraction in stats.fractional_sheets_used_by_type.items():
            opened = stats.sheets_opened_by_type.get(name, 0)
            lines.append(f"  {name}: {opened} opened, {fraction:.2f} sheets used")

        banded = {k: v for k, v in stats.banding_length_by_thickness.items() if v > 0}
        for thickness, length in banded.items():
            lines.append(f"  Edging {thickness}: {length / 1000:.2f} m")
        if stats.backer_sheets_fraction is not None:
            lines.append(f"  Backer sheets:    {stats.backer_sheets_fraction:.2f}")
        return lines

    def _format_warnings(self, result: LayoutResult) -> list[str]:
        if not result.unplaceable and not result.sheet_exhausted:
            return []
        lines = ["WARNINGS", "-" * 70]
        for notice in result.sheet_exhausted:
            lines.append(f"  Sheet type '{notice.sheet_label}' ran out of stock")
        for item in result.unplaceable:
            lines.append(f"  Not placed: {item.message}")
        return lines


class JsonExporter:
    """Exports packing results as JSON.

    Keys are emitted in a fixed order, so identical results give
    byte-identical output.
    """

    def export(self, result: LayoutResult) -> str:
        """Export a layout result as JSON string."""
        return json.dumps(self.to_dict(result), indent=2)

    def export_report(self, report: PackingReport) -> str:
        """Export every material layout and the board group summary."""
        return json.dumps(self.report_to_dict(report), indent=2)

    def report_to_dict(self, report: PackingReport) -> dict[str, Any]:
        """Convert a packing report to JSON-compatible data."""
        calculation = report.board_calculation
        return {
            "layouts": [
                {
                    "material": layout.material,
                    "is_backer": layout.is_backer,
                    "result": self.to_dict(layout.result),
                }
                for layout in report.layouts
            ],
            "board_summary": (
                self._board_summary(calculation) if calculation is not None else None
            ),
        }

    def _board_summary(self, calculation: BoardCalculation) -> dict[str, Any]:
        return {
            "groups": [
                {
                    "name": group.name,
                    "board_type": group.board_type.value,
                    "display_name": group.board_type.display_name,
                    "description": group.board_type.description,
                    "primary_pieces": group.primary_pieces,
                    "backer_pieces": group.backer_pieces,
                }
                for group in calculation.groups
            ],
            "total_primary_parts": calculation.total_primary_parts,
            "total_backer_parts": calculation.total_backer_parts,
            "edging_by_thickness": dict(calculation.edging_by_thickness),
        }

    def to_dict(self, result: LayoutResult) -> dict[str, Any]:
        """Convert a layout result to JSON-compatible data."""
        stats = result.stats
        return {
            "sheets": [self._format_sheet(sheet) for sheet in result.sheets],
            "stats": {
                "used_area": stats.used_area,
                "waste_area": stats.waste_area,
                "total_waste_percentage": stats.total_waste_percentage,
                "cut_count": stats.cut_count,
                "total_cut_length": stats.total_cut_length,
                "banding_length_by_thickness": dict(stats.banding_length_by_thickness),
                "banding_length_by_side": dict(stats.banding_length_by_side),
                "fractional_sheets_used_by_type": dict(
                    stats.fractional_sheets_used_by_type
                ),
                "sheets_opened_by_type": dict(stats.sheets_opened_by_type),
                "backer_sheets_fraction": stats.backer_sheets_fraction,
            },
            "unplaceable": [
                {
                    "part_label": item.part_label,
                    "unit_label": item.unit_label,
                    "length": item.length,
                    "width": item.width,
                    "reason": item.reason.value,
                    "message": item.message,
                }
                for item in result.unplaceable
            ],
            "sheet_exhausted": [
                {
                    "sheet_label": notice.sheet_label,
                    "sheet_type_index": notice.sheet_type_index,
                    "unit_label": notice.unit_label,
                }
                for notice in result.sheet_exhausted
            ],
            "offcuts": [
                {
                    "sheet_index": o.sheet_index,
                    "x": o.x,
                    "y": o.y,
                    "width": o.width,
                    "height": o.height,
                }
                for o in result.offcuts
            ],
        }

    def _format_sheet(self, sheet: SheetLayout) -> dict[str, Any]:
        return {
            "sheet_index": sheet.sheet_index,
            "sheet_type": {
                "label": sheet.sheet_type.name,
                "length": sheet.sheet_type.length,
                "width": sheet.sheet_type.width,
            },
            "used_area": sheet.used_area,
            "waste_area": sheet.waste_area,
            "waste_percentage": sheet.waste_percentage,
            "placements": [
                {
                    "part_label": p.part_label,
                    "unit_label": p.unit_label,
                    "x": p.x,
                    "y": p.y,
                    "placed_width": p.placed_width,
                    "placed_height": p.placed_height,
                    "rotated": p.rotated,
                }
                for p in sheet.placements
            ],
            "free_rects": [
                {"x": r.x, "y": r.y, "width": r.width, "height": r.height}
                for r in sheet.free_rects
            ],
            "cut_runs": [
                {
                    "axis": run.axis.value,
                    "position": run.position,
                    "start": run.start,
                    "end": run.end,
                }
                for run in sheet.cut_runs
            ],
        }
