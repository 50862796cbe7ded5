"""Import command: convert a SketchUp cutlist CSV into a request file."""

import json
from pathlib import Path
from typing import Annotated, Any

import typer

from nesting.application.csv_import import CsvImportResult, parse_csv_file
from nesting.domain.value_objects import PartSpec

DEFAULT_SHEET_LENGTH = 2750.0
DEFAULT_SHEET_WIDTH = 1830.0
DEFAULT_KERF = 3.0


def _part_to_json(part: PartSpec) -> dict[str, Any]:
    data: dict[str, Any] = {
        "label": part.label,
        "length": part.length,
        "width": part.width,
        "quantity": part.quantity,
        "grain": part.grain.value,
    }
    if part.band_edges.any:
        data["band_edges"] = {
            "top": part.band_edges.top,
            "right": part.band_edges.right,
            "bottom": part.band_edges.bottom,
            "left": part.band_edges.left,
        }
    return data


def build_request(
    result: CsvImportResult,
    sheet_length: float,
    sheet_width: float,
    kerf: float,
) -> dict[str, Any]:
    """Build a request skeleton around the imported parts."""
    return {
        "schema_version": "1.0",
        "parts": [_part_to_json(part) for part in result.to_parts()],
        "stock": [
            {
                "label": "Board",
                "length": sheet_length,
                "width": sheet_width,
            }
        ],
        "options": {"kerf_mm": kerf},
    }


def import_csv_command(
    csv_file: Annotated[
        Path,
        typer.Argument(help="Path to the SketchUp cutlist CSV export"),
    ],
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the request JSON to this file"),
    ] = None,
    sheet_length: Annotated[
        float,
        typer.Option("--sheet-length", help="Stock sheet length in mm"),
    ] = DEFAULT_SHEET_LENGTH,
    sheet_width: Annotated[
        float,
        typer.Option("--sheet-width", help="Stock sheet width in mm"),
    ] = DEFAULT_SHEET_WIDTH,
    kerf: Annotated[
        float,
        typer.Option("--kerf", help="Saw kerf in mm"),
    ] = DEFAULT_KERF,
) -> None:
    """Convert a SketchUp cutlist CSV into a packing request.

    Only "Sheet Goods" rows are imported (all rows when the file has
    none). Rows with a missing length, width or quantity are skipped and
    reported.

    Example:
        nesting import-csv cutlist.csv --output kitchen.json
    """
    if not csv_file.exists():
        typer.echo(f"File not found: {csv_file}", err=True)
        raise typer.Exit(code=1)

    try:
        result = parse_csv_file(csv_file)
    except (OSError, UnicodeDecodeError) as e:
        typer.echo(f"Error reading {csv_file}: {e}", err=True)
        raise typer.Exit(code=1)

    if result.errors:
        typer.echo("Errors:", err=True)
        for error in result.errors:
            typer.echo(f"  {error}", err=True)
        raise typer.Exit(code=1)

    for warning in result.warnings:
        typer.echo(f"Warning: {warning}", err=True)
    for row in result.sheet_goods_rows:
        for error in row.errors:
            typer.echo(f"Skipped row {row.row_index + 1}: {error}", err=True)

    request = build_request(result, sheet_length, sheet_width, kerf)
    text = json.dumps(request, indent=2)

    if output_file is not None:
        output_file.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"Imported {len(request['parts'])} part(s) into {output_file}")
    else:
        typer.echo(text)
