"""Pack command: run the nesting engine on a request file."""

from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer

from nesting.application.config import (
    ConfigError,
    PackingRequest,
    load_request,
    request_to_domain,
)
from nesting.application.packing_service import PackingReport, PackingService
from nesting.cli.commands.validate import display_load_error
from nesting.domain.errors import InvalidInputError
from nesting.infrastructure.formatters import JsonExporter, LayoutReportFormatter


OUTPUT_FORMATS = ("text", "json")


def _apply_overrides(
    request: PackingRequest,
    kerf: float | None,
    no_rotation: bool,
    single_sheet: bool,
) -> PackingRequest:
    """Merge command line options over the request's options."""
    options = request.options
    if kerf is not None:
        options = replace(options, kerf_mm=kerf)
    if no_rotation:
        options = replace(options, allow_rotation=False)
    if single_sheet:
        options = replace(options, single_sheet_only=True)
    return replace(request, options=options)


def _render(report: PackingReport, output_format: str) -> str:
    if output_format == "json":
        if len(report.layouts) == 1 and report.board_calculation is None:
            return JsonExporter().export(report.layouts[0].result)
        return JsonExporter().export_report(report)
    return LayoutReportFormatter().format_report(report)


def pack_command(
    request_file: Annotated[
        Path,
        typer.Argument(help="Path to the JSON request file"),
    ],
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: text, json"),
    ] = "text",
    output_file: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the output to this file"),
    ] = None,
    kerf: Annotated[
        float | None,
        typer.Option("--kerf", help="Saw kerf in mm (overrides the request)"),
    ] = None,
    no_rotation: Annotated[
        bool,
        typer.Option("--no-rotation", help="Disallow 90 degree placements"),
    ] = False,
    single_sheet: Annotated[
        bool,
        typer.Option("--single-sheet", help="Check whether one sheet is enough"),
    ] = False,
) -> None:
    """Pack the parts of a request file onto its stock sheets.

    Exit codes:
        0 - Every part was placed
        1 - The request is invalid
        2 - Some parts could not be placed (listed as warnings)

    Example:
        nesting pack kitchen.json --format json --output layout.json
    """
    if output_format not in OUTPUT_FORMATS:
        typer.echo(f"Unknown format: {output_format}", err=True)
        typer.echo(f"Available formats: {', '.join(OUTPUT_FORMATS)}", err=True)
        raise typer.Exit(code=1)

    try:
        schema = load_request(request_file)
    except ConfigError as e:
        display_load_error(e)
        raise typer.Exit(code=1)

    request = _apply_overrides(request_to_domain(schema), kerf, no_rotation, single_sheet)

    try:
        report = PackingService().run(request)
    except InvalidInputError as e:
        typer.echo("Errors:", err=True)
        for issue in e.issues:
            typer.echo(f"  {issue.path}: {issue.message}", err=True)
        raise typer.Exit(code=1)

    text = _render(report, output_format)
    if output_file is not None:
        output_file.write_text(text + "\n", encoding="utf-8")
        typer.echo(f"Layout written to {output_file}")
    else:
        typer.echo(text)

    if report.unplaceable_count:
        typer.echo(
            f"Warning: {report.unplaceable_count} piece(s) could not be placed",
            err=True,
        )
        raise typer.Exit(code=2)
