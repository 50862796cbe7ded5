"""Import of SketchUp cutlist CSV exports.

SketchUp cutlist extensions export one row per part with semicolon
separated columns such as ``Length - raw`` and ``Edge Length 1``. Rows are
filtered to sheet goods (edge banding rows describe the tape, not parts),
validated, and converted to part specifications.
"""

from __future__ import annotations

import csv
import io
import logging
import math
import re
from dataclasses import dataclass, field
from pathlib import Path

from nesting.domain.value_objects import BandEdges, GrainDirection, PartSpec

logger = logging.getLogger(__name__)

SHEET_GOODS = "sheet goods"

# Lowercased header -> field name
COLUMN_MAP: dict[str, str] = {
    "no.": "no",
    "no": "no",
    "designation": "designation",
    "quantity": "quantity",
    "length": "length",
    "length - raw": "length",
    "width": "width",
    "width - raw": "width",
    "thickness": "thickness",
    "thickness - raw": "thickness",
    "material type": "material_type",
    "material name": "material_name",
    "edge length 1": "edge_length_1",
    "edge length 2": "edge_length_2",
    "edge width 1": "edge_width_1",
    "edge width 2": "edge_width_2",
    "tags": "tags",
}

REQUIRED_COLUMNS = ("length", "width", "quantity")

_MM_SUFFIX = re.compile(r"\s*mm\s*", re.IGNORECASE)
_SPACES = re.compile(r"[\s\u00a0\u2009]")


@dataclass
class CsvRow:
    """One parsed data row.

    Attributes:
        row_index: Zero-based index among data rows.
        designation: Part name.
        quantity: Number of pieces.
        length: Length in mm (0 when missing or unparseable).
        width: Width in mm.
        thickness: Thickness in mm.
        material_type: "Sheet Goods", "Edge Banding", ...
        material_name: Material name.
        band_edges: Banding derived from the edge columns.
        errors: Problems that prevent importing the row.
        warnings: Non-blocking concerns.
    """

    row_index: int
    designation: str = ""
    quantity: int = 1
    length: float = 0.0
    width: float = 0.0
    thickness: float = 0.0
    material_type: str = ""
    material_name: str = ""
    band_edges: BandEdges = field(default_factory=BandEdges)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def is_sheet_goods(self) -> bool:
        return not self.material_type or self.material_type.lower() == SHEET_GOODS


@dataclass
class CsvImportResult:
    """Result of parsing a cutlist CSV.

    Attributes:
        rows: Every parsed data row.
        sheet_goods_rows: Rows to import (all rows when none are sheet goods).
        delimiter: Detected delimiter.
        headers: Header row as found.
        errors: File-level errors.
        warnings: File-level warnings.
    """

    rows: list[CsvRow] = field(default_factory=list)
    sheet_goods_rows: list[CsvRow] = field(default_factory=list)
    delimiter: str = ";"
    headers: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_parts(self) -> list[PartSpec]:
        """Convert valid sheet goods rows to part specifications."""
        return [row_to_part(row) for row in self.sheet_goods_rows if row.is_valid]


def detect_delimiter(first_line: str) -> str:
    """Pick ``;`` unless the line has more commas than semicolons."""
    return ";" if first_line.count(";") >= first_line.count(",") else ","


def parse_dimension(value: str) -> float:
    """Parse a dimension like ``"1 200,5 mm"``.

    Returns:
        The value in mm, or 0.0 when it cannot be parsed or is negative.
    """
    if not value:
        return 0.0
    cleaned = _MM_SUFFIX.sub("", value).strip()
    if "," in cleaned and "." not in cleaned:
        cleaned = cleaned.replace(",", ".", 1)
    cleaned = _SPACES.sub("", cleaned)
    try:
        parsed = float(cleaned)
    except ValueError:
        return 0.0
    if not math.isfinite(parsed) or parsed < 0:
        return 0.0
    return parsed


def _parse_quantity(value: str) -> int | None:
    """Parse a quantity cell; ``"2.0"`` and ``"2,0"`` both count as 2.

    Returns:
        The whole number of pieces, 1 for an empty or zero cell, or None
        when the cell is not a number.
    """
    cleaned = value.strip().replace(",", ".", 1)
    if not cleaned:
        return 1
    try:
        parsed = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return int(parsed) or 1


def map_columns(headers: list[str]) -> tuple[dict[str, int], list[str]]:
    """Map header names to column indices.

    Returns:
        ``(mapping, unmapped)``; the first of duplicate headers wins.
    """
    mapping: dict[str, int] = {}
    unmapped: list[str] = []
    for index, header in enumerate(headers):
        name = COLUMN_MAP.get(header.strip().lower())
        if name is None:
            unmapped.append(header)
        elif name not in mapping:
            mapping[name] = index
    return mapping, unmapped


def validate_row(row: CsvRow) -> None:
    """Fill in the row's errors and warnings."""
    if row.length <= 0:
        row.errors.append("Invalid or missing length")
    if row.width <= 0:
        row.errors.append("Invalid or missing width")
    if row.quantity <= 0:
        row.errors.append("Invalid or missing quantity")

    if row.thickness <= 0:
        row.warnings.append("No thickness specified")
    if not row.material_name.strip():
        row.warnings.append("No material name")
    if not row.designation.strip():
        row.warnings.append("No designation/name")


def parse_csv_content(content: str) -> CsvImportResult:
    """Parse SketchUp cutlist CSV content.

    Args:
        content: Full text of the CSV file.

    Returns:
        CsvImportResult with parsed rows and file-level problems.
    """
    result = CsvImportResult()
    lines = [line for line in content.lstrip("\ufeff").splitlines() if line.strip()]
    if not lines:
        result.errors.append("CSV file is empty")
        return result

    result.delimiter = detect_delimiter(lines[0])
    records = [
        [value.strip() for value in record]
        for record in csv.reader(io.StringIO("\n".join(lines)), delimiter=result.delimiter)
    ]
    result.headers = records[0]

    mapping, unmapped = map_columns(result.headers)
    missing = [name for name in REQUIRED_COLUMNS if name not in mapping]
    if missing:
        result.errors.append(f"Missing required columns: {', '.join(missing)}")
    if unmapped:
        result.warnings.append(f"Unmapped columns: {', '.join(unmapped)}")

    for row_index, record in enumerate(records[1:]):

        def value(name: str) -> str:
            index = mapping.get(name)
            if index is None or index >= len(record):
                return ""
            return record[index]

        raw_quantity = value("quantity")
        quantity = _parse_quantity(raw_quantity)
        row = CsvRow(
            row_index=row_index,
            designation=value("designation"),
            quantity=1 if quantity is None else quantity,
            length=parse_dimension(value("length")),
            width=parse_dimension(value("width")),
            thickness=parse_dimension(value("thickness")),
            material_type=value("material_type"),
            material_name=value("material_name"),
            band_edges=BandEdges(
                top=bool(value("edge_length_1")),
                bottom=bool(value("edge_length_2")),
                right=bool(value("edge_width_1")),
                left=bool(value("edge_width_2")),
            ),
        )
        validate_row(row)
        if quantity is None:
            row.warnings.append(f"Unreadable quantity '{raw_quantity}', using 1")
        result.rows.append(row)

    sheet_goods = [row for row in result.rows if row.is_sheet_goods]
    if not sheet_goods and result.rows:
        result.warnings.append('No "Sheet Goods" rows found. Using all rows.')
        sheet_goods = list(result.rows)
    result.sheet_goods_rows = sheet_goods

    logger.debug(
        "Parsed %d CSV rows (%d sheet goods)", len(result.rows), len(sheet_goods)
    )
    return result


def parse_csv_file(path: Path) -> CsvImportResult:
    """Read and parse a cutlist CSV file.

    Raises:
        OSError: If the file cannot be read.
    """
    return parse_csv_content(path.read_text(encoding="utf-8-sig"))


def row_to_part(row: CsvRow) -> PartSpec:
    """Convert a row to a part; imported parts follow the length grain."""
    return PartSpec(
        length=row.length,
        width=row.width,
        quantity=row.quantity,
        grain=GrainDirection.LENGTH,
        band_edges=row.band_edges,
        label=row.designation.strip() or f"Row {row.row_index + 1}",
    )
