"""Error taxonomy for the nesting engine.

Only invalid input is raised. Units that cannot be placed and sheet types
that run out are recorded on the result so that a caller always receives a
complete layout for everything that did fit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class PackingError(Exception):
    """Base class for errors raised by the nesting engine."""

    pass


@dataclass(frozen=True)
class InputIssue:
    """A single problem found while validating a packing request.

    Attributes:
        path: Location of the offending value (e.g. "parts[2].width").
        message: Human-readable description of the problem.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class InvalidInputError(PackingError, ValueError):
    """Raised before packing when the request is malformed.

    Every issue found is collected so the caller can fix them in one pass.

    Attributes:
        issues: All problems found in the request.
    """

    def __init__(self, issues: list[InputIssue]) -> None:
        self.issues = list(issues)
        if len(self.issues) == 1:
            message = f"Invalid packing input: {self.issues[0]}"
        else:
            message = f"Invalid packing input ({len(self.issues)} issues): " + "; ".join(
                str(issue) for issue in self.issues
            )
        super().__init__(message)


class UnplaceableReason(str, Enum):
    """Why a unit could not be placed.

    Attributes:
        GRAIN_LOCKED: The unit's only legal orientation needs rotation,
            which is disabled.
        TOO_LARGE_FOR_SHEET: No offered sheet type can hold any legal
            orientation of the unit.
        INSUFFICIENT_SHEET_CAPACITY: A suitable sheet type exists but every
            one of them has run out.
        SINGLE_SHEET_LIMIT: The unit needs a second sheet in single sheet
            mode.
    """

    GRAIN_LOCKED = "grain_locked"
    TOO_LARGE_FOR_SHEET = "too_large_for_sheet"
    INSUFFICIENT_SHEET_CAPACITY = "insufficient_sheet_capacity"
    SINGLE_SHEET_LIMIT = "single_sheet_limit"


@dataclass(frozen=True)
class UnplaceablePart:
    """A unit that was not placed.

    Attributes:
        part_label: Label of the source part.
        unit_label: Label of the unplaced piece.
        length: Part length in mm.
        width: Part width in mm.
        reason: Why the unit could not be placed.
    """

    part_label: str
    unit_label: str
    length: float
    width: float
    reason: UnplaceableReason

    @property
    def message(self) -> str:
        dims = f"{self.length:g}x{self.width:g}"
        if self.reason == UnplaceableReason.GRAIN_LOCKED:
            return (
                f"'{self.unit_label}' ({dims}) needs rotation for its grain "
                "direction but rotation is disabled"
            )
        if self.reason == UnplaceableReason.TOO_LARGE_FOR_SHEET:
            return f"'{self.unit_label}' ({dims}) does not fit on any sheet type"
        if self.reason == UnplaceableReason.SINGLE_SHEET_LIMIT:
            return f"'{self.unit_label}' ({dims}) would need a second sheet"
        return f"'{self.unit_label}' ({dims}) found no sheet left in stock"


@dataclass(frozen=True)
class SheetExhausted:
    """Notice that a sheet type ran out while a unit still needed it.

    Attributes:
        sheet_label: Name of the exhausted sheet type.
        sheet_type_index: Index of the sheet type in the stock list.
        unit_label: The unit that asked for another sheet.
    """

    sheet_label: str
    sheet_type_index: int
    unit_label: str
