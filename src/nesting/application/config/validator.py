"""Validation structures and packing advisories for request files.

Schema validation happens when a request is loaded. This module adds the
checks that need the whole request: blocking errors the engine would reject
(such as a kerf wider than a sheet) and advisory warnings about parts that
are likely to end up unplaced.
"""

from dataclasses import dataclass, field
from typing import Any

from nesting.application.config.adapter import part_to_domain, request_to_domain
from nesting.application.config.schemas import PackingRequestSchema, PartSchema
from nesting.domain.services.board_calculator import BoardType
from nesting.domain.services.normalizer import legal_orientations
from nesting.domain.value_objects import GrainDirection


@dataclass
class ValidationError:
    """Represents a blocking validation error.

    Attributes:
        path: JSON path to the invalid field (e.g., "stock[0].kerf")
        message: Human-readable description of the error
        value: The invalid value that caused the error
    """

    path: str
    message: str
    value: Any = None


@dataclass
class ValidationWarning:
    """Represents a non-blocking validation warning.

    Attributes:
        path: JSON path to the concerning field
        message: Human-readable description of the concern
        suggestion: Optional suggested remediation
    """

    path: str
    message: str
    suggestion: str | None = None


@dataclass
class ValidationResult:
    """Container for validation errors and warnings.

    Attributes:
        errors: List of blocking validation errors
        warnings: List of non-blocking validation warnings
    """

    errors: list[ValidationError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Check if the request has no blocking errors."""
        return len(self.errors) == 0

    @property
    def has_warnings(self) -> bool:
        return len(self.warnings) > 0

    @property
    def exit_code(self) -> int:
        """Get the CLI exit code based on validation status.

        Returns:
            0 if valid with no warnings
            1 if there are errors
            2 if valid but has warnings
        """
        if self.errors:
            return 1
        if self.warnings:
            return 2
        return 0

    def add_error(
        self, path: str, message: str, value: Any = None
    ) -> "ValidationResult":
        """Add a validation error and return self for chaining."""
        self.errors.append(ValidationError(path=path, message=message, value=value))
        return self

    def add_warning(
        self, path: str, message: str, suggestion: str | None = None
    ) -> "ValidationResult":
        """Add a validation warning and return self for chaining."""
        self.warnings.append(
            ValidationWarning(path=path, message=message, suggestion=suggestion)
        )
        return self

    def merge(self, other: "ValidationResult") -> "ValidationResult":
        """Merge another ValidationResult into this one."""
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self


def _all_parts(request: PackingRequestSchema) -> list[tuple[str, PartSchema]]:
    """Every part with its JSON path, plain parts first."""
    located = [(f"parts[{i}]", part) for i, part in enumerate(request.parts)]
    for g, group in enumerate(request.groups):
        located.extend(
            (f"groups[{g}].parts[{p}]", part) for p, part in enumerate(group.parts)
        )
    return located


def check_packing_advisories(request: PackingRequestSchema) -> ValidationResult:
    """Warn about parts that are likely to end up unplaced.

    Advisories checked:
    - Width-grain parts while rotation is disabled
    - Parts that fit no offered sheet type in any legal orientation
    - Laminated parts without a backer sheet
    - Group materials with no stock sheet of their own
    - Total part area beyond the available sheet area

    Args:
        request: A validated PackingRequestSchema instance

    Returns:
        ValidationResult containing any warnings found
    """
    result = ValidationResult()
    options = request.options
    laminated = False
    total_part_area = 0.0

    for path, schema in _all_parts(request):
        part = part_to_domain(schema)
        total_part_area += part.area * part.quantity
        laminated = laminated or part.laminate

        orientations = legal_orientations(part, options.allow_rotation)
        if part.grain == GrainDirection.WIDTH and not orientations:
            result.add_warning(
                path=f"{path}.grain",
                message=(
                    f"Part '{part.label}' has width grain but rotation is "
                    "disabled; it cannot be placed"
                ),
                suggestion="Enable options.allow_rotation or change the grain",
            )
            continue

        fits_any = any(
            o.width <= sheet.width and o.height <= sheet.length
            for o in orientations
            for sheet in request.stock
        )
        if request.stock and not fits_any:
            result.add_warning(
                path=path,
                message=(
                    f"Part '{part.label}' ({part.length:g}x{part.width:g}) "
                    "is larger than every stock sheet"
                ),
                suggestion="Offer a larger sheet or split the part",
            )

    if any(g.board_type != BoardType.SINGLE_16MM and g.parts for g in request.groups):
        laminated = True
    if laminated and options.laminate_backer_sheet is None:
        result.add_warning(
            path="options.laminate_backer_sheet",
            message="Laminated parts present but no backer sheet is configured",
            suggestion="Set options.laminate_backer_sheet to report backer usage",
        )

    sheet_materials = {s.material for s in request.stock if s.material is not None}
    untagged = any(s.material is None for s in request.stock)
    for g, group in enumerate(request.groups):
        material = group.primary_material
        if group.parts and material and material not in sheet_materials and untagged:
            result.add_warning(
                path=f"groups[{g}].primary_material",
                message=(
                    f"No stock sheet is tagged '{material}'; group "
                    f"'{group.name}' is cut from the untagged sheets"
                ),
                suggestion=f"Add a stock sheet with material '{material}'",
            )

    if request.stock and all(s.quantity_available is not None for s in request.stock):
        available_area = sum(
            s.length * s.width * (s.quantity_available or 0) for s in request.stock
        )
        if options.single_sheet_only:
            available_area = max(s.length * s.width for s in request.stock)
        if total_part_area > available_area:
            result.add_warning(
                path="stock",
                message=(
                    f"Parts cover {total_part_area:,.0f} mm2 but the available "
                    f"sheets only cover {available_area:,.0f} mm2"
                ),
                suggestion="Increase quantity_available or add a sheet type",
            )

    return result


def validate_request(request: PackingRequestSchema) -> ValidationResult:
    """Run all request checks that go beyond the schema.

    Args:
        request: A validated PackingRequestSchema instance

    Returns:
        ValidationResult with errors the engine would reject and advisory
        warnings.
    """
    result = ValidationResult()
    domain = request_to_domain(request)
    for issue in domain.input_issues():
        result.add_error(path=issue.path, message=issue.message)

    result.merge(check_packing_advisories(request))
    return result
