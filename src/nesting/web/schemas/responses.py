"""Pydantic response schemas for the REST API."""

from pydantic import BaseModel, Field


class SheetTypeSchema(BaseModel):
    """Stock sheet type a layout was cut from."""

    label: str = Field(..., description="Sheet type name")
    length: float = Field(..., description="Sheet length in mm")
    width: float = Field(..., description="Sheet width in mm")


class PlacementSchema(BaseModel):
    """One placed piece."""

    part_label: str = Field(..., description="Label of the part type")
    unit_label: str = Field(..., description="Label of this piece")
    x: float = Field(..., description="Left edge in mm")
    y: float = Field(..., description="Top edge in mm")
    placed_width: float = Field(..., description="Footprint along X, the sheet width")
    placed_height: float = Field(..., description="Footprint along Y, the sheet length")
    rotated: bool = Field(..., description="Whether the piece is turned 90 degrees")


class FreeRectSchema(BaseModel):
    """Unused rectangle left on a sheet."""

    x: float
    y: float
    width: float
    height: float


class CutRunSchema(BaseModel):
    """Merged straight cut along one line."""

    axis: str = Field(..., description="'horizontal' or 'vertical'")
    position: float = Field(..., description="Line position in mm")
    start: float = Field(..., description="Run start in mm")
    end: float = Field(..., description="Run end in mm")


class SheetLayoutSchema(BaseModel):
    """Layout of one physical sheet."""

    sheet_index: int
    sheet_type: SheetTypeSchema
    used_area: float
    waste_area: float
    waste_percentage: float
    placements: list[PlacementSchema] = Field(default_factory=list)
    free_rects: list[FreeRectSchema] = Field(default_factory=list)
    cut_runs: list[CutRunSchema] = Field(default_factory=list)


class PackingStatsSchema(BaseModel):
    """Aggregate statistics of a layout."""

    used_area: float
    waste_area: float
    total_waste_percentage: float
    cut_count: int
    total_cut_length: float
    banding_length_by_thickness: dict[str, float] = Field(default_factory=dict)
    banding_length_by_side: dict[str, float] = Field(default_factory=dict)
    fractional_sheets_used_by_type: dict[str, float] = Field(default_factory=dict)
    sheets_opened_by_type: dict[str, int] = Field(default_factory=dict)
    backer_sheets_fraction: float | None = None


class UnplaceableSchema(BaseModel):
    """Piece that could not be placed."""

    part_label: str
    unit_label: str
    length: float
    width: float
    reason: str = Field(..., description="Machine readable reason code")
    message: str = Field(..., description="Human readable explanation")


class SheetExhaustedSchema(BaseModel):
    """Notice that a sheet type ran out of stock."""

    sheet_label: str
    sheet_type_index: int
    unit_label: str = Field(..., description="Piece that asked for another sheet")


class OffcutSchema(BaseModel):
    """Leftover rectangle large enough to keep."""

    sheet_index: int
    x: float
    y: float
    width: float
    height: float


class LayoutResultSchema(BaseModel):
    """Result of one packing run."""

    sheets: list[SheetLayoutSchema] = Field(default_factory=list)
    stats: PackingStatsSchema
    unplaceable: list[UnplaceableSchema] = Field(default_factory=list)
    sheet_exhausted: list[SheetExhaustedSchema] = Field(default_factory=list)
    offcuts: list[OffcutSchema] = Field(default_factory=list)


class MaterialLayoutSchema(BaseModel):
    """Layout of the pieces cut from one material."""

    material: str | None = Field(default=None, description="Material identifier")
    is_backer: bool = Field(default=False, description="Whether backer boards")
    result: LayoutResultSchema


class GroupSummarySchema(BaseModel):
    """Pieces one board-type group contributes."""

    name: str
    board_type: str = Field(..., description="'16mm', '32mm-both' or '32mm-backer'")
    display_name: str
    description: str
    primary_pieces: int
    backer_pieces: int


class BoardSummarySchema(BaseModel):
    """Pre-pack summary of board-type groups."""

    groups: list[GroupSummarySchema] = Field(default_factory=list)
    total_primary_parts: int
    total_backer_parts: int
    edging_by_thickness: dict[str, float] = Field(
        default_factory=dict, description="Estimated edging per thickness in mm"
    )


class PackResponseSchema(BaseModel):
    """Response for packing a request."""

    is_complete: bool = Field(..., description="Whether every piece was placed")
    layouts: list[MaterialLayoutSchema] = Field(
        ..., description="One layout per material, backer layouts last"
    )
    board_summary: BoardSummarySchema | None = Field(
        default=None, description="Board-type group summary, when groups were given"
    )


class ValidationIssueSchema(BaseModel):
    """Single validation error or warning."""

    path: str
    message: str


class ValidationResultSchema(BaseModel):
    """Response for request validation."""

    is_valid: bool = Field(..., description="Whether the request can be packed")
    errors: list[ValidationIssueSchema] = Field(
        default_factory=list, description="Blocking errors"
    )
    warnings: list[ValidationIssueSchema] = Field(
        default_factory=list, description="Packing advisories"
    )


class ErrorDetailSchema(BaseModel):
    """Location and message of one problem."""

    path: str
    message: str


class ErrorResponseSchema(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type identifier")
    details: list[ErrorDetailSchema] = Field(
        default_factory=list, description="Per-field problems"
    )
