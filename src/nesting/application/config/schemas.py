"""Pydantic schemas for packing request files.

A request file holds the parts to cut, the stock sheets on offer and the
packing options. Parts may also be given in board-type groups, which are
expanded into laminated parts and backer parts before packing.

Example:
    {
        "schema_version": "1.0",
        "parts": [{"label": "Side", "length": 720, "width": 560, "quantity": 2}],
        "stock": [{"label": "Board", "length": 2750, "width": 1830}],
        "options": {"kerf_mm": 3}
    }
"""

from __future__ import annotations

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

from nesting.domain.services.board_calculator import BoardType
from nesting.domain.value_objects import GrainDirection

# Version 1.0: Parts, stock and options
# Version 1.1: Board-type groups
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0", "1.1"})


class BandEdgesSchema(BaseModel):
    """Edge banding flags in the part's unrotated frame."""

    model_config = ConfigDict(extra="forbid")

    top: bool = False
    right: bool = False
    bottom: bool = False
    left: bool = False


class PartSchema(BaseModel):
    """One part type to cut.

    Attributes:
        label: Identifier shown in reports.
        length: Length in mm (along the sheet length at 0 degrees).
        width: Width in mm.
        quantity: Number of pieces.
        grain: Grain orientation constraint.
        band_edges: Edge banding flags.
        laminate: Whether the part is laminated.
    """

    model_config = ConfigDict(extra="forbid")

    label: str = Field(default="", description="Part label")
    length: float = Field(..., gt=0, description="Part length in mm")
    width: float = Field(..., gt=0, description="Part width in mm")
    quantity: int = Field(default=1, gt=0, description="Number of pieces")
    grain: GrainDirection = Field(
        default=GrainDirection.ANY, description="Grain orientation constraint"
    )
    band_edges: BandEdgesSchema = Field(default_factory=BandEdgesSchema)
    laminate: bool = Field(default=False, description="Laminated part")


class StockSheetSchema(BaseModel):
    """One stock sheet type.

    Attributes:
        label: Identifier shown in reports and statistics.
        length: Sheet length in mm.
        width: Sheet width in mm.
        quantity_available: Sheets on hand; omit for unbounded.
        kerf: Saw kerf for this sheet type; omit to use the global option.
        material: Material the sheet is made of; group parts whose
            primary material matches are cut from it.
    """

    model_config = ConfigDict(extra="forbid")

    label: str = Field(default="", description="Sheet label")
    length: float = Field(..., gt=0, description="Sheet length in mm")
    width: float = Field(..., gt=0, description="Sheet width in mm")
    quantity_available: int | None = Field(
        default=None, ge=0, description="Sheets on hand (unbounded when omitted)"
    )
    kerf: float | None = Field(default=None, ge=0, description="Saw kerf in mm")
    material: str | None = Field(default=None, description="Sheet material")


class ScoreWeightsSchema(BaseModel):
    """Weights of the composite placement score."""

    model_config = ConfigDict(extra="forbid")

    leftover: float = Field(default=1.0, ge=0)
    sliver_penalty: float = Field(default=10_000.0, ge=0)
    sliver_area: float = Field(default=2.0, ge=0)
    aspect: float = Field(default=0.05, ge=0)
    future_fit: float = Field(default=0.5, ge=0)
    cut_length: float = Field(default=10.0, ge=0)


class BackerSheetSchema(BaseModel):
    """Sheet used for backer boards under laminated parts."""

    model_config = ConfigDict(extra="forbid")

    label: str = Field(default="Backer", description="Backer sheet label")
    length: float = Field(..., gt=0, description="Backer sheet length in mm")
    width: float = Field(..., gt=0, description="Backer sheet width in mm")


class PackingOptionsSchema(BaseModel):
    """Packing options.

    Attributes:
        kerf_mm: Default saw kerf in mm.
        allow_rotation: Allow 90 degree placements.
        single_sheet_only: Never open a second sheet.
        min_offcut_mm: Residuals narrower than this are slivers.
        min_offcut_area_mm2: Minimum area of a reusable offcut.
        board_thickness_mm: Board thickness for banding classes.
        laminate_backer_sheet: Backer sheet for laminated parts.
        weights: Score weights.
    """

    model_config = ConfigDict(extra="forbid")

    kerf_mm: float = Field(default=0.0, ge=0, le=20, description="Saw kerf in mm")
    allow_rotation: bool = Field(default=True, description="Allow 90 degree rotation")
    single_sheet_only: bool = Field(
        default=False, description="Feasibility mode: use at most one sheet"
    )
    min_offcut_mm: float = Field(
        default=150.0, ge=0, description="Minimum usable offcut dimension in mm"
    )
    min_offcut_area_mm2: float = Field(
        default=100_000.0, ge=0, description="Minimum usable offcut area in mm2"
    )
    board_thickness_mm: float = Field(
        default=16.0, gt=0, le=100, description="Board thickness in mm"
    )
    laminate_backer_sheet: BackerSheetSchema | None = Field(
        default=None, description="Backer sheet for laminated parts"
    )
    weights: ScoreWeightsSchema = Field(default_factory=ScoreWeightsSchema)


class PartGroupSchema(BaseModel):
    """A group of parts sharing a board type (v1.1+).

    Attributes:
        name: Group name.
        board_type: How the group's panels are built.
        parts: Parts of the group.
        primary_material: Visible material identifier.
        backer_material: Backer material identifier.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(default="", description="Group name")
    board_type: BoardType = Field(default=BoardType.SINGLE_16MM)
    parts: list[PartSchema] = Field(default_factory=list)
    primary_material: str | None = None
    backer_material: str | None = None


class PackingRequestSchema(BaseModel):
    """Root model of a packing request file.

    Attributes:
        schema_version: Version string in format "major.minor".
        parts: Parts to cut.
        groups: Board-type groups of parts (v1.1+).
        stock: Stock sheet types on offer.
        options: Packing options.
    """

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", pattern=r"^\d+\.\d+$")
    parts: list[PartSchema] = Field(default_factory=list)
    groups: list[PartGroupSchema] = Field(default_factory=list)
    stock: list[StockSheetSchema] = Field(default_factory=list)
    options: PackingOptionsSchema = Field(default_factory=PackingOptionsSchema)

    @field_validator("schema_version")
    @classmethod
    def validate_supported_version(cls, v: str) -> str:
        """Accept supported versions and newer minors of a supported major."""
        if v in SUPPORTED_VERSIONS:
            return v

        major_version = int(v.split(".")[0])
        supported_majors = {int(sv.split(".")[0]) for sv in SUPPORTED_VERSIONS}
        if major_version in supported_majors:
            return v

        raise ValueError(
            f"Unsupported schema version '{v}'. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}"
        )
