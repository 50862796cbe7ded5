"""Request schema and loading system for packing requests.

This package provides JSON-based request loading and validation. It
includes Pydantic models for schema validation, a loader with
comprehensive error handling, conversion to domain objects, and packing
advisories.

Public API:
    - PackingRequestSchema: Root request model
    - PartSchema, StockSheetSchema, PackingOptionsSchema: Sub-models
    - load_request: Load a request from a JSON file
    - load_request_from_dict: Load a request from a dictionary
    - ConfigError: Exception for request file errors
    - request_to_domain: Convert a request to domain objects
    - validate_request: Engine checks plus packing advisories

Example:
    >>> from pathlib import Path
    >>> from nesting.application.config import load_request, ConfigError
    >>>
    >>> try:
    ...     request = load_request(Path("kitchen.json"))
    ...     print(f"{len(request.parts)} part types")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from nesting.application.config.adapter import (
    PackingRequest,
    options_to_domain,
    part_to_domain,
    request_to_domain,
    stock_to_domain,
)
from nesting.application.config.loader import (
    ConfigError,
    load_request,
    load_request_from_dict,
)
from nesting.application.config.schemas import (
    SUPPORTED_VERSIONS,
    BackerSheetSchema,
    BandEdgesSchema,
    PackingOptionsSchema,
    PackingRequestSchema,
    PartGroupSchema,
    PartSchema,
    ScoreWeightsSchema,
    StockSheetSchema,
)
from nesting.application.config.validator import (
    ValidationError,
    ValidationResult,
    ValidationWarning,
    check_packing_advisories,
    validate_request,
)

__all__ = [
    "SUPPORTED_VERSIONS",
    "BackerSheetSchema",
    "BandEdgesSchema",
    "ConfigError",
    "PackingOptionsSchema",
    "PackingRequest",
    "PackingRequestSchema",
    "PartGroupSchema",
    "PartSchema",
    "ScoreWeightsSchema",
    "StockSheetSchema",
    "ValidationError",
    "ValidationResult",
    "ValidationWarning",
    "check_packing_advisories",
    "load_request",
    "load_request_from_dict",
    "options_to_domain",
    "part_to_domain",
    "request_to_domain",
    "stock_to_domain",
    "validate_request",
]
