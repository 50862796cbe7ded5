"""Request validation endpoints."""

from fastapi import APIRouter

from nesting.application.config import load_request_from_dict, validate_request
from nesting.web.schemas.requests import RequestValidateRequest
from nesting.web.schemas.responses import (
    ErrorResponseSchema,
    ValidationIssueSchema,
    ValidationResultSchema,
)

router = APIRouter(prefix="/validate", tags=["validate"])


@router.post(
    "",
    response_model=ValidationResultSchema,
    responses={422: {"model": ErrorResponseSchema}},
)
async def validate_packing_request(
    request: RequestValidateRequest,
) -> ValidationResultSchema:
    """Validate a packing request without packing it.

    Schema errors are reported as 422 responses; engine errors and packing
    advisories come back in the result body.
    """
    schema = load_request_from_dict(request.request)
    result = validate_request(schema)

    return ValidationResultSchema(
        is_valid=result.is_valid,
        errors=[ValidationIssueSchema(path=e.path, message=e.message) for e in result.errors],
        warnings=[
            ValidationIssueSchema(path=w.path, message=w.message) for w in result.warnings
        ],
    )
