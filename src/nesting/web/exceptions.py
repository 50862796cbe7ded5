"""Error handlers for the REST API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from nesting.application.config import ConfigError
from nesting.domain.errors import InvalidInputError


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "Invalid packing request",
                "error_type": exc.error_type,
                "details": [
                    {"path": d.get("path", ""), "message": d.get("message", "")}
                    for d in exc.details
                ],
            },
        )

    @app.exception_handler(InvalidInputError)
    async def invalid_input_handler(
        request: Request, exc: InvalidInputError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": "Invalid packing input",
                "error_type": "invalid_input",
                "details": [
                    {"path": issue.path, "message": issue.message}
                    for issue in exc.issues
                ],
            },
        )
