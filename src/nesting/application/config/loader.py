"""Loading of packing requests from JSON files and dictionaries.

Every failure surfaces as a ConfigError whose ``details`` carry a JSON path
and a message per problem, so the CLI and the REST API can point at the
offending entry of the request.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from nesting.application.config.schemas import PackingRequestSchema

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """A request that cannot be read or does not match the schema.

    Attributes:
        message: Summary of every problem found.
        error_type: One of file_not_found, permission_denied,
            file_read_error, json_parse or validation.
        path: The request file, or None for in-memory requests.
        details: One dict per problem. Validation problems have ``path``,
            ``message`` and ``value``; JSON syntax problems have ``line``,
            ``column`` and ``message``.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "validation",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


def _json_path(loc: tuple[str | int, ...]) -> str:
    """Join a Pydantic location into a path like ``parts[0].length``."""
    path = ""
    for segment in loc:
        if isinstance(segment, int):
            path += f"[{segment}]"
        else:
            path += f".{segment}" if path else str(segment)
    return path


def _describe(detail: dict[str, Any]) -> str:
    line = f"  - {detail['path'] or '(root)'}: {detail['message']}"
    value = detail.get("value")
    # Whole-object inputs would flood the message
    if value is not None and not isinstance(value, (dict, list)):
        line += f" (got: {value!r})"
    return line


def _validation_error(
    details: list[dict[str, Any]], path: Path | None
) -> ConfigError:
    message = "\n".join(["Request validation failed:", *map(_describe, details)])
    return ConfigError(message=message, error_type="validation", path=path, details=details)


def _parse(data: Any, path: Path | None) -> PackingRequestSchema:
    """Validate request data against the schema and require stock.

    A request with parts but no stock sheets is schema-valid on its own, but
    nothing can be cut from it, so it is rejected here with a ``stock`` path.
    """
    try:
        request = PackingRequestSchema.model_validate(data)
    except PydanticValidationError as e:
        details = [
            {"path": _json_path(err["loc"]), "message": err["msg"], "value": err.get("input")}
            for err in e.errors()
        ]
        raise _validation_error(details, path)

    has_parts = bool(request.parts) or any(group.parts for group in request.groups)
    if has_parts and not request.stock:
        detail = {"path": "stock", "message": "At least one stock sheet is required"}
        raise _validation_error([detail], path)

    logger.debug(
        "Request has %d parts, %d groups and %d stock sheet types",
        len(request.parts),
        len(request.groups),
        len(request.stock),
    )
    return request


def load_request(path: Path) -> PackingRequestSchema:
    """Load and validate a packing request from a JSON file.

    Args:
        path: Path to the JSON request file

    Returns:
        A validated PackingRequestSchema instance

    Raises:
        ConfigError: If the file is missing, unreadable, not JSON, or does
            not describe a packable request.
    """
    if not path.exists():
        raise ConfigError(f"Request file not found: {path}", "file_not_found", path)

    try:
        content = path.read_text(encoding="utf-8")
    except PermissionError:
        raise ConfigError(
            f"Permission denied reading request file: {path}", "permission_denied", path
        )
    except OSError as e:
        raise ConfigError(f"Error reading request file: {path}: {e}", "file_read_error", path)

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=f"Invalid JSON in {path} at line {e.lineno}, column {e.colno}: {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        )

    logger.debug("Loaded request file %s", path)
    return _parse(data, path)


def load_request_from_dict(data: dict[str, Any]) -> PackingRequestSchema:
    """Validate a packing request given as a dictionary.

    Raises:
        ConfigError: If the data does not describe a packable request.
    """
    return _parse(data, None)
