"""
Error Translation - Company Scoring Platform
app/core/errors.py

Turns store and engine exceptions into HTTP errors carrying the standard
ErrorResponse body, and formats request validation failures.
"""

from datetime import datetime, timezone
from typing import NoReturn, Optional

from fastapi import Request, status
from fastapi.exceptions import HTTPException, RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import (
    ConfigValidationException,
    DuplicateEntityException,
    EntityNotFoundException,
    IntakeException,
    InvalidCompanyReportException,
    InvalidRunTransitionException,
    RadarSelectionFullException,
    RepositoryException,
)
from app.models.common import ErrorResponse


#  Validation Error Messages


FIELD_MESSAGES = {
    "name": {
        "missing": "Name is required",
        "string_too_short": "Name cannot be empty",
        "string_too_long": "Name must not exceed 255 characters",
        "string_type": "Name must be a string",
    },
    "configId": {
        "missing": "Config ID is required",
        "string_too_short": "Config ID cannot be empty",
    },
    "config_id": {
        "missing": "Config ID is required",
        "string_too_short": "Config ID cannot be empty",
    },
    "file": {
        "missing": "A CSV file of company names is required",
    },
    "reason": {
        "string_too_long": "Failure reason must not exceed 2000 characters",
    },
}

DEFAULT_MESSAGES = {
    "missing": "Field '{field}' is required",
    "string_too_short": "Field '{field}' is too short",
    "string_too_long": "Field '{field}' is too long",
    "string_pattern_mismatch": "Field '{field}' has invalid format",
    "less_than_equal": "Field '{field}' exceeds maximum allowed value",
    "greater_than_equal": "Field '{field}' is below minimum allowed value",
    "string_type": "Field '{field}' must be a string",
    "int_type": "Field '{field}' must be an integer",
    "int_parsing": "Field '{field}' must be a valid integer",
    "int_from_float": "Field '{field}' must be a whole number",
    "bool_type": "Field '{field}' must be true or false",
    "bool_parsing": "Field '{field}' must be true or false",
    "list_type": "Field '{field}' must be a list",
    "enum": "Field '{field}' has an unsupported value",
    "json_invalid": "Malformed JSON request body",
    "extra_forbidden": "Unknown field '{field}' is not allowed",
}


def get_validation_message(field: str, error_type: str) -> str:
    leaf = field.split(".")[-1] if field else field
    for name in (field, leaf):
        if name in FIELD_MESSAGES:
            for key in FIELD_MESSAGES[name]:
                if key in error_type:
                    return FIELD_MESSAGES[name][key]
    for key, template in DEFAULT_MESSAGES.items():
        if key in error_type:
            return template.format(field=field)
    return f"Invalid value for field '{field}'"


def _error_body(error_code: str, message: str, details: Optional[dict] = None) -> dict:
    return {
        "error_code": error_code,
        "message": message,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if not errors:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=_error_body("VALIDATION_ERROR", "Request validation failed"),
        )
    err = errors[0]
    error_type = err.get("type", "")
    loc = err.get("loc", [])
    if "json_invalid" in error_type:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_error_body("INVALID_REQUEST", "Malformed JSON request body"),
        )
    field = ".".join(str(l) for l in loc if l not in ("body", "query", "path"))
    message = get_validation_message(field, error_type)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=_error_body(
            "VALIDATION_ERROR",
            message,
            {"field": field, "type": error_type} if field else None,
        ),
    )


#  Exception Helpers


def raise_error(status_code: int, error_code: str, message: str, details: Optional[dict] = None) -> NoReturn:
    raise HTTPException(
        status_code=status_code,
        detail=ErrorResponse(
            error_code=error_code,
            message=message,
            details=details,
            timestamp=datetime.now(timezone.utc),
        ).model_dump(mode="json"),
    )


def raise_not_found(entity_type: str, entity_id: Optional[str] = None) -> NoReturn:
    raise_error(
        status.HTTP_404_NOT_FOUND,
        f"{entity_type.upper()}_NOT_FOUND",
        f"{entity_type} not found",
        {"id": entity_id} if entity_id else None,
    )


def raise_for(exc: RepositoryException) -> NoReturn:
    """Map an engine/store exception to its HTTP error."""
    if isinstance(exc, EntityNotFoundException):
        raise_not_found(exc.entity_type, exc.entity_id)
    if isinstance(exc, ConfigValidationException):
        raise_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "CONFIG_INVALID",
            exc.violations[0] if exc.violations else "Invalid scoring config",
            {"violations": exc.violations},
        )
    if isinstance(exc, InvalidCompanyReportException):
        raise_error(status.HTTP_422_UNPROCESSABLE_ENTITY, "INVALID_REPORT", exc.message)
    if isinstance(exc, InvalidRunTransitionException):
        raise_error(
            status.HTTP_409_CONFLICT,
            "RUN_TERMINAL",
            str(exc),
            {"status": exc.status, "action": exc.action},
        )
    if isinstance(exc, RadarSelectionFullException):
        raise_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "RADAR_SELECTION_FULL",
            str(exc),
            {"limit": exc.limit, "company_id": exc.company_id},
        )
    if isinstance(exc, IntakeException):
        raise_error(status.HTTP_400_BAD_REQUEST, "INVALID_UPLOAD", exc.message)
    if isinstance(exc, DuplicateEntityException):
        raise_error(status.HTTP_409_CONFLICT, "DUPLICATE_ENTITY", exc.message)
    raise_error(status.HTTP_500_INTERNAL_SERVER_ERROR, "STORE_ERROR", str(exc))
