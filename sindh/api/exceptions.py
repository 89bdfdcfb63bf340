"""Exception handlers mapping domain errors to JSON responses."""
import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from sindh.exceptions import (
    AccountNotFoundError,
    AuthenticationError,
    DuplicateApplicationError,
    DuplicateEmailError,
    DuplicatePhoneError,
    NotFoundError,
    OTPRateLimitError,
    SindhError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Most specific first
STATUS_CODES: list[tuple[type[SindhError], int]] = [
    (DuplicatePhoneError, 409),
    (DuplicateEmailError, 409),
    (DuplicateApplicationError, 409),
    (ValidationError, 400),
    (NotFoundError, 404),
    (AccountNotFoundError, 404),
    (OTPRateLimitError, 429),
    (AuthenticationError, 401),
]


def status_code_for(exc: SindhError) -> int:
    for exc_type, code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return 500


def _error_body(error, error_type: str, **extra) -> dict:
    body = {"success": False, "error": error, "type": error_type}
    body.update(extra)
    return body


async def sindh_exception_handler(request: Request, exc: SindhError) -> JSONResponse:
    """
    Handle domain exceptions.

    Args:
        request: The FastAPI request.
        exc: The domain exception.

    Returns:
        JSONResponse with error details.
    """
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("Service error in %s: %s", request.url.path, exc, exc_info=True)
    else:
        logger.info("%s %s -> %d %s", request.method, request.url.path, status_code, exc)

    extra = {}
    if isinstance(exc, ValidationError):
        extra["field"] = exc.field
    return JSONResponse(
        status_code=status_code,
        content=_error_body(str(exc), exc.__class__.__name__, **extra),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies and parameters as 400."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    # Drop the leading "body"/"query"/"path" marker
    loc = [str(p) for p in first.get("loc", ())][1:]
    field = ".".join(loc) or None
    message = first.get("msg", "Invalid request")

    return JSONResponse(
        status_code=400,
        content=_error_body(
            f"{field}: {message}" if field else message,
            "ValidationError",
            field=field,
        ),
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions with a consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.detail, "HTTPException"),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unexpected error in %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content=_error_body("Internal server error", "InternalError"),
    )
