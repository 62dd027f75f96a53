"""
Global Exception Handlers

Implements exception handling with consistent error responses and proper
logging for all API exceptions, including the engine's error taxonomy.

Design Considerations:
- Standardized error response format
- NotFound -> 404, Unauthenticated -> 401, ModelFailure -> 500,
  PromptConflict -> 409
- Detailed error logging with severity by status code
"""

import json
import logging
import traceback
from datetime import datetime

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse as StarletteJSONResponse

from api.models.errors import ErrorResponse, ValidationErrorResponse, ValidationErrorItem
from email_brain.errors import EmailBrainError, ModelFailure, NotFound, PromptConflict, Unauthenticated

# Configure logging
logger = logging.getLogger(__name__)

ENGINE_ERROR_STATUS = {
    NotFound: status.HTTP_404_NOT_FOUND,
    Unauthenticated: status.HTTP_401_UNAUTHORIZED,
    PromptConflict: status.HTTP_409_CONFLICT,
    ModelFailure: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class DateTimeEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles datetime objects."""
    def default(self, obj):
        if isinstance(obj, datetime):
            return obj.isoformat()
        return super().default(obj)


class JSONResponse(StarletteJSONResponse):
    """JSONResponse that handles datetime serialization."""
    def render(self, content):
        return json.dumps(content, cls=DateTimeEncoder).encode("utf-8")


def add_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(EmailBrainError, engine_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Exception handlers registered")


def error_status_for(exc: EmailBrainError) -> int:
    for error_type, status_code in ENGINE_ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def engine_exception_handler(
    request: Request,
    exc: EmailBrainError
) -> JSONResponse:
    """
    Map engine errors to HTTP responses.

    Args:
        request: Request that caused exception
        exc: Engine error

    Returns:
        Standardized error response with the mapped status code
    """
    status_code = error_status_for(exc)
    log_exception(request, exc, status_code)

    error_response = ErrorResponse(
        message=exc.message,
        detail=exc.message,
        error_code=exc.error_code,
        details=exc.details,
        timestamp=datetime.utcnow()
    )

    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(),
        headers=headers
    )


async def http_exception_handler(
    request: Request,
    exc: StarletteHTTPException
) -> JSONResponse:
    """
    Handle HTTP exceptions with standardized format.

    Args:
        request: Request that caused exception
        exc: HTTP exception

    Returns:
        Standardized error response
    """
    log_exception(request, exc, exc.status_code)

    error_response = ErrorResponse(
        message=str(exc.detail),
        detail=str(exc.detail),
        error_code=f"HTTP_{exc.status_code}",
        details=getattr(exc, "details", None),
        timestamp=datetime.utcnow()
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=error_response.model_dump(),
        headers=getattr(exc, "headers", None)
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors with detailed field information.

    Args:
        request: Request that caused exception
        exc: Validation exception

    Returns:
        Detailed validation error response
    """
    log_exception(request, exc, status.HTTP_422_UNPROCESSABLE_ENTITY)

    validation_errors = []
    for error in exc.errors():
        loc = [str(loc_item) for loc_item in error["loc"]]
        validation_errors.append(
            ValidationErrorItem(
                loc=loc,
                msg=error["msg"],
                type=error["type"]
            )
        )

    error_response = ValidationErrorResponse(
        message="Request validation error",
        detail="Request validation error",
        error_code="VALIDATION_ERROR",
        validation_errors=validation_errors,
        timestamp=datetime.utcnow()
    )

    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_response.model_dump()
    )


async def general_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """
    Handle all unhandled exceptions with safe error responses.

    Args:
        request: Request that caused exception
        exc: Unhandled exception

    Returns:
        Safe error response
    """
    log_exception(request, exc, status.HTTP_500_INTERNAL_SERVER_ERROR, include_traceback=True)

    error_response = ErrorResponse(
        message="An unexpected error occurred",
        detail="An unexpected error occurred",
        error_code="INTERNAL_SERVER_ERROR",
        details={"type": exc.__class__.__name__},
        timestamp=datetime.utcnow()
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump()
    )


def log_exception(
    request: Request,
    exc: Exception,
    status_code: int,
    include_traceback: bool = False
) -> None:
    """
    Log exception with request context and severity by status code.

    Args:
        request: Request that caused exception
        exc: Exception instance
        status_code: HTTP status code
        include_traceback: Whether to include full traceback
    """
    if status_code >= 500:
        log_level = logging.ERROR
    elif status_code >= 400:
        log_level = logging.WARNING
    else:
        log_level = logging.INFO

    error_message = f"Exception during request to {request.method} {request.url.path}: {exc}"
    error_details = {
        "status_code": status_code,
        "error_type": exc.__class__.__name__,
        "client_host": request.client.host if request.client else "unknown"
    }

    if include_traceback:
        error_details["traceback"] = traceback.format_exc()

    logger.log(log_level, error_message, extra={"error_details": error_details})
