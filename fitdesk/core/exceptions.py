"""
Global exception handling for the application.
Every error leaves the API in the standard envelope:
``{"success": false, "message": ..., **details}``.
"""

from typing import Any, Dict, Optional

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""
    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Missing or malformed input."""
    def __init__(self, message: str = "Validation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class NotFoundError(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class AuthError(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "Authentication failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details)


class ForbiddenError(AppError):
    """Authorization failure error."""
    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class ConflictError(AppError):
    """Business rule violation error."""
    def __init__(self, message: str = "Business rule violation", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class RateLimitError(AppError):
    """Too many requests in a short window."""
    def __init__(self, message: str = "Too many requests", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_429_TOO_MANY_REQUESTS, details)


class InternalError(AppError):
    """Unexpected failure; the message is never sent to the client."""
    def __init__(self, message: str = "Internal server error", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR, details)


# OTP

class InvalidOTPError(ValidationError):
    def __init__(self):
        super().__init__("Invalid OTP")


class OTPAttemptsExceededError(ValidationError):
    def __init__(self):
        super().__init__("Maximum attempts exceeded")


class OTPExpiredError(ValidationError):
    def __init__(self):
        super().__init__("OTP expired")


class OTPCooldownError(RateLimitError):
    def __init__(self, wait_minutes: int):
        self.wait_minutes = wait_minutes
        super().__init__(
            f"Please wait {wait_minutes} minute(s) before requesting a new OTP",
            {"retry_after_minutes": wait_minutes},
        )


# Tokens

class TokenExpiredError(AuthError):
    def __init__(self):
        super().__init__("Token has expired")


class InvalidTokenError(AuthError):
    def __init__(self):
        super().__init__("Invalid token")


# Sessions

class SessionFullError(ConflictError):
    def __init__(self, capacity: int):
        super().__init__(f"Session is full. Maximum {capacity} person(s) allowed.")


def _envelope(message: str, **extra: Any) -> Dict[str, Any]:
    return {"success": False, "message": message, **extra}


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Translate an AppError raised anywhere below a handler."""
    if exc.status_code >= 500:
        logger.error("Application error", path=request.url.path, error=exc.message)
        return JSONResponse(status_code=exc.status_code, content=_envelope("Internal server error"))

    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(exc.message, **exc.details),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report every violated field at once instead of the first one."""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(location) or "body", "message": error.get("msg", "Invalid value")})

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope("Validation failed", errors=errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=_envelope(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""
    logger.exception("Unhandled error", path=request.url.path, method=request.method)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope("Internal server error"),
    )


def register_exception_handlers(app) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)
