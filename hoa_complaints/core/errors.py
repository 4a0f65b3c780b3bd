"""
Error taxonomy for the complaints core and its HTTP mapping.

ValidationError  - malformed or missing caller input (400)
NotFoundError    - referenced resident/complaint does not exist (404)
CorruptDataError - stored data violates the domain's own rules (500)
"""

import logging
from enum import Enum
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class ErrorCode(str, Enum):
    """Machine-readable error codes."""
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    CORRUPT_DATA = "CORRUPT_DATA"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ComplaintsError(Exception):
    """
    Base exception for all errors raised by the complaints core.

    Carries a message, an error code and the HTTP status the transport
    layer should answer with.
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to its JSON body."""
        return {"error": self.message}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, error_code={self.error_code.value!r})"


class ValidationError(ComplaintsError):
    """Caller-correctable input problem."""
    error_code = ErrorCode.VALIDATION_ERROR
    status_code = 400


class NotFoundError(ComplaintsError):
    """A referenced entity does not exist."""
    error_code = ErrorCode.RESOURCE_NOT_FOUND
    status_code = 404


class CorruptDataError(ComplaintsError):
    """
    Stored data no longer matches the domain (schema drift or tampering).
    Never caller-correctable, and the message is not shown to callers.
    """
    error_code = ErrorCode.CORRUPT_DATA
    status_code = 500


GENERIC_ERROR_MESSAGE = "An unexpected error occurred."


async def complaints_error_handler(request: Request, exc: ComplaintsError) -> JSONResponse:
    """Translate a core error into a JSON response."""
    if exc.status_code >= 500:
        logger.error("%s on %s %s: %s", exc.error_code.value, request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": GENERIC_ERROR_MESSAGE})
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies or query strings are caller errors, answered like ValidationError."""
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', 'invalid')}"
        for error in exc.errors()
    )
    return JSONResponse(status_code=400, content={"error": f"Invalid request. {problems}".strip()})


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler; never leaks internals."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": GENERIC_ERROR_MESSAGE})


def setup_exception_handlers(app: FastAPI) -> None:
    """Register the error-to-response mapping on the application."""
    app.add_exception_handler(ComplaintsError, complaints_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
