"""Custom exceptions following RFC 9457 Problem Details for HTTP APIs."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .validation import ValidationResult

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"


class ProblemDetailsException(HTTPException):
    """
    Base exception class following RFC 9457 Problem Details for HTTP APIs.

    https://tools.ietf.org/rfc/rfc9457.txt
    """

    def __init__(
        self,
        status_code: int,
        title: str,
        detail: Optional[str] = None,
        type_uri: Optional[str] = None,
        instance: Optional[str] = None,
        extensions: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize Problem Details exception.

        Args:
            status_code: HTTP status code
            title: Short, human-readable summary of the problem type
            detail: Human-readable explanation specific to this occurrence
            type_uri: URI reference that identifies the problem type
            instance: URI reference that identifies the specific occurrence
            extensions: Additional problem-specific information
            headers: HTTP headers to include in response
        """
        self.status_code = status_code
        self.title = title
        self.detail = detail
        self.type_uri = type_uri or f"about:blank#{status_code}"
        self.instance = instance
        self.extensions = extensions or {}

        self.problem_details = {
            "type": self.type_uri,
            "title": self.title,
            "status": self.status_code,
        }

        if self.detail:
            self.problem_details["detail"] = self.detail

        if self.instance:
            self.problem_details["instance"] = self.instance

        self.problem_details.update(self.extensions)

        super().__init__(
            status_code=status_code,
            detail=self.problem_details,
            headers=headers
        )


class BadRequestError(ProblemDetailsException):
    """Exception for missing or malformed input, and for unknown tours."""

    def __init__(
        self,
        detail: Optional[str] = None,
        instance: Optional[str] = None,
    ):
        super().__init__(
            status_code=400,
            title="Bad Request",
            detail=detail,
            type_uri="https://example.com/problems/bad-request",
            instance=instance,
        )


class UnprocessableEntityError(ProblemDetailsException):
    """Exception for declarative validation failures with field-keyed errors."""

    def __init__(
        self,
        errors: ValidationResult,
        detail: str = "One or more validation errors occurred",
        instance: Optional[str] = None,
    ):
        self.errors = errors
        super().__init__(
            status_code=422,
            title="Validation Failed",
            detail=detail,
            type_uri="https://example.com/problems/validation-failed",
            instance=instance,
            extensions={"errors": errors.to_dict()},
        )


class UnsupportedMediaTypeError(ProblemDetailsException):
    """Exception when no handler accepts the request's Content-Type."""

    def __init__(
        self,
        content_type: Optional[str],
        supported: list[str],
        instance: Optional[str] = None,
    ):
        super().__init__(
            status_code=415,
            title="Unsupported Media Type",
            detail=f"Content-Type '{content_type or ''}' is not supported",
            type_uri="https://example.com/problems/unsupported-media-type",
            instance=instance,
            extensions={"supported_media_types": supported},
        )


class AmbiguousRepresentationError(ProblemDetailsException):
    """Exception when more than one representation variant matches a request."""

    def __init__(
        self,
        header_name: str,
        candidates: list[str],
        instance: Optional[str] = None,
    ):
        super().__init__(
            status_code=500,
            title="Ambiguous Representation",
            detail=f"The {header_name} header matches more than one representation",
            type_uri="https://example.com/problems/ambiguous-representation",
            instance=instance,
            extensions={"candidates": candidates},
        )


class TourSaveError(RuntimeError):
    """Raised when committing tour changes fails; surfaced as an unhandled 500."""


async def problem_details_handler(request: Request, exc: ProblemDetailsException) -> JSONResponse:
    """
    Exception handler for Problem Details exceptions.

    Args:
        request: FastAPI request object
        exc: Problem Details exception

    Returns:
        JSONResponse: Problem Details formatted response
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.problem_details,
        headers=exc.headers,
        media_type=PROBLEM_JSON,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render FastAPI parameter validation errors (e.g. a malformed tour id) as 400."""
    violations = [
        {
            "path": ".".join(str(part) for part in error["loc"]),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    problem = BadRequestError(detail="The request parameters are invalid")
    return JSONResponse(
        status_code=400,
        content={**problem.problem_details, "violations": violations},
        media_type=PROBLEM_JSON,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Generic exception handler that converts unhandled exceptions to Problem Details format.

    Args:
        request: FastAPI request object
        exc: Unhandled exception

    Returns:
        JSONResponse: Problem Details formatted response
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception",
        extra={"error_id": error_id, "path": request.url.path, "error": str(exc)},
        exc_info=exc,
    )

    problem_details = {
        "type": "https://example.com/problems/internal-server-error",
        "title": "Internal Server Error",
        "status": 500,
        "detail": "An unexpected error occurred while processing the request",
        "instance": str(request.url),
        "error_id": error_id,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }

    return JSONResponse(
        status_code=500,
        content=problem_details,
        media_type=PROBLEM_JSON,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the Problem Details handlers to an application."""
    app.add_exception_handler(ProblemDetailsException, problem_details_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
