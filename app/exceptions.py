"""
Domain errors raised by the services and rendered by the API.

Every error maps to its own HTTP status so callers can tell a missing
entity from a dangling reference or a failed validation.
"""
from typing import Any, Dict, Iterable, List, Optional

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse


class APIError(HTTPException):
    """Base API error with structured error response."""

    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        details: Optional[Any] = None,
    ):
        self.error = error
        self.message = message
        self.details = details
        super().__init__(status_code=status_code, detail=message)


class NotFoundError(APIError):
    """Target entity does not exist."""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            status_code=404,
            error="not_found",
            message=f"{resource} with ID {identifier} not found",
            details={"resource": resource, "id": identifier},
        )


class InvalidReferenceError(APIError):
    """An association points at actors or genres that do not exist."""

    def __init__(self, resource: str, missing_ids: Iterable[int]):
        missing = sorted(set(missing_ids))
        super().__init__(
            status_code=400,
            error="invalid_reference",
            message=f"Unknown {resource} IDs: {', '.join(str(i) for i in missing)}",
            details={"resource": resource, "missing_ids": missing},
        )


class ValidationFailedError(APIError):
    """Submitted (or patched) state violates field constraints."""

    def __init__(self, message: str, violations: Optional[List[Dict[str, Any]]] = None):
        super().__init__(
            status_code=422,
            error="validation_failed",
            message=message,
            details=violations or [],
        )


class StorageFailureError(APIError):
    """Persisting the change failed; storage details are not exposed."""

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(
            status_code=503,
            error="storage_failure",
            message=message,
        )


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions and return structured JSON response."""
    content = {
        "error": exc.error,
        "message": exc.message,
    }
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)
