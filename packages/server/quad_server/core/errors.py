"""
Error taxonomy for the API.

Each kind is an ``HTTPException`` so services raise them exactly where they
would raise ``HTTPException``; the app renders every one of them as
``{"success": false, "error": "<detail>"}``.
"""

from __future__ import annotations

from typing import Optional

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quad_shared.schemas.common import ErrorResponse


class ServiceError(HTTPException):
    status_code = 500
    default_detail = "Internal server error"

    def __init__(self, detail: Optional[str] = None, headers: Optional[dict[str, str]] = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
            headers=headers,
        )


class Unauthenticated(ServiceError):
    status_code = 401
    default_detail = "Authentication required"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail, headers={"WWW-Authenticate": "Bearer"})


class Forbidden(ServiceError):
    status_code = 403
    default_detail = "Forbidden"


class InvalidRequest(ServiceError):
    status_code = 400
    default_detail = "Invalid request"


class PreconditionFailed(ServiceError):
    status_code = 400
    default_detail = "Precondition failed"


class Conflict(ServiceError):
    # 400 rather than 409: existing clients branch on 400 for duplicate submissions.
    status_code = 400
    default_detail = "Conflict"


class NotFound(ServiceError):
    status_code = 404
    default_detail = "Not found"


class Internal(ServiceError):
    """Anything no handler claimed; the detail never leaks the cause."""


def error_response(exc: StarletteHTTPException) -> JSONResponse:
    """Render any HTTP error as the API's error envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=str(exc.detail)).model_dump(by_alias=True),
        headers=getattr(exc, "headers", None),
    )
