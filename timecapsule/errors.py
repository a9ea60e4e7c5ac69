"""
Error taxonomy and the JSON error envelope returned by the API.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class ApiError(Exception):
    """Base error carrying the HTTP status and the client-facing message."""

    status_code: int = 500
    default_message: str = "Server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)

    def as_dict(self) -> dict:
        body = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class Unauthenticated(ApiError):
    status_code = 401
    default_message = "Access Denied"


class InvalidCredential(ApiError):
    status_code = 400
    default_message = "Invalid Token"


class BadRequest(ApiError):
    status_code = 400
    default_message = "Bad request"


class UploadFailed(ApiError):
    status_code = 500
    default_message = "Upload failed"


class ServerError(ApiError):
    # Underlying details are never surfaced to the client.
    status_code = 500
    default_message = "Server error"


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.as_dict())


UPLOAD_FIELD = "file"


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures in the same envelope as ``ApiError``."""
    for error in exc.errors():
        loc = tuple(error.get("loc", ()))
        if loc[:2] == ("body", UPLOAD_FIELD):
            return await api_error_handler(request, BadRequest("No file uploaded"))
    return await api_error_handler(request, BadRequest("Invalid request"))
