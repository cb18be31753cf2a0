"""
Error types surfaced by the API and the handlers that render them.

Every error body has the shape ``{"error": <message>}``; validation errors add a
``details`` string listing each failing field.
"""

import logging

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError

logger = logging.getLogger(__name__)


class AppError(Exception):
    status_code: int = 500
    error: str = "Failed to process request"

    def __init__(self, details: str | None = None):
        super().__init__(self.error)
        self.details = details

    def to_content(self) -> dict[str, str]:
        content = {"error": self.error}
        if self.details:
            content["details"] = self.details
        return content


class ValidationFailed(AppError):
    status_code = 400
    error = "Invalid input"


class AuthenticationRequired(AppError):
    status_code = 401
    error = "Authentication required"


class ProcessingError(AppError):
    status_code = 500
    error = "Failed to process request"


class NotFound(AppError):
    status_code = 404

    def __init__(self, error: str):
        self.error = error
        super().__init__()


class UpstreamError(Exception):
    """An outbound call (AI gateway, weather, image generation) failed."""


def format_validation_errors(errors: list[dict]) -> str:
    """Render pydantic errors as ``"<field>: <message>, ..."``."""
    parts = []
    for err in errors:
        # FastAPI prefixes body errors with "body"
        loc = [str(p) for p in err.get("loc", ()) if p != "body"]
        message = "Required" if err.get("type") == "missing" else err.get("msg", "")
        parts.append(f"{'.'.join(loc)}: {message}" if loc else message)
    return ", ".join(parts)


def validation_failed_from(exc: ValidationError) -> ValidationFailed:
    return ValidationFailed(format_validation_errors(exc.errors()))


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = ValidationFailed(format_validation_errors(list(exc.errors())))
    logger.info(f"Rejected request to {request.url.path}: {error.details}")
    return JSONResponse(status_code=error.status_code, content=error.to_content())
