"""Error responses for the HTTP API.

Every error body has the same shape:
{
    "type": "error",
    "error": {
        "type": "<error_type>",
        "message": "<error_message>"
    }
}
"""

import logging
from dataclasses import dataclass
from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse

from searchdeck.core.error_types import ErrorType
from searchdeck.core.exceptions import ProviderClientError

logger = logging.getLogger(__name__)

STATUS_BY_ERROR_TYPE: dict[ErrorType, int] = {
    ErrorType.NO_CREDENTIALS: 400,
    ErrorType.AUTH_ERROR: 401,
    ErrorType.RATE_LIMIT: 429,
    ErrorType.PROVIDER_ERROR: 502,
    ErrorType.MALFORMED_RESPONSE: 502,
    ErrorType.EXHAUSTED: 503,
    ErrorType.TIMEOUT: 504,
    ErrorType.UNEXPECTED_ERROR: 500,
}


def error_body(error_type: str, message: str, details: Any | None = None) -> dict[str, Any]:
    content: dict[str, Any] = {"type": "error", "error": {"type": error_type, "message": message}}
    if details is not None:
        content["error"]["details"] = details
    return content


@dataclass(frozen=True, slots=True)
class ErrorResponseBuilder:
    """Centralized builder for consistent error responses across all endpoints."""

    @staticmethod
    def from_provider_error(exc: ProviderClientError) -> JSONResponse:
        """Map a provider client failure to its HTTP status.

        400 no credentials, 502 provider error or malformed payload,
        503 exhausted, 504 image job timeout.
        """
        status_code = STATUS_BY_ERROR_TYPE.get(exc.error_type, 500)
        details = {"provider": exc.provider}
        attempts = getattr(exc, "attempts", None)
        if attempts is not None:
            details["attempts"] = attempts
        return JSONResponse(
            status_code=status_code,
            content=error_body(exc.error_type.value, exc.message, details),
        )

    @staticmethod
    def invalid_parameter(name: str, reason: str, value: Any | None = None) -> JSONResponse:
        """Build a 400 Bad Request error response for invalid parameters."""
        message = f"Invalid parameter '{name}': {reason}"
        if value is not None:
            message += f" (got: {value!r})"
        return JSONResponse(status_code=400, content=error_body("invalid_parameter", message))


async def provider_error_handler(request: Request, exc: ProviderClientError) -> JSONResponse:
    """FastAPI exception handler for ProviderClientError."""
    logger.warning(
        "%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.error_type.value
    )
    return ErrorResponseBuilder.from_provider_error(exc)
