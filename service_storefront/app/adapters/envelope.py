"""
Response envelope shared by every storefront endpoint.

Successful payloads arrive as ``{"data": ...}``; failures carry
``{"apiError": {"status_code", "message", "errors"}}``. A response without
``data`` is an application failure even on HTTP 2xx.
"""

from typing import Any, Awaitable, Dict, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from shared.errors import ApiError, ExternalServiceError


class ApiErrorBody(BaseModel):
    """Error detail reported by the backend."""

    model_config = ConfigDict(extra="ignore")

    status_code: Optional[int] = None
    message: Optional[str] = None
    errors: Dict[str, Any] = Field(default_factory=dict)


class ApiResponse(BaseModel):
    """Uniform response wrapper."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    local_date_time: Optional[str] = Field(default=None, alias="localDateTime")
    data: Optional[Any] = None
    api_error: Optional[ApiErrorBody] = Field(default=None, alias="apiError")


def parse_envelope(response: httpx.Response) -> ApiResponse:
    """Parse a response body into the envelope model."""
    try:
        return ApiResponse.model_validate(response.json())
    except (ValueError, PydanticValidationError) as e:
        raise ExternalServiceError(
            service="storefront_api",
            message="Malformed response envelope",
            details={"status_code": response.status_code, "error": str(e)}
        ) from e


def error_message(response: httpx.Response) -> Optional[str]:
    """Server-provided error message, if the body carries one."""
    try:
        envelope = ApiResponse.model_validate(response.json())
    except (ValueError, PydanticValidationError):
        return None
    if envelope.api_error and envelope.api_error.message:
        return envelope.api_error.message
    return None


def unwrap(response: httpx.Response, default_message: str) -> Any:
    """Return the ``data`` payload or raise ApiError."""
    envelope = parse_envelope(response)
    if envelope.data is None:
        message = default_message
        details: Dict[str, Any] = {}
        if envelope.api_error:
            message = envelope.api_error.message or default_message
            details = envelope.api_error.errors
        raise ApiError(message, status_code=response.status_code, details=details)
    return envelope.data


async def call_action(request: Awaitable[httpx.Response], default_message: str) -> Any:
    """Await a gateway call and unwrap its envelope.

    HTTP status failures become ApiError carrying the server's message when
    present. Refresh failures and transport errors propagate unchanged.
    """
    try:
        response = await request
    except httpx.HTTPStatusError as e:
        raise ApiError(
            error_message(e.response) or default_message,
            status_code=e.response.status_code,
        ) from e
    return unwrap(response, default_message)
